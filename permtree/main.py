"""
PermTree - Main entry point.

Handles logging setup, argument handling, loading of the menu tree (from
the backend or from a JSON file) and display of the role editor.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import Optional

from permtree.constants import (
    APP_NAME,
    APP_ORG,
    APP_VERSION,
    LOG_BACKUP_COUNT,
    LOG_DATE_FORMAT,
    LOG_DIR,
    LOG_FILE_NAME,
    LOG_FORMAT,
    LOG_MAX_BYTES,
    ROLE_STATUS_NORMAL,
)
from permtree.core.MenuNode import MenuNode, parse_tree
from permtree.core.RoleModels import Role, sanitize_menu_ids
from permtree.core.TreeIndex import TreeIndex
from permtree.core.TreeWalker import render_text, walk_display
from permtree.validation.TreeValidator import TreeValidator

logger = logging.getLogger(__name__)

USAGE = f"""Usage: permtree [options]

Options:
  --role <id>          Edit an existing role (backend mode)
  --tree-file <path>   Load the menu tree from a JSON file (offline mode)
  --select <ids>       Comma separated initial selection (offline mode)
  --api-url <url>      Backend base URL (stored for next runs)
  --print              Print the tree as text and exit
  -h, --help           Show this help

{APP_NAME} v{APP_VERSION}
"""


def setup_logging() -> None:
    """
    Configure application logging with file rotation and console output.

    Creates log directory if needed and sets up handlers for both
    file and console output with appropriate formatting.
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    file_handler = RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(file_handler)

    # Console handler (only warnings and above)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    logger.info(f"{APP_NAME} v{APP_VERSION} - Logging initialized")


def setup_exception_hook() -> None:
    """
    Install global exception handler for uncaught exceptions.

    Logs exceptions and shows error dialog when a GUI is running.
    """

    def exception_handler(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

        from PySide6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is not None:
            QMessageBox.critical(
                None, "Critical Error", f"Unexpected error:\n\n{exc_type.__name__}: {exc_value}"
            )

    sys.excepthook = exception_handler


def parse_arguments(argv: list[str]) -> Optional[dict]:
    """
    Parse command line arguments.

    Returns:
        Options dictionary, or None when arguments are invalid
    """
    options = {
        "role_id": None,
        "tree_file": None,
        "select": [],
        "api_url": None,
        "print": False,
        "help": False,
    }
    value_options = {"--role", "--tree-file", "--select", "--api-url"}

    position = 0
    while position < len(argv):
        arg = argv[position]

        if arg in ("-h", "--help"):
            options["help"] = True
        elif arg == "--print":
            options["print"] = True
        elif arg in value_options:
            if position + 1 >= len(argv):
                print(f"✗ Missing value for {arg}")
                return None
            value = argv[position + 1]
            position += 1

            if arg == "--role":
                try:
                    options["role_id"] = int(value)
                except ValueError:
                    print(f"✗ Invalid role id: {value}")
                    return None
            elif arg == "--tree-file":
                options["tree_file"] = Path(value)
            elif arg == "--select":
                options["select"] = sanitize_menu_ids(value.split(","))
            else:
                options["api_url"] = value
        else:
            print(f"✗ Unknown argument: {arg}")
            return None

        position += 1

    return options


def load_tree_file(path: Path) -> list[MenuNode]:
    """
    Load a menu tree from a JSON file.

    Accepts either a bare node list or a backend envelope with a "data" list.

    Raises:
        ValueError: If the file does not hold a valid tree
    """
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "data" in data:
        data = data["data"]

    result = TreeValidator().validate_data(data, path)
    if not result.is_valid:
        raise ValueError(f"Invalid tree file {path}: {'; '.join(result.errors)}")

    for warning in result.warnings:
        logger.warning(f"{path}: {warning}")

    nodes = parse_tree(data)
    logger.info(f"Tree loaded from {path}: {len(nodes)} roots")
    return nodes


def print_tree(nodes: list[MenuNode], selection: list[int]) -> None:
    """Print the fully expanded tree with check markers."""
    index = TreeIndex.build(nodes)
    rows = walk_display(nodes, set(selection), set(index.parent_ids))
    print(render_text(rows))


def run_gui(options: dict) -> int:
    """Show the role editor. Returns the process exit code."""
    from PySide6.QtWidgets import QApplication, QDialog, QMessageBox

    from permtree.core.MenuService import MenuService, MenuServiceError
    from permtree.core.SettingsManager import SettingsManager
    from permtree.ui.RoleEditorDialog import RoleEditorDialog

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORG)
    app.setStyle("Fusion")

    settings = SettingsManager()
    service = None

    if options["tree_file"]:
        try:
            nodes = load_tree_file(options["tree_file"])
        except (OSError, ValueError) as e:
            logger.error(f"Cannot load tree file: {e}")
            QMessageBox.critical(None, APP_NAME, str(e))
            return 1
        role = Role(menu_ids=options["select"])
    else:
        if options["api_url"]:
            settings.set_api_url(options["api_url"])

        service = MenuService.from_settings(settings)
        try:
            nodes = service.fetch_menu_tree(status=ROLE_STATUS_NORMAL)
            role = service.fetch_role(options["role_id"]) if options["role_id"] else Role()
        except MenuServiceError as e:
            logger.error(f"Backend unavailable: {e}")
            QMessageBox.critical(None, APP_NAME, f"Cannot reach {service.base_url}:\n\n{e}")
            return 1

    dialog = RoleEditorDialog(service=service, role=role, nodes=nodes)

    geometry = settings.get_dialog_geometry()
    if geometry is not None:
        dialog.restoreGeometry(geometry)

    result = dialog.exec()
    settings.set_dialog_geometry(dialog.saveGeometry())

    if result == QDialog.DialogCode.Accepted:
        saved = dialog.saved_role()
        if saved is not None:
            print(",".join(str(menu_id) for menu_id in saved.menu_ids))
    else:
        logger.info("Role editor cancelled")

    return 0


def main() -> int:
    """
    Main application entry point.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    options = parse_arguments(sys.argv[1:])
    if options is None:
        print(USAGE)
        return 1
    if options["help"]:
        print(USAGE)
        return 0

    setup_logging()
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")
    setup_exception_hook()

    if options["print"]:
        if not options["tree_file"]:
            print("✗ --print requires --tree-file")
            return 1
        try:
            nodes = load_tree_file(options["tree_file"])
        except (OSError, ValueError) as e:
            print(f"✗ {e}")
            return 1
        print_tree(nodes, options["select"])
        return 0

    try:
        return run_gui(options)
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
