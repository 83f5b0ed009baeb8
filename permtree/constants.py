from pathlib import Path

from PySide6.QtCore import Qt

# ============================================================================
# APPLICATION METADATA
# ============================================================================

APP_NAME = "PermTree"
APP_VERSION = "0.1.0"
APP_ORG = "PermTree"

# ============================================================================
# PATHS
# ============================================================================

LOG_DIR = Path("logs")
SCHEMA_DIR = Path(__file__).parent / "validation"

# ============================================================================
# TREE CONVENTIONS
# ============================================================================

# Parent id used for root nodes
ROOT_PARENT_ID = 0

# Backend menu type of buttons ("M" directory and "C" page are menus)
MENU_TYPE_BUTTON = "F"

# Role status codes
ROLE_STATUS_NORMAL = "0"
ROLE_STATUS_DISABLED = "1"

# Role data scope codes
DATA_SCOPE_ALL = "1"
DATA_SCOPE_LABELS = {
    "1": "All data",
    "2": "Custom data",
    "3": "Own department",
    "4": "Own department and below",
    "5": "Own data only",
}

# Role form limits
ROLE_NAME_MAX_LENGTH = 50
ROLE_KEY_MAX_LENGTH = 100
ROLE_REMARK_MAX_LENGTH = 256
ROLE_SORT_MAX = 9999

# ============================================================================
# COLORS
# ============================================================================

COLOR_TEXT_MUTED = "#888888"
COLOR_BADGE_BACKGROUND = "#e8e8e8"
COLOR_BADGE_TEXT = "#444444"

# ============================================================================
# LABELS
# ============================================================================

LABEL_MENU_PERMISSIONS = "Menu permissions"
LABEL_EXPAND_COLLAPSE = "Expand / collapse"
LABEL_SELECT_ALL = "Select all / none"
LABEL_LINKAGE = "Parent-child linkage"
LABEL_OPERATION_BADGE = "operation"
LABEL_EMPTY_TITLE = "No configurable menus"
LABEL_EMPTY_DESCRIPTION = "Enable menus to assign them to roles here."

# ============================================================================
# SIZES & SPACING
# ============================================================================

INDENT_PX = 20
TREE_MIN_HEIGHT = 320
DIALOG_MIN_WIDTH = 640
DIALOG_MIN_HEIGHT = 720

SPACING_MEDIUM = 10
MARGIN_STANDARD = 15

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

LOG_FILE_NAME = "permtree.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# ============================================================================
# QT DATA ROLES (Custom ItemDataRole extensions)
# ============================================================================

ROLE_NODE = Qt.ItemDataRole.UserRole + 1
ROLE_NODE_ID = Qt.ItemDataRole.UserRole + 2
ROLE_PERMISSION = Qt.ItemDataRole.UserRole + 3

# ============================================================================
# NETWORK CONFIGURATION
# ============================================================================

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_API_VERSION = "v1"
REQUEST_TIMEOUT = 30  # seconds
USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

# Envelope codes the backend uses for success
API_SUCCESS_CODES = (0, 200)

# Environment overrides
ENV_API_URL = "PERMTREE_API_URL"
ENV_API_TOKEN = "PERMTREE_API_TOKEN"
ENV_TIMEOUT = "PERMTREE_TIMEOUT"
