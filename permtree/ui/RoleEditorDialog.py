"""
Role editor dialog: role fields plus the menu permission tree.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QSpinBox,
    QVBoxLayout,
)

from permtree.constants import (
    APP_NAME,
    DATA_SCOPE_ALL,
    DATA_SCOPE_LABELS,
    DIALOG_MIN_HEIGHT,
    DIALOG_MIN_WIDTH,
    MARGIN_STANDARD,
    ROLE_KEY_MAX_LENGTH,
    ROLE_NAME_MAX_LENGTH,
    ROLE_REMARK_MAX_LENGTH,
    ROLE_SORT_MAX,
    ROLE_STATUS_DISABLED,
    ROLE_STATUS_NORMAL,
)
from permtree.core.MenuNode import MenuNode
from permtree.core.MenuService import MenuService, MenuServiceError
from permtree.core.RoleModels import Role
from permtree.ui.widgets.PermissionTree import PermissionTree

logger = logging.getLogger(__name__)


class RoleEditorDialog(QDialog):
    """
    Create or edit a role.

    With a MenuService, accepting the dialog saves the role to the backend
    and the dialog only closes on success. Without one (offline mode) the
    edited role is simply available through ``role()``.
    """

    def __init__(
        self,
        service: Optional[MenuService] = None,
        role: Optional[Role] = None,
        nodes: Sequence[MenuNode] = (),
        read_only: bool = False,
        parent=None,
    ) -> None:
        super().__init__(parent)

        self._service = service
        self._role = role or Role()
        self._read_only = read_only
        self._saved_role: Role | None = None

        self._setup_ui()
        self._permission_tree.set_nodes(nodes)
        self._populate(self._role)

        logger.info(f"RoleEditorDialog opened for role {self._role.role_id or '<new>'}")

    # ========================================
    # Initialization
    # ========================================

    def _setup_ui(self) -> None:
        self.setWindowTitle(
            f"{APP_NAME} - {'New role' if self._role.is_new else 'Edit role'}"
        )
        self.setMinimumSize(DIALOG_MIN_WIDTH, DIALOG_MIN_HEIGHT)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(MARGIN_STANDARD, MARGIN_STANDARD, MARGIN_STANDARD, MARGIN_STANDARD)

        form = QFormLayout()
        self._name_edit = QLineEdit()
        self._key_edit = QLineEdit()
        self._sort_spin = QSpinBox()
        self._sort_spin.setRange(0, ROLE_SORT_MAX)
        self._status_combo = QComboBox()
        self._status_combo.addItem("Normal", ROLE_STATUS_NORMAL)
        self._status_combo.addItem("Disabled", ROLE_STATUS_DISABLED)
        self._data_scope_combo = QComboBox()
        for code, label in DATA_SCOPE_LABELS.items():
            self._data_scope_combo.addItem(label, code)
        self._remark_edit = QPlainTextEdit()
        self._remark_edit.setMaximumHeight(80)

        form.addRow("Role name", self._name_edit)
        form.addRow("Role key", self._key_edit)
        form.addRow("Sort order", self._sort_spin)
        form.addRow("Status", self._status_combo)
        form.addRow("Data scope", self._data_scope_combo)
        form.addRow("Remark", self._remark_edit)
        layout.addLayout(form)

        self._permission_tree = PermissionTree(parent=self)
        layout.addWidget(self._permission_tree, 1)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        self._buttons.accepted.connect(self.accept)
        self._buttons.rejected.connect(self.reject)
        layout.addWidget(self._buttons)

        if self._read_only:
            self._set_read_only()

    def _set_read_only(self) -> None:
        for widget in (self._name_edit, self._key_edit, self._remark_edit):
            widget.setReadOnly(True)
        self._sort_spin.setEnabled(False)
        self._status_combo.setEnabled(False)
        self._data_scope_combo.setEnabled(False)
        self._buttons.button(QDialogButtonBox.StandardButton.Save).setEnabled(False)
        self._permission_tree.set_disabled(True)

    def _populate(self, role: Role) -> None:
        self._name_edit.setText(role.role_name)
        self._key_edit.setText(role.role_key)
        self._sort_spin.setValue(role.role_sort)

        status_index = self._status_combo.findData(role.status)
        self._status_combo.setCurrentIndex(max(status_index, 0))

        scope_index = self._data_scope_combo.findData(role.data_scope)
        self._data_scope_combo.setCurrentIndex(max(scope_index, 0))

        self._remark_edit.setPlainText(role.remark or "")
        self._permission_tree.set_value(role.menu_ids)

    # ========================================
    # Public API
    # ========================================

    @property
    def permission_tree(self) -> PermissionTree:
        return self._permission_tree

    def role(self) -> Role:
        """Role as currently edited."""
        return Role(
            role_id=self._role.role_id,
            role_name=self._name_edit.text().strip(),
            role_key=self._key_edit.text().strip(),
            role_sort=self._sort_spin.value(),
            status=self._status_combo.currentData() or ROLE_STATUS_NORMAL,
            data_scope=self._data_scope_combo.currentData() or DATA_SCOPE_ALL,
            remark=self._remark_edit.toPlainText().strip() or None,
            menu_check_strictly=self._role.menu_check_strictly,
            dept_check_strictly=self._role.dept_check_strictly,
            menu_ids=self._permission_tree.value(),
        )

    def saved_role(self) -> Role | None:
        """Role returned by the backend after a successful save."""
        return self._saved_role

    # ========================================
    # Dialog Flow
    # ========================================

    def validate(self) -> str | None:
        """Return an error message if the form is incomplete or too long."""
        role = self.role()
        if not role.role_name:
            return "Role name is required."
        if len(role.role_name) > ROLE_NAME_MAX_LENGTH:
            return f"Role name cannot exceed {ROLE_NAME_MAX_LENGTH} characters."
        if not role.role_key:
            return "Role key is required."
        if len(role.role_key) > ROLE_KEY_MAX_LENGTH:
            return f"Role key cannot exceed {ROLE_KEY_MAX_LENGTH} characters."
        if not 0 <= role.role_sort <= ROLE_SORT_MAX:
            return f"Sort order must be between 0 and {ROLE_SORT_MAX}."
        if role.remark and len(role.remark) > ROLE_REMARK_MAX_LENGTH:
            return f"Remark cannot exceed {ROLE_REMARK_MAX_LENGTH} characters."
        return None

    def accept(self) -> None:
        error = self.validate()
        if error:
            QMessageBox.warning(self, APP_NAME, error)
            return

        role = self.role()

        if self._service is not None:
            try:
                self._saved_role = self._service.save_role(role)
            except MenuServiceError as e:
                logger.error(f"Failed to save role {role.role_key}: {e}")
                QMessageBox.critical(self, APP_NAME, f"Failed to save role:\n\n{e}")
                return
        else:
            self._saved_role = role

        logger.info(f"Role {role.role_key} saved with {len(role.menu_ids)} menus")
        super().accept()
