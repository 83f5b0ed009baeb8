from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QStandardItem

from permtree.constants import (
    COLOR_BADGE_BACKGROUND,
    COLOR_BADGE_TEXT,
    COLOR_TEXT_MUTED,
    LABEL_OPERATION_BADGE,
    ROLE_NODE,
    ROLE_NODE_ID,
    ROLE_PERMISSION,
)
from permtree.core.MenuNode import MenuNode


class PermissionTreeItem(QStandardItem):
    """Checkable tree item bound to one menu node."""

    def __init__(self, node: MenuNode):
        super().__init__(node.name)

        self.setFlags(
            Qt.ItemFlag.ItemIsEnabled
            | Qt.ItemFlag.ItemIsSelectable
            | Qt.ItemFlag.ItemIsUserCheckable
        )
        self.setCheckState(Qt.CheckState.Unchecked)
        self.setToolTip(node.name)

        self.setData(node, ROLE_NODE)
        self.setData(node.id, ROLE_NODE_ID)
        self.setData(node.permission, ROLE_PERMISSION)

    @property
    def node(self) -> MenuNode:
        return self.data(ROLE_NODE)

    @property
    def node_id(self) -> int:
        return self.data(ROLE_NODE_ID)

    @property
    def permission(self) -> str | None:
        return self.data(ROLE_PERMISSION)

    def is_checked(self) -> bool:
        return self.checkState() == Qt.CheckState.Checked

    def set_checkable(self, checkable: bool) -> None:
        """Enable or disable the checkbox."""
        flags = self.flags()
        if checkable:
            flags |= Qt.ItemFlag.ItemIsUserCheckable
        else:
            flags &= ~Qt.ItemFlag.ItemIsUserCheckable
        self.setFlags(flags)

    # ========================================
    # Companion Columns
    # ========================================

    def create_kind_item(self) -> QStandardItem:
        """Badge column: shows the operation marker for button nodes."""
        node = self.node
        item = QStandardItem(LABEL_OPERATION_BADGE if node.is_operation() else "")
        item.setFlags(Qt.ItemFlag.ItemIsEnabled)
        item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
        if node.is_operation():
            item.setBackground(QColor(COLOR_BADGE_BACKGROUND))
            item.setForeground(QColor(COLOR_BADGE_TEXT))
        return item

    def create_permission_item(self) -> QStandardItem:
        """Permission column: shows the permission string, muted."""
        permission = self.permission or ""
        item = QStandardItem(permission)
        item.setFlags(Qt.ItemFlag.ItemIsEnabled)
        item.setToolTip(permission)
        item.setForeground(QColor(COLOR_TEXT_MUTED))
        item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return item
