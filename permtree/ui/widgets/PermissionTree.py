"""
PermissionTree - Checkable menu tree used by the role editor.

The widget renders the state owned by a SelectionController: every change
of selection, expansion or tree is pushed back into the Qt model by walking
the visible display rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging

from PySide6.QtCore import QModelIndex, Qt, Signal
from PySide6.QtGui import QStandardItem, QStandardItemModel
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QStackedWidget,
    QTreeView,
    QVBoxLayout,
    QWidget,
)

from permtree.constants import (
    INDENT_PX,
    LABEL_EMPTY_DESCRIPTION,
    LABEL_EMPTY_TITLE,
    LABEL_EXPAND_COLLAPSE,
    LABEL_LINKAGE,
    LABEL_MENU_PERMISSIONS,
    LABEL_SELECT_ALL,
    ROLE_NODE_ID,
    SPACING_MEDIUM,
    TREE_MIN_HEIGHT,
)
from permtree.core.MenuNode import MenuNode
from permtree.ui.SelectionController import SelectionController
from permtree.ui.widgets.PermissionTreeItem import PermissionTreeItem

logger = logging.getLogger(__name__)


class PermissionTree(QWidget):
    """Menu permission picker with expand-all, select-all and linkage toggles."""

    selection_changed = Signal(list)

    def __init__(self, controller: SelectionController | None = None, parent=None):
        super().__init__(parent)

        self._controller = controller or SelectionController(self)
        self._items: dict[int, PermissionTreeItem] = {}
        self._syncing = False

        self._setup_ui()
        self._setup_model()
        self._connect_signals()
        self._rebuild_model()

        logger.info("PermissionTree initialized")

    # ========================================
    # Initialization
    # ========================================

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(SPACING_MEDIUM)

        header = QHBoxLayout()
        header.setSpacing(SPACING_MEDIUM)

        title = QLabel(LABEL_MENU_PERMISSIONS)
        title.setStyleSheet("font-weight: bold;")
        header.addWidget(title)

        self._expand_all_box = QCheckBox(LABEL_EXPAND_COLLAPSE)
        self._select_all_box = QCheckBox(LABEL_SELECT_ALL)
        self._linkage_box = QCheckBox(LABEL_LINKAGE)
        self._linkage_box.setChecked(self._controller.linkage)

        header.addWidget(self._expand_all_box)
        header.addWidget(self._select_all_box)
        header.addWidget(self._linkage_box)
        header.addStretch()
        layout.addLayout(header)

        self._view = QTreeView()
        self._view.setHeaderHidden(True)
        self._view.setIndentation(INDENT_PX)
        self._view.setEditTriggers(QTreeView.EditTrigger.NoEditTriggers)
        self._view.setExpandsOnDoubleClick(False)
        self._view.setMinimumHeight(TREE_MIN_HEIGHT)

        self._empty_label = QLabel(f"<b>{LABEL_EMPTY_TITLE}</b><br>{LABEL_EMPTY_DESCRIPTION}")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setMinimumHeight(TREE_MIN_HEIGHT)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._view)
        self._stack.addWidget(self._empty_label)
        layout.addWidget(self._stack)

    def _setup_model(self) -> None:
        self._model = QStandardItemModel(self)
        self._view.setModel(self._model)

    def _configure_header(self) -> None:
        header = self._view.header()
        header.setStretchLastSection(False)
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)

    def _connect_signals(self) -> None:
        # clicked() only fires on user interaction, never on setChecked()
        self._expand_all_box.clicked.connect(self._controller.set_all_expanded)
        self._select_all_box.clicked.connect(self._controller.set_all_selected)
        self._linkage_box.clicked.connect(self._controller.set_linkage)

        self._model.itemChanged.connect(self._on_item_changed)
        self._view.expanded.connect(self._on_view_expanded)
        self._view.collapsed.connect(self._on_view_collapsed)

        self._controller.tree_changed.connect(self._rebuild_model)
        self._controller.selection_changed.connect(self._on_controller_selection_changed)
        self._controller.expansion_changed.connect(self._sync_view)
        self._controller.linkage_changed.connect(self._sync_view)
        self._controller.disabled_changed.connect(self._on_disabled_changed)

    # ========================================
    # Public API
    # ========================================

    @property
    def controller(self) -> SelectionController:
        return self._controller

    def set_nodes(self, nodes: Sequence[MenuNode]) -> None:
        """Replace the displayed tree."""
        self._controller.set_tree(nodes)

    def set_value(self, menu_ids: Iterable[int]) -> None:
        """Replace the selection (e.g. with a loaded role's menu ids)."""
        self._controller.set_selection(menu_ids)

    def value(self) -> list[int]:
        """Current selection, sorted ascending."""
        return self._controller.selection

    def set_disabled(self, disabled: bool) -> None:
        self._controller.set_disabled(disabled)

    def item_for(self, node_id: int) -> PermissionTreeItem | None:
        return self._items.get(node_id)

    def index_for(self, node_id: int) -> QModelIndex:
        item = self._items.get(node_id)
        return self._model.indexFromItem(item) if item else QModelIndex()

    # ========================================
    # Model Building
    # ========================================

    def _rebuild_model(self) -> None:
        """Recreate every item from the controller tree."""
        self._syncing = True
        try:
            self._model.clear()
            self._items.clear()

            root = self._model.invisibleRootItem()
            stack: list[tuple[MenuNode, QStandardItem]] = [
                (node, root) for node in reversed(self._controller.nodes)
            ]

            while stack:
                node, parent_item = stack.pop()
                item = PermissionTreeItem(node)
                item.set_checkable(not self._controller.disabled)
                self._items[node.id] = item
                parent_item.appendRow(
                    [item, item.create_kind_item(), item.create_permission_item()]
                )

                for child in reversed(node.children):
                    stack.append((child, item))

            if self._model.columnCount() > 0:
                self._configure_header()
        finally:
            self._syncing = False

        logger.debug(f"Model rebuilt: {len(self._items)} items")
        self._sync_view()

    # ========================================
    # State Synchronization
    # ========================================

    def _sync_view(self, *_args) -> None:
        """Push controller state into items and header checkboxes.

        Check state is applied to every item, including those under a
        collapsed parent; expansion only to the visible rows.
        """
        controller = self._controller
        self._syncing = True
        try:
            selected = set(controller.selection)
            for node_id, item in self._items.items():
                state = Qt.CheckState.Checked if node_id in selected else Qt.CheckState.Unchecked
                if item.checkState() != state:
                    item.setCheckState(state)

            for row in controller.display_rows():
                if not row.has_children:
                    continue
                index = self.index_for(row.node.id)
                if index.isValid() and self._view.isExpanded(index) != row.is_expanded:
                    self._view.setExpanded(index, row.is_expanded)

            disabled = controller.disabled
            self._expand_all_box.setChecked(controller.is_all_expanded())
            self._expand_all_box.setEnabled(not disabled and controller.has_parents())
            self._select_all_box.setChecked(controller.is_all_selected())
            self._select_all_box.setEnabled(not disabled and controller.has_nodes())
            self._linkage_box.setChecked(controller.linkage)
            self._linkage_box.setEnabled(not disabled)

            self._view.setEnabled(not disabled)
            self._stack.setCurrentWidget(
                self._view if controller.has_nodes() else self._empty_label
            )
        finally:
            self._syncing = False

    # ========================================
    # Event Handlers
    # ========================================

    def _on_item_changed(self, item: QStandardItem) -> None:
        """Forward a user checkbox click to the controller."""
        if self._syncing or not isinstance(item, PermissionTreeItem):
            return

        if not self._controller.toggle_node(item.node_id, item.is_checked()):
            # Rejected: restore the controller state
            self._sync_view()

    def _on_view_expanded(self, index: QModelIndex) -> None:
        self._on_view_expansion(index, True)

    def _on_view_collapsed(self, index: QModelIndex) -> None:
        self._on_view_expansion(index, False)

    def _on_view_expansion(self, index: QModelIndex, expanded: bool) -> None:
        if self._syncing:
            return

        node_id = index.data(ROLE_NODE_ID)
        if node_id is not None:
            self._controller.set_node_expanded(node_id, expanded)

    def _on_controller_selection_changed(self, selection: list) -> None:
        self._sync_view()
        self.selection_changed.emit(selection)

    def _on_disabled_changed(self, disabled: bool) -> None:
        # Flag changes emit itemChanged; they must not read as user toggles
        self._syncing = True
        try:
            for item in self._items.values():
                item.set_checkable(not disabled)
        finally:
            self._syncing = False
        self._sync_view()
