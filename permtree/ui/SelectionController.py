"""
SelectionController - Single owner of the permission tree state.

This controller is the ONLY place where tree state lives.
Views send user intents here; the controller computes the next state with
the pure core functions and announces it through signals.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging

from PySide6.QtCore import QObject, Signal

from permtree.core.ExpansionState import ExpansionState
from permtree.core.MenuNode import MenuNode
from permtree.core.SelectionEngine import SelectionEngine, sorted_ids
from permtree.core.TreeIndex import TreeIndex
from permtree.core.TreeWalker import DisplayRow, walk_display

logger = logging.getLogger(__name__)


class SelectionController(QObject):
    """Centralized controller for selection, expansion and linkage."""

    selection_changed = Signal(list)
    expansion_changed = Signal()
    linkage_changed = Signal(bool)
    disabled_changed = Signal(bool)
    tree_changed = Signal()

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._nodes: list[MenuNode] = []
        self._index = TreeIndex()
        self._engine = SelectionEngine(self._index)
        self._expansion = ExpansionState()
        self._selection: list[int] = []
        self._linkage = True
        self._disabled = False

        logger.info("SelectionController initialized")

    # ========================================
    # Inputs
    # ========================================

    def set_tree(self, nodes: Sequence[MenuNode]) -> None:
        """Replace the tree and rebuild every derived index."""
        self._nodes = list(nodes)
        self._index = TreeIndex.build(self._nodes)
        self._engine = SelectionEngine(self._index)

        self._expansion.reconcile(self._index.parent_ids)

        logger.info(f"Tree set: {len(self._index.all_ids)} nodes")
        self.tree_changed.emit()

    def set_selection(self, selection: Iterable[int]) -> None:
        """Adopt a selection coming from outside (e.g. a loaded role)."""
        self._commit_selection(sorted_ids(selection))

    def set_disabled(self, disabled: bool) -> None:
        if self._disabled == disabled:
            return
        self._disabled = disabled
        self.disabled_changed.emit(disabled)

    # ========================================
    # User intents
    # ========================================

    def toggle_node(self, node_id: int, checked: bool) -> bool:
        """Check or uncheck a node.

        Returns:
            False if the toggle was rejected (tree disabled)
        """
        if self._disabled:
            logger.debug(f"Toggle of {node_id} rejected: tree disabled")
            return False

        next_selection = self._engine.apply_selection(
            node_id, checked, self._selection, self._linkage
        )
        self._commit_selection(next_selection)
        return True

    def set_all_selected(self, checked: bool) -> bool:
        """Select every node, or none."""
        if self._disabled:
            return False

        self._commit_selection(self._engine.select_all(checked))
        logger.debug(f"Select all: {checked}")
        return True

    def set_all_expanded(self, expanded: bool) -> bool:
        """Expand every parent, or collapse everything."""
        if self._disabled:
            return False

        if expanded:
            self._expansion.expand_all(self._index.parent_ids)
        else:
            self._expansion.collapse_all()

        self.expansion_changed.emit()
        return True

    def toggle_expanded(self, node_id: int) -> bool:
        """Flip a single parent node. Leaves are ignored."""
        if self._disabled or not self._index.has_children(node_id):
            return False

        self._expansion.toggle(node_id)
        self.expansion_changed.emit()
        return True

    def set_node_expanded(self, node_id: int, expanded: bool) -> bool:
        """Force a single parent node state (used when the view expands itself)."""
        if not self._index.has_children(node_id):
            return False

        if self._expansion.set_expanded(node_id, expanded):
            self.expansion_changed.emit()
        return True

    def set_linkage(self, enabled: bool) -> None:
        """Switch cascading on or off. The current selection is kept as is."""
        if self._disabled or self._linkage == enabled:
            return

        self._linkage = enabled
        logger.debug(f"Linkage: {enabled}")
        self.linkage_changed.emit(enabled)

    # ========================================
    # Query API
    # ========================================

    @property
    def nodes(self) -> list[MenuNode]:
        return self._nodes

    @property
    def index(self) -> TreeIndex:
        return self._index

    @property
    def selection(self) -> list[int]:
        return list(self._selection)

    @property
    def expanded(self) -> frozenset[int]:
        return self._expansion.expanded

    @property
    def linkage(self) -> bool:
        return self._linkage

    @property
    def disabled(self) -> bool:
        return self._disabled

    def is_selected(self, node_id: int) -> bool:
        return node_id in self._selection

    def is_expanded(self, node_id: int) -> bool:
        return self._expansion.is_expanded(node_id, self._index.has_children(node_id))

    def is_all_selected(self) -> bool:
        return self._engine.is_all_selected(self._selection)

    def is_all_expanded(self) -> bool:
        return self._expansion.is_all_expanded(self._index.parent_ids)

    def has_nodes(self) -> bool:
        return bool(self._index.all_ids)

    def has_parents(self) -> bool:
        return bool(self._index.parent_ids)

    def display_rows(self) -> list[DisplayRow]:
        """Visible rows for the current state."""
        return list(walk_display(self._nodes, set(self._selection), self._expansion.expanded))

    # ========================================
    # Internals
    # ========================================

    def _commit_selection(self, next_selection: list[int]) -> None:
        self._selection = next_selection
        self.selection_changed.emit(list(next_selection))
