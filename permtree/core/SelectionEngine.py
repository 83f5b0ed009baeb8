"""
SelectionEngine - Pure selection logic over a TreeIndex.

Every operation takes the current selection and returns the next one as a
new, ascending list of ids. The input selection is never modified.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

from permtree.core.TreeIndex import TreeIndex

logger = logging.getLogger(__name__)


def sorted_ids(ids: Iterable[int]) -> list[int]:
    """Deduplicate and sort ids ascending."""
    return sorted(set(ids))


class SelectionEngine:
    """State-transition functions for the Selection Set."""

    def __init__(self, index: TreeIndex):
        self._index = index

    @property
    def index(self) -> TreeIndex:
        return self._index

    # ========================================
    # Main API
    # ========================================

    def apply_selection(
        self, node_id: int, checked: bool, selection: Iterable[int], linkage: bool = True
    ) -> list[int]:
        """Check or uncheck a node and return the next selection.

        Args:
            node_id: Target node
            checked: Desired state of the target
            selection: Current selection (left untouched)
            linkage: If True, cascade to descendants and ancestors

        Returns:
            Next selection, sorted ascending
        """
        current = set(selection)

        if not self._index.contains(node_id):
            logger.debug(f"Ignoring toggle of unknown node {node_id}")
            return sorted(current)

        if checked:
            next_selection = self._check(node_id, current, linkage)
        else:
            next_selection = self._uncheck(node_id, current, linkage)

        logger.debug(
            f"{'Checked' if checked else 'Unchecked'} {node_id} "
            f"(linkage={linkage}): {len(current)} -> {len(next_selection)} selected"
        )
        return sorted(next_selection)

    def select_all(self, checked: bool) -> list[int]:
        """Total replacement: every id, or nothing. Linkage does not apply."""
        if not checked:
            return []
        return sorted_ids(self._index.all_ids)

    def is_all_selected(self, selection: Iterable[int]) -> bool:
        """Check if every node of a non-empty tree is selected."""
        all_ids = self._index.all_ids
        if not all_ids:
            return False

        selected = set(selection)
        return all(node_id in selected for node_id in all_ids)

    # ========================================
    # Cascade Logic
    # ========================================

    def _check(self, node_id: int, current: set[int], linkage: bool) -> set[int]:
        """Select node, then its subtree and ancestor chain."""
        next_selection = set(current)
        next_selection.add(node_id)

        if linkage:
            next_selection.update(self._index.collect_descendants(node_id))
            next_selection.update(self._index.collect_ancestors(node_id))

        return next_selection

    def _uncheck(self, node_id: int, current: set[int], linkage: bool) -> set[int]:
        """Unselect node and its subtree, then prune orphaned ancestors.

        Ancestors are visited nearest first so each check sees the removals
        made for the ancestor below it.
        """
        next_selection = set(current)
        next_selection.discard(node_id)

        if not linkage:
            return next_selection

        next_selection.difference_update(self._index.collect_descendants(node_id))

        for ancestor_id in self._index.collect_ancestors(node_id):
            children = self._index.get_children(ancestor_id)
            if not any(child_id in next_selection for child_id in children):
                next_selection.discard(ancestor_id)

        return next_selection
