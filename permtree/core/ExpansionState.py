"""Expansion state of the permission tree (which parent nodes are open)."""

from __future__ import annotations

from collections.abc import Iterable
import logging

logger = logging.getLogger(__name__)


class ExpansionState:
    """
    Set of expanded node ids.

    Only parent ids are ever stored; leaves count as expanded without being
    members. Every mutation replaces the underlying set instead of editing
    it, so snapshots handed out by ``expanded`` stay valid.
    """

    def __init__(self, expanded: Iterable[int] = ()) -> None:
        self._expanded: frozenset[int] = frozenset(expanded)

    @property
    def expanded(self) -> frozenset[int]:
        """Current expanded ids (immutable snapshot)."""
        return self._expanded

    def is_expanded(self, node_id: int, has_children: bool = True) -> bool:
        """Check if node is shown expanded. Leaves always are."""
        return not has_children or node_id in self._expanded

    def is_all_expanded(self, parent_ids: Iterable[int]) -> bool:
        """Check if every given parent id is expanded."""
        return all(node_id in self._expanded for node_id in parent_ids)

    def reconcile(self, parent_ids: Iterable[int]) -> bool:
        """Expand every parent id not yet known.

        Returns:
            True if the set changed
        """
        missing = [node_id for node_id in parent_ids if node_id not in self._expanded]
        if not missing:
            return False

        self._expanded = self._expanded.union(missing)
        logger.debug(f"Reconciled expansion: {len(missing)} new parents expanded")
        return True

    def toggle(self, node_id: int) -> bool:
        """Flip a single node. Returns the new expanded state."""
        if node_id in self._expanded:
            self._expanded = self._expanded - {node_id}
            return False

        self._expanded = self._expanded | {node_id}
        return True

    def set_expanded(self, node_id: int, expanded: bool) -> bool:
        """Force a single node state.

        Returns:
            True if the set changed
        """
        if (node_id in self._expanded) == expanded:
            return False
        self.toggle(node_id)
        return True

    def expand_all(self, parent_ids: Iterable[int]) -> None:
        """Total replacement with the given parent ids."""
        self._expanded = frozenset(parent_ids)

    def collapse_all(self) -> None:
        """Total replacement with the empty set."""
        self._expanded = frozenset()
