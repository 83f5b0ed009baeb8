"""
Derived lookup indexes over a menu tree.

A TreeIndex is a pure function of the tree it was built from: parent and
children relationships, the ids of every node and the ids of nodes that
own at least one child. It is rebuilt whenever the tree reference changes.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from permtree.constants import ROOT_PARENT_ID
from permtree.core.MenuNode import MenuNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FlatEntry:
    """A node paired with the id of its parent (ROOT_PARENT_ID for roots)."""
    node: MenuNode
    parent_id: int


def flatten_nodes(nodes: Sequence[MenuNode]) -> list[FlatEntry]:
    """Pre-order walk of the forest.

    Args:
        nodes: Root nodes

    Returns:
        One entry per visited node, in pre-order
    """
    entries: list[FlatEntry] = []
    stack: list[tuple[MenuNode, int]] = [(node, ROOT_PARENT_ID) for node in reversed(nodes)]

    while stack:
        node, parent_id = stack.pop()
        entries.append(FlatEntry(node, parent_id))

        # Reverse so the first child is popped first
        for child in reversed(node.children):
            stack.append((child, node.id))

    return entries


@dataclass
class TreeIndex:
    """Centralized index system for O(1) tree lookups.

    Holds:
    1. Flattened entries (pre-order)
    2. Parent relationships (child id -> parent id)
    3. Children relationships (parent id -> ordered child ids, 0 -> roots)
    4. Parent ids (nodes owning at least one child, pre-order)
    5. All ids (pre-order)
    """

    entries: list[FlatEntry] = field(default_factory=list)
    parent_index: dict[int, int] = field(default_factory=dict)
    children_index: dict[int, list[int]] = field(default_factory=dict)
    parent_ids: list[int] = field(default_factory=list)
    all_ids: list[int] = field(default_factory=list)

    # ========================================
    # Construction
    # ========================================

    @classmethod
    def build(cls, nodes: Sequence[MenuNode]) -> TreeIndex:
        """Build every index from a forest.

        Duplicate ids are not rejected: the later occurrence overwrites the
        earlier one in the parent index, and both occurrences are listed
        under their respective parents in the children index.
        """
        index = cls()
        index.entries = flatten_nodes(nodes)

        for entry in index.entries:
            node_id = entry.node.id

            if node_id in index.parent_index:
                logger.warning(f"Duplicate node id {node_id}: later occurrence wins")

            index.parent_index[node_id] = entry.parent_id
            index.children_index.setdefault(entry.parent_id, []).append(node_id)
            index.all_ids.append(node_id)

            if entry.node.has_children:
                index.parent_ids.append(node_id)

        logger.debug(
            f"Tree indexed: {len(index.all_ids)} nodes, {len(index.parent_ids)} parents"
        )
        return index

    # ========================================
    # Lookups
    # ========================================

    def contains(self, node_id: int) -> bool:
        """Check if id belongs to the tree."""
        return node_id in self.parent_index

    def get_parent(self, node_id: int) -> int:
        """Get parent id (ROOT_PARENT_ID for roots and unknown ids)."""
        return self.parent_index.get(node_id, ROOT_PARENT_ID)

    def get_children(self, node_id: int) -> list[int]:
        """Get direct child ids (empty if none)."""
        return self.children_index.get(node_id, [])

    def get_roots(self) -> list[int]:
        """Get root ids."""
        return self.get_children(ROOT_PARENT_ID)

    def has_children(self, node_id: int) -> bool:
        """Check if node owns at least one child."""
        return node_id != ROOT_PARENT_ID and bool(self.children_index.get(node_id))

    # ========================================
    # Traversal
    # ========================================

    def collect_descendants(self, node_id: int) -> list[int]:
        """Breadth-first list of every descendant id (node itself excluded)."""
        result: list[int] = []
        seen: set[int] = {node_id}
        queue = deque(self.get_children(node_id))

        while queue:
            current = queue.popleft()
            # Guards against cycles created by duplicate ids
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            queue.extend(self.get_children(current))

        return result

    def collect_ancestors(self, node_id: int) -> list[int]:
        """Ancestor ids, nearest first, up to (excluding) the root sentinel."""
        result: list[int] = []
        seen: set[int] = {node_id}
        current = self.get_parent(node_id)

        while current > ROOT_PARENT_ID and current not in seen:
            result.append(current)
            seen.add(current)
            current = self.get_parent(current)

        return result
