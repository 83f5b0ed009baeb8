"""
Type-safe representation of menu/permission tree nodes.

Nodes arrive either in the compact shape
``{id, name, kind, permission, children}`` or in the backend shape
``{menuId, menuName, menuType, perms, children}``. Both are parsed into the
same immutable ``MenuNode`` forest.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from permtree.constants import MENU_TYPE_BUTTON

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Node kind discriminator."""
    MENU = "menu"  # Directory or page
    OPERATION = "operation"  # Button / API operation

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> NodeKind:
        """Detect kind from either payload shape."""
        kind = data.get("kind")
        if kind == cls.OPERATION.value:
            return cls.OPERATION
        if kind == cls.MENU.value:
            return cls.MENU

        if data.get("menuType") == MENU_TYPE_BUTTON:
            return cls.OPERATION

        return cls.MENU


@dataclass(frozen=True, slots=True)
class MenuNode:
    """
    One entry of the permission tree.

    Attributes:
        id: Unique positive identifier
        name: Display label
        kind: Menu or operation
        permission: Optional permission string (e.g. "system:role:edit")
        children: Ordered child nodes
    """
    id: int
    name: str
    kind: NodeKind = NodeKind.MENU
    permission: str | None = None
    children: tuple[MenuNode, ...] = ()

    @property
    def has_children(self) -> bool:
        """Check if node has at least one child."""
        return len(self.children) > 0

    def is_operation(self) -> bool:
        """Check if node is an operation/button."""
        return self.kind == NodeKind.OPERATION

    @staticmethod
    def read_id(data: Mapping[str, Any]) -> int | None:
        """Extract a positive integer id from either payload shape."""
        raw_id = data.get("id", data.get("menuId"))
        if isinstance(raw_id, bool):
            return None
        try:
            node_id = int(raw_id)
        except (TypeError, ValueError):
            return None
        return node_id if node_id > 0 else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], children: tuple[MenuNode, ...] = ()) -> MenuNode:
        """Build a single node from raw data, with already parsed children."""
        node_id = cls.read_id(data)
        if node_id is None:
            raise ValueError(f"Invalid node id in {dict(data)!r}")

        name = data.get("name", data.get("menuName")) or ""
        permission = data.get("permission", data.get("perms")) or None

        return cls(
            id=node_id,
            name=str(name),
            kind=NodeKind.from_raw(data),
            permission=permission,
            children=children,
        )


def parse_tree(raw_nodes: Iterable[Any] | None) -> list[MenuNode]:
    """Parse a raw forest into MenuNode roots.

    Uses an explicit stack so arbitrarily deep trees do not hit the
    recursion limit. Entries that are not mappings or carry no valid id are
    dropped together with their subtree.

    Args:
        raw_nodes: List of raw root nodes (either shape)

    Returns:
        Parsed root nodes in input order
    """
    # Frame: [items, position, built children, owning raw node]
    frames: list[list[Any]] = [[list(raw_nodes or []), 0, [], None]]

    while True:
        frame = frames[-1]
        items, position, built, owner = frame

        if position < len(items):
            frame[1] += 1
            raw = items[position]

            if not isinstance(raw, Mapping) or MenuNode.read_id(raw) is None:
                logger.warning(f"Skipping malformed node: {raw!r}")
                continue

            children_raw = raw.get("children") or []
            frames.append([list(children_raw), 0, [], raw])
            continue

        frames.pop()
        if owner is None:
            return built

        frames[-1][2].append(MenuNode.from_dict(owner, tuple(built)))
