"""
Tree-to-display walk.

Produces the depth-annotated, pre-order rows a view needs to render the
permission tree. Collapsed subtrees are skipped.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator, Sequence
from dataclasses import dataclass

from permtree.core.MenuNode import MenuNode


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """Render record for one visible node."""
    node: MenuNode
    depth: int
    is_checked: bool
    is_expanded: bool
    has_children: bool


def walk_display(
    nodes: Sequence[MenuNode],
    selection: Collection[int],
    expanded: Collection[int],
) -> Iterator[DisplayRow]:
    """Yield visible rows in pre-order.

    Args:
        nodes: Root nodes
        selection: Selected ids
        expanded: Expanded ids

    Yields:
        DisplayRow per visible node
    """
    stack: list[tuple[MenuNode, int]] = [(node, 0) for node in reversed(nodes)]

    while stack:
        node, depth = stack.pop()
        has_children = node.has_children
        is_expanded = not has_children or node.id in expanded

        yield DisplayRow(
            node=node,
            depth=depth,
            is_checked=node.id in selection,
            is_expanded=is_expanded,
            has_children=has_children,
        )

        if has_children and is_expanded:
            for child in reversed(node.children):
                stack.append((child, depth + 1))


def render_text(rows: Iterator[DisplayRow] | Sequence[DisplayRow], indent: int = 2) -> str:
    """Plain-text rendering of display rows, one line per node.

    Example:
        "[x] - System"
        "  [ ]   Edit role  <operation>  system:role:edit"
    """
    lines = []
    for row in rows:
        marker = "[x]" if row.is_checked else "[ ]"
        if row.has_children:
            toggle = "-" if row.is_expanded else "+"
        else:
            toggle = " "

        line = f"{' ' * (row.depth * indent)}{marker} {toggle} {row.node.name}"
        if row.node.is_operation():
            line += f"  <{row.node.kind}>"
        if row.node.permission:
            line += f"  {row.node.permission}"
        lines.append(line)

    return "\n".join(lines)
