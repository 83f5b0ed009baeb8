"""Unit tests for MenuNode parsing."""

from __future__ import annotations

import pytest

from permtree.core.MenuNode import MenuNode, NodeKind, parse_tree


class TestNodeKind:
    """Tests for kind detection."""

    def test_compact_shape(self) -> None:
        assert NodeKind.from_raw({"kind": "operation"}) is NodeKind.OPERATION
        assert NodeKind.from_raw({"kind": "menu"}) is NodeKind.MENU

    def test_backend_shape(self) -> None:
        """Test button menu type maps to operation, anything else to menu."""
        assert NodeKind.from_raw({"menuType": "F"}) is NodeKind.OPERATION
        assert NodeKind.from_raw({"menuType": "C"}) is NodeKind.MENU
        assert NodeKind.from_raw({"menuType": "M"}) is NodeKind.MENU

    def test_unknown_defaults_to_menu(self) -> None:
        assert NodeKind.from_raw({}) is NodeKind.MENU
        assert NodeKind.from_raw({"kind": "widget"}) is NodeKind.MENU


class TestParseTree:
    """Tests for parse_tree."""

    def test_parses_compact_shape(self) -> None:
        nodes = parse_tree(
            [
                {
                    "id": 1,
                    "name": "System",
                    "kind": "menu",
                    "children": [
                        {"id": 2, "name": "Add", "kind": "operation", "permission": "system:add"},
                    ],
                }
            ]
        )

        assert len(nodes) == 1
        root = nodes[0]
        assert root.id == 1
        assert root.name == "System"
        assert root.has_children
        child = root.children[0]
        assert child.id == 2
        assert child.is_operation()
        assert child.permission == "system:add"
        assert not child.has_children

    def test_parses_backend_shape(self) -> None:
        nodes = parse_tree(
            [
                {
                    "menuId": 5,
                    "menuName": "Roles",
                    "menuType": "C",
                    "perms": None,
                    "children": [{"menuId": 6, "menuName": "Edit", "menuType": "F", "perms": "system:role:edit"}],
                }
            ]
        )

        assert nodes[0].id == 5
        assert nodes[0].name == "Roles"
        assert nodes[0].permission is None
        assert nodes[0].children[0].kind is NodeKind.OPERATION
        assert nodes[0].children[0].permission == "system:role:edit"

    def test_preserves_child_order(self) -> None:
        nodes = parse_tree(
            [{"id": 1, "name": "R", "children": [{"id": 4, "name": "x"}, {"id": 2, "name": "y"}, {"id": 3, "name": "z"}]}]
        )

        assert [child.id for child in nodes[0].children] == [4, 2, 3]

    def test_drops_malformed_entries(self) -> None:
        """Test nodes without a positive id are dropped with their subtree."""
        nodes = parse_tree(
            [
                {"name": "no id", "children": [{"id": 9, "name": "orphan"}]},
                {"id": 0, "name": "zero"},
                {"id": True, "name": "bool"},
                "not a node",
                {"id": "7", "name": "string id"},
            ]
        )

        assert [node.id for node in nodes] == [7]

    def test_none_and_empty_children(self) -> None:
        nodes = parse_tree([{"id": 1, "name": "a", "children": None}, {"id": 2, "name": "b", "children": []}])

        assert [node.has_children for node in nodes] == [False, False]

    def test_empty_input(self) -> None:
        assert parse_tree(None) == []
        assert parse_tree([]) == []

    def test_deep_tree_does_not_recurse(self) -> None:
        """Test a tree deeper than the recursion limit parses."""
        depth = 5000
        raw: dict = {"id": depth, "name": str(depth)}
        for node_id in range(depth - 1, 0, -1):
            raw = {"id": node_id, "name": str(node_id), "children": [raw]}

        nodes = parse_tree([raw])

        current = nodes[0]
        count = 1
        while current.children:
            current = current.children[0]
            count += 1
        assert count == depth
        assert current.id == depth

    def test_from_dict_rejects_missing_id(self) -> None:
        with pytest.raises(ValueError):
            MenuNode.from_dict({"name": "x"})
