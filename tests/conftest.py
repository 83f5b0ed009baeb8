"""Shared fixtures: sample trees and a headless QApplication."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from permtree.core.MenuNode import MenuNode, NodeKind, parse_tree


@pytest.fixture
def chain_tree() -> list[MenuNode]:
    """A -> B -> C with ids 1, 2, 3."""
    return parse_tree(
        [{"id": 1, "name": "A", "children": [{"id": 2, "name": "B", "children": [{"id": 3, "name": "C"}]}]}]
    )


@pytest.fixture
def sibling_tree() -> list[MenuNode]:
    """A -> {B, C} with ids 1, 2, 3."""
    return parse_tree(
        [{"id": 1, "name": "A", "children": [{"id": 2, "name": "B"}, {"id": 3, "name": "C"}]}]
    )


@pytest.fixture
def system_tree() -> list[MenuNode]:
    """Two roots, three levels, operations with permission strings.

    System (1)
      Roles (10)
        Add role (100)  system:role:add
        Edit role (101) system:role:edit
      Menus (11)
        Add menu (110)  system:menu:add
    Monitor (2)
      Cache (20)
    """
    return [
        MenuNode(1, "System", children=(
            MenuNode(10, "Roles", children=(
                MenuNode(100, "Add role", NodeKind.OPERATION, "system:role:add"),
                MenuNode(101, "Edit role", NodeKind.OPERATION, "system:role:edit"),
            )),
            MenuNode(11, "Menus", children=(
                MenuNode(110, "Add menu", NodeKind.OPERATION, "system:menu:add"),
            )),
        )),
        MenuNode(2, "Monitor", children=(
            MenuNode(20, "Cache"),
        )),
    ]


@pytest.fixture(scope="session")
def qapp():
    """Create (or reuse) the QApplication for widget tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    return app
