"""Unit tests for Role and menu id sanitizing."""

from __future__ import annotations

import pytest

from permtree.core.RoleModels import Role, sanitize_menu_ids


def test_sanitize_drops_invalid_and_duplicates() -> None:
    assert sanitize_menu_ids([3, 0, -1, 3, "5", None, True, "x", 2]) == [3, 5, 2]


class TestRole:
    """Tests for Role conversions."""

    def test_from_dict_backend_shape(self) -> None:
        role = Role.from_dict(
            {
                "roleId": 7,
                "roleName": "Auditor",
                "roleKey": "auditor",
                "roleSort": 3,
                "status": "1",
                "remark": "read only",
                "menuCheckStrictly": False,
                "menuIds": [10, 1, 10],
            }
        )

        assert role.role_id == 7
        assert role.role_name == "Auditor"
        assert role.role_sort == 3
        assert role.status == "1"
        assert role.menu_check_strictly is False
        assert role.menu_ids == [10, 1]
        assert not role.is_new

    def test_from_dict_defaults(self) -> None:
        role = Role.from_dict({})

        assert role.is_new
        assert role.status == "0"
        assert role.menu_ids == []

    def test_to_payload(self) -> None:
        role = Role(role_name=" Admin ", role_key="admin", menu_ids=[3, 3, 1], remark="  ")

        payload = role.to_payload()

        assert payload == {
            "roleName": "Admin",
            "roleKey": "admin",
            "roleSort": 0,
            "status": "0",
            "dataScope": "1",
            "menuCheckStrictly": True,
            "deptCheckStrictly": False,
            "menuIds": [3, 1],
        }

    def test_to_payload_keeps_remark(self) -> None:
        payload = Role(role_name="a", role_key="a", remark="note").to_payload()

        assert payload["remark"] == "note"

    def test_data_scope_and_dept_flag_round_trip(self) -> None:
        role = Role.from_dict(
            {"roleId": 2, "roleName": "Dept", "roleKey": "dept", "dataScope": "4", "deptCheckStrictly": True}
        )

        payload = role.to_payload()

        assert role.data_scope == "4"
        assert role.dept_check_strictly is True
        assert payload["dataScope"] == "4"
        assert payload["deptCheckStrictly"] is True

    def test_missing_data_scope_defaults_to_all(self) -> None:
        role = Role.from_dict({"dataScope": None})

        assert role.data_scope == "1"
        assert role.dept_check_strictly is False

    def test_unknown_data_scope_raises(self) -> None:
        with pytest.raises(ValueError, match="data scope"):
            Role.from_dict({"dataScope": "9"})

    def test_null_name_and_key_become_empty(self) -> None:
        role = Role.from_dict({"roleId": 1, "roleName": None, "roleKey": None})

        assert role.role_name == ""
        assert role.role_key == ""
        assert role.to_payload()["roleName"] == ""

    def test_non_numeric_id_raises(self) -> None:
        with pytest.raises(ValueError):
            Role.from_dict({"roleId": "abc"})
