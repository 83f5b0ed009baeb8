"""Role data exchanged with the management backend."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from permtree.constants import DATA_SCOPE_ALL, DATA_SCOPE_LABELS, ROLE_STATUS_NORMAL


def sanitize_menu_ids(ids: Iterable[Any]) -> list[int]:
    """Drop non-positive and duplicate ids, keeping first-occurrence order."""
    seen: set[int] = set()
    result: list[int] = []

    for raw in ids:
        if isinstance(raw, bool):
            continue
        try:
            menu_id = int(raw)
        except (TypeError, ValueError):
            continue
        if menu_id <= 0 or menu_id in seen:
            continue
        seen.add(menu_id)
        result.append(menu_id)

    return result


@dataclass
class Role:
    """
    Role with its assigned menu permissions.

    Attributes:
        role_id: Backend id (None until created)
        role_name: Display name
        role_key: Permission key (e.g. "admin")
        role_sort: Display order
        status: "0" normal, "1" disabled
        data_scope: Data scope code ("1" all data to "5" own data only)
        remark: Free text
        menu_check_strictly: Backend flag, passed through untouched
        dept_check_strictly: Backend flag, passed through untouched
        menu_ids: Assigned menu ids
    """
    role_name: str = ""
    role_key: str = ""
    role_id: int | None = None
    role_sort: int = 0
    status: str = ROLE_STATUS_NORMAL
    data_scope: str = DATA_SCOPE_ALL
    remark: str | None = None
    menu_check_strictly: bool = True
    dept_check_strictly: bool = False
    menu_ids: list[int] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        """Check if role has not been created yet."""
        return self.role_id is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Role:
        """Load Role from the backend camelCase shape.

        Raises:
            ValueError: If the id, sort order or data scope is invalid
            TypeError: If a field has an unusable type
        """
        role_id = data.get("roleId")
        data_scope = str(data.get("dataScope") or DATA_SCOPE_ALL)
        if data_scope not in DATA_SCOPE_LABELS:
            raise ValueError(f"Unknown data scope: {data_scope!r}")

        remark = data.get("remark")
        return cls(
            role_id=int(role_id) if role_id is not None else None,
            role_name=str(data.get("roleName") or ""),
            role_key=str(data.get("roleKey") or ""),
            role_sort=int(data.get("roleSort") or 0),
            status=str(data.get("status") or ROLE_STATUS_NORMAL),
            data_scope=data_scope,
            remark=str(remark) if remark is not None else None,
            menu_check_strictly=bool(data.get("menuCheckStrictly", True)),
            dept_check_strictly=bool(data.get("deptCheckStrictly", False)),
            menu_ids=sanitize_menu_ids(data.get("menuIds") or []),
        )

    def to_payload(self) -> dict[str, Any]:
        """Convert to the create/update request body."""
        payload: dict[str, Any] = {
            "roleName": self.role_name.strip(),
            "roleKey": self.role_key.strip(),
            "roleSort": self.role_sort,
            "status": self.status,
            "dataScope": self.data_scope,
            "menuCheckStrictly": self.menu_check_strictly,
            "deptCheckStrictly": self.dept_check_strictly,
            "menuIds": sanitize_menu_ids(self.menu_ids),
        }

        remark = (self.remark or "").strip()
        if remark:
            payload["remark"] = remark

        return payload
