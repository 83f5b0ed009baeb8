"""Unit tests for MenuService (HTTP mocked at the session level)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from permtree.core.MenuNode import NodeKind
from permtree.core.MenuService import MenuService, MenuServiceError
from permtree.core.RoleModels import Role


def make_response(status: int = 200, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session() -> requests.Session:
    session = requests.Session()
    session.request = MagicMock()
    return session


@pytest.fixture
def service(session) -> MenuService:
    return MenuService(api_url="http://backend/", api_version="v1", token="secret", timeout=5, session=session)


class TestSetup:
    """Tests for session configuration."""

    def test_base_url_and_headers(self, service, session) -> None:
        assert service.base_url == "http://backend/v1"
        assert session.headers["Authorization"] == "Bearer secret"
        assert session.headers["User-Agent"].startswith("PermTree/")

    def test_no_token_no_auth_header(self) -> None:
        session = requests.Session()
        MenuService(session=session)

        assert "Authorization" not in session.headers

    def test_from_settings(self) -> None:
        settings = MagicMock()
        settings.get_api_url.return_value = "http://stored"
        settings.get_api_version.return_value = "v2"
        settings.get_api_token.return_value = ""
        settings.get_timeout.return_value = 7.0

        service = MenuService.from_settings(settings)

        assert service.base_url == "http://stored/v2"


class TestFetchMenuTree:
    """Tests for fetch_menu_tree."""

    def test_parses_tree(self, service, session) -> None:
        session.request.return_value = make_response(
            body={
                "code": 200,
                "data": [
                    {
                        "menuId": 1,
                        "menuName": "System",
                        "menuType": "M",
                        "children": [{"menuId": 2, "menuName": "Add", "menuType": "F", "perms": "system:add"}],
                    }
                ],
            }
        )

        nodes = service.fetch_menu_tree(status="0")

        assert nodes[0].id == 1
        assert nodes[0].children[0].kind is NodeKind.OPERATION
        session.request.assert_called_once_with(
            "GET", "http://backend/v1/system/menus/tree", timeout=5, params={"status": "0"}
        )

    def test_null_data_is_empty_tree(self, service, session) -> None:
        session.request.return_value = make_response(body={"code": 0, "data": None})

        assert service.fetch_menu_tree() == []

    def test_invalid_payload_raises(self, service, session) -> None:
        session.request.return_value = make_response(body={"code": 200, "data": [{"name": "no id"}]})

        with pytest.raises(MenuServiceError, match="Invalid menu tree payload"):
            service.fetch_menu_tree()

    def test_duplicates_are_tolerated(self, service, session) -> None:
        session.request.return_value = make_response(
            body={"code": 200, "data": [{"id": 1, "children": [{"id": 2}]}, {"id": 2}]}
        )

        nodes = service.fetch_menu_tree()

        assert [node.id for node in nodes] == [1, 2]


class TestErrors:
    """Tests for error translation."""

    def test_network_error(self, service, session) -> None:
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(MenuServiceError, match="Request failed"):
            service.fetch_menu_tree()

    def test_http_error_uses_backend_message(self, service, session) -> None:
        session.request.return_value = make_response(status=403, body={"code": 403, "msg": "forbidden"})

        with pytest.raises(MenuServiceError) as exc_info:
            service.fetch_role(1)

        assert str(exc_info.value) == "forbidden"
        assert exc_info.value.status == 403

    def test_http_error_without_body(self, service, session) -> None:
        session.request.return_value = make_response(status=502, json_error=True)

        with pytest.raises(MenuServiceError, match="HTTP 502"):
            service.fetch_role(1)

    def test_envelope_error_code(self, service, session) -> None:
        session.request.return_value = make_response(body={"code": 500, "message": "boom"})

        with pytest.raises(MenuServiceError) as exc_info:
            service.fetch_role(1)

        assert exc_info.value.code == 500
        assert str(exc_info.value) == "boom"

    def test_malformed_body(self, service, session) -> None:
        session.request.return_value = make_response(body=["not", "an", "envelope"])

        with pytest.raises(MenuServiceError, match="Malformed response"):
            service.fetch_role(1)


class TestRoles:
    """Tests for role endpoints."""

    def test_fetch_role(self, service, session) -> None:
        session.request.return_value = make_response(
            body={"code": 200, "data": {"roleId": 4, "roleName": "Ops", "roleKey": "ops", "menuIds": [3, 1]}}
        )

        role = service.fetch_role(4)

        assert role.role_id == 4
        assert role.menu_ids == [3, 1]
        session.request.assert_called_once_with("GET", "http://backend/v1/system/roles/4", timeout=5)

    def test_save_new_role_posts(self, service, session) -> None:
        session.request.return_value = make_response(body={"code": 200, "data": True})
        role = Role(role_name="Ops", role_key="ops", menu_ids=[2, 1])

        saved = service.save_role(role)

        assert saved is role
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", "http://backend/v1/system/roles")
        assert session.request.call_args.kwargs["json"]["menuIds"] == [2, 1]

    def test_save_existing_role_puts(self, service, session) -> None:
        session.request.return_value = make_response(
            body={"code": 200, "data": {"roleId": 9, "roleName": "Ops", "roleKey": "ops", "menuIds": [1]}}
        )

        saved = service.save_role(Role(role_id=9, role_name="Ops", role_key="ops", menu_ids=[1]))

        assert saved.role_id == 9
        method, url = session.request.call_args.args
        assert (method, url) == ("PUT", "http://backend/v1/system/roles/9")

    def test_update_without_id_raises(self, service) -> None:
        with pytest.raises(MenuServiceError):
            service.update_role(Role(role_name="x", role_key="x"))

    def test_malformed_role_id_raises_service_error(self, service, session) -> None:
        session.request.return_value = make_response(body={"code": 200, "data": {"roleId": "abc"}})

        with pytest.raises(MenuServiceError, match="Unexpected role payload"):
            service.fetch_role(1)

    def test_malformed_role_echo_on_save(self, service, session) -> None:
        session.request.return_value = make_response(
            body={"code": 200, "data": {"roleId": 9, "menuIds": 5}}
        )

        with pytest.raises(MenuServiceError, match="Unexpected role payload"):
            service.save_role(Role(role_id=9, role_name="Ops", role_key="ops"))

    def test_null_role_name_is_loaded_as_empty(self, service, session) -> None:
        session.request.return_value = make_response(
            body={"code": 200, "data": {"roleId": 1, "roleName": None, "roleKey": "ops"}}
        )

        role = service.fetch_role(1)

        assert role.role_name == ""
        assert role.to_payload()["roleKey"] == "ops"
