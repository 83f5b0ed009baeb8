"""
Client for the management backend menu and role endpoints.

All failures (network, HTTP status, envelope code, invalid payload) surface
as MenuServiceError so the UI has a single exception to handle.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from permtree.constants import (
    API_SUCCESS_CODES,
    DEFAULT_API_URL,
    DEFAULT_API_VERSION,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from permtree.core.MenuNode import MenuNode, parse_tree
from permtree.core.RoleModels import Role
from permtree.validation.TreeValidator import TreeValidator

logger = logging.getLogger(__name__)


class MenuServiceError(Exception):
    """Raised when a backend call fails."""

    def __init__(self, message: str, status: int | None = None, code: int | None = None):
        super().__init__(message)
        self.status = status
        self.code = code


class MenuService:
    """Fetches the menu tree and loads/saves roles."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_version: str = DEFAULT_API_VERSION,
        token: str = "",
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
        validator: TreeValidator | None = None,
    ) -> None:
        self._base_url = f"{api_url.rstrip('/')}/{api_version.strip('/')}"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._validator = validator or TreeValidator()

        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

        logger.info(f"MenuService initialized for {self._base_url}")

    @classmethod
    def from_settings(cls, settings) -> MenuService:
        """Build a service from a SettingsManager."""
        return cls(
            api_url=settings.get_api_url(),
            api_version=settings.get_api_version(),
            token=settings.get_api_token(),
            timeout=settings.get_timeout(),
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ========================================
    # Menus
    # ========================================

    def fetch_menu_tree(
        self, status: str | None = None, menu_name: str | None = None
    ) -> list[MenuNode]:
        """Fetch and parse the menu tree.

        Args:
            status: Optional status filter ("0" enabled)
            menu_name: Optional name filter

        Returns:
            Root nodes

        Raises:
            MenuServiceError: On any failure or schema-invalid payload
        """
        params = {}
        if status:
            params["status"] = status
        if menu_name:
            params["menuName"] = menu_name

        data = self._request("GET", "/system/menus/tree", params=params or None)
        if data is None:
            data = []

        result = self._validator.validate_data(data, "menu tree")
        if not result.is_valid:
            logger.error(f"Invalid menu tree payload: {result.errors}")
            raise MenuServiceError(f"Invalid menu tree payload: {result.errors[0]}")

        for warning in result.warnings:
            logger.warning(f"Menu tree: {warning}")

        nodes = parse_tree(data)
        logger.info(f"Menu tree loaded: {len(nodes)} roots")
        return nodes

    # ========================================
    # Roles
    # ========================================

    def fetch_role(self, role_id: int) -> Role:
        """Load a role with its menu ids."""
        data = self._request("GET", f"/system/roles/{role_id}")
        if not isinstance(data, dict):
            raise MenuServiceError(f"Unexpected role payload for {role_id}")

        role = self._parse_role(data)
        logger.info(f"Role loaded: {role.role_id} ({len(role.menu_ids)} menus)")
        return role

    def create_role(self, role: Role) -> Role:
        """Create a role. Returns the created role as echoed by the backend."""
        data = self._request("POST", "/system/roles", json=role.to_payload())
        logger.info(f"Role created: {role.role_key}")
        return self._parse_role(data) if isinstance(data, dict) else role

    def update_role(self, role: Role) -> Role:
        """Update an existing role."""
        if role.role_id is None:
            raise MenuServiceError("Cannot update a role without id")

        data = self._request("PUT", f"/system/roles/{role.role_id}", json=role.to_payload())
        logger.info(f"Role updated: {role.role_id}")
        return self._parse_role(data) if isinstance(data, dict) else role

    def save_role(self, role: Role) -> Role:
        """Create or update depending on whether the role has an id."""
        return self.create_role(role) if role.is_new else self.update_role(role)

    @staticmethod
    def _parse_role(data: dict) -> Role:
        try:
            return Role.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.error(f"Unexpected role payload: {data!r}")
            raise MenuServiceError(f"Unexpected role payload: {e}") from e

    # ========================================
    # Transport
    # ========================================

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and unwrap the response envelope.

        Returns:
            The envelope "data" member
        """
        url = f"{self._base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise MenuServiceError(f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        message = self._extract_message(body)

        if not response.ok:
            raise MenuServiceError(
                message or f"HTTP {response.status_code} for {method} {path}",
                status=response.status_code,
            )

        if not isinstance(body, dict):
            raise MenuServiceError(
                f"Malformed response for {method} {path}", status=response.status_code
            )

        code = body.get("code")
        if code is not None and code not in API_SUCCESS_CODES:
            raise MenuServiceError(
                message or f"Backend error {code}", status=response.status_code, code=code
            )

        return body.get("data")

    @staticmethod
    def _extract_message(body: Any) -> str | None:
        if not isinstance(body, dict):
            return None
        message = body.get("msg") or body.get("message")
        return str(message) if message else None
