"""User preferences backed by QSettings, with environment overrides."""

import logging
import os

from PySide6.QtCore import QByteArray, QSettings

from permtree.constants import (
    APP_NAME,
    APP_ORG,
    DEFAULT_API_URL,
    DEFAULT_API_VERSION,
    ENV_API_TOKEN,
    ENV_API_URL,
    ENV_TIMEOUT,
    REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)


class SettingsManager:
    """
    Manages connection and window preferences.

    Values are read from the environment first, then QSettings, then the
    defaults in constants. The linkage flag of the permission tree is
    session state and is not stored here.

    Attributes:
        settings: Qt settings store
    """

    def __init__(self, settings: QSettings | None = None) -> None:
        self.settings = settings if settings is not None else QSettings(APP_ORG, APP_NAME)

    # ========================================
    # API CONNECTION
    # ========================================

    def get_api_url(self) -> str:
        """Get backend base URL (without version prefix)."""
        override = os.environ.get(ENV_API_URL)
        if override:
            return override.rstrip("/")
        return str(self.settings.value("api/url", DEFAULT_API_URL, str)).rstrip("/")

    def set_api_url(self, url: str) -> None:
        self.settings.setValue("api/url", url.rstrip("/"))
        logger.info(f"API URL set to: {url}")

    def get_api_version(self) -> str:
        return str(self.settings.value("api/version", DEFAULT_API_VERSION, str))

    def set_api_version(self, version: str) -> None:
        self.settings.setValue("api/version", version)

    def get_api_token(self) -> str:
        """Get bearer token ("" when none configured)."""
        override = os.environ.get(ENV_API_TOKEN)
        if override:
            return override
        return str(self.settings.value("api/token", "", str))

    def set_api_token(self, token: str) -> None:
        self.settings.setValue("api/token", token)
        logger.info("API token updated")

    def get_timeout(self) -> float:
        """Get request timeout in seconds."""
        override = os.environ.get(ENV_TIMEOUT)
        if override:
            try:
                return float(override)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_TIMEOUT} value: {override!r}")

        value = self.settings.value("api/timeout", REQUEST_TIMEOUT)
        try:
            return float(value)
        except (TypeError, ValueError):
            return float(REQUEST_TIMEOUT)

    def set_timeout(self, seconds: float) -> None:
        self.settings.setValue("api/timeout", seconds)

    # ========================================
    # WINDOW STATE
    # ========================================

    def get_dialog_geometry(self) -> QByteArray | None:
        """Get saved role editor geometry."""
        value = self.settings.value("ui/role_editor_geometry")
        return value if isinstance(value, QByteArray) else None

    def set_dialog_geometry(self, geometry: QByteArray) -> None:
        self.settings.setValue("ui/role_editor_geometry", geometry)
