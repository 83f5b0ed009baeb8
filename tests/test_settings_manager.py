"""Unit tests for SettingsManager."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QByteArray, QSettings

from permtree.constants import DEFAULT_API_URL, ENV_API_TOKEN, ENV_API_URL, ENV_TIMEOUT, REQUEST_TIMEOUT
from permtree.core.SettingsManager import SettingsManager


@pytest.fixture
def manager(qapp, tmp_path, monkeypatch) -> SettingsManager:
    for name in (ENV_API_URL, ENV_API_TOKEN, ENV_TIMEOUT):
        monkeypatch.delenv(name, raising=False)
    settings = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return SettingsManager(settings)


def test_defaults(manager) -> None:
    assert manager.get_api_url() == DEFAULT_API_URL
    assert manager.get_api_token() == ""
    assert manager.get_timeout() == float(REQUEST_TIMEOUT)
    assert manager.get_dialog_geometry() is None


def test_stored_values(manager) -> None:
    manager.set_api_url("http://backend:9000/")
    manager.set_api_token("abc")
    manager.set_timeout(12.5)
    manager.set_api_version("v2")

    assert manager.get_api_url() == "http://backend:9000"
    assert manager.get_api_version() == "v2"
    assert manager.get_api_token() == "abc"
    assert manager.get_timeout() == 12.5


def test_environment_overrides(manager, monkeypatch) -> None:
    manager.set_api_url("http://stored")
    monkeypatch.setenv(ENV_API_URL, "http://env/")
    monkeypatch.setenv(ENV_API_TOKEN, "env-token")
    monkeypatch.setenv(ENV_TIMEOUT, "3")

    assert manager.get_api_url() == "http://env"
    assert manager.get_api_token() == "env-token"
    assert manager.get_timeout() == 3.0


def test_invalid_timeout_override_falls_back(manager, monkeypatch) -> None:
    monkeypatch.setenv(ENV_TIMEOUT, "soon")

    assert manager.get_timeout() == float(REQUEST_TIMEOUT)


def test_dialog_geometry(manager) -> None:
    manager.set_dialog_geometry(QByteArray(b"\x01\x02"))

    assert manager.get_dialog_geometry() == QByteArray(b"\x01\x02")
