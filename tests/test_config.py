# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from taskpad.api.credentials import StaticTokenProvider, TokenFileProvider
from taskpad.cli.bootstrap import build_credentials
from taskpad.config import DEFAULT_BACKEND_URL, Settings

_VARS = (
    "TASKPAD_BACKEND_URL",
    "REACT_APP_BACKEND_URL",
    "TASKPAD_ACCESS_TOKEN",
    "TASKPAD_DATA_DIR",
    "TASKPAD_TOKEN_FILE",
    "TASKPAD_SUCCESS_DELAY_SECONDS",
    "TASKPAD_REQUEST_TIMEOUT_SECONDS",
    "TASKPAD_CATEGORY_DEFAULTS_PATH",
)


def _clean(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch) -> None:
    _clean(monkeypatch)

    s = Settings.from_env()

    assert s.backend_url == DEFAULT_BACKEND_URL
    assert s.success_delay_seconds == 1.5
    assert s.access_token is None
    assert s.token_file == Path(".local/taskpad") / "access_token"
    assert s.category_defaults_path == "/api/categories/"


def test_overrides_and_bad_numbers(monkeypatch, tmp_path) -> None:
    _clean(monkeypatch)
    monkeypatch.setenv("REACT_APP_BACKEND_URL", "http://localhost:8000/")
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKPAD_SUCCESS_DELAY_SECONDS", "soon")
    monkeypatch.setenv("TASKPAD_REQUEST_TIMEOUT_SECONDS", "0")

    s = Settings.from_env()

    assert s.backend_url == "http://localhost:8000"
    assert s.data_dir == tmp_path
    assert s.token_file == tmp_path / "access_token"
    assert s.success_delay_seconds == 1.5
    assert s.request_timeout_seconds == 1.0


def test_credentials_prefer_explicit_token(settings) -> None:
    assert isinstance(build_credentials(settings), StaticTokenProvider)

    settings.access_token = None
    provider = build_credentials(settings)
    assert isinstance(provider, TokenFileProvider)
    assert provider.get_token() is None
