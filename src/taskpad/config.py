# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the access token is read lazily by the
  credential provider, never by the workflow itself).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKPAD"

DEFAULT_BACKEND_URL = "https://pp5-productivity-backend2.onrender.com"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Backend ----
    backend_url: str
    request_timeout_seconds: float
    category_defaults_path: str

    # ---- Credentials ----
    access_token: str | None
    token_file: Path

    # ---- Form behaviour ----
    success_delay_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad") or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # REACT_APP_BACKEND_URL is honoured so an existing frontend .env can be reused.
        backend_url = (
            _first_env(_k("BACKEND_URL"), "REACT_APP_BACKEND_URL", default=DEFAULT_BACKEND_URL)
            or DEFAULT_BACKEND_URL
        ).strip().rstrip("/")

        request_timeout_seconds = max(1.0, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 30.0))
        category_defaults_path = _env(_k("CATEGORY_DEFAULTS_PATH"), "/api/categories/").strip() or "/api/categories/"

        access_token = _first_env(_k("ACCESS_TOKEN"), default=None)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        token_file = _env_path(_k("TOKEN_FILE"), data_dir / "access_token")

        success_delay_seconds = max(0.0, _env_float(_k("SUCCESS_DELAY_SECONDS"), 1.5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend_url=backend_url,
            request_timeout_seconds=request_timeout_seconds,
            category_defaults_path=category_defaults_path,
            access_token=access_token,
            token_file=token_file,
            success_delay_seconds=success_delay_seconds,
            data_dir=data_dir,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
