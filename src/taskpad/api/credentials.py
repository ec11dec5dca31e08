# src/taskpad/api/credentials.py

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class StaticTokenProvider:
    """Token fixed at construction (e.g. from TASKPAD_ACCESS_TOKEN)."""

    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip() or None

    def get_token(self) -> str | None:
        return self._token


class TokenFileProvider:
    """
    Reads the token from a local file on every call.

    The file is written by whatever performs the login (outside this app), so
    re-reading picks up a refreshed token without a restart. It contains a
    secret and must live under a gitignored dir.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    def get_token(self) -> str | None:
        try:
            raw = self._path.read_text("utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Failed to read token file %s: %r", self._path, e)
            return None
        return raw.strip() or None
