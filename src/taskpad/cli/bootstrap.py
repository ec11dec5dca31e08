# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the credential provider,
- wires the two API channels and the notifier into AppState.
"""

from __future__ import annotations

import logging

from ..api.client import AuthenticatedApiClient, PublicApiClient
from ..api.credentials import StaticTokenProvider, TokenFileProvider
from ..config import get_settings
from ..core.ports import CredentialProvider, Notifier
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def build_credentials(settings) -> CredentialProvider:
    """Explicit token wins; otherwise read the token file written by the login tool."""
    token = getattr(settings, "access_token", None)
    if token:
        logger.debug("Using access token from environment")
        return StaticTokenProvider(token)
    logger.debug("Using token file %s", settings.token_file)
    return TokenFileProvider(settings.token_file)


def create_initial_state(*, notifier: Notifier, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    timeout = float(settings.request_timeout_seconds)
    auth = AuthenticatedApiClient(
        settings.backend_url,
        build_credentials(settings),
        timeout=timeout,
    )
    public = PublicApiClient(
        settings.backend_url,
        category_defaults_path=settings.category_defaults_path,
        timeout=timeout,
    )
    logger.info("Backend: %s", settings.backend_url)

    return AppState(settings=settings, auth=auth, public=public, notifier=notifier)


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if state.session is not None:
        try:
            await state.session.unmount()
        except Exception:
            logger.exception("Failed to unmount form.")
        state.session = None

    for client in (state.auth, state.public):
        try:
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()
        except Exception:
            logger.debug("HTTP client close failed.", exc_info=True)
