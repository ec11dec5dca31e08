# src/taskpad/forms/reference_loader.py

from __future__ import annotations

"""
Reference data loader.

Fetches users (authenticated channel) and categories (public channel)
concurrently, then runs at most one self-heal pass when the category list
comes back empty:

    LOADED -> EMPTY_DETECTED -> RECOVERY_REQUESTED -> RECOVERY_RESOLVED

The self-heal asks the backend to ensure its default categories exist and
re-fetches the list once. It never loops: a still-empty list leaves the
informational status in place and submission stays disabled.
"""

import asyncio
import logging
from collections.abc import Sequence
from enum import StrEnum

from ..core.models import Category, User
from ..core.ports import AuthenticatedClient, PublicClient
from .form_state import FormState
from .status import FormStatus, MountGuard

logger = logging.getLogger(__name__)

NO_CATEGORIES_MESSAGE = "No categories yet - adding defaults..."
LOAD_FAILED_MESSAGE = "Failed to load data. Please refresh."


class LoadPhase(StrEnum):
    IDLE = "idle"
    LOADED = "loaded"
    EMPTY_DETECTED = "empty_detected"
    RECOVERY_REQUESTED = "recovery_requested"
    RECOVERY_RESOLVED = "recovery_resolved"
    FAILED = "failed"


class ReferenceDataLoader:
    def __init__(
        self,
        auth: AuthenticatedClient,
        public: PublicClient,
        *,
        form: FormState,
        status: FormStatus,
        guard: MountGuard,
    ) -> None:
        self._auth = auth
        self._public = public
        self._form = form
        self._status = status
        self._guard = guard

        self.phase = LoadPhase.IDLE
        self.users: list[User] = []
        self.categories: list[Category] = []
        self._recovery_attempted = False

    @property
    def has_categories(self) -> bool:
        return bool(self.categories)

    @property
    def failed(self) -> bool:
        return self.phase == LoadPhase.FAILED

    def fetch_initial(self) -> list[asyncio.Future]:
        """The two initial requests, for callers that gather them with more work."""
        return [
            asyncio.ensure_future(self._auth.list_users()),
            asyncio.ensure_future(self._public.list_categories()),
        ]

    async def load(self) -> bool:
        """Full bootstrap. Returns False on failure (status already set)."""
        try:
            users, categories = await asyncio.gather(*self.fetch_initial())
        except Exception:
            logger.exception("Reference data fetch failed")
            self.fail(LOAD_FAILED_MESSAGE)
            return False
        return await self.resolve(users, categories)

    async def resolve(self, users: Sequence[User], categories: Sequence[Category]) -> bool:
        """Store fetched collections, pick the default category, self-heal if empty."""
        if not self._guard.active:
            logger.debug("Form unmounted; dropping reference data")
            return False

        self.users = list(users)
        self.categories = list(categories)
        self.phase = LoadPhase.LOADED
        logger.debug("Loaded %d users, %d categories", len(self.users), len(self.categories))

        if self.categories:
            self._form.apply_default_category(self.categories)
            return True

        try:
            await self._recover()
        except Exception:
            logger.exception("Category self-heal failed")
            self.fail(LOAD_FAILED_MESSAGE)
            return False
        return True

    async def _recover(self) -> None:
        if self._recovery_attempted:
            return
        self._recovery_attempted = True

        self.phase = LoadPhase.EMPTY_DETECTED
        self._status.info = NO_CATEGORIES_MESSAGE
        logger.info("No categories returned; requesting defaults")

        self.phase = LoadPhase.RECOVERY_REQUESTED
        await self._public.ensure_default_categories()
        retry = await self._public.list_categories()

        if not self._guard.active:
            return

        self.phase = LoadPhase.RECOVERY_RESOLVED
        if not retry:
            logger.warning("Categories still empty after requesting defaults; submission stays disabled")
            return

        self.categories = list(retry)
        self._form.apply_default_category(self.categories)
        self._status.info = ""
        logger.info("Recovered %d categories", len(self.categories))

    def fail(self, message: str) -> None:
        if not self._guard.active:
            return
        self.phase = LoadPhase.FAILED
        self.users = []
        self.categories = []
        self._status.info = ""
        self._status.error = message
