# src/taskpad/forms/session.py

from __future__ import annotations

"""
One mounted task form (create or edit).

Owns its draft, reference collections and status; nothing is shared between
sessions. mount() bootstraps, unmount() tears down. Results of requests that
finish after unmount() are dropped.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.models import FormMode, TaskRecord
from ..core.state import AppState
from .form_state import FormState
from .reference_loader import ReferenceDataLoader
from .status import FormStatus, MountGuard
from .submission import DEFAULT_SUCCESS_DELAY_SECONDS, SubmissionController

logger = logging.getLogger(__name__)

LOAD_TASK_FAILED_MESSAGE = "Failed to load task."
TASK_NOT_FOUND_TOAST = "Task not found."

Callback = Callable[[], Awaitable[None] | None]


async def _call(cb: Callback | None) -> None:
    if cb is None:
        return
    result = cb()
    if inspect.isawaitable(result):
        await result


class TaskFormSession:
    def __init__(
        self,
        state: AppState,
        mode: FormMode,
        *,
        task_id: int | str | None = None,
        on_close: Callback | None = None,
        on_navigate: Callback | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.mode = mode
        self.task_id = task_id
        self.task: TaskRecord | None = None
        self.loading = False

        self._auth = state.auth
        self._notifier = state.notifier
        self._on_close = on_close
        self._on_navigate = on_navigate

        self.guard = MountGuard()
        self.status = FormStatus()
        self.form = FormState(mode, today=today)
        self.loader = ReferenceDataLoader(
            state.auth,
            state.public,
            form=self.form,
            status=self.status,
            guard=self.guard,
        )
        self.controller = SubmissionController(
            mode=mode,
            form=self.form,
            loader=self.loader,
            auth=state.auth,
            status=self.status,
            guard=self.guard,
            notifier=state.notifier,
            post_success=self._after_success,
            task_id=task_id,
            success_delay=getattr(state.settings, "success_delay_seconds", DEFAULT_SUCCESS_DELAY_SECONDS),
        )

    @classmethod
    def create(cls, state: AppState, *, on_close: Callback | None = None, **kwargs) -> TaskFormSession:
        return cls(state, FormMode.CREATE, on_close=on_close, **kwargs)

    @classmethod
    def edit(
        cls,
        state: AppState,
        task_id: int | str,
        *,
        on_navigate: Callback | None = None,
        **kwargs,
    ) -> TaskFormSession:
        return cls(state, FormMode.EDIT, task_id=task_id, on_navigate=on_navigate, **kwargs)

    @property
    def active(self) -> bool:
        return self.guard.active

    @property
    def can_submit(self) -> bool:
        return not self.loading and self.controller.can_submit

    async def mount(self) -> bool:
        """Bootstrap reference data (and the task in edit mode). Never raises."""
        self.loading = True
        try:
            if self.mode == FormMode.EDIT:
                return await self._load_for_edit()
            return await self.loader.load()
        finally:
            if self.guard.active:
                self.loading = False

    async def _load_for_edit(self) -> bool:
        try:
            task, users, categories = await asyncio.gather(
                self._auth.get_task(self.task_id),  # type: ignore[arg-type]
                *self.loader.fetch_initial(),
            )
        except Exception:
            logger.exception("Failed to load task %s for editing", self.task_id)
            if self.guard.active:
                self.loader.fail(LOAD_TASK_FAILED_MESSAGE)
                self._notifier.error(TASK_NOT_FOUND_TOAST)
            return False

        if not self.guard.active:
            return False

        self.task = task
        self.form.hydrate(task, categories)
        return await self.loader.resolve(users, categories)

    async def submit(self) -> bool:
        return await self.controller.submit()

    async def cancel(self) -> None:
        """Create: close (or reset when nothing listens). Edit: navigate away."""
        if self.mode == FormMode.EDIT:
            await _call(self._on_navigate)
            return
        if self._on_close is not None:
            await _call(self._on_close)
            return
        self.form.reset(self.loader.categories)
        self.status.error = ""

    async def _after_success(self) -> None:
        if self.mode == FormMode.EDIT:
            await _call(self._on_navigate)
        else:
            await _call(self._on_close)

    async def unmount(self) -> None:
        self.guard.close()
        self.controller.close()
        logger.debug("Form %s unmounted", self.mode.value)
