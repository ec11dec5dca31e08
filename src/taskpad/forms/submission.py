# src/taskpad/forms/submission.py

from __future__ import annotations

"""
Submission controller.

    IDLE -> SUBMITTING -> SUCCEEDED | FAILED
    FAILED -> IDLE on the next draft edit
    SUCCEEDED -> post-success action after a fixed delay

submit() never raises: every outcome ends in one of the states above with a
user-facing message. Raw server errors go to the log only.
"""

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import StrEnum

from ..api.client import ApiError
from ..core.models import Category, FormMode, TaskDraft, User
from ..core.ports import AuthenticatedClient, Notifier
from .form_state import FormState
from .payload import build_task_payload
from .reference_loader import ReferenceDataLoader
from ..logging_setup import SERVER_DETAIL
from .status import FormStatus, MountGuard

logger = logging.getLogger(__name__)

PostSuccessAction = Callable[[], Awaitable[None] | None]

CREATE_SUCCESS_MESSAGE = "Task + files uploaded!"
CREATE_FAILURE_MESSAGE = "Check: file size <10MB, category selected, users assigned"
UPDATE_SUCCESS_MESSAGE = "Task updated!"
UPDATE_FAILURE_MESSAGE = "Failed to update task."
UPDATE_FAILURE_TOAST = "Update failed."

DEFAULT_SUCCESS_DELAY_SECONDS = 1.5


class SubmitState(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DraftValidationError(ValueError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__("Missing: " + ", ".join(missing))
        self.missing = missing

    def user_message(self) -> str:
        return "Please fill in: " + ", ".join(self.missing) + "."


def validate_draft(draft: TaskDraft, mode: FormMode, categories: Sequence[Category]) -> None:
    missing: list[str] = []
    if not draft.title.strip():
        missing.append("title")
    if mode == FormMode.CREATE and not draft.description.strip():
        missing.append("description")
    if not draft.category or draft.category not in {str(c.id) for c in categories}:
        missing.append("category")
    if missing:
        raise DraftValidationError(missing)


def _unknown_assignees(draft: TaskDraft, users: Sequence[User]) -> list[str]:
    known = {str(u.id) for u in users}
    return [u for u in draft.assigned_users if u not in known]


class DeferredAction:
    """A callback scheduled after a delay; cancel() drops it if it has not started yet."""

    def __init__(self, delay: float, action: PostSuccessAction) -> None:
        self._delay = max(0.0, float(delay))
        self._action = action
        self._started = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        await asyncio.sleep(self._delay)
        # The action may itself tear the form down (and call cancel()); it runs to completion.
        self._started = True
        try:
            result = self._action()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Post-success action failed")

    @property
    def pending(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        if not self._started:
            self._task.cancel()

    async def wait(self) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            await self._task


class SubmissionController:
    def __init__(
        self,
        *,
        mode: FormMode,
        form: FormState,
        loader: ReferenceDataLoader,
        auth: AuthenticatedClient,
        status: FormStatus,
        guard: MountGuard,
        notifier: Notifier,
        post_success: PostSuccessAction,
        task_id: int | str | None = None,
        success_delay: float = DEFAULT_SUCCESS_DELAY_SECONDS,
    ) -> None:
        if mode == FormMode.EDIT and task_id is None:
            raise ValueError("task_id is required in edit mode")

        self.mode = mode
        self.task_id = task_id
        self.state = SubmitState.IDLE

        self._form = form
        self._loader = loader
        self._auth = auth
        self._status = status
        self._guard = guard
        self._notifier = notifier
        self._post_success = post_success
        self._success_delay = success_delay
        self._deferred: DeferredAction | None = None

        form.add_listener(self._on_edit)

    @property
    def can_submit(self) -> bool:
        return (
            self._guard.active
            and self.state in (SubmitState.IDLE, SubmitState.FAILED)
            and self._loader.has_categories
        )

    def _on_edit(self, _field_name: str) -> None:
        if self.state == SubmitState.FAILED:
            self.state = SubmitState.IDLE

    async def submit(self) -> bool:
        """Send the draft. Returns True on success; a no-op (False) when submission is unavailable."""
        if not self.can_submit:
            logger.debug("Submit ignored (state=%s, categories=%d)", self.state, len(self._loader.categories))
            return False

        self.state = SubmitState.SUBMITTING
        self._status.clear_submission()

        draft = self._form.snapshot()
        try:
            validate_draft(draft, self.mode, self._loader.categories)
        except DraftValidationError as e:
            logger.info("Draft rejected locally: %s", e)
            self._fail(e.user_message())
            return False

        unknown = _unknown_assignees(draft, self._loader.users)
        if unknown:
            logger.warning("Assignees not in loaded users (server decides): %s", unknown)

        payload = build_task_payload(draft, self.mode)
        logger.debug(
            "Submitting %s: %d fields, %d files",
            self.mode.value,
            len(payload.fields),
            len(payload.files),
        )

        try:
            if self.mode == FormMode.EDIT:
                await self._auth.update_task(self.task_id, payload)  # type: ignore[arg-type]
            else:
                await self._auth.create_task(payload)
        except ApiError as e:
            logger.warning("Task %s failed: %s detail=%r", self.mode.value, e, e.detail, extra=SERVER_DETAIL)
            self._fail_request()
            return False
        except Exception:
            logger.exception("Task %s failed unexpectedly", self.mode.value)
            self._fail_request()
            return False

        if not self._guard.active:
            logger.debug("Form unmounted during submit; skipping success handling")
            return True

        self.state = SubmitState.SUCCEEDED
        if self.mode == FormMode.EDIT:
            self._status.success = UPDATE_SUCCESS_MESSAGE
            self._notifier.success(UPDATE_SUCCESS_MESSAGE)
        else:
            self._status.success = CREATE_SUCCESS_MESSAGE
        logger.info("Task %s succeeded", self.mode.value)

        self._deferred = DeferredAction(self._success_delay, self._run_post_success)
        return True

    async def _run_post_success(self) -> None:
        if not self._guard.active:
            return
        if self.mode == FormMode.CREATE:
            self._form.reset(self._loader.categories)
            self._status.clear_submission()
            self.state = SubmitState.IDLE
        result = self._post_success()
        if inspect.isawaitable(result):
            await result

    def _fail(self, message: str) -> None:
        if not self._guard.active:
            return
        self.state = SubmitState.FAILED
        self._status.error = message

    def _fail_request(self) -> None:
        if self.mode == FormMode.EDIT:
            self._fail(UPDATE_FAILURE_MESSAGE)
            if self._guard.active:
                self._notifier.error(UPDATE_FAILURE_TOAST)
        else:
            self._fail(CREATE_FAILURE_MESSAGE)

    @property
    def side_effect_pending(self) -> bool:
        return self._deferred is not None and self._deferred.pending

    async def wait_side_effect(self) -> None:
        if self._deferred is not None:
            await self._deferred.wait()

    def close(self) -> None:
        if self._deferred is not None:
            self._deferred.cancel()
