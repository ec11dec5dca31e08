# tests/test_submission.py

from __future__ import annotations

import asyncio

import pytest

from taskpad.core.models import Attachment, Category, FormMode, Priority, TaskRecord, TaskStatus
from taskpad.forms.payload import ASSIGNEES_KEY, FILES_KEY
from taskpad.forms.session import TaskFormSession
from taskpad.forms.submission import (
    CREATE_FAILURE_MESSAGE,
    CREATE_SUCCESS_MESSAGE,
    UPDATE_FAILURE_MESSAGE,
    UPDATE_FAILURE_TOAST,
    UPDATE_SUCCESS_MESSAGE,
    SubmitState,
)

from .fakes import FakePublicClient, server_error


async def _create_session(state, today, **kwargs) -> TaskFormSession:
    session = TaskFormSession.create(state, today=lambda: today, **kwargs)
    await session.mount()
    return session


def _fill(session: TaskFormSession) -> None:
    session.form.set_title("Write report")
    session.form.set_description("Quarterly numbers")
    session.form.set_assigned_users(["1", "2"])
    session.form.set_priority("high")
    session.form.add_attachment(Attachment(name="a.txt", content=b"a"))


@pytest.mark.asyncio
async def test_create_success_resets_and_closes(state, auth, notifier, today) -> None:
    closed: list[bool] = []
    session = await _create_session(state, today, on_close=lambda: closed.append(True))
    _fill(session)

    assert await session.submit() is True
    assert session.controller.state == SubmitState.SUCCEEDED
    assert session.status.success == CREATE_SUCCESS_MESSAGE
    # Create mode reports through the form status only.
    assert notifier.successes == []

    [(name, payload)] = auth.submitted()
    assert name == "create_task"
    assert payload.values(ASSIGNEES_KEY) == [1, 2]
    assert payload.count(FILES_KEY) == 1
    assert payload.values("due_date") == [today.isoformat()]
    assert payload.values("category") == ["3"]

    await session.controller.wait_side_effect()

    assert closed == [True]
    assert session.controller.state == SubmitState.IDLE
    assert session.form.draft.title == ""
    assert session.form.draft.category == "3"
    assert session.status.success == ""


@pytest.mark.asyncio
async def test_double_submit_is_ignored(state, auth, today) -> None:
    session = await _create_session(state, today)
    _fill(session)
    auth.gate = asyncio.Event()

    first = asyncio.create_task(session.submit())
    await asyncio.sleep(0)
    assert session.controller.state == SubmitState.SUBMITTING
    assert not session.can_submit

    assert await session.submit() is False

    auth.gate.set()
    assert await first is True
    assert len(auth.submitted()) == 1


@pytest.mark.asyncio
async def test_submit_disabled_without_categories(state, auth, today) -> None:
    state.public = FakePublicClient([], [])
    session = await _create_session(state, today)
    _fill(session)

    assert not session.can_submit
    assert await session.submit() is False
    assert auth.submitted() == []
    assert session.controller.state == SubmitState.IDLE


@pytest.mark.asyncio
async def test_failure_preserves_draft_and_hides_server_detail(state, auth, notifier, today) -> None:
    session = await _create_session(state, today)
    _fill(session)
    before = session.form.snapshot()
    auth.submit_error = server_error()

    assert await session.submit() is False

    assert session.form.draft == before
    assert session.controller.state == SubmitState.FAILED
    assert session.status.error == CREATE_FAILURE_MESSAGE
    assert "Invalid pk" not in session.status.error
    assert notifier.errors == []
    assert session.can_submit

    # Next edit returns the controller to idle.
    session.form.set_title("Write report v2")
    assert session.controller.state == SubmitState.IDLE


@pytest.mark.asyncio
async def test_retry_after_failure(state, auth, today) -> None:
    session = await _create_session(state, today)
    _fill(session)
    auth.submit_error = server_error()
    await session.submit()

    auth.submit_error = None
    assert await session.submit() is True
    assert session.status.error == ""
    assert len(auth.submitted()) == 2


@pytest.mark.asyncio
async def test_incomplete_draft_rejected_locally(state, auth, today) -> None:
    session = await _create_session(state, today)
    session.form.set_title("Only a title")

    assert await session.submit() is False

    assert auth.submitted() == []
    assert session.controller.state == SubmitState.FAILED
    assert session.status.error == "Please fill in: description."


@pytest.mark.asyncio
async def test_unknown_category_rejected_locally(state, auth, today) -> None:
    session = await _create_session(state, today)
    _fill(session)
    session.form.set_category("99")

    assert await session.submit() is False
    assert "category" in session.status.error
    assert auth.submitted() == []


@pytest.mark.asyncio
async def test_unmount_cancels_post_success_action(state, auth, today) -> None:
    state.settings.success_delay_seconds = 30.0
    closed: list[bool] = []
    session = await _create_session(state, today, on_close=lambda: closed.append(True))
    _fill(session)

    assert await session.submit() is True
    assert session.controller.side_effect_pending

    await session.unmount()
    await session.controller.wait_side_effect()

    assert closed == []
    assert not session.controller.side_effect_pending
    assert session.form.draft.title == "Write report"


def _edit_state(state, auth) -> None:
    auth.tasks["5"] = TaskRecord(
        id=5,
        title="Fix sink",
        description="Kitchen",
        due_date=None,
        priority=Priority.LOW,
        status=TaskStatus.PENDING,
        category=7,
        assigned_users=[2],
    )
    state.public = FakePublicClient([Category(id=3, name="Work"), Category(id=7, name="Home")])


@pytest.mark.asyncio
async def test_edit_success_puts_and_navigates(state, auth, notifier, today) -> None:
    _edit_state(state, auth)
    navigated: list[bool] = []

    async def navigate() -> None:
        navigated.append(True)

    session = TaskFormSession.edit(state, "5", on_navigate=navigate, today=lambda: today)
    await session.mount()
    session.form.set_description("")

    assert await session.submit() is True

    [(name, (task_id, payload))] = auth.submitted()
    assert name == "update_task"
    assert task_id == "5"
    assert "due_date" not in payload
    assert payload.values(ASSIGNEES_KEY) == ["2"]
    assert payload.values("category") == ["7"]
    assert session.status.success == UPDATE_SUCCESS_MESSAGE
    assert notifier.successes == [UPDATE_SUCCESS_MESSAGE]

    await session.controller.wait_side_effect()
    assert navigated == [True]


@pytest.mark.asyncio
async def test_edit_failure_notifies(state, auth, notifier, today) -> None:
    _edit_state(state, auth)
    session = TaskFormSession.edit(state, 5, today=lambda: today)
    await session.mount()
    auth.submit_error = server_error()

    assert await session.submit() is False

    assert session.mode == FormMode.EDIT
    assert session.status.error == UPDATE_FAILURE_MESSAGE
    assert notifier.errors == [UPDATE_FAILURE_TOAST]
    assert session.form.draft.title == "Fix sink"
