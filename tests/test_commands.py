# tests/test_commands.py

from __future__ import annotations

import pytest

from taskpad.cli.commands import CommandRegistry, registry


@pytest.mark.asyncio
async def test_command_registry_routes_sync_and_async_handlers(state) -> None:
    reg = CommandRegistry()
    called = {"sync": 0, "async": 0}

    def h_sync(state, args, emit):
        called["sync"] += 1
        return "sync:" + ",".join(args)

    async def h_async(state, args, emit):
        called["async"] += 1
        if emit is not None:
            emit("note")
        return "async"

    reg.register("a", h_sync, "a", aliases=["aa"])
    reg.register("b", h_async, "b")

    assert await reg.handle(state, "/a x y") == "sync:x,y"
    assert await reg.handle(state, "/AA") == "sync:"
    assert await reg.handle(state, "/b", emit=lambda _: None) == "async"
    assert called == {"sync": 2, "async": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_field_commands_need_an_open_form(state) -> None:
    reply = await registry.handle(state, "/title Hello")
    assert reply == "No open form. Use /new or /edit <id>."


@pytest.mark.asyncio
async def test_console_create_flow(state, auth, tmp_path) -> None:
    attachment = tmp_path / "notes.txt"
    attachment.write_bytes(b"notes")
    emitted: list[str] = []

    reply = await registry.handle(state, "/new", emit=emitted.append)
    assert "Create New Task" in reply
    assert "*3:Work" in reply

    await registry.handle(state, "/title Write the report")
    await registry.handle(state, "/desc Numbers for Q3")
    await registry.handle(state, "/assign 2 1")
    await registry.handle(state, "/priority low")
    await registry.handle(state, f"/attach {attachment}")
    bad = await registry.handle(state, "/priority urgent")
    assert bad.startswith("Invalid value")

    reply = await registry.handle(state, "/submit", emit=emitted.append)
    assert "Task + files uploaded!" in reply

    [(_, payload)] = auth.submitted()
    assert payload.values("title") == ["Write the report"]
    assert payload.values("assigned_users") == [2, 1]
    assert payload.values("priority") == ["low"]
    assert payload.count("new_files[]") == 1

    session = state.session
    await session.controller.wait_side_effect()
    assert state.session is None
    assert emitted == ["Form closed."]


@pytest.mark.asyncio
async def test_attach_missing_file_reports_error(state, tmp_path) -> None:
    await registry.handle(state, "/new")

    reply = await registry.handle(state, f"/attach {tmp_path / 'missing.bin'}")

    assert reply.startswith("Invalid value")
    assert state.session.form.draft.new_attachments == []


@pytest.mark.asyncio
async def test_register_command_usage(state) -> None:
    assert (await registry.handle(state, "/register alice")).startswith("Usage")
    reply = await registry.handle(state, "/register alice a@example.com password1 password1")
    assert reply == "Registered. You can log in now."
