# src/taskpad/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

from ..core.models import Attachment, FormMode, Priority, TaskStatus
from ..core.state import AppState
from ..forms.form_state import InvalidFieldError
from ..forms.registration import RegistrationForm, register_user
from ..forms.session import TaskFormSession

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str | Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_session(session: TaskFormSession) -> str:
    title = "Edit Task" if session.mode == FormMode.EDIT else "Create New Task"
    lines = [f"== {title} =="]
    lines.extend(session.status.lines())

    if session.loading:
        lines.append("Loading form...")
        return "\n".join(lines)

    d = session.form.draft
    categories = session.loader.categories
    users = session.loader.users

    lines.append(f"  title:       {d.title or '-'}")
    lines.append(f"  description: {d.description or '-'}")
    lines.append(f"  due date:    {d.due_date.isoformat() if d.due_date else '-'}")
    lines.append(f"  priority:    {d.priority.value}")
    lines.append(f"  status:      {d.status.value}")

    if categories:
        names = ", ".join(
            f"{'*' if str(c.id) == d.category else ''}{c.id}:{c.name}" for c in categories
        )
        lines.append(f"  category:    {names}")
    else:
        lines.append("  category:    (none available)")

    if users:
        names = ", ".join(
            f"{'*' if str(u.id) in d.assigned_users else ''}{u.id}:{u.username}" for u in users
        )
        lines.append(f"  assignees:   {names}")

    files = ", ".join(f"{a.name} ({a.size} B)" for a in d.new_attachments) or "-"
    lines.append(f"  files:       {files}")
    lines.append(f"  submit:      {'available' if session.can_submit else 'disabled'}")
    return "\n".join(lines)


def _session_or_hint(state: AppState) -> TaskFormSession | str:
    if state.session is None or not state.session.active:
        return "No open form. Use /new or /edit <id>."
    return state.session


async def _replace_session(state: AppState, session: TaskFormSession) -> str:
    if state.session is not None:
        await state.session.unmount()
    state.session = session
    await session.mount()
    return render_session(session)


def _closer(state: AppState, emit: CommandEmitter | None, message: str) -> Callable[[], Awaitable[None]]:
    async def _close() -> None:
        session = state.session
        state.session = None
        if session is not None:
            await session.unmount()
        if emit:
            emit(message)

    return _close


async def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = TaskFormSession.create(state, on_close=_closer(state, emit, "Form closed."))
    return await _replace_session(state, session)


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /edit <task id>"
    session = TaskFormSession.edit(
        state,
        args[0],
        on_navigate=_closer(state, emit, "Back to task list."),
    )
    return await _replace_session(state, session)


def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = _session_or_hint(state)
    if isinstance(session, str):
        return session
    return render_session(session)


def _field_command(apply: Callable[[TaskFormSession, list[str]], None], usage: str) -> CommandHandler:
    def handler(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
        session = _session_or_hint(state)
        if isinstance(session, str):
            return session
        try:
            apply(session, args)
        except InvalidFieldError as e:
            return f"Invalid value ({e}). {usage}"
        except (IndexError, ValueError):
            return usage
        return render_session(session)

    return handler


def _attach(session: TaskFormSession, args: list[str]) -> None:
    files: list[Attachment] = []
    for raw in args:
        try:
            files.append(Attachment.from_path(raw))
        except OSError as e:
            raise InvalidFieldError("new_files", f"cannot read {raw}: {e.strerror}") from None
    session.form.set_attachments(files)


def _need(args: list[str]) -> list[str]:
    if not args:
        raise IndexError("missing argument")
    return args


async def cmd_submit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = _session_or_hint(state)
    if isinstance(session, str):
        return session
    if not session.can_submit:
        return "Submit is not available right now.\n" + render_session(session)
    await session.submit()
    return render_session(session)


async def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = _session_or_hint(state)
    if isinstance(session, str):
        return session
    await session.cancel()
    if state.session is session:
        return render_session(session)
    return "Cancelled."


async def cmd_register(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 4:
        return "Usage: /register <username> <email> <password> <confirm password>"
    form = RegistrationForm(username=args[0], email=args[1], password=args[2], confirm_password=args[3])
    result = await register_user(state.public, form)
    if result.ok:
        return "Registered. You can log in now."
    return result.error


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("new", cmd_new, help_text="Open a new task form.")
registry.register("edit", cmd_edit, help_text="Edit an existing task: /edit <id>.")
registry.register("show", cmd_show, help_text="Show the open form.")
registry.register(
    "title",
    _field_command(lambda s, a: s.form.set_title(" ".join(_need(a))), "Usage: /title <text>"),
    help_text="Set the title.",
)
registry.register(
    "desc",
    _field_command(lambda s, a: s.form.set_description(" ".join(a)), "Usage: /desc <text>"),
    help_text="Set the description.",
    aliases=["description"],
)
registry.register(
    "due",
    _field_command(lambda s, a: s.form.set_due_date(_need(a)[0]), "Usage: /due <YYYY-MM-DD|none>"),
    help_text="Set the due date (today or later), or clear it with 'none'.",
)
registry.register(
    "priority",
    _field_command(
        lambda s, a: s.form.set_priority(_need(a)[0]),
        "Usage: /priority " + "|".join(p.value for p in Priority),
    ),
    help_text="Set the priority.",
)
registry.register(
    "status",
    _field_command(
        lambda s, a: s.form.set_status(_need(a)[0]),
        "Usage: /status " + "|".join(t.value for t in TaskStatus),
    ),
    help_text="Set the task status.",
)
registry.register(
    "category",
    _field_command(lambda s, a: s.form.set_category(_need(a)[0]), "Usage: /category <id>"),
    help_text="Pick a category by id.",
)
registry.register(
    "assign",
    _field_command(lambda s, a: s.form.set_assigned_users(a), "Usage: /assign <user id> [...]"),
    help_text="Replace the assignees (no ids clears them).",
)
registry.register(
    "attach",
    _field_command(_attach, "Usage: /attach <path> [...]"),
    help_text="Replace the selected files (no paths clears them).",
)
registry.register("submit", cmd_submit, help_text="Create or update the task.")
registry.register("cancel", cmd_cancel, help_text="Close the form (create) or go back (edit).")
registry.register(
    "register",
    cmd_register,
    help_text="Create an account: /register <username> <email> <password> <confirm>.",
)
