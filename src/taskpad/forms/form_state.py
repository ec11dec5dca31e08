# src/taskpad/forms/form_state.py

"""
Form state for one task form (create or edit).

Setters only check shape (types, enum membership, due date not in the past);
whether the draft is complete enough to submit is decided at submission time.
No setter touches another field. The only cross-field rule is default
category selection, and it is explicit (apply_default_category / reset / hydrate).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime

from ..core.models import Attachment, Category, FormMode, Priority, TaskDraft, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class InvalidFieldError(ValueError):
    """A value has the wrong shape for the field it was given to."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


def first_category_id(categories: Sequence[Category]) -> str:
    return str(categories[0].id) if categories else ""


def resolve_category(raw: int | str | None, categories: Sequence[Category]) -> str:
    """Matching loaded category id, else the first one, else ""."""
    if raw is not None:
        for cat in categories:
            if str(cat.id) == str(raw):
                return str(cat.id)
    return first_category_id(categories)


def _coerce_date(value: date | datetime | str | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if not s or s.lower() == "none":
            return None
        try:
            return date.fromisoformat(s)
        except ValueError:
            raise InvalidFieldError("due_date", f"expected YYYY-MM-DD, got {value!r}") from None
    raise InvalidFieldError("due_date", f"unsupported type {type(value).__name__}")


class FormState:
    def __init__(self, mode: FormMode = FormMode.CREATE, *, today: Callable[[], date] = date.today) -> None:
        self.mode = mode
        self._today = today
        self.draft = self._defaults(categories=())
        self.user_touched_category = False
        self._hydrated_category: int | str | None = None
        self._listeners: list[ChangeListener] = []

    # ---- listeners ----

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _changed(self, field_name: str) -> None:
        for listener in list(self._listeners):
            listener(field_name)

    # ---- setters ----

    def set_title(self, value: str) -> None:
        self.draft.title = str(value)
        self._changed("title")

    def set_description(self, value: str) -> None:
        self.draft.description = str(value)
        self._changed("description")

    def set_due_date(self, value: date | datetime | str | None) -> None:
        due = _coerce_date(value)
        if due is not None and due < self._today():
            raise InvalidFieldError("due_date", "must not be in the past")
        self.draft.due_date = due
        self._changed("due_date")

    def set_priority(self, value: Priority | str) -> None:
        try:
            self.draft.priority = Priority(str(value).strip().lower())
        except ValueError:
            raise InvalidFieldError("priority", f"expected one of {[p.value for p in Priority]}") from None
        self._changed("priority")

    def set_status(self, value: TaskStatus | str) -> None:
        try:
            self.draft.status = TaskStatus(str(value).strip().lower())
        except ValueError:
            raise InvalidFieldError("status", f"expected one of {[s.value for s in TaskStatus]}") from None
        self._changed("status")

    def set_category(self, value: int | str) -> None:
        self.draft.category = str(value).strip()
        self.user_touched_category = True
        self._changed("category")

    def set_assigned_users(self, values: Iterable[int | str]) -> None:
        if isinstance(values, (str, bytes)):
            raise InvalidFieldError("assigned_users", "expected a collection of ids, not a single string")
        ids: list[str] = []
        for v in values:
            s = str(v).strip()
            if s and s not in ids:
                ids.append(s)
        self.draft.assigned_users = ids
        self._changed("assigned_users")

    def set_attachments(self, files: Iterable[Attachment]) -> None:
        """Replace the selection (file input semantics)."""
        self.draft.new_attachments = list(files)
        self._changed("new_attachments")

    def add_attachment(self, file: Attachment) -> None:
        self.draft.new_attachments.append(file)
        self._changed("new_attachments")

    # ---- initialization ----

    def _defaults(self, categories: Sequence[Category]) -> TaskDraft:
        return TaskDraft(
            due_date=self._today(),
            category=first_category_id(categories),
        )

    def apply_default_category(self, categories: Sequence[Category]) -> bool:
        """
        Select the default category unless the user already picked one.

        Create mode: the first category. Edit mode: only fills an empty
        category, resolving the task's stored id against the new collection.
        """
        if self.user_touched_category or not categories:
            return False
        if self.mode == FormMode.EDIT:
            if self.draft.category:
                return False
            self.draft.category = resolve_category(self._hydrated_category, categories)
            return True
        self.draft.category = first_category_id(categories)
        return True

    def hydrate(self, task: TaskRecord, categories: Sequence[Category]) -> None:
        """Fill every field from a fetched task (edit mode)."""
        category = resolve_category(task.category, categories)
        if task.category is not None and category != str(task.category):
            logger.info("Task %s category %s not loaded; falling back to %r", task.id, task.category, category)

        self.draft = TaskDraft(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            category=category,
            status=task.status,
            assigned_users=[str(u) for u in task.assigned_users],
        )
        self._hydrated_category = task.category
        self.user_touched_category = False

    def reset(self, categories: Sequence[Category]) -> None:
        """Back to create-mode defaults."""
        self.draft = self._defaults(categories)
        self.user_touched_category = False

    def snapshot(self) -> TaskDraft:
        return self.draft.copy()
