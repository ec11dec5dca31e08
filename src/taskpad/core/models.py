# src/taskpad/core/models.py

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Any


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_api(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


class TaskStatus(StrEnum):
    """Task lifecycle status as understood by the backend."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def from_api(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(str(raw))
        except ValueError:
            return cls.PENDING


class FormMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(slots=True, frozen=True)
class User:
    id: int | str
    username: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> User:
        return cls(id=raw["id"], username=str(raw.get("username", "")))


@dataclass(slots=True, frozen=True)
class Category:
    id: int | str
    name: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Category:
        return cls(id=raw["id"], name=str(raw.get("name", "")))


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """A task as returned by GET /api/tasks/{id}/."""

    id: int | str
    title: str
    description: str | None
    due_date: date | None
    priority: Priority
    status: TaskStatus
    category: int | str | None
    assigned_users: list[int | str] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> TaskRecord:
        due_raw = raw.get("due_date")
        due: date | None = None
        if due_raw:
            # The backend may send a full timestamp; only the calendar date matters here.
            due = date.fromisoformat(str(due_raw)[:10])

        return cls(
            id=raw["id"],
            title=str(raw.get("title") or ""),
            description=raw.get("description"),
            due_date=due,
            priority=Priority.from_api(raw.get("priority")),
            status=TaskStatus.from_api(raw.get("status")),
            category=raw.get("category"),
            assigned_users=list(raw.get("assigned_users") or []),
        )


@dataclass(slots=True, frozen=True)
class Attachment:
    """A file selected for upload; content is read eagerly."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> Attachment:
        p = Path(path).expanduser()
        content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        return cls(name=p.name, content=p.read_bytes(), content_type=content_type)

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(slots=True)
class TaskDraft:
    """The client-local, editable representation of a task."""

    title: str = ""
    description: str = ""
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    category: str = ""
    status: TaskStatus = TaskStatus.PENDING
    assigned_users: list[str] = field(default_factory=list)
    new_attachments: list[Attachment] = field(default_factory=list)

    def copy(self) -> TaskDraft:
        return TaskDraft(
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            priority=self.priority,
            category=self.category,
            status=self.status,
            assigned_users=list(self.assigned_users),
            new_attachments=list(self.new_attachments),
        )
