# src/taskpad/forms/payload.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.models import Attachment, FormMode, TaskDraft

ASSIGNEES_KEY = "assigned_users"
FILES_KEY = "new_files[]"

MultipartPart = tuple[str, tuple[str | None, Any] | tuple[str | None, Any, str | None]]


@dataclass(slots=True)
class TaskPayload:
    """
    Transport-ready task body.

    Entries are kept as ordered (key, value) pairs, so repeated keys
    (assignees, files) stay distinct values of one multi-valued field.
    """

    fields: list[tuple[str, str | int]] = field(default_factory=list)
    files: list[tuple[str, Attachment]] = field(default_factory=list)

    def add(self, key: str, value: str | int) -> None:
        self.fields.append((key, value))

    def add_file(self, key: str, file: Attachment) -> None:
        self.files.append((key, file))

    def values(self, key: str) -> list[Any]:
        out: list[Any] = [v for k, v in self.fields if k == key]
        out.extend(f for k, f in self.files if k == key)
        return out

    def count(self, key: str) -> int:
        return len(self.values(key))

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.fields) or any(k == key for k, _ in self.files)

    def to_multipart(self) -> list[MultipartPart]:
        """
        httpx `files=` argument.

        Plain fields are sent as filename-less parts, so the body is always
        multipart/form-data even when no file is attached.
        """
        parts: list[MultipartPart] = [(k, (None, str(v))) for k, v in self.fields]
        parts.extend((k, (f.name, f.content, f.content_type)) for k, f in self.files)
        return parts


def _assignee_value(user_id: str, mode: FormMode) -> str | int:
    if mode == FormMode.CREATE:
        # Create sends numeric ids; anything non-numeric is passed through for the server to judge.
        try:
            return int(user_id)
        except ValueError:
            return user_id
    return user_id


def build_task_payload(draft: TaskDraft, mode: FormMode) -> TaskPayload:
    payload = TaskPayload()
    payload.add("title", draft.title)
    payload.add("description", draft.description)
    if draft.due_date is not None:
        payload.add("due_date", draft.due_date.isoformat())
    payload.add("priority", draft.priority.value)
    payload.add("category", draft.category)
    payload.add("status", draft.status.value)

    for user_id in draft.assigned_users:
        payload.add(ASSIGNEES_KEY, _assignee_value(user_id, mode))

    for file in draft.new_attachments:
        payload.add_file(FILES_KEY, file)

    return payload
