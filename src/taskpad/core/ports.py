# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the form workflow.

The workflow depends on Protocols instead of concrete HTTP clients.
The two channels are scoped by trust level: the authenticated one carries a
bearer credential, the public one never does.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Protocol

from .models import Category, TaskRecord, User

if TYPE_CHECKING:
    from ..forms.payload import TaskPayload


class CredentialProvider(Protocol):
    """Supplies the bearer token for the authenticated channel (None if absent)."""

    def get_token(self) -> str | None: ...


class AuthenticatedClient(Protocol):
    def get_task(self, task_id: int | str) -> Awaitable[TaskRecord]: ...
    def list_users(self) -> Awaitable[list[User]]: ...
    def create_task(self, payload: TaskPayload) -> Awaitable[dict[str, Any]]: ...
    def update_task(self, task_id: int | str, payload: TaskPayload) -> Awaitable[dict[str, Any]]: ...


class PublicClient(Protocol):
    def list_categories(self) -> Awaitable[list[Category]]: ...

    def ensure_default_categories(self) -> Awaitable[None]:
        """Ask the backend to create its default categories (idempotent)."""
        ...

    def register(self, body: dict[str, str], *, timeout: float | None = None) -> Awaitable[dict[str, Any]]: ...


class Notifier(Protocol):
    """
    Transient user-visible notifications (toasts).

    Persistent form messages live in FormStatus; this port is for one-off
    feedback that outlives the form (e.g. "Task updated!" after navigating away).
    """

    def success(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...
