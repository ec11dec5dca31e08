# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .ports import AuthenticatedClient, Notifier, PublicClient

if TYPE_CHECKING:
    from ..forms.session import TaskFormSession


@dataclass
class AppState:
    # Settings object (config.Settings, or a SimpleNamespace in tests).
    settings: Any

    auth: AuthenticatedClient
    public: PublicClient
    notifier: Notifier

    # The currently mounted form, if any (one at a time in the console).
    session: TaskFormSession | None = None
