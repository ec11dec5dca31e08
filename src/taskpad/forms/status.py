# src/taskpad/forms/status.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FormStatus:
    """
    User-visible messages of one form instance.

    - info: transient, non-error state (e.g. waiting for default categories)
    - error: loading or submission failure, always non-technical
    - success: submission confirmation
    """

    info: str = ""
    error: str = ""
    success: str = ""

    def clear(self) -> None:
        self.info = ""
        self.error = ""
        self.success = ""

    def clear_submission(self) -> None:
        self.error = ""
        self.success = ""

    def lines(self) -> list[str]:
        out: list[str] = []
        if self.success:
            out.append(f"[ok] {self.success}")
        if self.info:
            out.append(f"[info] {self.info}")
        if self.error:
            out.append(f"[error] {self.error}")
        return out


class MountGuard:
    """
    Tracks whether the owning form is still mounted.

    Requests are never cancelled; their results must be dropped once the form
    is gone, so every state update after an await checks `active` first.
    """

    __slots__ = ("_active",)

    def __init__(self) -> None:
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        self._active = False
