# src/taskpad/forms/registration.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..api.client import ApiError
from ..core.ports import PublicClient
from ..logging_setup import SERVER_DETAIL

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
REGISTER_TIMEOUT_SECONDS = 5.0
GENERIC_REGISTRATION_ERROR = "An error occurred during registration."


@dataclass(slots=True, frozen=True)
class RegistrationForm:
    username: str
    email: str
    password: str
    confirm_password: str

    def local_error(self) -> str | None:
        if len(self.password) < MIN_PASSWORD_LENGTH:
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        if self.password != self.confirm_password:
            return "Passwords do not match."
        return None

    def to_body(self) -> dict[str, str]:
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "confirm_password": self.confirm_password,
        }


@dataclass(slots=True, frozen=True)
class RegistrationResult:
    ok: bool
    error: str = ""


def flatten_field_errors(detail: Any) -> str:
    """{"username": ["taken"], "email": ["bad"]} -> "taken bad"."""
    if not isinstance(detail, dict):
        return ""
    parts: list[str] = []
    for value in detail.values():
        if isinstance(value, (list, tuple)):
            parts.extend(str(v) for v in value)
        elif value:
            parts.append(str(value))
    return " ".join(parts)


async def register_user(client: PublicClient, form: RegistrationForm) -> RegistrationResult:
    local = form.local_error()
    if local:
        return RegistrationResult(ok=False, error=local)

    try:
        await client.register(form.to_body(), timeout=REGISTER_TIMEOUT_SECONDS)
    except ApiError as e:
        logger.warning(
            "Registration rejected: status=%s detail=%r", e.status_code, e.detail, extra=SERVER_DETAIL
        )
        return RegistrationResult(ok=False, error=flatten_field_errors(e.detail) or GENERIC_REGISTRATION_ERROR)
    except Exception:
        logger.exception("Registration failed unexpectedly")
        return RegistrationResult(ok=False, error=GENERIC_REGISTRATION_ERROR)

    logger.info("Registered user %s", form.username)
    return RegistrationResult(ok=True)
