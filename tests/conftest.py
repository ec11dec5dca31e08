# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.core.models import Category, User
from taskpad.core.state import AppState

from .fakes import FakeAuthClient, FakeNotifier, FakePublicClient

TODAY = date(2026, 3, 10)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the form session.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic (no env, no .env file).
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        backend_url="https://api.test",
        request_timeout_seconds=5.0,
        category_defaults_path="/api/categories/",
        access_token="t0ken",
        token_file=tmp_path / "access_token",
        data_dir=tmp_path,
        success_delay_seconds=0.0,
    )


@pytest.fixture()
def users() -> list[User]:
    return [User(id=1, username="alice"), User(id=2, username="bob")]


@pytest.fixture()
def categories() -> list[Category]:
    return [Category(id=3, name="Work"), Category(id=7, name="Home")]


@pytest.fixture()
def auth(users: list[User]) -> FakeAuthClient:
    return FakeAuthClient(users=users)


@pytest.fixture()
def public(categories: list[Category]) -> FakePublicClient:
    return FakePublicClient(categories)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, auth: FakeAuthClient, public: FakePublicClient, notifier: FakeNotifier) -> AppState:
    """AppState wired with deterministic fakes for both channels."""
    return AppState(settings=settings, auth=auth, public=public, notifier=notifier)
