"""Pytest fixtures for chat-perms tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from chat_perms.adapters.memory import (
    InMemorySettingsStore,
    RecordingNotificationSink,
    StaticUserDirectory,
)
from chat_perms.config import Settings, override_settings, reset_settings
from chat_perms.core.models import EffectiveSettings
from chat_perms.core.settings_resolver import SettingsContext
from chat_perms.factory import ServiceContainer, ServiceFactory

# ---------------------------------------------------------------------------
# Basic fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Process settings with a temp settings file and no host version."""
    settings = Settings(
        settings_file=tmp_path / "settings.json",
        host_version=None,
        plugin_settings="",
        log_level="DEBUG",
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def make_context() -> Callable[..., SettingsContext]:
    """Factory for a SettingsContext holding defaults updated with keyword overrides."""

    def _make(**overrides: Any) -> SettingsContext:
        return SettingsContext(initial=EffectiveSettings(**overrides))

    return _make


@pytest.fixture
def directory() -> StaticUserDirectory:
    """A small forum: an admin, a veteran, a newcomer and a banned user."""
    users = StaticUserDirectory()
    users.add_user(1, username="admin", reputation=500, postcount=300, groups=["administrators"])
    users.add_user(2, username="veteran", reputation=50, postcount=40)
    users.add_user(3, username="newcomer", reputation=3, postcount=1)
    users.add_user(4, username="troll", reputation=80, postcount=90, groups=["denyChat"])
    return users


@pytest.fixture
def sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def container(
    test_settings: Settings,
    store: InMemorySettingsStore,
    directory: StaticUserDirectory,
    sink: RecordingNotificationSink,
) -> ServiceContainer:
    """Fully wired services over in-memory ports."""
    return ServiceFactory(
        test_settings,
        store=store,
        users=directory,
        groups=directory,
        notifications=sink,
    ).create_all()
