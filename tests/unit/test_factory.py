"""Unit tests for chat_perms.factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from chat_perms.adapters.json_store import JsonFileSettingsStore
from chat_perms.adapters.memory import InMemorySettingsStore, StaticUserDirectory
from chat_perms.config import Settings
from chat_perms.factory import ServiceContainer, ServiceFactory


@pytest.mark.unit
class TestServiceFactory:
    def test_create_all_wires_shared_context(self, container: ServiceContainer) -> None:
        assert container.plugin.settings is container.settings
        assert container.plugin.alerts is container.alerts
        assert container.settings.resolver is not None
        assert container.settings.resolver.namespace == "chat-perms"

    def test_default_store_is_json_file(self, test_settings: Settings) -> None:
        container = ServiceFactory(test_settings).create_all()
        assert isinstance(container.store, JsonFileSettingsStore)
        assert container.store.path == test_settings.settings_file

    def test_users_double_as_group_lookup(self, test_settings: Settings) -> None:
        directory = StaticUserDirectory()
        factory = ServiceFactory(test_settings, store=InMemorySettingsStore(), users=directory)
        container = factory.create_all()
        assert container.gate._groups is directory

    async def test_override_layer_from_settings(self, tmp_path: Path) -> None:
        settings = Settings(
            settings_file=tmp_path / "settings.json",
            plugin_settings='{"MIN_REPUTATION": "0", "keywordList": ["spam"]}',
        )
        store = InMemorySettingsStore({"chat-perms": {"minReputation": "99"}})
        container = ServiceFactory(settings, store=store).create_all()

        resolved = await container.settings.refresh()

        assert resolved.min_reputation == 0
        assert resolved.keyword_list == ("spam",)

    async def test_custom_namespace(self, tmp_path: Path) -> None:
        settings = Settings(settings_file=tmp_path / "s.json", settings_namespace="forum-a")
        store = InMemorySettingsStore()
        container = ServiceFactory(settings, store=store).create_all()

        await container.admin.save_settings({"minPosts": 4})

        assert await store.get("forum-a") == {"minPosts": "4"}
        assert container.settings.current.min_posts == 4
