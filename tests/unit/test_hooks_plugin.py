"""Unit tests for chat_perms.hooks.plugin (the hook surface)."""

from __future__ import annotations

import logging

import pytest

from chat_perms.adapters.memory import InMemorySettingsStore, RecordingNotificationSink
from chat_perms.core.errors import (
    AccessDeniedError,
    AccessForbiddenError,
    NotYetEligibleError,
)
from chat_perms.core.models import WARNING_KEY
from chat_perms.factory import ServiceContainer


async def _configure(container: ServiceContainer, store: InMemorySettingsStore, **values: str) -> None:
    await store.set("chat-perms", values)
    await container.settings.refresh()


@pytest.mark.unit
class TestLifecycle:
    async def test_initialize_loads_settings(
        self, container: ServiceContainer, store: InMemorySettingsStore
    ) -> None:
        await store.set("chat-perms", {"minPosts": "1"})
        assert await container.plugin.initialize() is True
        assert container.plugin.settings.current.min_posts == 1

    async def test_initialize_incompatible_host_is_advisory(
        self, container: ServiceContainer, caplog: pytest.LogCaptureFixture
    ) -> None:
        container.plugin._host_version = "3.0.0"
        with caplog.at_level(logging.WARNING):
            assert await container.plugin.initialize() is False
        assert "may not function correctly" in caplog.text
        # Hooks still run
        assert await container.plugin.on_can_reply({"content": "hi"}) == {"content": "hi"}

    async def test_shutdown_drains_alerts(
        self, container: ServiceContainer, store: InMemorySettingsStore, sink: RecordingNotificationSink
    ) -> None:
        await _configure(
            container,
            store,
            keywordAlertsEnabled="true",
            keywordList='["banned"]',
            alertRecipientUids="[1]",
        )
        await container.plugin.on_can_reply({"content": "banned", "uid": 2, "roomId": 1})
        await container.plugin.shutdown()
        assert len(sink.pushed) == 1
        assert container.plugin.alerts.pending_count == 0


@pytest.mark.unit
class TestCanReadMessages:
    async def test_own_messages(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_can_read_messages({"callerUid": 2, "uid": 2})
        assert result["canGet"] is True
        assert WARNING_KEY not in result

    async def test_can_get_is_forced_true(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_can_read_messages({"callerUid": 2, "uid": 2, "canGet": False})
        assert result["canGet"] is True

    async def test_newcomer_not_yet_eligible(self, container: ServiceContainer) -> None:
        with pytest.raises(NotYetEligibleError):
            await container.plugin.on_can_read_messages({"callerUid": 3, "uid": 3})

    async def test_denied(self, container: ServiceContainer) -> None:
        with pytest.raises(AccessDeniedError):
            await container.plugin.on_can_read_messages({"callerUid": 4, "uid": 4})

    async def test_reading_others_forbidden(self, container: ServiceContainer) -> None:
        with pytest.raises(AccessForbiddenError):
            await container.plugin.on_can_read_messages({"callerUid": 2, "uid": 1})

    async def test_admin_reads_others(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_can_read_messages({"callerUid": 1, "uid": 2})
        assert result["canGet"] is True

    async def test_warning_injected_when_enabled(
        self, container: ServiceContainer, store: InMemorySettingsStore
    ) -> None:
        await _configure(container, store, warningEnabled="on", warningMessage="Admins may read", warningDisplayType="popup")
        result = await container.plugin.on_can_read_messages({"callerUid": 2, "uid": 2})
        assert result[WARNING_KEY] == {"message": "Admins may read", "displayType": "popup"}


@pytest.mark.unit
class TestContentHooks:
    @pytest.fixture(autouse=True)
    async def _alerts_on(self, container: ServiceContainer, store: InMemorySettingsStore) -> None:
        await _configure(
            container,
            store,
            keywordAlertsEnabled="true",
            keywordList="banned\nscam",
            alertRecipientUids="1",
        )

    @pytest.mark.parametrize("hook", ["on_can_reply", "on_can_message_room"])
    async def test_returns_event_unchanged(self, container: ServiceContainer, hook: str) -> None:
        event = {"content": "this is a BANNED word", "uid": 2, "roomId": 5}
        result = await getattr(container.plugin, hook)(event)
        assert result == event
        await container.alerts.drain()

    @pytest.mark.parametrize("hook", ["on_can_reply", "on_can_message_room"])
    async def test_alert_is_sent(
        self, container: ServiceContainer, sink: RecordingNotificationSink, hook: str
    ) -> None:
        await getattr(container.plugin, hook)({"content": "scam alert", "uid": 2, "roomId": 5})
        await container.alerts.drain()
        assert sink.pushed[0][1] == [1]
        assert sink.created[0]["path"] == "/chats/5"

    async def test_scan_content(self, container: ServiceContainer) -> None:
        result = await container.plugin.scan_content({"content": "this is a BANNED word", "uid": 2, "roomId": 5})
        assert result.to_dict() == {"matched": True, "keywords": ["banned"]}
        await container.alerts.drain()

    async def test_no_content(self, container: ServiceContainer, sink: RecordingNotificationSink) -> None:
        assert await container.plugin.on_can_reply(None) == {}
        assert (await container.plugin.scan_content({"uid": 2})).matched is False
        assert sink.created == []

    async def test_reply_does_not_gate(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_can_reply({"content": "hello", "uid": 3})
        assert result["uid"] == 3


@pytest.mark.unit
class TestCanMessageUser:
    async def test_eligible(self, container: ServiceContainer) -> None:
        assert await container.plugin.on_can_message_user({"uid": 2, "touid": 3}) == {"uid": 2, "touid": 3}

    async def test_not_yet_eligible(self, container: ServiceContainer) -> None:
        with pytest.raises(NotYetEligibleError):
            await container.plugin.on_can_message_user({"uid": 3, "touid": 2})

    async def test_denied(self, container: ServiceContainer) -> None:
        with pytest.raises(AccessDeniedError):
            await container.plugin.on_can_message_user({"uid": 4, "touid": 2})


@pytest.mark.unit
class TestIsUserInRoom:
    async def test_admin_always_in_room(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_is_user_in_room({"uid": 1, "roomId": 7, "inRoom": False})
        assert result["inRoom"] is True

    async def test_regular_user_unchanged(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_is_user_in_room({"uid": 2, "roomId": 7, "inRoom": False})
        assert result["inRoom"] is False

    async def test_admin_uid_as_string(self, container: ServiceContainer) -> None:
        result = await container.plugin.on_is_user_in_room({"uid": "1", "roomId": 7})
        assert result["inRoom"] is True
