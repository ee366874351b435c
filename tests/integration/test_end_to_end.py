"""End-to-end tests: host hook events through the full wired pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from chat_perms.adapters.json_store import JsonFileSettingsStore
from chat_perms.adapters.memory import RecordingNotificationSink, StaticUserDirectory
from chat_perms.config import Settings
from chat_perms.core.errors import AccessForbiddenError, NotYetEligibleError
from chat_perms.core.models import WARNING_KEY
from chat_perms.factory import ServiceContainer, ServiceFactory
from chat_perms.hooks.dispatcher import dispatch_hook


@pytest.fixture
def forum(tmp_path: Path) -> tuple[ServiceContainer, StaticUserDirectory, RecordingNotificationSink]:
    settings = Settings(settings_file=tmp_path / "settings.json", host_version="4.2.0")
    users = StaticUserDirectory()
    users.add_user(1, username="admin", reputation=900, postcount=500, groups=["administrators"])
    users.add_user(20, username="newbie", reputation=3, postcount=1)
    users.add_user(30, username="regular", reputation=50, postcount=20)
    sink = RecordingNotificationSink()
    container = ServiceFactory(settings, users=users, groups=users, notifications=sink).create_all()
    return container, users, sink


@pytest.mark.integration
class TestModerationScenario:
    async def test_thresholds_and_keyword_alerts(
        self, forum: tuple[ServiceContainer, StaticUserDirectory, RecordingNotificationSink]
    ) -> None:
        container, _, sink = forum
        await container.admin.save_settings(
            {
                "minReputation": 10,
                "minPosts": 5,
                "keywordList": ["banned"],
                "keywordAlertsEnabled": True,
                "alertRecipientUids": [1],
            }
        )
        assert await container.plugin.initialize() is True

        with pytest.raises(NotYetEligibleError):
            await dispatch_hook(
                container.plugin, "filter:messaging.canGetMessages", {"callerUid": 20, "uid": 20}
            )

        event = {"content": "this is a BANNED word", "uid": 30, "roomId": 4}
        scan = await container.plugin.scan_content(event)
        assert scan.to_dict() == {"matched": True, "keywords": ["banned"]}

        reply = await dispatch_hook(container.plugin, "filter:messaging.canReply", event)
        assert reply == event

        await container.plugin.shutdown()
        assert len(sink.pushed) == 2
        notification, recipients = sink.pushed[0]
        assert recipients == [1]
        assert "User regular sent a message in room 4" in notification["bodyLong"]

    async def test_settings_persist_across_restarts(
        self, forum: tuple[ServiceContainer, StaticUserDirectory, RecordingNotificationSink]
    ) -> None:
        container, users, sink = forum
        await container.admin.save_settings({"warningEnabled": True, "warningMessage": "Admins can read chats"})
        assert isinstance(container.store, JsonFileSettingsStore)

        restarted = ServiceFactory(
            Settings(settings_file=container.store.path),
            users=users,
            groups=users,
            notifications=sink,
        ).create_all()
        await restarted.plugin.initialize()

        result = await restarted.plugin.on_can_read_messages({"callerUid": 30, "uid": 30})
        assert result[WARNING_KEY] == {"message": "Admins can read chats", "displayType": "banner"}

    async def test_admin_visibility(
        self, forum: tuple[ServiceContainer, StaticUserDirectory, RecordingNotificationSink]
    ) -> None:
        container, _, _ = forum
        await container.plugin.initialize()

        assert (await container.plugin.on_can_read_messages({"callerUid": 1, "uid": 30}))["canGet"] is True
        with pytest.raises(AccessForbiddenError):
            await container.plugin.on_can_read_messages({"callerUid": 30, "uid": 1})
        assert (await container.plugin.on_is_user_in_room({"uid": 1, "roomId": 4}))["inRoom"] is True
