"""In-process implementations of the host ports.

Used when chat-perms runs standalone (CLI, admin app) and as test doubles.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chat_perms.core.utils import coerce_uid

logger = logging.getLogger(__name__)


class InMemorySettingsStore:
    """Settings store keeping each namespace as a dict of strings."""

    def __init__(self, initial: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._data: dict[str, dict[str, str]] = {
            namespace: dict(values) for namespace, values in (initial or {}).items()
        }

    async def get(self, namespace: str) -> dict[str, str]:
        return dict(self._data.get(namespace, {}))

    async def set(self, namespace: str, values: Mapping[str, str]) -> None:
        self._data[namespace] = {str(k): str(v) for k, v in values.items()}


@dataclass
class StaticUserDirectory:
    """User and group lookup backed by plain dicts keyed by uid."""

    users: dict[Any, dict[str, Any]] = field(default_factory=dict)
    groups: dict[Any, list[str]] = field(default_factory=dict)

    def add_user(self, uid: int, *, groups: Sequence[str] = (), **profile: Any) -> None:
        self.users[uid] = dict(profile)
        self.groups[uid] = list(groups)

    async def get_user_data(self, uid: Any) -> dict[str, Any]:
        key = coerce_uid(uid)
        if key not in self.users:
            raise LookupError(f"No such user: {uid!r}")
        return dict(self.users[key])

    async def get_user_groups(self, uid: Any) -> list[dict[str, str]]:
        return [{"name": name} for name in self.groups.get(coerce_uid(uid), [])]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StaticUserDirectory:
        """Build from ``{"<uid>": {"groups": [...], ...profile}}``."""
        directory = cls()
        for raw_uid, record in data.items():
            record = dict(record)
            groups = record.pop("groups", [])
            directory.add_user(coerce_uid(raw_uid), groups=groups, **record)
        return directory


@dataclass
class RecordingNotificationSink:
    """Notification sink that keeps everything it is asked to deliver."""

    created: list[dict[str, Any]] = field(default_factory=list)
    pushed: list[tuple[dict[str, Any], list[int]]] = field(default_factory=list)

    async def create(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        notification = dict(spec)
        self.created.append(notification)
        return notification

    async def push(self, notification: Any, recipient_uids: Sequence[int]) -> None:
        self.pushed.append((notification, list(recipient_uids)))


class LoggingNotificationSink:
    """Notification sink that writes alerts to the log."""

    async def create(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        return dict(spec)

    async def push(self, notification: Any, recipient_uids: Sequence[int]) -> None:
        logger.warning(
            f"Keyword alert for {list(recipient_uids)}: {notification.get('bodyShort', '')}"
        )
