"""Adapters implementing the host ports."""

from chat_perms.adapters.json_store import JsonFileSettingsStore
from chat_perms.adapters.memory import (
    InMemorySettingsStore,
    LoggingNotificationSink,
    RecordingNotificationSink,
    StaticUserDirectory,
)

__all__ = [
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "LoggingNotificationSink",
    "RecordingNotificationSink",
    "StaticUserDirectory",
]
