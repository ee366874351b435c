"""Port interfaces for chat-perms."""

from chat_perms.ports.host import (
    GroupLookupPort,
    NotificationSinkPort,
    SettingsStorePort,
    UserLookupPort,
)

__all__ = [
    "GroupLookupPort",
    "NotificationSinkPort",
    "SettingsStorePort",
    "UserLookupPort",
]
