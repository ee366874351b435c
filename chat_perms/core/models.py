"""Data models for the chat-perms pipeline."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from chat_perms.core.utils import parse_timestamp

HookEvent = dict[str, Any]
"""Normalized hook payload.  Always a mapping; unknown keys pass through."""

WARNING_KEY = "chatPermsWarning"
"""Key under which the privacy warning is attached to outbound data."""

DEFAULT_WARNING_MESSAGE = "Note: forum administrators can view chat messages"


class DisplayType(str, Enum):
    """How the client renders the privacy warning."""

    BANNER = "banner"
    POPUP = "popup"
    INLINE = "inline"


class EffectiveSettings(BaseModel):
    """Fully resolved plugin configuration.

    Instances are immutable snapshots; a settings change produces a new
    instance which replaces the cached one.  Serialized with camelCase keys
    (``adminUids``, ``minReputation``...) to match the admin form.
    """

    admin_uids: tuple[int, ...] = (1,)
    allow_chat_group: str = "allowChat"
    deny_chat_group: str = "denyChat"
    min_reputation: int = Field(default=10, ge=0)
    min_posts: int = Field(default=5, ge=0)
    chat_not_yet_allowed_message: str = "You are not allowed to use chat yet"
    chat_denied_message: str = "You are not allowed to use chat"
    warning_enabled: bool = False
    warning_message: str = DEFAULT_WARNING_MESSAGE
    warning_display_type: DisplayType = DisplayType.BANNER
    keyword_alerts_enabled: bool = False
    keyword_list: tuple[str, ...] = ()
    alert_recipient_uids: tuple[int, ...] = ()

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    def to_json_dict(self) -> dict[str, Any]:
        """Camel-cased, JSON-ready representation."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class UserProfile:
    """The slice of a host user record the permission gate needs."""

    reputation: float = 0
    postcount: int = 0
    joindate: datetime | None = None
    username: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> UserProfile:
        """Build a profile from a host user record, tolerating string numbers."""
        if not data:
            return cls()
        username = data.get("username")
        return cls(
            reputation=_as_number(data.get("reputation")),
            postcount=int(_as_number(data.get("postcount"))),
            joindate=parse_timestamp(data.get("joindate")),
            username=username if isinstance(username, str) else "",
        )


def _as_number(value: object) -> float:
    """Numeric value of a host field; junk and non-finite values count as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    return 0


@dataclass(frozen=True)
class AlertRecord:
    """A keyword alert for a single triggering message.  Never mutated."""

    message_content: str
    sender_uid: int
    sender_username: str
    room_id: int
    timestamp: int  # epoch milliseconds
    matched_keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class WarningAnnotation:
    """Privacy notice attached to outbound chat data."""

    message: str
    display_type: DisplayType = DisplayType.BANNER

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "displayType": self.display_type.value}


@dataclass(frozen=True)
class KeywordScanResult:
    """Outcome of keyword processing for a content-bearing hook."""

    matched: bool = False
    keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"matched": self.matched, "keywords": list(self.keywords)}
