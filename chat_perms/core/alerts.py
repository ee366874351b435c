"""Keyword alerts: build an alert for a flagged message and notify moderators.

Delivery is fire-and-forget.  ``process_message`` starts the dispatch as a
detached asyncio task and returns immediately, so a slow or failing
notification system never delays or fails the hook that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from chat_perms.core.errors import NotificationDeliveryError
from chat_perms.core.keywords import scan_message
from chat_perms.core.models import AlertRecord, KeywordScanResult
from chat_perms.core.utils import coerce_uid, epoch_millis

if TYPE_CHECKING:
    from chat_perms.core.settings_resolver import SettingsContext
    from chat_perms.ports.host import NotificationSinkPort, UserLookupPort

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE = "chat-perms-keyword-alert"
UNKNOWN_USERNAME = "unknown"


def _as_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def build_alert(
    *,
    message_content: Any = None,
    sender_uid: Any = None,
    sender_username: Any = None,
    room_id: Any = None,
    matched_keywords: Any = None,
) -> AlertRecord:
    """Build an AlertRecord, coercing every field to its expected type.

    Missing or invalid values fall back to ``""`` (content), ``"unknown"``
    (username), ``0`` (ids) and ``()`` (keywords).  The timestamp is the
    current time in epoch milliseconds.
    """
    if isinstance(matched_keywords, (list, tuple)):
        keywords = tuple(k for k in matched_keywords if isinstance(k, str))
    else:
        keywords = ()

    username = sender_username if isinstance(sender_username, str) and sender_username else UNKNOWN_USERNAME

    return AlertRecord(
        message_content=message_content if isinstance(message_content, str) else "",
        sender_uid=_as_int(sender_uid),
        sender_username=username,
        room_id=_as_int(room_id),
        timestamp=epoch_millis(),
        matched_keywords=keywords,
    )


def build_notification(alert: AlertRecord) -> dict[str, Any]:
    """Notification spec handed to the host notification system."""
    keywords = ", ".join(alert.matched_keywords)
    return {
        "type": NOTIFICATION_TYPE,
        "bodyShort": f"Sensitive keyword alert: {keywords}",
        "bodyLong": (
            f"User {alert.sender_username} sent a message in room {alert.room_id} "
            f"containing sensitive keywords: {keywords}\n\n"
            f"Message content: {alert.message_content}"
        ),
        "nid": f"chat-perms:keyword-alert:{alert.room_id}:{alert.timestamp}",
        "from": alert.sender_uid,
        "path": f"/chats/{alert.room_id}",
    }


def recipient_uids(configured: Sequence[Any]) -> list[int]:
    """Configured alert recipients that are valid (positive integer) uids."""
    return [uid for uid in configured if _as_int(uid) > 0]


class AlertDispatcher:
    """Scans content-bearing hook payloads and dispatches keyword alerts."""

    def __init__(
        self,
        settings: SettingsContext,
        notifications: NotificationSinkPort | None,
        users: UserLookupPort | None = None,
    ) -> None:
        self._settings = settings
        self._notifications = notifications
        self._users = users
        self._pending: set[asyncio.Task[bool]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def dispatch(self, alert: AlertRecord) -> bool:
        """Deliver *alert* to the configured recipients.

        Returns:
            ``True`` once the notification was created (and pushed, when the
            host returned one); ``False`` for a malformed alert, no
            recipients, no notification sink, or any delivery failure.
        """
        if not isinstance(alert, AlertRecord):
            logger.warning("Invalid alert data provided")
            return False

        recipients = recipient_uids(self._settings.current.alert_recipient_uids)
        if not recipients:
            logger.warning("No alert recipients configured")
            return False

        if self._notifications is None:
            logger.warning("No notification sink configured, dropping keyword alert")
            return False

        spec = build_notification(alert)
        try:
            await self._deliver(self._notifications, spec, recipients)
        except NotificationDeliveryError as e:
            logger.error(f"Failed to send keyword alert: {e}")
            return False
        return True

    @staticmethod
    async def _deliver(
        sink: NotificationSinkPort, spec: Mapping[str, Any], recipients: list[int]
    ) -> None:
        try:
            notification = await sink.create(spec)
            if notification:
                await sink.push(notification, recipients)
        except Exception as e:
            raise NotificationDeliveryError(str(spec.get("nid", "")), str(e)) from e

    async def _lookup_username(self, uid: Any) -> str:
        if self._users is None:
            return UNKNOWN_USERNAME
        try:
            user = await self._users.get_user_data(uid)
        except Exception as e:
            logger.debug(f"Username lookup failed for uid {uid!r}: {e}")
            return UNKNOWN_USERNAME
        username = user.get("username") if isinstance(user, Mapping) else None
        return username if isinstance(username, str) and username else UNKNOWN_USERNAME

    async def process_message(self, event: Mapping[str, Any] | None) -> KeywordScanResult:
        """Scan a message and, on a match, start a detached alert dispatch.

        Args:
            event: Mapping with ``content``, ``uid`` and ``roomId``.

        Returns:
            Whether any keyword matched, and which.  Dispatch outcome is not
            part of the result.
        """
        current = self._settings.current
        if not current.keyword_alerts_enabled:
            return KeywordScanResult()

        event = event or {}
        content = event.get("content") or ""
        matched = scan_message(content, current.keyword_list)
        if not matched:
            return KeywordScanResult()

        uid = event.get("uid")
        username = await self._lookup_username(uid)
        alert = build_alert(
            message_content=content,
            sender_uid=coerce_uid(uid or 0),
            sender_username=username,
            room_id=coerce_uid(event.get("roomId") or 0),
            matched_keywords=matched,
        )
        logger.info(f"Keyword alert for uid {alert.sender_uid} in room {alert.room_id}: {matched}")
        self._schedule(alert)
        return KeywordScanResult(matched=True, keywords=matched)

    def _schedule(self, alert: AlertRecord) -> None:
        task = asyncio.get_running_loop().create_task(self.dispatch(alert))
        self._pending.add(task)
        task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task[bool]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.debug("Keyword alert dispatch cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Alert send error: {error}")

    async def drain(self) -> None:
        """Wait for in-flight alert dispatches to finish.  Never raises."""
        if not self._pending:
            return
        await asyncio.gather(*list(self._pending), return_exceptions=True)
