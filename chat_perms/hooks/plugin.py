"""Hook entry points invoked by the host for chat messaging events.

Every handler takes the raw hook payload, normalizes it, and either returns
the (possibly annotated) event or raises a ``PermissionFailure`` that the host
turns into a user-visible denial.  Nothing else escapes a handler: settings,
notification and version problems are logged and the hook carries on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chat_perms.core.compat import is_compatible
from chat_perms.core.models import HookEvent, KeywordScanResult
from chat_perms.core.normalize import normalize_hook_data

if TYPE_CHECKING:
    from chat_perms.core.alerts import AlertDispatcher
    from chat_perms.core.permissions import PermissionGate
    from chat_perms.core.settings_resolver import SettingsContext
    from chat_perms.core.warning import WarningInjector

logger = logging.getLogger(__name__)


class ChatPermsPlugin:
    """The hook surface: one method per host messaging hook."""

    def __init__(
        self,
        settings: SettingsContext,
        gate: PermissionGate,
        alerts: AlertDispatcher,
        warnings: WarningInjector,
        host_version: str | None = None,
    ) -> None:
        self._settings = settings
        self._gate = gate
        self._alerts = alerts
        self._warnings = warnings
        self._host_version = host_version

    @property
    def settings(self) -> SettingsContext:
        return self._settings

    @property
    def alerts(self) -> AlertDispatcher:
        return self._alerts

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """Load settings and check host compatibility.

        Returns:
            The (advisory) compatibility result.
        """
        await self._settings.refresh()
        compatible = is_compatible(self._host_version)
        if not compatible:
            logger.warning("Plugin may not function correctly with this host version")
        return compatible

    async def shutdown(self) -> None:
        """Let in-flight alert dispatches finish."""
        await self._alerts.drain()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def on_can_read_messages(self, event: Any) -> HookEvent:
        """Caller wants to read the messages of ``uid``.

        Order: eligibility, deny group, identity; then the privacy warning.
        """
        data = normalize_hook_data(event, {"canGet": True})
        data["canGet"] = True

        caller_uid = data.get("callerUid")
        await self._gate.check_eligibility(caller_uid)
        self._gate.check_read_access(caller_uid, data.get("uid"))

        return self._warnings.inject(data)

    async def on_can_reply(self, event: Any) -> HookEvent:
        data = normalize_hook_data(event)
        await self.scan_content(data)
        return data

    async def on_can_message_room(self, event: Any) -> HookEvent:
        data = normalize_hook_data(event)
        await self.scan_content(data)
        return data

    async def on_can_message_user(self, event: Any) -> HookEvent:
        data = normalize_hook_data(event)
        await self._gate.check_eligibility(data.get("uid"))
        return data

    async def on_is_user_in_room(self, event: Any) -> HookEvent:
        """Admins see every room."""
        data = normalize_hook_data(event)
        if self._gate.is_admin(data.get("uid")):
            data["inRoom"] = True
        return data

    async def scan_content(self, data: HookEvent) -> KeywordScanResult:
        """Run keyword alerts for a content-bearing event."""
        if not data.get("content"):
            return KeywordScanResult()
        return await self._alerts.process_message(
            {
                "content": data.get("content"),
                "uid": data.get("uid"),
                "roomId": data.get("roomId"),
            }
        )
