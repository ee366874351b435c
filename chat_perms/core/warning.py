"""Privacy warning injection for outbound chat data."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from chat_perms.core.models import (
    DEFAULT_WARNING_MESSAGE,
    WARNING_KEY,
    DisplayType,
    EffectiveSettings,
    HookEvent,
    WarningAnnotation,
)

if TYPE_CHECKING:
    from chat_perms.core.settings_resolver import SettingsContext


def warning_config(settings: EffectiveSettings) -> tuple[bool, WarningAnnotation]:
    """Effective warning state: enabled flag plus the annotation to attach.

    A blank message falls back to the built-in notice and an unknown display
    type to ``banner``.
    """
    message = settings.warning_message
    if not isinstance(message, str) or not message.strip():
        message = DEFAULT_WARNING_MESSAGE

    display_type = settings.warning_display_type
    if not isinstance(display_type, DisplayType):
        try:
            display_type = DisplayType(display_type)
        except ValueError:
            display_type = DisplayType.BANNER

    return settings.warning_enabled is True, WarningAnnotation(message=message, display_type=display_type)


class WarningInjector:
    """Attaches the configured privacy notice to outbound data when enabled."""

    def __init__(self, settings: SettingsContext) -> None:
        self._settings = settings

    def inject(self, data: Any) -> HookEvent:
        """Return *data* as a mapping, with ``chatPermsWarning`` when enabled.

        ``None`` becomes ``{}``; any non-mapping value is wrapped as
        ``{"originalData": data}``.  When enabled the result is a shallow copy.
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            data = {"originalData": data}

        enabled, annotation = warning_config(self._settings.current)
        if not enabled:
            return data if isinstance(data, dict) else dict(data)

        return {**data, WARNING_KEY: annotation.to_dict()}
