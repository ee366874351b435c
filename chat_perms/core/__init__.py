"""Core components of the chat-perms pipeline."""

from chat_perms.core.alerts import AlertDispatcher, build_alert, build_notification
from chat_perms.core.compat import is_compatible, parse_version
from chat_perms.core.errors import (
    AccessDeniedError,
    AccessForbiddenError,
    ChatPermsError,
    ConfigurationError,
    InvalidVersionFormatError,
    NotificationDeliveryError,
    NotYetEligibleError,
    PermissionFailure,
    SettingsLoadError,
    SettingsSaveError,
    UnknownHookError,
)
from chat_perms.core.keywords import normalize_keywords, scan_message
from chat_perms.core.models import (
    AlertRecord,
    DisplayType,
    EffectiveSettings,
    HookEvent,
    KeywordScanResult,
    UserProfile,
    WarningAnnotation,
)
from chat_perms.core.normalize import normalize_hook_data
from chat_perms.core.permissions import PermissionGate
from chat_perms.core.settings_resolver import (
    DEFAULT_SETTINGS,
    SettingsContext,
    SettingsResolver,
    resolve_layers,
    serialize_settings,
)
from chat_perms.core.warning import WarningInjector

__all__ = [
    # Errors
    "ChatPermsError",
    "PermissionFailure",
    "NotYetEligibleError",
    "AccessDeniedError",
    "AccessForbiddenError",
    "SettingsLoadError",
    "SettingsSaveError",
    "NotificationDeliveryError",
    "InvalidVersionFormatError",
    "ConfigurationError",
    "UnknownHookError",
    # Models
    "AlertRecord",
    "DisplayType",
    "EffectiveSettings",
    "HookEvent",
    "KeywordScanResult",
    "UserProfile",
    "WarningAnnotation",
    # Components
    "AlertDispatcher",
    "PermissionGate",
    "SettingsContext",
    "SettingsResolver",
    "WarningInjector",
    "DEFAULT_SETTINGS",
    "build_alert",
    "build_notification",
    "is_compatible",
    "normalize_hook_data",
    "normalize_keywords",
    "parse_version",
    "resolve_layers",
    "scan_message",
    "serialize_settings",
]
