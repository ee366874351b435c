"""chat-perms - chat permission, keyword alert and privacy warning hooks."""

__version__ = "0.1.0"

from chat_perms.config import Settings, get_settings
from chat_perms.core import (
    AccessDeniedError,
    AccessForbiddenError,
    ChatPermsError,
    EffectiveSettings,
    NotYetEligibleError,
    PermissionFailure,
)

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ChatPermsError",
    "PermissionFailure",
    "NotYetEligibleError",
    "AccessDeniedError",
    "AccessForbiddenError",
    # Models
    "EffectiveSettings",
]
