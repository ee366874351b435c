"""Custom exceptions for the chat-perms hook pipeline.

Permission failures (``PermissionFailure`` subclasses) are raised from the hook
entry points and must reach the host unchanged.  Everything else is
infrastructure trouble that the pipeline contains and logs.
"""

from __future__ import annotations


class ChatPermsError(Exception):
    """Base exception for all chat-perms errors."""

    pass


# =============================================================================
# Permission failures (user-facing)
# =============================================================================


class PermissionFailure(ChatPermsError):
    """Base class for access decisions surfaced to the host.

    The exception message is shown to the end user verbatim.
    """

    kind: str = "permission"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotYetEligibleError(PermissionFailure):
    """Raised when the caller has not reached the chat thresholds yet."""

    kind = "not_yet_eligible"


class AccessDeniedError(PermissionFailure):
    """Raised when the caller belongs to the deny group."""

    kind = "denied"


class AccessForbiddenError(PermissionFailure):
    """Raised when a non-admin reads another user's messages."""

    kind = "forbidden"

    DEFAULT_MESSAGE = "Access forbidden"

    def __init__(
        self,
        caller_uid: object = None,
        target_uid: object = None,
        message: str | None = None,
    ) -> None:
        self.caller_uid = caller_uid
        self.target_uid = target_uid
        super().__init__(message or self.DEFAULT_MESSAGE)


# =============================================================================
# Infrastructure failures (contained, logged only)
# =============================================================================


class SettingsLoadError(ChatPermsError):
    """Raised when the persisted settings store cannot be read."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Failed to load settings namespace '{namespace}': {reason}")


class NotificationDeliveryError(ChatPermsError):
    """Raised when an alert notification cannot be created or pushed."""

    def __init__(self, nid: str, reason: str) -> None:
        self.nid = nid
        self.reason = reason
        super().__init__(f"Failed to deliver notification {nid}: {reason}")


class InvalidVersionFormatError(ChatPermsError):
    """Raised when a host version string cannot be parsed."""

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"Invalid version format: {version!r}")


class ConfigurationError(ChatPermsError):
    """Raised when process configuration is invalid."""

    pass


class UnknownHookError(ChatPermsError):
    """Raised when a hook name does not map to any handler."""

    def __init__(self, hook_name: str) -> None:
        self.hook_name = hook_name
        super().__init__(f"Unknown hook: {hook_name}")


class SettingsSaveError(ChatPermsError):
    """Raised when settings cannot be written to the store."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Failed to save settings namespace '{namespace}': {reason}")
