"""Routes host hook names to ``ChatPermsPlugin`` handlers.

The host registers filter hooks under ``filter:messaging.*`` names; older
integrations and the CLI use bare camelCase or kebab-case names.  All of them
resolve to one canonical handler name.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from chat_perms.core.errors import UnknownHookError
from chat_perms.core.models import HookEvent

if TYPE_CHECKING:
    from chat_perms.hooks.plugin import ChatPermsPlugin

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HOOK_HANDLERS: dict[str, str] = {
    "canGetMessages": "on_can_read_messages",
    "canReply": "on_can_reply",
    "canMessageUser": "on_can_message_user",
    "canMessageRoom": "on_can_message_room",
    "isUserInRoom": "on_is_user_in_room",
}
"""Canonical (camelCase) hook name -> plugin method."""

_HOOK_ALIASES: dict[str, str] = {
    # Host filter names
    "filter:messaging.canGetMessages": "canGetMessages",
    "filter:messaging.canReply": "canReply",
    "filter:messaging.canMessageUser": "canMessageUser",
    "filter:messaging.canMessageRoom": "canMessageRoom",
    "filter:messaging.isUserInRoom": "isUserInRoom",
    # kebab-case (CLI)
    "can-read-messages": "canGetMessages",
    "can-get-messages": "canGetMessages",
    "can-reply": "canReply",
    "can-message-user": "canMessageUser",
    "can-message-room": "canMessageRoom",
    "is-user-in-room": "isUserInRoom",
}


def normalize_hook_name(raw: str) -> str | None:
    """Canonical camelCase hook name, or ``None`` if not recognized."""
    if raw in HOOK_HANDLERS:
        return raw
    return _HOOK_ALIASES.get(raw)


def resolve_handler(
    plugin: ChatPermsPlugin, hook_name: str
) -> Callable[[Any], Awaitable[HookEvent]]:
    """Look up the plugin method for *hook_name*.

    Raises:
        UnknownHookError: The name maps to no handler.
    """
    canonical = normalize_hook_name(hook_name)
    if canonical is None:
        raise UnknownHookError(hook_name)
    return getattr(plugin, HOOK_HANDLERS[canonical])


async def dispatch_hook(plugin: ChatPermsPlugin, hook_name: str, payload: Any) -> HookEvent:
    """Run the handler registered for *hook_name* on *payload*.

    Permission failures propagate unchanged.
    """
    handler = resolve_handler(plugin, hook_name)
    logger.debug(f"Dispatching hook {hook_name}")
    return await handler(payload)
