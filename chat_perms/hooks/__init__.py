"""Host hook surface for chat-perms."""

from chat_perms.hooks.dispatcher import HOOK_HANDLERS, dispatch_hook, normalize_hook_name
from chat_perms.hooks.plugin import ChatPermsPlugin

__all__ = [
    "HOOK_HANDLERS",
    "ChatPermsPlugin",
    "dispatch_hook",
    "normalize_hook_name",
]
