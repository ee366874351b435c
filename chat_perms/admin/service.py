"""Application layer for the admin settings page.

Reads the cached EffectiveSettings and persists partial updates in the
store's string form, then refreshes the cache so the hooks pick up the
change.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from chat_perms.core.errors import SettingsSaveError
from chat_perms.core.settings_resolver import encode_for_store

if TYPE_CHECKING:
    from chat_perms.core.settings_resolver import SettingsContext
    from chat_perms.ports.host import SettingsStorePort

logger = logging.getLogger(__name__)


class SettingsAdminService:
    """Get and save the plugin settings on behalf of the admin surface."""

    def __init__(
        self,
        context: SettingsContext,
        store: SettingsStorePort,
        namespace: str = "chat-perms",
    ) -> None:
        self._context = context
        self._store = store
        self._namespace = namespace

    def get_settings(self) -> dict[str, Any]:
        """Current EffectiveSettings as camelCase JSON."""
        return self._context.current.to_json_dict()

    async def save_settings(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """Persist *partial* over the stored values and refresh the cache.

        Arrays are JSON-encoded and booleans stored as ``"true"``/``"false"``;
        keys that are not plugin settings are ignored.

        Returns:
            The refreshed settings as camelCase JSON.

        Raises:
            TypeError: *partial* is not a mapping.
            SettingsSaveError: The store rejected the write.
        """
        if not isinstance(partial, Mapping):
            raise TypeError(f"Settings payload must be an object, got {type(partial).__name__}")

        encoded = encode_for_store(partial)

        # Saves are serialized so the cache ends up matching the last write.
        async with self._context.lock:
            existing = await self._store.get(self._namespace)
            merged = {**dict(existing or {}), **encoded}

            try:
                await self._store.set(self._namespace, merged)
            except SettingsSaveError:
                raise
            except Exception as e:
                raise SettingsSaveError(self._namespace, str(e)) from e

            refreshed = await self._context.reload()
        logger.info(f"Plugin settings saved ({', '.join(sorted(encoded)) or 'no changes'})")
        return refreshed.to_json_dict()
