"""Protocol interfaces for the host application's services.

The pipeline depends on these protocols, not on the host's modules.  An
adapter layer (``chat_perms.adapters`` or the host integration) implements
them.  All methods are async because every host call is I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol


class UserLookupPort(Protocol):
    """Host user records.

    Consumers: PermissionGate (profile thresholds), AlertDispatcher (sender
    username).
    """

    async def get_user_data(self, uid: Any) -> Mapping[str, Any]:
        """Fetch a user record.

        Returns:
            Mapping with at least ``reputation``, ``postcount``, ``joindate``
            (epoch milliseconds) and ``username``.

        Raises:
            Exception: Any lookup failure; permission checks let it propagate.
        """
        ...


class GroupLookupPort(Protocol):
    """Host group membership.

    Consumer: PermissionGate
    """

    async def get_user_groups(self, uid: Any) -> Sequence[Any]:
        """List the groups a user belongs to.

        Returns:
            Sequence of group records: mappings with a ``name`` key or
            objects with a ``name`` attribute.
        """
        ...


class SettingsStorePort(Protocol):
    """Persistent key/value settings store.  Values are always strings.

    Consumers: SettingsResolver (read), SettingsAdminService (write)
    """

    async def get(self, namespace: str) -> Mapping[str, str]:
        """Read all values stored under *namespace* (empty if none)."""
        ...

    async def set(self, namespace: str, values: Mapping[str, str]) -> None:
        """Replace the values stored under *namespace*."""
        ...


class NotificationSinkPort(Protocol):
    """Host notification / push system.

    Consumer: AlertDispatcher
    """

    async def create(self, spec: Mapping[str, Any]) -> Any:
        """Create a notification from *spec*; may return ``None``."""
        ...

    async def push(self, notification: Any, recipient_uids: Sequence[int]) -> None:
        """Deliver *notification* to the given users."""
        ...
