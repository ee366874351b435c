"""Service factory for dependency injection and initialization.

Wires the settings cache, pipeline components and hook surface around the
host ports.  The host integration passes its own port implementations;
anything left out falls back to the standalone adapters.

Usage:
    from chat_perms.factory import ServiceFactory

    factory = ServiceFactory(settings, users=host_users, groups=host_groups)
    services = factory.create_all()
    await services.plugin.initialize()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chat_perms.adapters.json_store import JsonFileSettingsStore
from chat_perms.adapters.memory import LoggingNotificationSink, StaticUserDirectory
from chat_perms.admin.service import SettingsAdminService
from chat_perms.config import Settings
from chat_perms.core.alerts import AlertDispatcher
from chat_perms.core.compat import UNKNOWN_VERSION
from chat_perms.core.permissions import PermissionGate
from chat_perms.core.settings_resolver import (
    SettingsContext,
    SettingsResolver,
    parse_override_json,
)
from chat_perms.core.warning import WarningInjector
from chat_perms.hooks.plugin import ChatPermsPlugin

if TYPE_CHECKING:
    from chat_perms.ports.host import (
        GroupLookupPort,
        NotificationSinkPort,
        SettingsStorePort,
        UserLookupPort,
    )

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container for all initialized services.

    Attributes:
        settings: Settings cache shared by every component.
        store: Persistent settings store.
        gate: Permission gate.
        alerts: Keyword alert dispatcher.
        warnings: Privacy warning injector.
        plugin: Hook surface.
        admin: Admin settings service.
    """

    settings: SettingsContext
    store: SettingsStorePort
    gate: PermissionGate
    alerts: AlertDispatcher
    warnings: WarningInjector
    plugin: ChatPermsPlugin
    admin: SettingsAdminService


class ServiceFactory:
    """Factory for creating and wiring all services."""

    def __init__(
        self,
        settings: Settings,
        *,
        store: SettingsStorePort | None = None,
        users: UserLookupPort | None = None,
        groups: GroupLookupPort | None = None,
        notifications: NotificationSinkPort | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            settings: Process configuration.
            store: Settings store (defaults to the JSON file store).
            users: User lookup (defaults to an empty directory).
            groups: Group lookup (defaults to *users* when it also looks up
                groups, else an empty directory).
            notifications: Notification sink (defaults to logging alerts).
        """
        self._settings = settings
        self._store = store
        self._users = users
        self._groups = groups
        self._notifications = notifications

    def create_store(self) -> SettingsStorePort:
        if self._store is not None:
            return self._store
        return JsonFileSettingsStore(
            self._settings.settings_file,
            lock_timeout=self._settings.settings_lock_timeout,
        )

    def create_settings_context(self, store: SettingsStorePort) -> SettingsContext:
        resolver = SettingsResolver(
            store,
            namespace=self._settings.settings_namespace,
            overrides=parse_override_json(self._settings.plugin_settings),
        )
        return SettingsContext(resolver)

    def _lookups(self) -> tuple[UserLookupPort, GroupLookupPort]:
        users = self._users
        groups = self._groups
        if users is None or groups is None:
            fallback = StaticUserDirectory()
            if users is None:
                users = fallback
            if groups is None:
                groups = users if hasattr(users, "get_user_groups") else fallback
        return users, groups  # type: ignore[return-value]

    def create_all(self) -> ServiceContainer:
        """Create and wire every service."""
        store = self.create_store()
        context = self.create_settings_context(store)
        users, groups = self._lookups()
        notifications = self._notifications or LoggingNotificationSink()

        gate = PermissionGate(context, users, groups)
        alerts = AlertDispatcher(context, notifications, users)
        warnings = WarningInjector(context)
        plugin = ChatPermsPlugin(
            context,
            gate,
            alerts,
            warnings,
            host_version=self._settings.host_version or UNKNOWN_VERSION,
        )
        admin = SettingsAdminService(context, store, namespace=self._settings.settings_namespace)

        logger.debug(f"chat-perms services created (namespace={self._settings.settings_namespace})")
        return ServiceContainer(
            settings=context,
            store=store,
            gate=gate,
            alerts=alerts,
            warnings=warnings,
            plugin=plugin,
            admin=admin,
        )
