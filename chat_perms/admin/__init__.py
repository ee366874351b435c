"""Admin settings service and HTTP surface."""

from chat_perms.admin.service import SettingsAdminService

__all__ = ["SettingsAdminService"]
