"""Process configuration for chat-perms.

These are deployment-level knobs read from the environment (``CHAT_PERMS_*``)
or a ``.env`` file.  The plugin's moderation settings live in the host's
settings store and are resolved by ``chat_perms.core.settings_resolver``;
``plugin_settings`` is the environment override layer on top of them.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """chat-perms process configuration."""

    # Settings resolution
    plugin_settings: str = Field(
        default="",
        description="JSON object overriding stored plugin settings (CHAT_PERMS_PLUGIN_SETTINGS)",
    )
    settings_namespace: str = Field(
        default="chat-perms",
        description="Namespace of the plugin settings in the host settings store",
    )
    settings_file: Path = Field(
        default=Path("./.chat-perms/settings.json"),
        description="JSON file backing the settings store when run standalone",
    )
    settings_lock_timeout: float = Field(
        default=5.0,
        ge=0.0,
        description="Seconds to wait for the settings file lock",
    )

    # Host
    host_version: str | None = Field(
        default=None,
        description="Version of the host forum software (None = undetectable)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit structured JSON log records",
    )

    # Admin HTTP surface
    admin_host: str = Field(default="127.0.0.1", description="Admin API bind address")
    admin_port: int = Field(default=4568, ge=1, le=65535, description="Admin API port")

    model_config = {
        "env_prefix": "CHAT_PERMS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Settings singleton with dependency injection support
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Example:
        from chat_perms.config import get_settings
        settings = get_settings()
        print(settings.settings_namespace)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None

