"""Layered resolution of the plugin's moderation settings.

Three layers, in ascending precedence:

1. built-in defaults (``DEFAULT_SETTINGS``)
2. values persisted in the host settings store (strings only; a value is
   applied only when present and, for non-boolean fields, non-empty)
3. overrides (``CHAT_PERMS_PLUGIN_SETTINGS`` JSON), applied whenever present

The merged raw values then go through a single coercion pass, so a bad value
at any layer falls back to the default instead of leaving a hole.

Keys are accepted as camelCase (store and admin form), UPPER_SNAKE (legacy
environment format) or snake_case (Python callers).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from chat_perms.core.errors import SettingsLoadError
from chat_perms.core.models import DisplayType, EffectiveSettings

if TYPE_CHECKING:
    from chat_perms.ports.host import SettingsStorePort

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = EffectiveSettings()

_TRUE_VALUES = ("true", "on")


@dataclass(frozen=True)
class _FieldSpec:
    name: str
    kind: str  # bool | int | str | uid_list | keyword_list | display_type

    @property
    def store_key(self) -> str:
        return to_camel(self.name)

    @property
    def keys(self) -> tuple[str, str, str]:
        return (self.store_key, self.name, self.name.upper())


FIELDS: tuple[_FieldSpec, ...] = (
    _FieldSpec("admin_uids", "uid_list"),
    _FieldSpec("allow_chat_group", "str"),
    _FieldSpec("deny_chat_group", "str"),
    _FieldSpec("min_reputation", "int"),
    _FieldSpec("min_posts", "int"),
    _FieldSpec("chat_not_yet_allowed_message", "str"),
    _FieldSpec("chat_denied_message", "str"),
    _FieldSpec("warning_enabled", "bool"),
    _FieldSpec("warning_message", "str"),
    _FieldSpec("warning_display_type", "display_type"),
    _FieldSpec("keyword_alerts_enabled", "bool"),
    _FieldSpec("keyword_list", "keyword_list"),
    _FieldSpec("alert_recipient_uids", "uid_list"),
)


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def _coerce_bool(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value in _TRUE_VALUES)


def _coerce_non_negative_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else default
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
        return parsed if parsed >= 0 else default
    return default


def _parse_uid(item: Any) -> int | None:
    if isinstance(item, bool):
        return None
    if isinstance(item, int):
        return item
    if isinstance(item, float):
        return int(item) if item.is_integer() else None
    if isinstance(item, str):
        try:
            return int(item.strip())
        except ValueError:
            return None
    return None


def _parse_keyword(item: Any) -> str | None:
    if not isinstance(item, str):
        return None
    keyword = item.strip().lower()
    return keyword or None


def _coerce_list(
    value: Any,
    default: tuple[Any, ...],
    separator: str,
    parse_item: Callable[[Any], Any],
) -> tuple[Any, ...]:
    """Accept a native sequence, JSON-array text or separated plain text."""
    if isinstance(value, str):
        text = value.strip()
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        items = decoded if isinstance(decoded, list) else text.split(separator)
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return default

    parsed = (parse_item(item) for item in items)
    return tuple(item for item in parsed if item is not None)


def _coerce_display_type(value: Any) -> DisplayType:
    if isinstance(value, DisplayType):
        return value
    if isinstance(value, str):
        try:
            return DisplayType(value)
        except ValueError:
            pass
    return DEFAULT_SETTINGS.warning_display_type


def _coerce_field(spec: _FieldSpec, value: Any) -> Any:
    default = getattr(DEFAULT_SETTINGS, spec.name)
    if spec.kind == "bool":
        return _coerce_bool(value)
    if spec.kind == "int":
        return _coerce_non_negative_int(value, default)
    if spec.kind == "uid_list":
        return _coerce_list(value, default, ",", _parse_uid)
    if spec.kind == "keyword_list":
        return _coerce_list(value, default, "\n", _parse_keyword)
    if spec.kind == "display_type":
        return _coerce_display_type(value)
    return value if isinstance(value, str) else default


def coerce_settings(raw: Mapping[str, Any]) -> EffectiveSettings:
    """Turn merged raw values (keyed by field name) into EffectiveSettings."""
    values = {
        spec.name: _coerce_field(spec, raw.get(spec.name, getattr(DEFAULT_SETTINGS, spec.name)))
        for spec in FIELDS
    }
    return EffectiveSettings(**values)


# ---------------------------------------------------------------------------
# Layer merging
# ---------------------------------------------------------------------------


def _lookup(layer: Mapping[str, Any], spec: _FieldSpec) -> tuple[bool, Any]:
    for key in spec.keys:
        if key in layer:
            return True, layer[key]
    return False, None


def _has_content(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def merge_layers(
    stored: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge defaults, store values and overrides into raw field values."""
    merged: dict[str, Any] = {spec.name: getattr(DEFAULT_SETTINGS, spec.name) for spec in FIELDS}

    for spec in FIELDS:
        if stored:
            found, value = _lookup(stored, spec)
            if found and (spec.kind == "bool" or _has_content(value)):
                merged[spec.name] = value
        if overrides:
            found, value = _lookup(overrides, spec)
            if found:
                merged[spec.name] = value

    return merged


def resolve_layers(
    stored: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> EffectiveSettings:
    """Pure resolution of the three layers into EffectiveSettings."""
    return coerce_settings(merge_layers(stored, overrides))


# ---------------------------------------------------------------------------
# Store encoding
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> str:
    """Encode one settings value into its store string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, DisplayType):
        return value.value
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False)
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def encode_for_store(partial: Mapping[str, Any]) -> dict[str, str]:
    """Encode a (partial) settings mapping into store strings.

    Unknown keys and ``None`` values are dropped; result keys are camelCase.
    """
    encoded: dict[str, str] = {}
    for spec in FIELDS:
        found, value = _lookup(partial, spec)
        if found and value is not None:
            encoded[spec.store_key] = encode_value(value)
    return encoded


def serialize_settings(settings: EffectiveSettings) -> dict[str, str]:
    """Full store string form of an EffectiveSettings snapshot."""
    return encode_for_store({spec.name: getattr(settings, spec.name) for spec in FIELDS})


def parse_override_json(text: str | None) -> dict[str, Any]:
    """Parse the override layer JSON; malformed input yields an empty layer."""
    if not text or not text.strip():
        return {}
    try:
        decoded = json.loads(text)
    except ValueError as e:
        logger.warning(f"Ignoring malformed plugin settings override: {e}")
        return {}
    if not isinstance(decoded, dict):
        logger.warning("Ignoring plugin settings override: expected a JSON object")
        return {}
    return decoded


# ---------------------------------------------------------------------------
# Resolver and cache
# ---------------------------------------------------------------------------


class SettingsResolver:
    """Resolves EffectiveSettings from the store and override layers."""

    def __init__(
        self,
        store: SettingsStorePort | None,
        namespace: str = "chat-perms",
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self._store = store
        self._namespace = namespace
        self._overrides = dict(overrides) if overrides else {}

    @property
    def namespace(self) -> str:
        return self._namespace

    async def read_store(self) -> dict[str, Any]:
        """Read the persisted layer.  Failures are logged and yield ``{}``."""
        if self._store is None:
            return {}
        try:
            values = await self._store.get(self._namespace)
        except Exception as e:
            error = e if isinstance(e, SettingsLoadError) else SettingsLoadError(self._namespace, str(e))
            logger.warning(f"{error}; falling back to defaults")
            return {}
        if values is None:
            return {}
        if not isinstance(values, Mapping):
            logger.warning(
                f"Settings store returned {type(values).__name__} for '{self._namespace}'; ignoring"
            )
            return {}
        return dict(values)

    async def resolve(self) -> EffectiveSettings:
        """Resolve the current EffectiveSettings.  Never raises."""
        stored = await self.read_store()
        return resolve_layers(stored, self._overrides)


class SettingsContext:
    """Process-wide holder of the current EffectiveSettings snapshot.

    The snapshot is replaced, never mutated; readers grab ``current`` once
    per hook invocation and work on that consistent view.

    Refreshes run one at a time under ``lock`` so the snapshot always
    reflects the last completed store write.  Writers that update the store
    hold the same lock across write and ``reload``.
    """

    def __init__(
        self,
        resolver: SettingsResolver | None = None,
        initial: EffectiveSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._current = initial if initial is not None else DEFAULT_SETTINGS
        self._lock = asyncio.Lock()

    @property
    def current(self) -> EffectiveSettings:
        return self._current

    @property
    def resolver(self) -> SettingsResolver | None:
        return self._resolver

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    def replace(self, new_settings: EffectiveSettings) -> None:
        self._current = new_settings

    async def refresh(self) -> EffectiveSettings:
        """Re-resolve the settings and swap in the new snapshot."""
        async with self._lock:
            return await self.reload()

    async def reload(self) -> EffectiveSettings:
        """Like ``refresh``, for callers already holding ``lock``."""
        if self._resolver is None:
            return self._current
        resolved = await self._resolver.resolve()
        self._current = resolved
        logger.debug("Plugin settings refreshed")
        return resolved
