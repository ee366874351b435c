"""Hook payload normalization.

Host versions disagree on what a messaging hook receives: older releases pass
bare values or lists, newer ones pass objects.  ``normalize_hook_data`` turns
any of these shapes into a fresh mapping so the rest of the pipeline only ever
deals with one format.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chat_perms.core.models import HookEvent


def normalize_hook_data(raw: Any, defaults: Mapping[str, Any] | None = None) -> HookEvent:
    """Coerce a hook payload of any shape into a mapping.

    - ``None``       -> copy of *defaults*
    - list / tuple   -> ``{**defaults, "items": raw}``
    - mapping        -> ``{**defaults, **raw}`` (payload keys win)
    - anything else  -> ``{**defaults, "value": raw}``

    Never raises and never mutates its arguments.
    """
    result: HookEvent = dict(defaults) if defaults else {}

    if raw is None:
        return result

    if isinstance(raw, Mapping):
        result.update(raw)
        return result

    if isinstance(raw, (list, tuple)):
        result["items"] = raw
        return result

    result["value"] = raw
    return result
