"""Shared helpers for time and identifier handling.

The host stores timestamps as epoch milliseconds and hands identifiers over
as either integers or numeric strings depending on the code path; everything
that compares or timestamps goes through these helpers.
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def utc_now() -> datetime:
    """Get current UTC datetime (timezone-aware).

    Example:
        >>> from chat_perms.core.utils import utc_now
        >>> utc_now().tzinfo is not None
        True
    """
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    """Current time in epoch milliseconds, never below 1."""
    return max(int(time.time() * 1000), 1)


def to_aware_utc(dt: datetime) -> datetime:
    """Convert any datetime to timezone-aware UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: object) -> datetime | None:
    """Interpret a host timestamp.

    Accepts epoch milliseconds (int/float or numeric string), ISO-8601
    strings and ``datetime`` objects.

    Returns:
        A timezone-aware UTC datetime, or ``None`` when the value is absent
        or cannot be interpreted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return to_aware_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromtimestamp(float(text) / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
        try:
            return to_aware_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def parse_leading_int(text: str) -> int | None:
    """Parse the leading integer of a string (``"12abc"`` -> 12).

    Returns ``None`` when the string does not start with digits.
    """
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))


def coerce_uid(value: object) -> object:
    """Normalize a user/room identifier for comparison.

    Integers pass through, numeric strings become integers, anything else is
    returned unchanged so that unequal junk never compares equal to a real id.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
    return value
