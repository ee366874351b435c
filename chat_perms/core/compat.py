"""Host version compatibility check.

Advisory only: an unsupported host logs a startup warning but the hooks keep
running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chat_perms.core.errors import InvalidVersionFormatError
from chat_perms.core.utils import parse_leading_int

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR_VERSION = 4
UNKNOWN_VERSION = "unknown"


@dataclass(frozen=True)
class HostVersion:
    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(version: object) -> HostVersion | None:
    """Parse a semantic version string.

    The pre-release suffix (everything after the first ``-``) is dropped and
    each segment is read by its leading digits.  Minor and patch default to 0.

    Returns:
        The parsed version, or ``None`` if the major segment is not an integer.
    """
    if not version or not isinstance(version, str):
        return None

    parts = version.split("-", 1)[0].split(".")
    major = parse_leading_int(parts[0])
    if major is None:
        return None

    minor = parse_leading_int(parts[1]) if len(parts) > 1 else None
    patch = parse_leading_int(parts[2]) if len(parts) > 2 else None
    return HostVersion(major=major, minor=minor or 0, patch=patch or 0)


def detect_host_version() -> str:
    """Host version from configuration, or ``"unknown"``."""
    from chat_perms.config import get_settings

    configured = get_settings().host_version
    if configured and configured.strip():
        return configured.strip()
    return UNKNOWN_VERSION


def is_compatible(version: str | None = None) -> bool:
    """Check whether the host version is supported.

    Args:
        version: Version to check; detected from configuration when ``None``.

    Returns:
        ``True`` for a supported major version or an undetectable version,
        ``False`` for unsupported or unparsable versions.
    """
    candidate = version if version is not None else detect_host_version()

    if candidate == UNKNOWN_VERSION:
        logger.warning("Unable to determine host version, assuming compatible")
        return True

    parsed = parse_version(candidate)
    if parsed is None:
        logger.warning(str(InvalidVersionFormatError(candidate)))
        return False

    compatible = parsed.major == SUPPORTED_MAJOR_VERSION
    if not compatible:
        logger.warning(
            f"Incompatible host version detected: {candidate}. "
            f"This plugin supports {SUPPORTED_MAJOR_VERSION}.x"
        )
    return compatible
