"""Logging setup for chat-perms.

Operational logs are the only place infrastructure failures (settings store,
notification delivery, version checks) become visible, so they go through
formatters that mask credentials the admin surface may echo.

Features:
    - Sensitive data masking (csrf tokens, api keys, passwords)
    - JSON structured logging format
    - Configurable log levels
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

# Patterns to mask in logs
SENSITIVE_PATTERNS = [
    (re.compile(r'x-csrf-token["\']?\s*[:=]\s*["\']?[\w-]+', re.I), "x-csrf-token=***MASKED***"),
    (re.compile(r'api[_-]?key["\']?\s*[:=]\s*["\']?[\w-]+', re.I), "api_key=***MASKED***"),
    (re.compile(r'password["\']?\s*[:=]\s*["\']?[^\s"\']+', re.I), "password=***MASKED***"),
]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def mask_sensitive(text: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecureFormatter(logging.Formatter):
    """Formatter that masks sensitive data."""

    def format(self, record: logging.LogRecord) -> str:
        return mask_sensitive(super().format(record))


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with sensitive data masked."""
        log_data: dict[str, str | None] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return mask_sensitive(json.dumps(log_data, ensure_ascii=False))


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    mask_sensitive_data: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: Use JSON format for structured logging.
        mask_sensitive_data: Mask sensitive data in logs.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    elif mask_sensitive_data:
        formatter = SecureFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    else:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
