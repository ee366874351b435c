"""Unit tests for chat_perms.core.logging."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Generator

import pytest

from chat_perms.core.logging import (
    JSONFormatter,
    SecureFormatter,
    configure_logging,
    mask_sensitive,
)


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("chat_perms.test", logging.WARNING, __file__, 1, message, None, None)


@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestMaskSensitive:
    def test_csrf_token(self) -> None:
        assert "abc123" not in mask_sensitive("x-csrf-token: abc123")

    def test_api_key(self) -> None:
        assert mask_sensitive("api_key=sk-live-999") == "api_key=***MASKED***"

    def test_password(self) -> None:
        assert "hunter2" not in mask_sensitive('{"password": "hunter2"}')

    def test_plain_text_untouched(self) -> None:
        assert mask_sensitive("Keyword alert for uid 2 in room 9") == "Keyword alert for uid 2 in room 9"


@pytest.mark.unit
class TestFormatters:
    def test_secure_formatter_masks(self) -> None:
        formatted = SecureFormatter("%(message)s").format(_record("saved with password=secret"))
        assert formatted == "saved with password=***MASKED***"

    def test_json_formatter(self) -> None:
        data = json.loads(JSONFormatter().format(_record("Sensitive keyword alert: banned")))
        assert data["level"] == "WARNING"
        assert data["logger"] == "chat_perms.test"
        assert data["message"] == "Sensitive keyword alert: banned"
        assert "timestamp" in data

    def test_json_formatter_includes_exception(self) -> None:
        try:
            raise RuntimeError("store offline")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "store offline" in data["exception"]


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    def test_default_uses_secure_formatter(self) -> None:
        configure_logging("WARNING")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, SecureFormatter)

    def test_json_format(self) -> None:
        configure_logging("DEBUG", json_format=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_unmasked(self) -> None:
        configure_logging("INFO", mask_sensitive_data=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert type(formatter) is logging.Formatter
