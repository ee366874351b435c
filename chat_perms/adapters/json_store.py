"""Settings store persisted as a JSON file.

Layout: ``{"<namespace>": {"<key>": "<string value>", ...}, ...}``.  Reads
and writes hold a cross-process ``FileLock`` so the admin app and CLI can
share one file; writes go through a temp file and ``os.replace``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from filelock import FileLock
from filelock import Timeout as FileLockTimeout

from chat_perms.core.errors import SettingsLoadError, SettingsSaveError

logger = logging.getLogger(__name__)


class JsonFileSettingsStore:
    """File-backed implementation of ``SettingsStorePort``."""

    def __init__(self, path: Path, lock_timeout: float = 5.0) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._lock = FileLock(str(self.path.with_suffix(self.path.suffix + ".lock")))

    def _read_all(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("settings file must contain a JSON object")
        return data

    def _write_all(self, data: Mapping[str, Mapping[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _get_sync(self, namespace: str) -> dict[str, str]:
        try:
            with self._lock.acquire(timeout=self.lock_timeout):
                data = self._read_all()
        except FileLockTimeout as e:
            raise SettingsLoadError(namespace, f"lock timeout after {self.lock_timeout}s") from e
        except (OSError, ValueError) as e:
            raise SettingsLoadError(namespace, str(e)) from e

        values = data.get(namespace, {})
        if not isinstance(values, dict):
            raise SettingsLoadError(namespace, "namespace entry is not an object")
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in values.items()}

    def _set_sync(self, namespace: str, values: Mapping[str, str]) -> None:
        try:
            with self._lock.acquire(timeout=self.lock_timeout):
                try:
                    data = self._read_all()
                except ValueError:
                    logger.warning(f"Overwriting unreadable settings file {self.path.name}")
                    data = {}
                data[namespace] = {str(k): str(v) for k, v in values.items()}
                self._write_all(data)
        except FileLockTimeout as e:
            raise SettingsSaveError(namespace, f"lock timeout after {self.lock_timeout}s") from e
        except OSError as e:
            raise SettingsSaveError(namespace, str(e)) from e

    async def get(self, namespace: str) -> dict[str, str]:
        return await asyncio.to_thread(self._get_sync, namespace)

    async def set(self, namespace: str, values: Mapping[str, str]) -> None:
        await asyncio.to_thread(self._set_sync, namespace, values)
