"""JSON file storage — one file per user profile, zero infrastructure.

The file holds a single JSON object mapping key to text value, the same
shape browser local storage exposes. Every write rewrites the whole file
through a temporary file and ``os.replace`` so a crash never leaves it
half-written.

Each read-modify-write holds a lock shared by every instance pointing at the
same file, so concurrent writers in one process never drop each other's keys.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pegase.errors import StorageUnavailableError
from pegase.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

_path_locks: dict[Path, threading.RLock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _path_locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.RLock()
        return lock


class JsonFileStorage(KeyValueStorage):
    """Key-value storage persisted to a JSON file."""

    def __init__(self, path: str | Path = "local_data/pegase_storage.json"):
        self._path = Path(path)
        self._lock = _lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key not in data:
                return
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read())

    def clear(self) -> None:
        with self._lock:
            self._write({})

    def describe(self) -> str:
        return f"json file ({self._path})"

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError(
                f"Cannot read storage file {self._path}: {exc}"
            ) from exc

        if not isinstance(data, dict):
            raise StorageUnavailableError(
                f"Storage file {self._path} does not contain a JSON object"
            )

        # Values are always text; anything else was written by hand.
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot write storage file {self._path}: {exc}"
            ) from exc

        logger.debug("JsonFileStorage wrote %d keys to %s", len(data), self._path)
