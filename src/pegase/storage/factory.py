"""Storage factory — backend registry, lazy import, one instance per location."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

from pegase.config import StorageSettings
from pegase.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Storage registry: (backend_key, module_path, class_name, file_backed)
# ---------------------------------------------------------------------------

_STORAGE_REGISTRY: list[tuple[str, str, str, bool]] = [
    ("json_file", "pegase.storage.json_file_store", "JsonFileStorage", True),
    ("memory", "pegase.storage.memory_store", "MemoryStorage", False),
]

# Keyed by (backend, resolved path); memory backends use a path of None.
_storage_cache: dict[tuple[str, Path | None], KeyValueStorage] = {}


def get_storage(backend: str = "json_file", path: str | Path | None = None) -> KeyValueStorage:
    """Get the storage backend for ``backend`` at ``path``.

    Every call for the same backend and file returns the same instance, so
    all stores in the process share one view of the file.

    Args:
        backend: One of ``json_file``, ``memory``.
        path: Storage file for file-backed backends. Omit to use the
            backend's default location.

    Raises:
        ValueError: Unknown backend, or a path given to the memory backend.
    """
    key = backend.lower()

    for reg_key, module_path, cls_name, file_backed in _STORAGE_REGISTRY:
        if reg_key != key:
            continue
        if path is not None and not file_backed:
            raise ValueError(f"Storage backend '{backend}' does not take a path")

        cache_key = (key, Path(path).resolve() if path is not None else None)
        if cache_key in _storage_cache:
            return _storage_cache[cache_key]

        mod = importlib.import_module(module_path)
        cls = getattr(mod, cls_name)
        instance = cls(path) if path is not None else cls()
        _storage_cache[cache_key] = instance
        logger.debug("Created storage backend %s", instance.describe())
        return instance

    raise ValueError(
        f"Unknown storage backend '{backend}'. Available: {available_storages()}"
    )


def storage_from_settings(settings: StorageSettings) -> KeyValueStorage:
    """Build the backend named by the ``storage`` settings section."""
    file_backed = {k: fb for k, _, _, fb in _STORAGE_REGISTRY}
    if file_backed.get(settings.backend.lower(), True):
        return get_storage(settings.backend, path=settings.path)
    return get_storage(settings.backend)


def available_storages() -> list[str]:
    """Return names of registered storage backends."""
    return [k for k, _, _, _ in _STORAGE_REGISTRY]


def clear_cache() -> None:
    """Forget every cached backend instance."""
    _storage_cache.clear()
