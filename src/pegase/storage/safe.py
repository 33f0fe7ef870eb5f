"""Storage access that never raises.

A disabled, full or corrupt backend degrades to in-memory-only operation:
reads look like absent keys, writes report ``False``, removes do nothing.
"""

from __future__ import annotations

import logging

from pegase.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


def safe_get_item(storage: KeyValueStorage, key: str) -> str | None:
    try:
        return storage.get_item(key)
    except Exception as exc:
        logger.warning("Unable to read %s from %s: %s", key, storage.storage_name(), exc)
        return None


def safe_set_item(storage: KeyValueStorage, key: str, value: str) -> bool:
    try:
        storage.set_item(key, value)
        return True
    except Exception as exc:
        logger.warning("Unable to write %s to %s: %s", key, storage.storage_name(), exc)
        return False


def safe_remove_item(storage: KeyValueStorage, key: str) -> bool:
    try:
        storage.remove_item(key)
        return True
    except Exception as exc:
        logger.warning("Unable to remove %s from %s: %s", key, storage.storage_name(), exc)
        return False
