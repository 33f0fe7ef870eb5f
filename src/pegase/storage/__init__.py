"""Storage backends — JSON file (default) and in-memory."""

from pegase.storage.base import KeyValueStorage
from pegase.storage.factory import available_storages, get_storage, storage_from_settings
from pegase.storage.safe import safe_get_item, safe_remove_item, safe_set_item

__all__ = [
    "KeyValueStorage",
    "available_storages",
    "get_storage",
    "safe_get_item",
    "safe_remove_item",
    "safe_set_item",
    "storage_from_settings",
]
