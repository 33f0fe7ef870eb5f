"""In-memory storage — nothing survives the process."""

from __future__ import annotations

from pegase.storage.base import KeyValueStorage


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage, used in tests and for throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()

    def describe(self) -> str:
        return "memory (not persisted)"
