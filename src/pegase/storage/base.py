"""Abstract base class for key-value storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Interface for text key-value stores (the local-storage analogue).

    Implementations may raise on any call; callers outside this package go
    through ``pegase.storage.safe``.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the text stored under ``key``, or ``None`` when absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the stored keys."""

    def clear(self) -> None:
        """Delete every key."""
        for key in self.keys():
            self.remove_item(key)

    def describe(self) -> str:
        """Return a short description of where data lives."""
        return self.storage_name()

    @classmethod
    def storage_name(cls) -> str:
        """Return human-readable storage name."""
        return cls.__name__
