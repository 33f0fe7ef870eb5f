"""Exceptions raised inside the workspace layers."""

from __future__ import annotations


class StorageUnavailableError(RuntimeError):
    """A storage backend could not be read or written.

    Raised by backends; the safe wrappers in ``pegase.storage.safe`` turn it
    into absent data or a failed write.
    """


class SettingsImportError(ValueError):
    """A settings document could not be parsed as a JSON object."""
