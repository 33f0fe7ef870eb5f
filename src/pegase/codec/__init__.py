"""Persistent codec and sanitize-on-read validators."""

from pegase.codec.keys import StorageKeys
from pegase.codec.persistent import PersistentCodec, ReadResult, ReadStatus
from pegase.codec.sanitize import (
    SanitizedCollection,
    sanitize_adjustment,
    sanitize_adjustments,
    sanitize_controls,
    sanitize_financial_snapshot,
    sanitize_imported_file,
    sanitize_imported_files,
)

__all__ = [
    "PersistentCodec",
    "ReadResult",
    "ReadStatus",
    "SanitizedCollection",
    "StorageKeys",
    "sanitize_adjustment",
    "sanitize_adjustments",
    "sanitize_controls",
    "sanitize_financial_snapshot",
    "sanitize_imported_file",
    "sanitize_imported_files",
]
