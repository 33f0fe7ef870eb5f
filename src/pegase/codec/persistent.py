"""Persistent codec — workspace collections to and from key-value text.

Writes are independent per key (no cross-key atomicity). Reads parse JSON
and hand the tree to the sanitizers; nothing read back is trusted. Storage
failures never escape: every access goes through ``pegase.storage.safe``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pegase.codec.guards import parse_iso_datetime
from pegase.codec.keys import StorageKeys
from pegase.codec.sanitize import (
    SanitizedCollection,
    sanitize_adjustments,
    sanitize_financial_snapshot,
    sanitize_imported_files,
)
from pegase.domain.schemas import (
    FinancialSnapshot,
    ImportedFile,
    QoEAdjustment,
    WorkspaceState,
)
from pegase.storage.base import KeyValueStorage
from pegase.storage.safe import safe_get_item, safe_remove_item, safe_set_item

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReadStatus(StrEnum):
    ABSENT = "absent"  # key not present: not an error
    INVALID = "invalid"  # unparseable or unusable shape
    OK = "ok"


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """Outcome of reading one key. ``value`` is set only when ``OK``."""

    status: ReadStatus
    value: T | None = None
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return self.status == ReadStatus.OK

    @classmethod
    def absent(cls) -> ReadResult[T]:
        return cls(status=ReadStatus.ABSENT)

    @classmethod
    def invalid(cls) -> ReadResult[T]:
        return cls(status=ReadStatus.INVALID)


class PersistentCodec:
    """Serialize workspace state to storage and sanitize it on the way back."""

    def __init__(self, storage: KeyValueStorage, keys: StorageKeys | None = None):
        self.storage = storage
        self.keys = keys or StorageKeys()

    # ------------------------------------------------------------------
    # Raw JSON access
    # ------------------------------------------------------------------

    def read_json(self, key: str) -> tuple[ReadStatus, Any]:
        """Read and parse one key.

        Returns ``(ABSENT, None)`` for a missing key or unavailable backend,
        ``(INVALID, None)`` for text that is not JSON.
        """
        raw = safe_get_item(self.storage, key)
        if raw is None:
            return ReadStatus.ABSENT, None

        try:
            return ReadStatus.OK, json.loads(raw)
        except ValueError as exc:
            logger.warning("Ignoring malformed JSON stored under %s: %s", key, exc)
            return ReadStatus.INVALID, None

    def write_json(self, key: str, value: Any) -> bool:
        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("Unable to serialize %s: %s", key, exc)
            return False
        return safe_set_item(self.storage, key, text)

    def remove(self, key: str) -> bool:
        return safe_remove_item(self.storage, key)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def write_financial_snapshot(self, snapshot: FinancialSnapshot) -> bool:
        return self.write_json(self.keys.financial_data, snapshot.to_dict())

    def write_adjustments(self, adjustments: list[QoEAdjustment]) -> bool:
        return self.write_json(self.keys.qoe_adjustments, [a.to_dict() for a in adjustments])

    def write_imported_files(self, files: list[ImportedFile]) -> bool:
        return self.write_json(self.keys.imported_files, [f.to_dict() for f in files])

    def write_last_saved(self, timestamp: str) -> bool:
        # Stored as bare text, not JSON, like the original dashboard did.
        return safe_set_item(self.storage, self.keys.last_save, timestamp)

    def write_state(self, state: WorkspaceState, saved_at: str) -> bool:
        """Write every key. Returns True only if all writes succeeded."""
        results = [
            self.write_financial_snapshot(state.financial_snapshot),
            self.write_adjustments(state.adjustments),
            self.write_imported_files(state.imported_files),
            self.write_last_saved(saved_at),
        ]
        return all(results)

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def read_financial_snapshot(self) -> ReadResult[FinancialSnapshot]:
        status, data = self.read_json(self.keys.financial_data)
        if status != ReadStatus.OK:
            return ReadResult(status=status)

        snapshot = sanitize_financial_snapshot(data)
        if snapshot is None:
            logger.warning("Stored financial snapshot is invalid, ignoring it")
            return ReadResult.invalid()
        return ReadResult(status=ReadStatus.OK, value=snapshot)

    def read_adjustments(self) -> ReadResult[list[QoEAdjustment]]:
        return self._read_collection(
            self.keys.qoe_adjustments, sanitize_adjustments, "adjustments",
        )

    def read_imported_files(self) -> ReadResult[list[ImportedFile]]:
        return self._read_collection(
            self.keys.imported_files, sanitize_imported_files, "imported files",
        )

    def read_last_saved(self) -> str | None:
        raw = safe_get_item(self.storage, self.keys.last_save)
        return parse_iso_datetime(raw)

    def _read_collection(
        self,
        key: str,
        sanitizer: Callable[[Any], SanitizedCollection[T] | None],
        label: str,
    ) -> ReadResult[list[T]]:
        status, data = self.read_json(key)
        if status != ReadStatus.OK:
            return ReadResult(status=status)

        collection = sanitizer(data)
        if collection is None:
            logger.warning("Stored %s under %s is not a list, ignoring it", label, key)
            return ReadResult.invalid()

        if collection.all_invalid:
            logger.warning(
                "All %d stored %s under %s are invalid, ignoring them",
                collection.total, label, key,
            )
            return ReadResult(status=ReadStatus.INVALID, dropped=collection.dropped)

        if collection.dropped:
            logger.warning(
                "Dropped %d of %d stored %s",
                collection.dropped, collection.total, label,
            )

        return ReadResult(
            status=ReadStatus.OK,
            value=collection.records,
            dropped=collection.dropped,
        )

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def clear(self) -> bool:
        """Remove every workspace key. Best effort."""
        results = [self.remove(key) for key in self.keys.workspace_keys()]
        return all(results)
