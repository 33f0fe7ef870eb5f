"""Domain store — single source of truth for a workspace session.

The store owns the financial snapshot, the QoE adjustments and the imported
file history. The front end reads and mutates state only through it; the
store talks to storage only through a ``PersistentCodec``.

Mutations never modify a record or list in place. Each one builds a new
record (``dataclasses.replace``) and rebinds the collection. Every mutation,
``persist``, ``restore`` and ``reset`` runs under one re-entrant lock, so an
auto-save on the scheduler thread and a save from the caller are serialized:
whichever writes last wrote the state current at that moment.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from pegase.codec.persistent import PersistentCodec, ReadStatus
from pegase.domain.defaults import (
    default_adjustments,
    default_financial_snapshot,
    default_imported_files,
)
from pegase.domain.schemas import (
    ADJUSTMENT_IMMUTABLE_FIELDS,
    AdjustmentCategory,
    AdjustmentStatus,
    AdjustmentType,
    FileControls,
    FileStatus,
    FileType,
    FinancialSnapshot,
    ImportedFile,
    QoEAdjustment,
    WorkspaceState,
)
from pegase.store.scheduler import ScheduledTask, Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_INTERVAL = 30.0  # seconds

_ENUM_FIELDS: dict[str, type] = {
    "type": AdjustmentType,
    "category": AdjustmentCategory,
    "status": AdjustmentStatus,
}


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class RestoreReport:
    """Per-key outcome of ``DomainStore.restore``."""

    financial_snapshot: ReadStatus
    adjustments: ReadStatus
    imported_files: ReadStatus
    reset_to_defaults: bool = False
    dropped_records: int = 0


class DomainStore:
    """In-memory workspace state with best-effort persistence.

    Args:
        codec: Codec used by ``persist``, ``restore`` and ``reset``.
        scheduler: Runs the auto-save timer. Defaults to a
            ``ThreadingScheduler``.
        autosave_interval: Seconds between auto-saves; ``0`` disables it.
        clock: Returns the current time, for timestamps.
        id_factory: Returns candidate record ids.
    """

    def __init__(
        self,
        codec: PersistentCodec,
        scheduler: Scheduler | None = None,
        autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._codec = codec
        self._scheduler = scheduler
        self._autosave_interval = autosave_interval
        self._clock = clock or (lambda: datetime.now(UTC))
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._autosave_task: ScheduledTask | None = None
        self._last_saved_at: str | None = None
        self._lock = threading.RLock()

        self._financial_snapshot = default_financial_snapshot()
        self._adjustments: list[QoEAdjustment] = default_adjustments()
        self._imported_files: list[ImportedFile] = default_imported_files()

        if autosave_interval > 0:
            self.start_autosave()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_autosave(self) -> None:
        if self._autosave_task is not None and not self._autosave_task.cancelled:
            return
        if self._autosave_interval <= 0:
            raise ValueError("Auto-save is disabled for this store (interval is 0)")
        if self._scheduler is None:
            self._scheduler = ThreadingScheduler()
        self._autosave_task = self._scheduler.call_every(
            self._autosave_interval, self.persist,
        )
        logger.debug("Auto-save every %.0fs started", self._autosave_interval)

    @property
    def autosave_active(self) -> bool:
        return self._autosave_task is not None and not self._autosave_task.cancelled

    def dispose(self) -> None:
        """Cancel the auto-save timer. Safe to call more than once."""
        if self._autosave_task is not None:
            self._autosave_task.cancel()
            self._autosave_task = None
            logger.debug("Auto-save stopped")

    def __enter__(self) -> DomainStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def financial_snapshot(self) -> FinancialSnapshot:
        return self._financial_snapshot

    @property
    def adjustments(self) -> tuple[QoEAdjustment, ...]:
        return tuple(self._adjustments)

    @property
    def imported_files(self) -> tuple[ImportedFile, ...]:
        return tuple(self._imported_files)

    @property
    def last_saved_at(self) -> str | None:
        return self._last_saved_at

    def get_adjustment(self, adjustment_id: str) -> QoEAdjustment | None:
        for adj in self._adjustments:
            if adj.id == adjustment_id:
                return adj
        return None

    def state(self) -> WorkspaceState:
        with self._lock:
            return WorkspaceState(
                financial_snapshot=self._financial_snapshot,
                adjustments=list(self._adjustments),
                imported_files=list(self._imported_files),
            )

    # ------------------------------------------------------------------
    # Financial snapshot
    # ------------------------------------------------------------------

    def set_financial_snapshot(self, snapshot: FinancialSnapshot) -> None:
        with self._lock:
            self._financial_snapshot = snapshot

    # ------------------------------------------------------------------
    # QoE adjustments
    # ------------------------------------------------------------------

    def add_adjustment(
        self,
        *,
        item: str,
        amount: float,
        type: AdjustmentType | str,
        category: AdjustmentCategory | str,
        confidence: float,
        description: str,
        status: AdjustmentStatus | str = AdjustmentStatus.PENDING,
    ) -> QoEAdjustment:
        """Append a new adjustment with a fresh id and timestamp."""
        with self._lock:
            adjustment = QoEAdjustment(
                id=self._new_id(a.id for a in self._adjustments),
                item=item,
                amount=amount,
                type=AdjustmentType(type),
                category=AdjustmentCategory(category),
                confidence=confidence,
                status=AdjustmentStatus(status),
                description=description,
                date_added=self._timestamp(),
            )
            self._adjustments = [*self._adjustments, adjustment]
            return adjustment

    def update_adjustment(self, adjustment_id: str, **updates: Any) -> QoEAdjustment | None:
        """Merge ``updates`` into the matching adjustment.

        ``id`` and ``date_added`` are ignored if supplied. An unknown id is a
        silent no-op and returns ``None``.
        """
        with self._lock:
            index = self._index_of(adjustment_id)
            if index is None:
                return None

            changes = {
                name: _ENUM_FIELDS[name](value) if name in _ENUM_FIELDS else value
                for name, value in updates.items()
                if name not in ADJUSTMENT_IMMUTABLE_FIELDS
            }
            updated = replace(self._adjustments[index], **changes)

            adjustments = list(self._adjustments)
            adjustments[index] = updated
            self._adjustments = adjustments
            return updated

    def accept_adjustment(self, adjustment_id: str) -> QoEAdjustment | None:
        return self.update_adjustment(adjustment_id, status=AdjustmentStatus.ACCEPTED)

    def reject_adjustment(self, adjustment_id: str) -> QoEAdjustment | None:
        return self.update_adjustment(adjustment_id, status=AdjustmentStatus.REJECTED)

    def remove_adjustment(self, adjustment_id: str) -> bool:
        """Remove the matching adjustment. Returns False if it was absent."""
        with self._lock:
            remaining = [a for a in self._adjustments if a.id != adjustment_id]
            if len(remaining) == len(self._adjustments):
                return False
            self._adjustments = remaining
            return True

    def replace_adjustments(self, adjustments: Iterable[QoEAdjustment]) -> None:
        with self._lock:
            self._adjustments = list(adjustments)

    # ------------------------------------------------------------------
    # Imported files
    # ------------------------------------------------------------------

    def add_imported_file(
        self,
        *,
        name: str,
        size: str,
        type: FileType | str,
        status: FileStatus | str,
        progress: float,
        controls: FileControls | None = None,
    ) -> ImportedFile:
        with self._lock:
            imported = ImportedFile(
                id=self._new_id(f.id for f in self._imported_files),
                name=name,
                size=size,
                type=FileType(type),
                status=FileStatus(status),
                progress=progress,
                date_imported=self._timestamp(),
                controls=controls,
            )
            self._imported_files = [*self._imported_files, imported]
            return imported

    def replace_imported_files(self, files: Iterable[ImportedFile]) -> None:
        with self._lock:
            self._imported_files = list(files)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self) -> bool:
        """Write every collection and the last-saved timestamp.

        Never raises. Returns True when every write succeeded.
        """
        with self._lock:
            saved_at = self._timestamp()
            try:
                ok = self._codec.write_state(self.state(), saved_at)
            except Exception as exc:
                logger.error("Error saving workspace: %s", exc)
                return False

            if ok:
                self._last_saved_at = saved_at
                logger.info(
                    "Workspace saved (%d adjustments, %d imported files)",
                    len(self._adjustments), len(self._imported_files),
                )
            else:
                logger.warning("Workspace only partially saved; will retry on next save")
            return ok

    def restore(self) -> RestoreReport:
        """Load sanitized state from storage.

        Keys that are absent or invalid leave the in-memory value as it is.
        An unexpected failure resets all three collections to defaults.
        """
        with self._lock:
            try:
                snapshot = self._codec.read_financial_snapshot()
                adjustments = self._codec.read_adjustments()
                files = self._codec.read_imported_files()
                last_saved = self._codec.read_last_saved()
            except Exception as exc:
                logger.error("Error loading workspace, using defaults: %s", exc)
                self._load_defaults()
                return RestoreReport(
                    financial_snapshot=ReadStatus.INVALID,
                    adjustments=ReadStatus.INVALID,
                    imported_files=ReadStatus.INVALID,
                    reset_to_defaults=True,
                )

            if snapshot.ok:
                self.set_financial_snapshot(snapshot.value)
            if adjustments.ok:
                self.replace_adjustments(adjustments.value)
            if files.ok:
                self.replace_imported_files(files.value)
            if last_saved is not None:
                self._last_saved_at = last_saved

        report = RestoreReport(
            financial_snapshot=snapshot.status,
            adjustments=adjustments.status,
            imported_files=files.status,
            dropped_records=adjustments.dropped + files.dropped,
        )
        logger.info(
            "Workspace restored (snapshot=%s, adjustments=%s, files=%s)",
            report.financial_snapshot, report.adjustments, report.imported_files,
        )
        return report

    def reset(self) -> None:
        """Forget persisted state and return to the built-in defaults."""
        with self._lock:
            try:
                if not self._codec.clear():
                    logger.warning("Some workspace keys could not be removed")
            except Exception as exc:
                logger.error("Error clearing workspace storage: %s", exc)

            self._load_defaults()
            self._last_saved_at = None
        logger.info("Workspace reset to defaults")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load_defaults(self) -> None:
        self._financial_snapshot = default_financial_snapshot()
        self._adjustments = default_adjustments()
        self._imported_files = default_imported_files()

    def _index_of(self, adjustment_id: str) -> int | None:
        for i, adj in enumerate(self._adjustments):
            if adj.id == adjustment_id:
                return i
        return None

    def _new_id(self, existing: Iterable[str]) -> str:
        taken = set(existing)
        candidate = self._id_factory()
        while candidate in taken:
            candidate = self._id_factory()
        return candidate

    def _timestamp(self) -> str:
        return utc_timestamp(self._clock())
