"""Data models for the due-diligence workspace.

Records use snake_case attributes in Python and camelCase keys on the wire
(``to_dict``), matching the JSON blobs the dashboard has always persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class AdjustmentType(StrEnum):
    """Direction of a QoE adjustment. Informational only."""

    ADD = "add"
    REMOVE = "remove"


class AdjustmentCategory(StrEnum):
    NON_RECURRING = "Non-recurring"
    OWNER_BENEFIT = "Owner-benefit"
    NORMALIZATION = "Normalization"


class AdjustmentStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FileType(StrEnum):
    """Accounting file families accepted by the import screen."""

    FEC = "FEC"
    BALANCE = "Balance"
    GENERAL_LEDGER = "GeneralLedger"
    AUXILIARY = "Auxiliary"


class FileStatus(StrEnum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Financial snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetricPair:
    """Current and previous period values of one metric."""

    current: float
    previous: float

    def to_dict(self) -> dict[str, float]:
        return {"current": self.current, "previous": self.previous}


@dataclass(frozen=True)
class FinancialSnapshot:
    """Headline figures shown on the dashboard.

    No range is enforced beyond finiteness: net debt and working capital
    are routinely negative.
    """

    revenue: MetricPair
    ebitda: MetricPair
    ebitda_normalized: float
    net_debt: MetricPair
    working_capital: MetricPair

    def to_dict(self) -> dict[str, Any]:
        return {
            "revenue": self.revenue.to_dict(),
            "ebitda": self.ebitda.to_dict(),
            "ebitdaNormalized": self.ebitda_normalized,
            "netDebt": self.net_debt.to_dict(),
            "workingCapital": self.working_capital.to_dict(),
        }


# ---------------------------------------------------------------------------
# Quality of Earnings adjustments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QoEAdjustment:
    """One Quality of Earnings adjustment.

    Attributes:
        id: Opaque identifier, unique within the collection. Immutable.
        item: Short label.
        amount: Signed amount. The sign is never reconciled with ``type``.
        type: Add-back or removal.
        category: Adjustment family.
        confidence: Analyst confidence, 0-100.
        status: Review status; only explicit actions change it.
        description: Free text.
        date_added: ISO-8601 creation timestamp. Immutable.
    """

    id: str
    item: str
    amount: float
    type: AdjustmentType
    category: AdjustmentCategory
    confidence: float
    status: AdjustmentStatus
    description: str
    date_added: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "item": self.item,
            "amount": self.amount,
            "type": self.type.value,
            "category": self.category.value,
            "confidence": self.confidence,
            "status": self.status.value,
            "description": self.description,
            "dateAdded": self.date_added,
        }


# ---------------------------------------------------------------------------
# Imported files
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileControls:
    """Line-level control totals reported for an import."""

    total_lines: float
    valid_lines: float
    warnings: float
    errors: float

    def to_dict(self) -> dict[str, float]:
        return {
            "totalLines": self.total_lines,
            "validLines": self.valid_lines,
            "warnings": self.warnings,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class ImportedFile:
    """A finished file import kept in the workspace history."""

    id: str
    name: str
    size: str  # human readable, e.g. "2.5 MB"
    type: FileType
    status: FileStatus
    progress: float
    date_imported: str
    controls: FileControls | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "type": self.type.value,
            "status": self.status.value,
            "progress": self.progress,
            "dateImported": self.date_imported,
        }
        if self.controls is not None:
            d["controls"] = self.controls.to_dict()
        return d


# Fields callers may not set on create or overwrite on update.
ADJUSTMENT_IMMUTABLE_FIELDS = frozenset({"id", "date_added"})


@dataclass
class WorkspaceState:
    """The three collections owned by the domain store, as one value."""

    financial_snapshot: FinancialSnapshot
    adjustments: list[QoEAdjustment] = field(default_factory=list)
    imported_files: list[ImportedFile] = field(default_factory=list)
