"""Domain records — financial snapshot, QoE adjustments, imported files."""

from pegase.domain.defaults import (
    default_adjustments,
    default_financial_snapshot,
    default_imported_files,
    default_state,
)
from pegase.domain.schemas import (
    AdjustmentCategory,
    AdjustmentStatus,
    AdjustmentType,
    FileControls,
    FileStatus,
    FileType,
    FinancialSnapshot,
    ImportedFile,
    MetricPair,
    QoEAdjustment,
    WorkspaceState,
)

__all__ = [
    "AdjustmentCategory",
    "AdjustmentStatus",
    "AdjustmentType",
    "FileControls",
    "FileStatus",
    "FileType",
    "FinancialSnapshot",
    "ImportedFile",
    "MetricPair",
    "QoEAdjustment",
    "WorkspaceState",
    "default_adjustments",
    "default_financial_snapshot",
    "default_imported_files",
    "default_state",
]
