"""Built-in workspace data used on first run and after a reset.

Every function returns fresh objects so callers can never share state.
"""

from __future__ import annotations

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


def default_financial_snapshot() -> FinancialSnapshot:
    return FinancialSnapshot(
        revenue=MetricPair(current=12_500_000, previous=10_850_000),
        ebitda=MetricPair(current=2_100_000, previous=1_850_000),
        ebitda_normalized=1_935_000,
        net_debt=MetricPair(current=950_000, previous=1_080_000),
        working_capital=MetricPair(current=1_800_000, previous=1_950_000),
    )


def default_adjustments() -> list[QoEAdjustment]:
    return [
        QoEAdjustment(
            id="1",
            item="Exceptional owner bonus",
            amount=-85_000,
            type=AdjustmentType.REMOVE,
            category=AdjustmentCategory.OWNER_BENEFIT,
            confidence=95,
            status=AdjustmentStatus.PENDING,
            description="One-off bonus paid to the managing director",
            date_added="2025-01-15T10:30:00Z",
        ),
        QoEAdjustment(
            id="2",
            item="Gain on property disposal",
            amount=-120_000,
            type=AdjustmentType.REMOVE,
            category=AdjustmentCategory.NON_RECURRING,
            confidence=98,
            status=AdjustmentStatus.ACCEPTED,
            description="Exceptional capital gain on the sale of land",
            date_added="2025-01-15T09:15:00Z",
        ),
        QoEAdjustment(
            id="3",
            item="Restructuring provision",
            amount=45_000,
            type=AdjustmentType.ADD,
            category=AdjustmentCategory.NORMALIZATION,
            confidence=87,
            status=AdjustmentStatus.PENDING,
            description="Non-recurring restructuring costs",
            date_added="2025-01-15T08:45:00Z",
        ),
    ]


def default_imported_files() -> list[ImportedFile]:
    return [
        ImportedFile(
            id="1",
            name="FEC_2024_SOCIETE_ABC.txt",
            size="2.5 MB",
            type=FileType.FEC,
            status=FileStatus.COMPLETED,
            progress=100,
            date_imported="2025-01-15T14:30:00Z",
            controls=FileControls(
                total_lines=8547, valid_lines=8523, warnings=15, errors=2,
            ),
        ),
        ImportedFile(
            id="2",
            name="Balance_Dec2024.xlsx",
            size="450 KB",
            type=FileType.BALANCE,
            status=FileStatus.COMPLETED,
            progress=100,
            date_imported="2025-01-14T16:20:00Z",
            controls=FileControls(
                total_lines=342, valid_lines=342, warnings=0, errors=0,
            ),
        ),
    ]


def default_state() -> WorkspaceState:
    return WorkspaceState(
        financial_snapshot=default_financial_snapshot(),
        adjustments=default_adjustments(),
        imported_files=default_imported_files(),
    )
