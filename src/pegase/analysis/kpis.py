"""Dashboard figures derived from the workspace state."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pegase.domain.schemas import AdjustmentStatus, QoEAdjustment
from pegase.store.domain_store import DomainStore


@dataclass(frozen=True)
class KpiLine:
    """One row of the dashboard."""

    label: str
    value: float
    previous: float | None = None
    change_pct: float | None = None


def calculate_change(current: float, previous: float) -> float | None:
    """Period-over-period change in percent, one decimal.

    Returns ``None`` when the previous value is zero.
    """
    if previous == 0:
        return None
    return round((current - previous) / previous * 100, 1)


def ebitda_margin(ebitda: float, revenue: float) -> float | None:
    if revenue == 0:
        return None
    return round(ebitda / revenue * 100, 1)


def accepted_adjustments(adjustments: Iterable[QoEAdjustment]) -> list[QoEAdjustment]:
    return [a for a in adjustments if a.status == AdjustmentStatus.ACCEPTED]


def accepted_total(adjustments: Iterable[QoEAdjustment]) -> float:
    return sum(a.amount for a in accepted_adjustments(adjustments))


def dashboard_summary(store: DomainStore) -> list[KpiLine]:
    snap = store.financial_snapshot
    adjustments = store.adjustments

    return [
        KpiLine(
            label="Revenue",
            value=snap.revenue.current,
            previous=snap.revenue.previous,
            change_pct=calculate_change(snap.revenue.current, snap.revenue.previous),
        ),
        KpiLine(
            label="EBITDA",
            value=snap.ebitda.current,
            previous=snap.ebitda.previous,
            change_pct=calculate_change(snap.ebitda.current, snap.ebitda.previous),
        ),
        KpiLine(label="Normalized EBITDA", value=snap.ebitda_normalized),
        KpiLine(
            label="EBITDA margin (%)",
            value=ebitda_margin(snap.ebitda.current, snap.revenue.current) or 0.0,
            previous=ebitda_margin(snap.ebitda.previous, snap.revenue.previous),
        ),
        KpiLine(
            label="Net debt",
            value=snap.net_debt.current,
            previous=snap.net_debt.previous,
            change_pct=calculate_change(snap.net_debt.current, snap.net_debt.previous),
        ),
        KpiLine(
            label="Working capital",
            value=snap.working_capital.current,
            previous=snap.working_capital.previous,
            change_pct=calculate_change(
                snap.working_capital.current, snap.working_capital.previous,
            ),
        ),
        KpiLine(label="Accepted adjustments", value=len(accepted_adjustments(adjustments))),
        KpiLine(label="Accepted adjustments total", value=accepted_total(adjustments)),
    ]
