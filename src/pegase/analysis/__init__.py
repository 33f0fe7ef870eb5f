"""Dashboard KPIs."""

from pegase.analysis.kpis import (
    KpiLine,
    accepted_adjustments,
    accepted_total,
    calculate_change,
    dashboard_summary,
    ebitda_margin,
)

__all__ = [
    "KpiLine",
    "accepted_adjustments",
    "accepted_total",
    "calculate_change",
    "dashboard_summary",
    "ebitda_margin",
]
