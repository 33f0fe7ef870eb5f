"""Sanitize-on-read validators for persisted workspace data.

Per-record validators compose the guards in ``pegase.codec.guards`` and
return a clean record or ``None``. Collection sanitizers filter-map raw
entries through a validator: a bad element is dropped, the rest survive in
their original order. Adjustments and imported files also drop any record
whose id repeats an earlier one.

Enum fields are strict (unknown value rejects the record). Confidence and
progress are the exception to "no coercion": they are clamped to 0-100
once they parse.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pegase.codec.guards import (
    clamp,
    parse_enum,
    parse_iso_datetime,
    parse_mapping,
    parse_non_empty_string,
    parse_number,
    parse_string,
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
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


@dataclass
class SanitizedCollection(Generic[T]):
    """Outcome of sanitizing a list of raw records.

    Attributes:
        records: Valid records, in input order.
        total: Number of raw entries seen.
        dropped: Number of entries rejected.
    """

    records: list[T] = field(default_factory=list)
    total: int = 0
    dropped: int = 0

    @property
    def all_valid(self) -> bool:
        return self.dropped == 0

    @property
    def all_invalid(self) -> bool:
        """True when there was input but none of it survived."""
        return self.total > 0 and not self.records


def sanitize_collection(
    raw: Any,
    validator: Callable[[Any], T | None],
    label: str = "record",
    key: Callable[[T], str] | None = None,
) -> SanitizedCollection[T] | None:
    """Run ``validator`` over each entry of a raw list.

    When ``key`` is given, a record whose key was already seen is dropped;
    the first occurrence wins.

    Returns ``None`` when ``raw`` is not a list at all.
    """
    if not isinstance(raw, list):
        return None

    result: SanitizedCollection[T] = SanitizedCollection(total=len(raw))
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        record = validator(entry)
        if record is None:
            result.dropped += 1
            logger.debug("Dropped invalid %s at index %d", label, index)
            continue
        if key is not None:
            record_key = key(record)
            if record_key in seen:
                result.dropped += 1
                logger.debug("Dropped duplicate %s %r at index %d", label, record_key, index)
                continue
            seen.add(record_key)
        result.records.append(record)

    return result


# ---------------------------------------------------------------------------
# Financial snapshot
# ---------------------------------------------------------------------------


def sanitize_metric_pair(raw: Any) -> MetricPair | None:
    data = parse_mapping(raw)
    if data is None:
        return None
    current = parse_number(data.get("current"))
    previous = parse_number(data.get("previous"))
    if current is None or previous is None:
        return None
    return MetricPair(current=current, previous=previous)


def sanitize_financial_snapshot(raw: Any) -> FinancialSnapshot | None:
    """Validate a snapshot. Every one of the nine numbers is required."""
    data = parse_mapping(raw)
    if data is None:
        return None

    revenue = sanitize_metric_pair(data.get("revenue"))
    ebitda = sanitize_metric_pair(data.get("ebitda"))
    ebitda_normalized = parse_number(data.get("ebitdaNormalized"))
    net_debt = sanitize_metric_pair(data.get("netDebt"))
    working_capital = sanitize_metric_pair(data.get("workingCapital"))

    if (
        revenue is None
        or ebitda is None
        or ebitda_normalized is None
        or net_debt is None
        or working_capital is None
    ):
        return None

    return FinancialSnapshot(
        revenue=revenue,
        ebitda=ebitda,
        ebitda_normalized=ebitda_normalized,
        net_debt=net_debt,
        working_capital=working_capital,
    )


# ---------------------------------------------------------------------------
# QoE adjustments
# ---------------------------------------------------------------------------


def sanitize_adjustment(raw: Any) -> QoEAdjustment | None:
    data = parse_mapping(raw)
    if data is None:
        return None

    adj_id = parse_non_empty_string(data.get("id"))
    item = parse_string(data.get("item"))
    amount = parse_number(data.get("amount"))
    adj_type = parse_enum(data.get("type"), AdjustmentType)
    category = parse_enum(data.get("category"), AdjustmentCategory)
    confidence = parse_number(data.get("confidence"))
    status = parse_enum(data.get("status"), AdjustmentStatus)
    description = parse_string(data.get("description"))
    date_added = parse_iso_datetime(data.get("dateAdded"))

    if (
        adj_id is None
        or item is None
        or amount is None
        or adj_type is None
        or category is None
        or confidence is None
        or status is None
        or description is None
        or date_added is None
    ):
        return None

    return QoEAdjustment(
        id=adj_id,
        item=item,
        amount=amount,
        type=adj_type,
        category=category,
        confidence=clamp(confidence, PERCENT_MIN, PERCENT_MAX),
        status=status,
        description=description,
        date_added=date_added,
    )


def sanitize_adjustments(raw: Any) -> SanitizedCollection[QoEAdjustment] | None:
    return sanitize_collection(
        raw, sanitize_adjustment, label="adjustment", key=lambda a: a.id,
    )


# ---------------------------------------------------------------------------
# Imported files
# ---------------------------------------------------------------------------


def sanitize_controls(raw: Any) -> FileControls | None:
    """All four counters must parse, otherwise there are no controls."""
    data = parse_mapping(raw)
    if data is None:
        return None

    total_lines = parse_number(data.get("totalLines"))
    valid_lines = parse_number(data.get("validLines"))
    warnings = parse_number(data.get("warnings"))
    errors = parse_number(data.get("errors"))

    if total_lines is None or valid_lines is None or warnings is None or errors is None:
        return None

    return FileControls(
        total_lines=total_lines,
        valid_lines=valid_lines,
        warnings=warnings,
        errors=errors,
    )


def sanitize_imported_file(raw: Any) -> ImportedFile | None:
    data = parse_mapping(raw)
    if data is None:
        return None

    file_id = parse_non_empty_string(data.get("id"))
    name = parse_string(data.get("name"))
    size = parse_string(data.get("size"))
    file_type = parse_enum(data.get("type"), FileType)
    status = parse_enum(data.get("status"), FileStatus)
    progress = parse_number(data.get("progress"))
    date_imported = parse_iso_datetime(data.get("dateImported"))

    if (
        file_id is None
        or name is None
        or size is None
        or file_type is None
        or status is None
        or progress is None
        or date_imported is None
    ):
        return None

    return ImportedFile(
        id=file_id,
        name=name,
        size=size,
        type=file_type,
        status=status,
        progress=clamp(progress, PERCENT_MIN, PERCENT_MAX),
        date_imported=date_imported,
        controls=sanitize_controls(data.get("controls")),
    )


def sanitize_imported_files(raw: Any) -> SanitizedCollection[ImportedFile] | None:
    return sanitize_collection(
        raw, sanitize_imported_file, label="imported file", key=lambda f: f.id,
    )
