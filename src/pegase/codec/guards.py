"""Typed guard functions for untrusted parsed JSON.

Each guard takes an arbitrary value and returns the validated value or
``None``. Guards never coerce across types except where noted
(``parse_number`` accepts numeric strings).
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeVar

E = TypeVar("E", bound=StrEnum)


def parse_number(value: Any) -> float | None:
    """Accept a finite number or a non-empty string holding one.

    Booleans, empty strings, strings with underscores, NaN and infinities
    are rejected.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        text = value.strip()
        # float() accepts digit separators such as "1_000"; stored numbers never use them.
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    return None


def parse_string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_non_empty_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def parse_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def parse_enum(value: Any, enum_cls: type[E]) -> E | None:
    """Return the enum member whose value equals ``value`` exactly."""
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def parse_iso_datetime(value: Any) -> str | None:
    """Return ``value`` unchanged if it is a parseable ISO-8601 timestamp."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return None
    return value


def parse_mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
