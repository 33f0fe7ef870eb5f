"""Sanitize settings read from storage or an imported document.

Unlike workspace records, settings are repaired field by field: a bad value
falls back to the built-in default for that field and the rest of the
section is kept. Sector entries are the only records that can be dropped.
"""

from __future__ import annotations

import logging
from typing import Any

from pegase.codec.guards import (
    parse_bool,
    parse_enum,
    parse_mapping,
    parse_non_empty_string,
    parse_number,
    parse_string,
)
from pegase.codec.sanitize import sanitize_collection
from pegase.settings_store.schemas import (
    SectorConfig,
    SecurityLevel,
    SystemSettings,
    UserSettings,
    default_sectors,
)

logger = logging.getLogger(__name__)

_USER_FIELDS = ("name", "email", "company", "role", "sector", "timezone", "language")


def sanitize_user_settings(raw: Any) -> UserSettings:
    defaults = UserSettings()
    data = parse_mapping(raw)
    if data is None:
        logger.warning("User settings are not an object, using defaults")
        return defaults

    values = {}
    for name in _USER_FIELDS:
        value = parse_string(data.get(name))
        values[name] = value if value is not None else getattr(defaults, name)
    return UserSettings(**values)


def sanitize_system_settings(raw: Any) -> SystemSettings:
    defaults = SystemSettings()
    data = parse_mapping(raw)
    if data is None:
        logger.warning("System settings are not an object, using defaults")
        return defaults

    def _flag(key: str, default: bool) -> bool:
        value = parse_bool(data.get(key))
        return default if value is None else value

    retention = parse_number(data.get("dataRetention"))
    if retention is None or int(retention) < 1:
        data_retention = defaults.data_retention
    else:
        data_retention = int(retention)

    security_level = parse_enum(data.get("securityLevel"), SecurityLevel)

    return SystemSettings(
        auto_save=_flag("autoSave", defaults.auto_save),
        notifications=_flag("notifications", defaults.notifications),
        email_reports=_flag("emailReports", defaults.email_reports),
        data_retention=data_retention,
        security_level=security_level or defaults.security_level,
        mask_sensitive_data=_flag("maskSensitiveData", defaults.mask_sensitive_data),
    )


def sanitize_sector(raw: Any) -> SectorConfig | None:
    data = parse_mapping(raw)
    if data is None:
        return None

    sector_id = parse_non_empty_string(data.get("id"))
    name = parse_non_empty_string(data.get("name"))
    if sector_id is None or name is None:
        return None

    enabled = parse_bool(data.get("enabled"))

    raw_kpis = data.get("kpis")
    kpis = [k for k in raw_kpis if isinstance(k, str)] if isinstance(raw_kpis, list) else []

    benchmarks: dict[str, float] = {}
    raw_benchmarks = parse_mapping(data.get("ratiosBenchmarks"))
    if raw_benchmarks is not None:
        for ratio, value in raw_benchmarks.items():
            number = parse_number(value)
            if number is not None:
                benchmarks[ratio] = number

    return SectorConfig(
        id=sector_id,
        name=name,
        enabled=bool(enabled),
        kpis=kpis,
        ratios_benchmarks=benchmarks,
    )


def sanitize_sectors(raw: Any) -> list[SectorConfig]:
    """Keep valid sectors; fall back to defaults if nothing usable remains."""
    collection = sanitize_collection(raw, sanitize_sector, label="sector")
    if collection is None:
        logger.warning("Sector configs are not a list, using defaults")
        return default_sectors()

    if collection.all_invalid:
        logger.warning("All %d sector configs are invalid, using defaults", collection.total)
        return default_sectors()

    if collection.dropped:
        logger.warning("Dropped %d invalid sector configs", collection.dropped)
    return collection.records
