"""Data models for user, system and sector settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SecurityLevel(StrEnum):
    STANDARD = "standard"
    HIGH = "high"
    MAXIMUM = "maximum"


@dataclass
class UserSettings:
    """Analyst profile."""

    name: str = "Jean Dupont"
    email: str = "jean.dupont@cabinet-expertise.fr"
    company: str = "Cabinet Expertise & Conseil"
    role: str = "Chartered accountant"
    sector: str = "multi"
    timezone: str = "Europe/Paris"
    language: str = "fr"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "company": self.company,
            "role": self.role,
            "sector": self.sector,
            "timezone": self.timezone,
            "language": self.language,
        }


@dataclass
class SystemSettings:
    auto_save: bool = True
    notifications: bool = True
    email_reports: bool = False
    data_retention: int = 36  # months
    security_level: SecurityLevel = SecurityLevel.HIGH
    mask_sensitive_data: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "autoSave": self.auto_save,
            "notifications": self.notifications,
            "emailReports": self.email_reports,
            "dataRetention": self.data_retention,
            "securityLevel": self.security_level.value,
            "maskSensitiveData": self.mask_sensitive_data,
        }


@dataclass
class SectorConfig:
    """Sector template: KPIs to track and benchmark ratios."""

    id: str
    name: str
    enabled: bool = False
    kpis: list[str] = field(default_factory=list)
    ratios_benchmarks: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "kpis": list(self.kpis),
            "ratiosBenchmarks": dict(self.ratios_benchmarks),
        }


def default_sectors() -> list[SectorConfig]:
    return [
        SectorConfig(
            id="btp",
            name="Construction & Civil Works",
            enabled=True,
            kpis=["Completion", "Retention guarantees", "Subcontracting"],
            ratios_benchmarks={"ebitdaMargin": 8.5, "currentRatio": 1.2},
        ),
        SectorConfig(
            id="retail",
            name="Retail & Distribution",
            enabled=False,
            kpis=["Average basket", "Stock rotation", "Prime cost"],
            ratios_benchmarks={"ebitdaMargin": 12.0, "currentRatio": 1.5},
        ),
        SectorConfig(
            id="saas",
            name="SaaS & Tech",
            enabled=False,
            kpis=["MRR", "ARR", "Churn rate", "CAC/LTV"],
            ratios_benchmarks={"ebitdaMargin": 25.0, "currentRatio": 2.0},
        ),
    ]


@dataclass
class SettingsBundle:
    """Everything the settings screen saves, exports and imports."""

    user: UserSettings = field(default_factory=UserSettings)
    system: SystemSettings = field(default_factory=SystemSettings)
    sectors: list[SectorConfig] = field(default_factory=default_sectors)
