"""User, system and sector settings — persistence, export, import."""

from pegase.settings_store.schemas import (
    SectorConfig,
    SecurityLevel,
    SettingsBundle,
    SystemSettings,
    UserSettings,
    default_sectors,
)
from pegase.settings_store.store import SettingsStore

__all__ = [
    "SectorConfig",
    "SecurityLevel",
    "SettingsBundle",
    "SettingsStore",
    "SystemSettings",
    "UserSettings",
    "default_sectors",
]
