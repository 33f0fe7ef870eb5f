"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class StorageSettings(BaseModel):
    backend: str = "json_file"
    path: str = "local_data/pegase_storage.json"
    key_prefix: str = ""


class AutosaveSettings(BaseModel):
    interval_seconds: float = Field(default=30.0, ge=0)


class LoggingSettings(BaseModel):
    level: str = "WARNING"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    autosave: AutosaveSettings = Field(default_factory=AutosaveSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for pegase.yaml."""
    profile = os.getenv("PEGASE_PROFILE", "")
    names = [f"pegase-{profile}.yaml", "pegase.yaml"] if profile else ["pegase.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings() -> Settings:
    """Load settings from YAML file, falling back to defaults.

    ``PEGASE_STORAGE_PATH`` and ``PEGASE_LOG_LEVEL`` override the file.
    """
    path = _find_settings_file()
    if path is None:
        settings = Settings()
    else:
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        settings = Settings(**raw)

    storage_path = os.getenv("PEGASE_STORAGE_PATH")
    if storage_path:
        settings.storage.path = storage_path
    log_level = os.getenv("PEGASE_LOG_LEVEL")
    if log_level:
        settings.logging.level = log_level.upper()

    return settings
