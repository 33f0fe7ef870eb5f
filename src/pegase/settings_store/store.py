"""Settings persistence, export and import.

Settings live under their own three keys, separate from the workspace
collections, and share the codec's best-effort storage access.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from pegase.codec.persistent import PersistentCodec, ReadStatus
from pegase.errors import SettingsImportError
from pegase.settings_store.sanitize import (
    sanitize_sectors,
    sanitize_system_settings,
    sanitize_user_settings,
)
from pegase.settings_store.schemas import SettingsBundle
from pegase.store.domain_store import utc_timestamp

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "pegase-settings.json"


class SettingsStore:
    """Load, save, reset, export and import the settings bundle."""

    def __init__(self, codec: PersistentCodec):
        self._codec = codec
        self._keys = codec.keys

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def load(self) -> SettingsBundle:
        """Read every section, repairing bad fields with defaults."""
        bundle = SettingsBundle()

        status, data = self._codec.read_json(self._keys.user_settings)
        if status == ReadStatus.OK:
            bundle.user = sanitize_user_settings(data)

        status, data = self._codec.read_json(self._keys.system_settings)
        if status == ReadStatus.OK:
            bundle.system = sanitize_system_settings(data)

        status, data = self._codec.read_json(self._keys.sector_configs)
        if status == ReadStatus.OK:
            bundle.sectors = sanitize_sectors(data)

        return bundle

    def save(self, bundle: SettingsBundle) -> bool:
        results = [
            self._codec.write_json(self._keys.user_settings, bundle.user.to_dict()),
            self._codec.write_json(self._keys.system_settings, bundle.system.to_dict()),
            self._codec.write_json(
                self._keys.sector_configs, [s.to_dict() for s in bundle.sectors],
            ),
        ]
        ok = all(results)
        if ok:
            logger.info("Settings saved")
        else:
            logger.warning("Settings only partially saved")
        return ok

    def reset(self) -> SettingsBundle:
        for key in self._keys.settings_keys():
            self._codec.remove(key)
        logger.info("Settings reset to defaults")
        return SettingsBundle()

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    @staticmethod
    def export_document(bundle: SettingsBundle, now: datetime | None = None) -> dict[str, Any]:
        return {
            "user": bundle.user.to_dict(),
            "system": bundle.system.to_dict(),
            "sectors": [s.to_dict() for s in bundle.sectors],
            "exportDate": utc_timestamp(now),
        }

    def export_to_file(self, bundle: SettingsBundle, path: str | Path) -> Path:
        """Write the export document, pretty-printed, and return its path."""
        p = Path(path)
        if p.is_dir():
            p = p / EXPORT_FILENAME
        p.parent.mkdir(parents=True, exist_ok=True)

        with open(p, "w", encoding="utf-8") as f:
            json.dump(self.export_document(bundle), f, indent=2, ensure_ascii=False)

        logger.info("Settings exported to %s", p)
        return p

    @staticmethod
    def import_document(text: str, base: SettingsBundle | None = None) -> SettingsBundle:
        """Parse an exported settings document.

        Sections missing from the document keep their value from ``base``
        (defaults if not given). Present sections are sanitized field by
        field.

        Raises:
            SettingsImportError: The text is not a JSON object.
        """
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SettingsImportError(f"Settings file is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise SettingsImportError("Settings file must contain a JSON object")

        bundle = replace(base) if base is not None else SettingsBundle()
        if data.get("user") is not None:
            bundle.user = sanitize_user_settings(data["user"])
        if data.get("system") is not None:
            bundle.system = sanitize_system_settings(data["system"])
        if data.get("sectors") is not None:
            bundle.sectors = sanitize_sectors(data["sectors"])
        return bundle

    def import_from_file(self, path: str | Path, base: SettingsBundle | None = None) -> SettingsBundle:
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SettingsImportError(f"Cannot read settings file {p}: {exc}") from exc

        bundle = self.import_document(text, base=base)
        logger.info("Settings imported from %s", p)
        return bundle
