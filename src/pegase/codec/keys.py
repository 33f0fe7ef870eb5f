"""Storage keys for persisted workspace data."""

from __future__ import annotations

from dataclasses import dataclass

FINANCIAL_DATA = "pegase_financial_data"
QOE_ADJUSTMENTS = "pegase_qoe_adjustments"
IMPORTED_FILES = "pegase_imported_files"
LAST_SAVE = "pegase_last_save"

USER_SETTINGS = "pegase_user_settings"
SYSTEM_SETTINGS = "pegase_system_settings"
SECTOR_CONFIGS = "pegase_sector_configs"


@dataclass(frozen=True)
class StorageKeys:
    """Resolved key names, optionally namespaced by a prefix.

    A prefix lets several workspaces share one storage file.
    """

    prefix: str = ""

    def _k(self, name: str) -> str:
        return f"{self.prefix}{name}"

    @property
    def financial_data(self) -> str:
        return self._k(FINANCIAL_DATA)

    @property
    def qoe_adjustments(self) -> str:
        return self._k(QOE_ADJUSTMENTS)

    @property
    def imported_files(self) -> str:
        return self._k(IMPORTED_FILES)

    @property
    def last_save(self) -> str:
        return self._k(LAST_SAVE)

    @property
    def user_settings(self) -> str:
        return self._k(USER_SETTINGS)

    @property
    def system_settings(self) -> str:
        return self._k(SYSTEM_SETTINGS)

    @property
    def sector_configs(self) -> str:
        return self._k(SECTOR_CONFIGS)

    def workspace_keys(self) -> list[str]:
        return [
            self.financial_data,
            self.qoe_adjustments,
            self.imported_files,
            self.last_save,
        ]

    def settings_keys(self) -> list[str]:
        return [self.user_settings, self.system_settings, self.sector_configs]
