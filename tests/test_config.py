"""Tests for settings loading and workspace wiring."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pegase.config import Settings, load_settings
from pegase.storage.json_file_store import JsonFileStorage
from pegase.storage.memory_store import MemoryStorage
from pegase.store.scheduler import ManualScheduler
from pegase.workspace import build_codec, open_settings_store, open_store


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path: Path):
    for var in ("PEGASE_PROFILE", "PEGASE_STORAGE_PATH", "PEGASE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:
    def test_defaults_without_file(self):
        settings = load_settings()
        assert settings.storage.backend == "json_file"
        assert settings.storage.path == "local_data/pegase_storage.json"
        assert settings.autosave.interval_seconds == 30
        assert settings.logging.level == "WARNING"

    def test_reads_yaml(self, tmp_path: Path):
        (tmp_path / "pegase.yaml").write_text(
            "storage:\n  backend: memory\n  key_prefix: 'deal:'\n"
            "autosave:\n  interval_seconds: 5\n"
        )
        settings = load_settings()
        assert settings.storage.backend == "memory"
        assert settings.storage.key_prefix == "deal:"
        assert settings.autosave.interval_seconds == 5

    def test_found_in_parent_directory(self, tmp_path: Path, monkeypatch):
        (tmp_path / "pegase.yaml").write_text("logging:\n  level: DEBUG\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert load_settings().logging.level == "DEBUG"

    def test_profile_file_preferred(self, tmp_path: Path, monkeypatch):
        (tmp_path / "pegase.yaml").write_text("autosave:\n  interval_seconds: 5\n")
        (tmp_path / "pegase-test.yaml").write_text("autosave:\n  interval_seconds: 0\n")
        monkeypatch.setenv("PEGASE_PROFILE", "test")
        assert load_settings().autosave.interval_seconds == 0

    def test_empty_file(self, tmp_path: Path):
        (tmp_path / "pegase.yaml").write_text("")
        assert load_settings() == Settings()

    def test_env_overrides(self, tmp_path: Path, monkeypatch):
        (tmp_path / "pegase.yaml").write_text("storage:\n  path: from_file.json\n")
        monkeypatch.setenv("PEGASE_STORAGE_PATH", "/tmp/override.json")
        monkeypatch.setenv("PEGASE_LOG_LEVEL", "info")
        settings = load_settings()
        assert settings.storage.path == "/tmp/override.json"
        assert settings.logging.level == "INFO"

    def test_negative_interval_rejected(self, tmp_path: Path):
        (tmp_path / "pegase.yaml").write_text("autosave:\n  interval_seconds: -1\n")
        with pytest.raises(ValidationError):
            load_settings()


class TestWorkspace:
    def test_build_codec_json_file(self, tmp_path: Path):
        settings = Settings()
        settings.storage.path = str(tmp_path / "store.json")
        codec = build_codec(settings)
        assert isinstance(codec.storage, JsonFileStorage)

    def test_build_codec_memory_with_prefix(self):
        settings = Settings()
        settings.storage.backend = "memory"
        settings.storage.key_prefix = "x:"
        codec = build_codec(settings)
        assert isinstance(codec.storage, MemoryStorage)
        assert codec.keys.financial_data == "x:pegase_financial_data"

    def test_open_store_restores_saved_state(self, tmp_path: Path):
        settings = Settings()
        settings.storage.path = str(tmp_path / "store.json")
        settings.autosave.interval_seconds = 0

        with open_store(settings) as store:
            store.remove_adjustment("2")
            assert store.persist() is True

        with open_store(settings) as fresh:
            assert [a.id for a in fresh.adjustments] == ["1", "3"]
            assert not fresh.autosave_active

    def test_open_store_starts_autosave(self, tmp_path: Path):
        settings = Settings()
        settings.storage.path = str(tmp_path / "store.json")
        scheduler = ManualScheduler()

        store = open_store(settings, scheduler=scheduler)
        try:
            assert store.autosave_active
            scheduler.advance(30)
            assert store.last_saved_at is not None
        finally:
            store.dispose()

    def test_open_settings_store(self, tmp_path: Path):
        settings = Settings()
        settings.storage.path = str(tmp_path / "store.json")
        assert open_settings_store(settings).load().user.name == "Jean Dupont"
