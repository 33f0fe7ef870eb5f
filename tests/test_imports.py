"""Tests for the import recorder."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from pegase.domain.schemas import FileStatus, FileType
from pegase.imports.recorder import (
    detect_file_type,
    format_file_size,
    generate_controls,
    record_completed_import,
)


class TestDetectFileType:
    @pytest.mark.parametrize("name,expected", [
        ("FEC_2024_SOCIETE_ABC.txt", FileType.FEC),
        ("balance_dec2024.xlsx", FileType.BALANCE),
        ("Balance_Generale.csv", FileType.BALANCE),
        ("GL_export.csv", FileType.GENERAL_LEDGER),
        ("Grand_Livre_2024.xlsx", FileType.GENERAL_LEDGER),
        ("clients_2024.csv", FileType.AUXILIARY),
    ])
    def test_rules(self, name, expected):
        assert detect_file_type(name) == expected

    def test_fec_wins_over_later_rules(self):
        assert detect_file_type("fec_balance.txt") == FileType.FEC


class TestFormatFileSize:
    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"),
        (-3, "0 B"),
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (460_800, "450 KB"),
        (2_621_440, "2.5 MB"),
        (3 * 1024 ** 3, "3 GB"),
    ])
    def test_format(self, size, expected):
        assert format_file_size(size) == expected

    def test_caps_at_gigabytes(self):
        assert format_file_size(2048 * 1024 ** 3) == "2048 GB"


class TestGenerateControls:
    def test_ranges(self):
        rng = random.Random(7)
        for _ in range(50):
            controls = generate_controls(rng)
            assert 5000 <= controls.total_lines < 15000
            assert 4500 <= controls.valid_lines < 14000
            assert 0 <= controls.warnings < 50
            assert 0 <= controls.errors < 10

    def test_seeded_is_reproducible(self):
        assert generate_controls(random.Random(1)) == generate_controls(random.Random(1))


class TestRecordCompletedImport:
    def test_records_existing_file(self, store, tmp_path: Path):
        path = tmp_path / "FEC_2025.txt"
        path.write_bytes(b"x" * 2048)

        imported = record_completed_import(store, path, rng=random.Random(3))

        assert imported.name == "FEC_2025.txt"
        assert imported.size == "2 KB"
        assert imported.type == FileType.FEC
        assert imported.status == FileStatus.COMPLETED
        assert imported.progress == 100
        assert imported.controls is not None
        assert imported.date_imported == "2025-02-01T12:00:00.000Z"
        assert store.imported_files[-1] == imported

    def test_missing_file_has_zero_size(self, store):
        imported = record_completed_import(store, "does/not/exist/ledger_livre.csv")
        assert imported.size == "0 B"
        assert imported.type == FileType.GENERAL_LEDGER

    def test_explicit_size(self, store):
        imported = record_completed_import(store, "clients.csv", size_bytes=1536)
        assert imported.size == "1.5 KB"
        assert imported.type == FileType.AUXILIARY

    def test_ids_are_unique(self, store):
        first = record_completed_import(store, "a.csv", size_bytes=1)
        second = record_completed_import(store, "b.csv", size_bytes=1)
        ids = [f.id for f in store.imported_files]
        assert first.id != second.id
        assert len(ids) == len(set(ids))
