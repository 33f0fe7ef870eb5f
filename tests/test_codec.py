"""Tests for the persistent codec — write path, sanitized read path, failures."""

from __future__ import annotations

import json
import logging

import pytest

from pegase.codec.keys import StorageKeys
from pegase.codec.persistent import PersistentCodec, ReadStatus
from pegase.domain.defaults import (
    default_adjustments,
    default_financial_snapshot,
    default_imported_files,
    default_state,
)
from pegase.domain.schemas import FinancialSnapshot, MetricPair
from pegase.storage.memory_store import MemoryStorage

KEYS = StorageKeys()


class TestStorageKeys:
    def test_default_names(self):
        assert KEYS.financial_data == "pegase_financial_data"
        assert KEYS.qoe_adjustments == "pegase_qoe_adjustments"
        assert KEYS.imported_files == "pegase_imported_files"
        assert KEYS.last_save == "pegase_last_save"

    def test_prefix(self):
        keys = StorageKeys(prefix="deal42:")
        assert keys.qoe_adjustments == "deal42:pegase_qoe_adjustments"
        assert all(k.startswith("deal42:") for k in keys.workspace_keys())
        assert all(k.startswith("deal42:") for k in keys.settings_keys())


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


class TestWritePath:
    def test_write_state_writes_every_key(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        assert codec.write_state(default_state(), "2025-02-01T12:00:00.000Z") is True
        assert set(memory_storage.keys()) == set(KEYS.workspace_keys())
        assert memory_storage.get_item(KEYS.last_save) == "2025-02-01T12:00:00.000Z"

    def test_wire_format_is_camel_case(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        codec.write_adjustments(default_adjustments())
        codec.write_imported_files(default_imported_files())

        adjustments = json.loads(memory_storage.get_item(KEYS.qoe_adjustments))
        assert adjustments[0]["dateAdded"] == "2025-01-15T10:30:00Z"
        assert adjustments[0]["category"] == "Owner-benefit"

        files = json.loads(memory_storage.get_item(KEYS.imported_files))
        assert files[0]["controls"]["totalLines"] == 8547
        assert files[0]["dateImported"] == "2025-01-15T14:30:00Z"

    def test_write_failure_reported(self, failing_storage):
        codec = PersistentCodec(failing_storage)
        assert codec.write_state(default_state(), "2025-02-01T12:00:00Z") is False


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


class TestReadPath:
    def test_snapshot_round_trip(self, codec: PersistentCodec):
        snapshot = FinancialSnapshot(
            revenue=MetricPair(1.5, -2.25),
            ebitda=MetricPair(-300_000, 0),
            ebitda_normalized=-12.75,
            net_debt=MetricPair(-950_000, 1_080_000),
            working_capital=MetricPair(0.1, 0.2),
        )
        codec.write_financial_snapshot(snapshot)
        result = codec.read_financial_snapshot()
        assert result.ok
        assert result.value == snapshot

    def test_collections_round_trip(self, codec: PersistentCodec):
        codec.write_adjustments(default_adjustments())
        codec.write_imported_files(default_imported_files())
        assert codec.read_adjustments().value == default_adjustments()
        assert codec.read_imported_files().value == default_imported_files()

    def test_absent_keys(self, codec: PersistentCodec):
        assert codec.read_financial_snapshot().status == ReadStatus.ABSENT
        assert codec.read_adjustments().status == ReadStatus.ABSENT
        assert codec.read_imported_files().status == ReadStatus.ABSENT
        assert codec.read_last_saved() is None

    @pytest.mark.parametrize("key", KEYS.workspace_keys()[:3])
    def test_not_json_is_invalid_and_logged(self, memory_storage: MemoryStorage, key: str, caplog):
        memory_storage.set_item(key, "not json")
        codec = PersistentCodec(memory_storage)
        with caplog.at_level(logging.WARNING):
            results = [
                codec.read_financial_snapshot(),
                codec.read_adjustments(),
                codec.read_imported_files(),
            ]
        statuses = {r.status for r in results}
        assert ReadStatus.INVALID in statuses
        assert "malformed JSON" in caplog.text

    def test_wrong_shape_is_invalid(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        memory_storage.set_item(KEYS.qoe_adjustments, json.dumps({"id": "1"}))
        memory_storage.set_item(KEYS.financial_data, json.dumps([1, 2, 3]))
        assert codec.read_adjustments().status == ReadStatus.INVALID
        assert codec.read_financial_snapshot().status == ReadStatus.INVALID

    def test_all_records_invalid_is_invalid(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        memory_storage.set_item(KEYS.imported_files, json.dumps([{"id": "x"}, 3]))
        result = codec.read_imported_files()
        assert result.status == ReadStatus.INVALID
        assert result.dropped == 2

    def test_empty_list_is_ok(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        memory_storage.set_item(KEYS.qoe_adjustments, "[]")
        result = codec.read_adjustments()
        assert result.ok
        assert result.value == []

    def test_partial_collection_drops_bad_records(
        self, codec: PersistentCodec, memory_storage: MemoryStorage, raw_adjustment: dict,
    ):
        bad = {**raw_adjustment, "id": "bad", "category": "Other"}
        memory_storage.set_item(KEYS.qoe_adjustments, json.dumps([raw_adjustment, bad]))
        result = codec.read_adjustments()
        assert result.ok
        assert [a.id for a in result.value] == ["a1"]
        assert result.dropped == 1

    def test_last_saved_must_be_a_date(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        memory_storage.set_item(KEYS.last_save, "garbage")
        assert codec.read_last_saved() is None
        memory_storage.set_item(KEYS.last_save, "2025-02-01T12:00:00.000Z")
        assert codec.read_last_saved() == "2025-02-01T12:00:00.000Z"

    def test_failing_backend_reads_as_absent(self, failing_storage):
        codec = PersistentCodec(failing_storage)
        assert codec.read_adjustments().status == ReadStatus.ABSENT
        assert codec.read_last_saved() is None


class TestClear:
    def test_clear_removes_workspace_keys_only(self, codec: PersistentCodec, memory_storage: MemoryStorage):
        codec.write_state(default_state(), "2025-02-01T12:00:00Z")
        memory_storage.set_item(KEYS.user_settings, "{}")
        assert codec.clear() is True
        assert memory_storage.keys() == [KEYS.user_settings]

    def test_clear_with_failing_backend(self, failing_storage):
        assert PersistentCodec(failing_storage).clear() is False

    def test_snapshot_default_written(self, codec: PersistentCodec):
        codec.write_financial_snapshot(default_financial_snapshot())
        assert codec.read_financial_snapshot().value == default_financial_snapshot()
