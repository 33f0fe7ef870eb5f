"""Shared fixtures for tests — in-memory storage, manual scheduler, no threads."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from pegase.codec.persistent import PersistentCodec
from pegase.errors import StorageUnavailableError
from pegase.storage.base import KeyValueStorage
from pegase.storage.factory import clear_cache
from pegase.storage.memory_store import MemoryStorage
from pegase.store.domain_store import DomainStore
from pegase.store.scheduler import ManualScheduler

FIXED_NOW = datetime(2025, 2, 1, 12, 0, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Storage and codec
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_storage_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def codec(memory_storage: MemoryStorage) -> PersistentCodec:
    return PersistentCodec(memory_storage)


@pytest.fixture
def failing_storage() -> MagicMock:
    """A backend that raises on every call, like disabled browser storage."""
    storage = MagicMock(spec=KeyValueStorage)
    storage.storage_name.return_value = "FailingStorage"
    error = StorageUnavailableError("storage disabled")
    storage.get_item.side_effect = error
    storage.set_item.side_effect = error
    storage.remove_item.side_effect = error
    storage.keys.side_effect = error
    return storage


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def store(codec: PersistentCodec, scheduler: ManualScheduler):
    s = DomainStore(codec, scheduler=scheduler, clock=lambda: FIXED_NOW)
    yield s
    s.dispose()


# ---------------------------------------------------------------------------
# Raw payloads (wire format)
# ---------------------------------------------------------------------------


@pytest.fixture
def raw_adjustment() -> dict:
    return {
        "id": "a1",
        "item": "Owner car lease",
        "amount": -24000,
        "type": "remove",
        "category": "Owner-benefit",
        "confidence": 80,
        "status": "pending",
        "description": "Private vehicle paid by the company",
        "dateAdded": "2025-01-20T10:00:00Z",
    }


@pytest.fixture
def raw_imported_file() -> dict:
    return {
        "id": "f1",
        "name": "FEC_2023.txt",
        "size": "1.2 MB",
        "type": "FEC",
        "status": "completed",
        "progress": 100,
        "dateImported": "2025-01-10T08:00:00Z",
        "controls": {"totalLines": 5000, "validLines": 4990, "warnings": 7, "errors": 3},
    }


@pytest.fixture
def raw_snapshot() -> dict:
    return {
        "revenue": {"current": 5_000_000, "previous": 4_200_000},
        "ebitda": {"current": 800_000, "previous": 650_000},
        "ebitdaNormalized": 760_000,
        "netDebt": {"current": -150_000, "previous": 300_000},
        "workingCapital": {"current": -20_000, "previous": 45_000},
    }
