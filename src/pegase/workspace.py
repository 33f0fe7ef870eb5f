"""Wire settings, storage, codec and stores together for a session."""

from __future__ import annotations

import logging

from pegase.codec.keys import StorageKeys
from pegase.codec.persistent import PersistentCodec
from pegase.config import Settings, load_settings
from pegase.settings_store.store import SettingsStore
from pegase.storage.factory import storage_from_settings
from pegase.store.domain_store import DomainStore
from pegase.store.scheduler import Scheduler

logger = logging.getLogger(__name__)


def build_codec(settings: Settings | None = None) -> PersistentCodec:
    settings = settings or load_settings()
    storage = storage_from_settings(settings.storage)
    return PersistentCodec(storage, StorageKeys(prefix=settings.storage.key_prefix))


def open_store(
    settings: Settings | None = None,
    scheduler: Scheduler | None = None,
    restore: bool = True,
) -> DomainStore:
    """Create a domain store for ``settings`` and restore persisted state.

    The caller owns the store and must ``dispose()`` it (or use it as a
    context manager) to stop auto-save.
    """
    settings = settings or load_settings()
    store = DomainStore(
        build_codec(settings),
        scheduler=scheduler,
        autosave_interval=settings.autosave.interval_seconds,
    )
    if restore:
        store.restore()
    return store


def open_settings_store(settings: Settings | None = None) -> SettingsStore:
    return SettingsStore(build_codec(settings))
