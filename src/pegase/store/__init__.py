"""Domain store and auto-save schedulers."""

from pegase.store.domain_store import DomainStore, RestoreReport
from pegase.store.scheduler import ManualScheduler, Scheduler, ThreadingScheduler

__all__ = [
    "DomainStore",
    "ManualScheduler",
    "RestoreReport",
    "Scheduler",
    "ThreadingScheduler",
]
