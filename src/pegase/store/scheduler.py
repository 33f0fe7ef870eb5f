"""Periodic task schedulers used for auto-save.

``ThreadingScheduler`` runs callbacks on a daemon thread. ``ManualScheduler``
runs them only when the owner advances its clock, which makes it suitable
for tests and for hosts that already drive their own event loop.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ScheduledTask(ABC):
    """Handle for a repeating callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the task. Cancelling twice is harmless."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Whether ``cancel`` has been called."""


class Scheduler(ABC):
    """Interface for running a callback at a fixed interval."""

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], object]) -> ScheduledTask:
        """Run ``callback`` every ``interval`` seconds until cancelled."""


# ---------------------------------------------------------------------------
# Thread-backed scheduler
# ---------------------------------------------------------------------------


class _ThreadTask(ScheduledTask):
    def __init__(self, interval: float, callback: Callable[[], object], name: str):
        self._interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Scheduled task %s failed", self._thread.name)

    def cancel(self) -> None:
        self._stop.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout=self._interval)

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()


class ThreadingScheduler(Scheduler):
    """Runs each task on its own daemon thread."""

    def __init__(self, name: str = "pegase-autosave"):
        self._name = name

    def call_every(self, interval: float, callback: Callable[[], object]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        task = _ThreadTask(interval, callback, self._name)
        task.start()
        return task


# ---------------------------------------------------------------------------
# Manually driven scheduler
# ---------------------------------------------------------------------------


class _ManualTask(ScheduledTask):
    def __init__(self, interval: float, callback: Callable[[], object], due: float):
        self.interval = interval
        self.callback = callback
        self.due = due
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._tasks: list[_ManualTask] = []

    def call_every(self, interval: float, callback: Callable[[], object]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        task = _ManualTask(interval, callback, due=self.now + interval)
        self._tasks.append(task)
        return task

    @property
    def active_tasks(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every task that falls due.

        Returns:
            Number of callbacks run.
        """
        target = self.now + seconds
        fired = 0
        while True:
            pending = [t for t in self._tasks if not t.cancelled and t.due <= target]
            if not pending:
                break
            task = min(pending, key=lambda t: t.due)
            self.now = task.due
            task.due += task.interval
            task.callback()
            fired += 1

        self.now = target
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return fired
