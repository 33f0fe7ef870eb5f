"""Tests for auto-save schedulers."""

from __future__ import annotations

import threading

import pytest

from pegase.store.scheduler import ManualScheduler, ThreadingScheduler


class TestManualScheduler:
    def test_fires_when_due(self):
        scheduler = ManualScheduler()
        calls: list[float] = []
        scheduler.call_every(10, lambda: calls.append(scheduler.now))

        assert scheduler.advance(9) == 0
        assert scheduler.advance(1) == 1
        assert calls == [10]

    def test_catches_up_in_order(self):
        scheduler = ManualScheduler()
        calls: list[str] = []
        scheduler.call_every(10, lambda: calls.append("a"))
        scheduler.call_every(15, lambda: calls.append("b"))

        scheduler.advance(30)
        assert calls == ["a", "b", "a", "a", "b"]

    def test_cancel(self):
        scheduler = ManualScheduler()
        task = scheduler.call_every(5, lambda: None)
        task.cancel()
        assert task.cancelled
        assert scheduler.advance(20) == 0
        assert scheduler.active_tasks == 0

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_every(0, lambda: None)


class TestThreadingScheduler:
    def test_runs_and_cancels(self):
        fired = threading.Event()
        task = ThreadingScheduler().call_every(0.01, fired.set)
        try:
            assert fired.wait(timeout=2)
        finally:
            task.cancel()
        assert task.cancelled

    def test_callback_errors_do_not_stop_the_task(self):
        calls: list[int] = []
        done = threading.Event()

        def flaky() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first call fails")
            done.set()

        task = ThreadingScheduler().call_every(0.01, flaky)
        try:
            assert done.wait(timeout=2)
        finally:
            task.cancel()
        assert len(calls) >= 2

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ThreadingScheduler().call_every(-1, lambda: None)
