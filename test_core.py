# =============================================================================
# test_core.py — tick scheduler, lifecycle registry and logger
# Run: pytest test_core.py
# =============================================================================

import threading
import time

import pytest

from core.logger import get_logger
from core.scheduler import TickScheduler
from core.thread_manager import ThreadManager


# ── TickScheduler ─────────────────────────────────────────────────────────────

def test_scheduler_stops_when_tick_returns_false():
    calls = []

    def tick():
        calls.append(time.monotonic())
        return len(calls) < 5

    sched = TickScheduler(0.001, tick)
    sched.run()
    assert len(calls) == 5
    assert sched.tick_count == 5


def test_scheduler_ticks_never_overlap():
    active = threading.Lock()
    overlaps = []

    def tick():
        if not active.acquire(blocking=False):
            overlaps.append(True)
            return False
        try:
            time.sleep(0.003)
        finally:
            active.release()
        return sched.tick_count < 9

    sched = TickScheduler(0.001, tick)
    sched.run()
    assert overlaps == []
    # Every tick overran the 1ms interval
    assert sched.overruns >= 9


def test_scheduler_keeps_interval_between_fast_ticks():
    stamps = []

    def tick():
        stamps.append(time.monotonic())
        return len(stamps) < 4

    TickScheduler(0.02, tick).run()
    gaps = [b - a for a, b in zip(stamps, stamps[1:])]
    assert all(g >= 0.015 for g in gaps)


def test_scheduler_stop_from_another_thread():
    sched = TickScheduler(0.005, lambda: None)
    timer = threading.Timer(0.05, sched.stop)
    timer.start()
    sched.run()
    timer.join()
    assert sched.tick_count >= 1


def test_scheduler_rejects_bad_interval():
    with pytest.raises(ValueError):
        TickScheduler(0, lambda: None)


# ── ThreadManager ─────────────────────────────────────────────────────────────

def test_lifecycle_stops_in_reverse_order():
    order = []
    tm = ThreadManager()
    tm.register("A", lambda: order.append("start A"), lambda: order.append("stop A"))
    tm.register("B", lambda: order.append("start B"), lambda: order.append("stop B"))
    tm.register("C", None, lambda: order.append("stop C"))
    tm.start_all()
    tm.stop_all()
    assert order == ["start A", "start B", "stop C", "stop B", "stop A"]


def test_lifecycle_start_failure_only_stops_started():
    stopped = []

    def boom():
        raise RuntimeError("no camera")

    tm = ThreadManager()
    tm.register("A", lambda: None, lambda: stopped.append("A"))
    tm.register("B", boom, lambda: stopped.append("B"))
    with pytest.raises(RuntimeError):
        tm.start_all()
    assert tm.started == ["A"]
    tm.stop_all()
    assert stopped == ["A"]


def test_lifecycle_shutdown_errors_are_swallowed():
    stopped = []

    def bad_stop():
        raise RuntimeError("stuck")

    tm = ThreadManager()
    tm.register("A", lambda: None, lambda: stopped.append("A"))
    tm.register("B", lambda: None, bad_stop)
    tm.start_all()
    tm.stop_all()
    assert stopped == ["A"]


# ── Logger ────────────────────────────────────────────────────────────────────

def test_get_logger_does_not_duplicate_handlers():
    a = get_logger("test.logger.dup")
    n = len(a.handlers)
    b = get_logger("test.logger.dup")
    assert a is b
    assert len(b.handlers) == n == 2
