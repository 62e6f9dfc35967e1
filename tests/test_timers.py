from __future__ import annotations

import threading

from timers import ThreadingTimerScheduler


def test_threading_timer_fires_once() -> None:
    fired = threading.Event()
    scheduler = ThreadingTimerScheduler()

    scheduler.call_later(10, fired.set)

    assert fired.wait(timeout=2.0) is True


def test_cancelled_threading_timer_does_not_fire() -> None:
    fired = threading.Event()
    scheduler = ThreadingTimerScheduler()

    handle = scheduler.call_later(200, fired.set)
    handle.cancel()

    assert fired.wait(timeout=0.4) is False
