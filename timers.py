"""Single-shot timer schedulers."""

from __future__ import annotations

import threading
from typing import Callable

try:
    from PySide6.QtCore import QTimer
except Exception:  # pragma: no cover
    QTimer = None  # type: ignore


class QtTimerHandle:
    def __init__(self, timer: "QTimer") -> None:
        self._timer = timer

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtTimerScheduler:
    """Schedules callbacks on the Qt event loop; call from the GUI thread."""

    def __init__(self) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 is not installed")

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.start(delay_ms)
        return QtTimerHandle(timer)


class ThreadingTimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingTimerScheduler:
    """Headless scheduler; callbacks run on a timer thread."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ThreadingTimerHandle:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return ThreadingTimerHandle(timer)
