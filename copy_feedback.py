"""Restartable "copied" confirmation flag."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from interfaces import Scheduler, TimerHandle

COPY_FEEDBACK_MS = 2000

CopiedCallback = Callable[[bool], None]


class CopyFeedback:
    """Owns the ``copied`` flag and at most one pending reset timer."""

    def __init__(
        self,
        scheduler: Scheduler,
        delay_ms: int = COPY_FEEDBACK_MS,
        on_change: Optional[CopiedCallback] = None,
    ) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._on_change = on_change
        self._lock = threading.RLock()
        self._copied = False
        self._pending: Optional[TimerHandle] = None
        self._token: Optional[object] = None
        self._closed = False

    @property
    def copied(self) -> bool:
        return self._copied

    @property
    def has_pending_timer(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._set(True)
            self._cancel_pending()
            token = object()
            self._token = token
            self._pending = self._scheduler.call_later(
                self._delay_ms, lambda: self._expire(token)
            )

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_pending()

    def _expire(self, token: object) -> None:
        with self._lock:
            # A cancelled timer may still fire if it was already queued.
            if self._closed or token is not self._token:
                return
            self._pending = None
            self._set(False)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._token = None

    def _set(self, value: bool) -> None:
        if self._copied == value:
            return
        self._copied = value
        if self._on_change:
            self._on_change(value)
