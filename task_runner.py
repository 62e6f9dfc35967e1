"""Background execution of blocking engine calls."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, TypeVar

from interfaces import Dispatch

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ThreadTaskRunner:
    """Run each call on a daemon thread and dispatch its outcome.

    Callbacks go through ``dispatch`` so they execute on the owning thread
    when one is supplied; otherwise they run on the worker thread.
    """

    def __init__(self, dispatch: Optional[Dispatch] = None, name: str = "transcribe") -> None:
        self._dispatch = dispatch
        self._name = name
        self._threads: list[threading.Thread] = []

    def run(
        self,
        fn: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        thread = threading.Thread(
            target=self._worker,
            args=(fn, on_success, on_failure),
            name=self._name,
            daemon=True,
        )
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()

    def join(self, timeout: float | None = None) -> None:
        for thread in list(self._threads):
            thread.join(timeout=timeout)

    def _worker(
        self,
        fn: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        try:
            value = fn()
        except Exception as exc:
            logger.debug("Task %s failed: %s", self._name, exc)
            self._post(lambda: on_failure(exc))
            return
        self._post(lambda: on_success(value))

    def _post(self, fn: Callable[[], None]) -> None:
        if self._dispatch is None:
            fn()
        else:
            self._dispatch(fn)
