"""Named-channel event bus with owned, releasable subscriptions.

Handlers are delivered through an optional ``dispatch`` callable so events
emitted from worker threads can be marshalled onto the owning (GUI) thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from interfaces import Dispatch

logger = logging.getLogger(__name__)

PROGRESS_CHANNEL = "file-transcription-progress"
DRAG_DROP_CHANNEL = "drag-drop"

Handler = Callable[[Any], None]


def _direct(fn: Callable[[], None]) -> None:
    fn()


class ListenerHandle:
    """Owned handle for one subscription.

    ``release()`` may be called before ``bind()``: the unlisten callable is
    then invoked as soon as it is bound. Release runs at most once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._unlisten: Optional[Callable[[], None]] = None
        self._released = False
        self._done = False

    @property
    def released(self) -> bool:
        return self._released

    def bind(self, unlisten: Callable[[], None]) -> None:
        with self._lock:
            if self._unlisten is not None:
                raise RuntimeError("subscription already bound")
            self._unlisten = unlisten
            run_now = self._released and not self._done
            if run_now:
                self._done = True
        if run_now:
            unlisten()

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
            unlisten = self._unlisten
            if unlisten is None:
                return
            self._done = True
        unlisten()


class EventBus:
    def __init__(self, dispatch: Optional[Dispatch] = None) -> None:
        self._dispatch = dispatch or _direct
        self._lock = threading.Lock()
        self._handlers: Dict[str, List[Handler]] = {}

    def listen(self, channel: str, handler: Handler) -> ListenerHandle:
        handle = ListenerHandle()
        with self._lock:
            self._handlers.setdefault(channel, []).append(handler)
        handle.bind(lambda: self._remove(channel, handler))
        return handle

    def emit(self, channel: str, payload: Any) -> None:
        self._dispatch(lambda: self._deliver(channel, payload))

    def listener_count(self, channel: str) -> int:
        with self._lock:
            return len(self._handlers.get(channel, []))

    def _deliver(self, channel: str, payload: Any) -> None:
        with self._lock:
            handlers = list(self._handlers.get(channel, []))
        if not handlers:
            logger.debug("No listeners on %s", channel)
        for handler in handlers:
            handler(payload)

    def _remove(self, channel: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(channel, [])
            if handler in handlers:
                handlers.remove(handler)
