from __future__ import annotations

from typing import Callable

from event_bus import PROGRESS_CHANNEL, EventBus, ListenerHandle


def test_emit_reaches_listeners_of_channel_only() -> None:
    bus = EventBus()
    progress: list[object] = []
    other: list[object] = []
    bus.listen(PROGRESS_CHANNEL, progress.append)
    bus.listen("other", other.append)

    bus.emit(PROGRESS_CHANNEL, "decoding")

    assert progress == ["decoding"]
    assert other == []


def test_release_stops_delivery_and_is_idempotent() -> None:
    bus = EventBus()
    received: list[object] = []
    handle = bus.listen(PROGRESS_CHANNEL, received.append)

    handle.release()
    handle.release()
    bus.emit(PROGRESS_CHANNEL, "late")

    assert received == []
    assert bus.listener_count(PROGRESS_CHANNEL) == 0


def test_release_before_bind_unlistens_on_bind() -> None:
    calls: list[str] = []
    handle = ListenerHandle()

    handle.release()
    assert calls == []

    handle.bind(lambda: calls.append("unlisten"))
    handle.release()

    assert calls == ["unlisten"]
    assert handle.released is True


def test_dispatch_is_used_for_delivery() -> None:
    queued: list[Callable[[], None]] = []
    bus = EventBus(dispatch=queued.append)
    received: list[object] = []
    bus.listen(PROGRESS_CHANNEL, received.append)

    bus.emit(PROGRESS_CHANNEL, "transcribing")
    assert received == []

    queued.pop()()
    assert received == ["transcribing"]


def test_listener_released_before_dispatch_runs_is_skipped() -> None:
    queued: list[Callable[[], None]] = []
    bus = EventBus(dispatch=queued.append)
    received: list[object] = []
    handle = bus.listen(PROGRESS_CHANNEL, received.append)

    bus.emit(PROGRESS_CHANNEL, "saving")
    handle.release()
    queued.pop()()

    assert received == []
