"""Protocol interfaces used by TranscriptionCoordinator."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, TypeVar

from models import FileTranscriptionResult

T = TypeVar("T")

Dispatch = Callable[[Callable[[], None]], None]


class TranscriptionEngine(Protocol):
    def transcribe(self, file_path: str) -> FileTranscriptionResult: ...


class TaskRunner(Protocol):
    def run(
        self,
        fn: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[BaseException], None],
    ) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class Clipboard(Protocol):
    def write_text(self, text: str) -> bool: ...


class FilePicker(Protocol):
    def pick_file(self) -> Optional[str]: ...


class Subscription(Protocol):
    def release(self) -> None: ...


class EventSource(Protocol):
    def listen(self, channel: str, handler: Callable[[Any], None]) -> Subscription: ...

