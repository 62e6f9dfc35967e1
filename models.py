"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union


class StateKind(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    RESULT = "result"
    ERROR = "error"


class DragKind(str, Enum):
    OVER = "over"
    DROP = "drop"
    LEAVE = "leave"


@dataclass(frozen=True)
class FileTranscriptionResult:
    text: str
    file_name: str
    duration_ms: int


@dataclass(frozen=True)
class TranscriptionProgress:
    stage: str
    message: Optional[str] = None


@dataclass(frozen=True)
class DragEvent:
    kind: str
    paths: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IdleState:
    kind: ClassVar[StateKind] = StateKind.IDLE


@dataclass(frozen=True)
class ProcessingState:
    stage: str
    kind: ClassVar[StateKind] = StateKind.PROCESSING


@dataclass(frozen=True)
class ResultState:
    result: FileTranscriptionResult
    kind: ClassVar[StateKind] = StateKind.RESULT


@dataclass(frozen=True)
class ErrorState:
    message: str
    kind: ClassVar[StateKind] = StateKind.ERROR


TranscribeState = Union[IdleState, ProcessingState, ResultState, ErrorState]
