"""State-machine based orchestration of file transcription."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable, Optional

from copy_feedback import COPY_FEEDBACK_MS, CopyFeedback
from errors import ERROR_MESSAGES, UNSUPPORTED_FORMAT
from event_bus import DRAG_DROP_CHANNEL, PROGRESS_CHANNEL
from formats import get_extension, is_supported
from interfaces import (
    Clipboard,
    EventSource,
    FilePicker,
    Scheduler,
    Subscription,
    TaskRunner,
    TranscriptionEngine,
)
from models import (
    DragEvent,
    DragKind,
    ErrorState,
    FileTranscriptionResult,
    IdleState,
    ProcessingState,
    ResultState,
    StateKind,
    TranscribeState,
    TranscriptionProgress,
)

logger = logging.getLogger(__name__)

StateCallback = Callable[[TranscribeState, TranscribeState], None]
FlagCallback = Callable[[bool], None]

INITIAL_STAGE = "decoding"


class TranscriptionCoordinator:
    def __init__(
        self,
        engine: TranscriptionEngine,
        runner: TaskRunner,
        events: EventSource,
        clipboard: Clipboard,
        scheduler: Scheduler,
        file_picker: Optional[FilePicker] = None,
        copy_feedback_ms: int = COPY_FEEDBACK_MS,
        on_state_change: Optional[StateCallback] = None,
        on_drag_over_change: Optional[FlagCallback] = None,
        on_copied_change: Optional[FlagCallback] = None,
    ) -> None:
        self._engine = engine
        self._runner = runner
        self._events = events
        self._clipboard = clipboard
        self._file_picker = file_picker
        self._on_state_change = on_state_change
        self._on_drag_over_change = on_drag_over_change

        self._lock = threading.RLock()
        self._state: TranscribeState = IdleState()
        self._is_drag_over = False
        self._generation = 0
        self._subscriptions: list[Subscription] = []
        self._started = False
        self._closed = False
        self._copy_feedback = CopyFeedback(
            scheduler, delay_ms=copy_feedback_ms, on_change=on_copied_change
        )

    @property
    def state(self) -> TranscribeState:
        return self._state

    @property
    def is_drag_over(self) -> bool:
        return self._is_drag_over

    @property
    def copied(self) -> bool:
        return self._copy_feedback.copied

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        with self._lock:
            if self._started or self._closed:
                return
            self._started = True
            self._subscriptions = [
                self._events.listen(PROGRESS_CHANNEL, self._handle_progress),
                self._events.listen(DRAG_DROP_CHANNEL, self._handle_drag_event),
            ]

    def teardown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            # Outstanding engine calls resolve against a dead generation.
            self._generation += 1
            subscriptions, self._subscriptions = self._subscriptions, []
            self._copy_feedback.close()
        for subscription in subscriptions:
            subscription.release()
        logger.debug("Coordinator torn down")

    # ------------------------------------------------------------------
    # Request initiator
    # ------------------------------------------------------------------

    def submit(self, file_path: str) -> None:
        with self._lock:
            if self._closed:
                return
            self._generation += 1
            generation = self._generation
            if not is_supported(file_path):
                logger.warning(
                    "Rejected %s: unsupported extension %r", file_path, get_extension(file_path)
                )
                self._transition(ErrorState(ERROR_MESSAGES[UNSUPPORTED_FORMAT]))
                return

            logger.info("Transcribing %s (request %d)", file_path, generation)
            self._transition(ProcessingState(INITIAL_STAGE))

        self._runner.run(
            lambda: self._engine.transcribe(file_path),
            lambda result: self._resolve_success(generation, result),
            lambda exc: self._resolve_failure(generation, exc),
        )

    def choose_file(self) -> None:
        if self._file_picker is None:
            return
        if self._state.kind == StateKind.PROCESSING:
            return
        selected = self._file_picker.pick_file()
        if selected:
            self.submit(selected)

    def _resolve_success(self, generation: int, result: FileTranscriptionResult) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            if not result.text or not result.text.strip():
                logger.info("No speech detected in %s", result.file_name)
                result = dataclasses.replace(result, text="")
            else:
                logger.info("Transcribed %s in %d ms", result.file_name, result.duration_ms)
            self._transition(ResultState(result))

    def _resolve_failure(self, generation: int, exc: BaseException) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            message = str(exc) or exc.__class__.__name__
            logger.warning("Transcription failed: %s", message)
            self._transition(ErrorState(message))

    def _is_current(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug(
                "Discarding resolution of request %d (current %d)", generation, self._generation
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def _handle_progress(self, progress: TranscriptionProgress) -> None:
        with self._lock:
            if self._closed:
                return
            if self._state.kind != StateKind.PROCESSING:
                logger.debug("Ignoring progress %r in state %s", progress.stage, self._state.kind.value)
                return
            self._transition(ProcessingState(progress.stage))

    def _handle_drag_event(self, event: DragEvent) -> None:
        with self._lock:
            if self._closed:
                return
            kind = event.kind
            if kind == DragKind.OVER.value:
                self._set_drag_over(True)
                return
            if kind == DragKind.LEAVE.value:
                self._set_drag_over(False)
                return
            if kind != DragKind.DROP.value:
                return
            self._set_drag_over(False)
            if not event.paths:
                return
            if len(event.paths) > 1:
                logger.info("Dropped %d files; using the first", len(event.paths))
        self.submit(event.paths[0])

    # ------------------------------------------------------------------
    # Copy feedback
    # ------------------------------------------------------------------

    def trigger_copy(self) -> None:
        with self._lock:
            if self._closed:
                return
            state = self._state
            if not isinstance(state, ResultState) or not state.result.text:
                return
            text = state.result.text
            if not self._clipboard.write_text(text):
                logger.warning("Clipboard write failed for %s", state.result.file_name)
            self._copy_feedback.trigger()

    # ------------------------------------------------------------------
    # State store
    # ------------------------------------------------------------------

    def _set_drag_over(self, value: bool) -> None:
        if self._is_drag_over == value:
            return
        self._is_drag_over = value
        if self._on_drag_over_change:
            self._on_drag_over_change(value)

    def _transition(self, to_state: TranscribeState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
