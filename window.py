"""Drop-zone window that publishes drag events and renders coordinator state."""

from __future__ import annotations

from typing import Callable, Optional

from event_bus import DRAG_DROP_CHANNEL, EventBus
from formats import dialog_filter
from models import DragEvent, DragKind, ErrorState, ProcessingState, ResultState, TranscribeState

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import (
        QFileDialog,
        QHBoxLayout,
        QLabel,
        QPlainTextEdit,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QFileDialog = None  # type: ignore
    QHBoxLayout = object  # type: ignore
    QLabel = object  # type: ignore
    QPlainTextEdit = object  # type: ignore
    QPushButton = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

STAGE_LABELS = {
    "decoding": "Decoding audio...",
    "loading_model": "Loading model...",
    "transcribing": "Transcribing...",
    "saving": "Saving...",
}

_ZONE_STYLE = "border: 2px dashed {color}; border-radius: 8px; padding: 24px; background: {bg};"
_ZONE_IDLE = _ZONE_STYLE.format(color="rgba(128,128,128,0.4)", bg="transparent")
_ZONE_HOVER = _ZONE_STYLE.format(color="#FAA2CA", bg="rgba(250,162,202,0.1)")


class QtFilePicker:
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        self._parent = parent

    def pick_file(self) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(self._parent, "Choose audio file", "", dialog_filter())
        return path or None


class TranscribeWindow(QWidget):
    def __init__(
        self,
        events: EventBus,
        on_choose_file: Callable[[], None],
        on_copy: Callable[[], None],
    ) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self._events = events
        self._processing = False
        self.setWindowTitle("Transcribe File")
        self.setMinimumWidth(560)
        self.setAcceptDrops(True)

        self._zone = QLabel("Drop an audio file here")
        self._zone.setAlignment(Qt.AlignCenter)
        self._zone.setStyleSheet(_ZONE_IDLE)

        self._choose_button = QPushButton("Choose file")
        self._choose_button.clicked.connect(on_choose_file)
        self._formats_label = QLabel("Supported: WAV, MP3, FLAC, M4A, AAC, OGG")
        self._formats_label.setStyleSheet("color: gray; font-size: 11px;")

        self._copy_button = QPushButton("Copy")
        self._copy_button.clicked.connect(on_copy)
        self._copy_button.hide()

        self._result_view = QPlainTextEdit()
        self._result_view.setReadOnly(True)
        self._result_view.hide()
        self._meta_label = QLabel("")
        self._meta_label.setStyleSheet("color: gray; font-size: 11px;")
        self._meta_label.hide()

        self._error_label = QLabel("")
        self._error_label.setWordWrap(True)
        self._error_label.setStyleSheet(
            "color: #FF6B6B; padding: 8px; background: rgba(255,0,0,0.08); border-radius: 6px;"
        )
        self._error_label.hide()

        header = QHBoxLayout()
        header.addWidget(QLabel("Result"))
        header.addStretch(1)
        header.addWidget(self._copy_button)

        layout = QVBoxLayout()
        layout.addWidget(self._zone)
        layout.addWidget(self._choose_button)
        layout.addWidget(self._formats_label)
        layout.addLayout(header)
        layout.addWidget(self._result_view)
        layout.addWidget(self._meta_label)
        layout.addWidget(self._error_label)
        self.setLayout(layout)

    # ------------------------------------------------------------------
    # Host drag-and-drop → drag-drop channel
    # ------------------------------------------------------------------

    def dragEnterEvent(self, event) -> None:  # noqa: ANN001, N802
        if not event.mimeData().hasUrls():
            event.ignore()
            return
        event.acceptProposedAction()
        self._events.emit(DRAG_DROP_CHANNEL, DragEvent(kind=DragKind.OVER.value))

    def dragMoveEvent(self, event) -> None:  # noqa: ANN001, N802
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dragLeaveEvent(self, event) -> None:  # noqa: ANN001, N802
        self._events.emit(DRAG_DROP_CHANNEL, DragEvent(kind=DragKind.LEAVE.value))

    def dropEvent(self, event) -> None:  # noqa: ANN001, N802
        paths = [url.toLocalFile() for url in event.mimeData().urls() if url.isLocalFile()]
        event.acceptProposedAction()
        self._events.emit(DRAG_DROP_CHANNEL, DragEvent(kind=DragKind.DROP.value, paths=paths))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def set_drag_over(self, value: bool) -> None:
        self._zone.setStyleSheet(_ZONE_HOVER if value else _ZONE_IDLE)

    def set_copied(self, value: bool) -> None:
        self._copy_button.setText("Copied" if value else "Copy")

    def render_state(self, state: TranscribeState) -> None:
        self._processing = isinstance(state, ProcessingState)
        self._choose_button.setEnabled(not self._processing)
        self._result_view.hide()
        self._meta_label.hide()
        self._copy_button.hide()
        self._error_label.hide()

        if isinstance(state, ProcessingState):
            self._zone.setText(STAGE_LABELS.get(state.stage, state.stage))
            return
        self._zone.setText("Drop an audio file here")

        if isinstance(state, ResultState):
            result = state.result
            self._result_view.setPlainText(result.text or "No speech detected.")
            self._result_view.show()
            self._meta_label.setText(f"{result.file_name} - {result.duration_ms}ms")
            self._meta_label.show()
            if result.text:
                self._copy_button.show()
        elif isinstance(state, ErrorState):
            self._error_label.setText(f"⚠️ {state.message}")
            self._error_label.show()
