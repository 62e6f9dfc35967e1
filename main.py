"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
from typing import Callable

from clipboard import PyperclipClipboard
from config import JsonConfigStore
from coordinator import TranscriptionCoordinator
from engine import DashscopeFileTranscriber
from event_bus import PROGRESS_CHANNEL, EventBus
from history import JsonHistoryStore
from log_setup import setup_logging
from models import TranscribeState
from task_runner import ThreadTaskRunner
from timers import QtTimerScheduler
from window import QtFilePicker, TranscribeWindow

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtWidgets import QApplication, QInputDialog
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)


class UIBridge(QObject):
    """Marshals callables from worker threads onto the Qt GUI thread."""

    call_signal = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self.call_signal.connect(self._run)

    def dispatch(self, fn: Callable[[], None]) -> None:
        self.call_signal.emit(fn)

    def _run(self, fn: Callable[[], None]) -> None:
        fn()


class App:
    def __init__(self) -> None:
        setup_logging()
        self.app = QApplication(sys.argv)
        self.app.aboutToQuit.connect(self.shutdown)
        self.config_store = JsonConfigStore()
        self.ui = UIBridge()
        self.events = EventBus(dispatch=self.ui.dispatch)

        api_key = self.config_store.get_api_key() or self._prompt_api_key()
        engine = DashscopeFileTranscriber(
            api_key=api_key,
            model=self.config_store.get_model(),
            on_progress=lambda progress: self.events.emit(PROGRESS_CHANNEL, progress),
            history=JsonHistoryStore(limit=self.config_store.get_history_limit()),
        )

        self.window = TranscribeWindow(
            events=self.events,
            on_choose_file=self._on_choose_file,
            on_copy=self._on_copy,
        )
        self.controller = TranscriptionCoordinator(
            engine=engine,
            runner=ThreadTaskRunner(dispatch=self.ui.dispatch),
            events=self.events,
            clipboard=PyperclipClipboard(),
            scheduler=QtTimerScheduler(),
            file_picker=QtFilePicker(self.window),
            on_state_change=self._on_state_change,
            on_drag_over_change=self.window.set_drag_over,
            on_copied_change=self.window.set_copied,
        )
        self.window.render_state(self.controller.state)

    def _prompt_api_key(self) -> str:
        value, ok = QInputDialog.getText(None, "API Key", "DashScope API Key")
        if not ok or not value:
            return ""
        self.config_store.set_api_key(value)
        return value

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: TranscribeState, to_state: TranscribeState) -> None:
        logger.debug("State %s -> %s", from_state.kind.value, to_state.kind.value)
        self.window.render_state(to_state)

    def _on_choose_file(self) -> None:
        self.controller.choose_file()

    def _on_copy(self) -> None:
        self.controller.trigger_copy()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.controller.start()
        self.window.show()
        return self.app.exec()

    def shutdown(self) -> None:
        self.controller.teardown()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
