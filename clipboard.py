"""Clipboard writer for transcription results."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore


class PyperclipClipboard:
    def write_text(self, text: str) -> bool:
        if pyperclip is None:
            logger.warning("pyperclip is not installed; clipboard unavailable")
            return False
        try:
            pyperclip.copy(text)
        except Exception as exc:
            logger.warning("Clipboard write failed: %s", exc)
            return False
        return True
