"""Supported audio formats and path-extension checks."""

from __future__ import annotations

SUPPORTED_EXTENSIONS = ("wav", "mp3", "flac", "m4a", "aac", "ogg", "oga")


def get_extension(path: str) -> str:
    """Return the lower-cased text after the last ``.``, or ``""`` if none."""
    if "." not in path:
        return ""
    return path.rsplit(".", 1)[1].lower()


def is_supported(path: str) -> bool:
    return get_extension(path) in SUPPORTED_EXTENSIONS


def dialog_filter() -> str:
    """Name filter for native file dialogs, e.g. ``Audio Files (*.wav *.mp3)``."""
    patterns = " ".join(f"*.{ext}" for ext in SUPPORTED_EXTENSIONS)
    return f"Audio Files ({patterns})"
