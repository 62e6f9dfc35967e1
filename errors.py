"""Shared error codes, user-facing messages and the engine exception."""

from __future__ import annotations

UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
DECODE_FAILED = "DECODE_FAILED"
AUTH_FAILED = "AUTH_FAILED"
NETWORK_ERROR = "NETWORK_ERROR"
TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"

ERROR_MESSAGES = {
    UNSUPPORTED_FORMAT: "Unsupported audio format. Supported: wav, mp3, flac, m4a, aac, ogg, oga.",
    FILE_NOT_FOUND: "File not found.",
    DECODE_FAILED: "Failed to read audio file.",
    AUTH_FAILED: "API key is invalid.",
    NETWORK_ERROR: "Network failed, please retry.",
    TRANSCRIPTION_FAILED: "Transcription failed.",
}


class TranscriptionError(Exception):
    """Raised by the transcription engine; ``str()`` is the user-facing message."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(code, code))
        self.code = code
