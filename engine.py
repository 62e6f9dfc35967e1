"""File transcription engine using DashScope qwen3-asr-flash.

The model accepts complete audio as a data URI and streams back recognition
results via ``stream=True``.  The latest streamed text is the transcript.
Progress stages are reported through ``on_progress`` as the call advances:
decoding, loading_model, transcribing, saving.
"""

from __future__ import annotations

import base64
import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

from errors import (
    AUTH_FAILED,
    DECODE_FAILED,
    ERROR_MESSAGES,
    FILE_NOT_FOUND,
    NETWORK_ERROR,
    TRANSCRIPTION_FAILED,
    UNSUPPORTED_FORMAT,
    TranscriptionError,
)
from formats import SUPPORTED_EXTENSIONS, get_extension
from history import JsonHistoryStore
from models import FileTranscriptionResult, TranscriptionProgress

logger = logging.getLogger(__name__)

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

ProgressCallback = Callable[[TranscriptionProgress], None]

_MIME_TYPES = {
    "wav": "audio/wav",
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
    "oga": "audio/ogg",
}


def _file_to_data_uri(path: Path) -> str:
    """Read an audio file into a base64 ``data:`` URI."""
    mime = _MIME_TYPES.get(get_extension(path.name), "application/octet-stream")
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"


class DashscopeFileTranscriber:
    def __init__(
        self,
        api_key: str,
        model: str = "qwen3-asr-flash",
        request_timeout_s: float = 120.0,
        on_progress: Optional[ProgressCallback] = None,
        history: Optional[JsonHistoryStore] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._request_timeout_s = request_timeout_s
        self._on_progress = on_progress
        self._history = history

    def transcribe(self, file_path: str) -> FileTranscriptionResult:
        path = Path(file_path)
        if not path.exists():
            raise TranscriptionError(FILE_NOT_FOUND, f"File not found: {file_path}")
        extension = get_extension(path.name)
        if extension not in SUPPORTED_EXTENSIONS:
            raise TranscriptionError(
                UNSUPPORTED_FORMAT,
                f"Unsupported audio format: .{extension}. Supported: {', '.join(SUPPORTED_EXTENSIONS)}",
            )
        file_name = path.name
        logger.info("Starting file transcription: %s", file_name)

        self._emit("decoding")
        try:
            audio = _file_to_data_uri(path)
        except OSError as exc:
            raise TranscriptionError(DECODE_FAILED, f"Failed to read audio file: {exc}") from exc

        self._emit("loading_model")
        api_key = self._require_sdk()

        self._emit("transcribing")
        start = time.monotonic()
        text = self._recognize(api_key, audio)
        duration_ms = int((time.monotonic() - start) * 1000)

        self._emit("saving")
        if self._history is not None:
            try:
                self._history.save(file_name, text, duration_ms)
            except OSError as exc:
                logger.error("Failed to save file transcription to history: %s", exc)

        logger.info("File transcription complete: %s (%d ms)", file_name, duration_ms)
        return FileTranscriptionResult(text=text, file_name=file_name, duration_ms=duration_ms)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _emit(self, stage: str, message: Optional[str] = None) -> None:
        if self._on_progress is not None:
            self._on_progress(TranscriptionProgress(stage=stage, message=message))

    def _require_sdk(self) -> str:
        if dashscope is None:
            raise TranscriptionError(TRANSCRIPTION_FAILED, "dashscope is not installed")
        api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
        if not api_key:
            raise TranscriptionError(AUTH_FAILED, "No API key configured")
        return api_key

    def _recognize(self, api_key: str, audio: str) -> str:
        """Send audio to dashscope and keep the latest streamed text."""
        try:
            response = dashscope.MultiModalConversation.call(
                api_key=api_key,
                model=self._model,
                messages=[
                    {"role": "system", "content": [{"text": ""}]},
                    {"role": "user", "content": [{"audio": audio}]},
                ],
                result_format="message",
                asr_options={"enable_itn": False},
                stream=True,
                timeout=self._request_timeout_s,
            )
            latest_text = ""
            for chunk in response:
                self._raise_for_status(chunk)
                text = self._extract_text(chunk)
                if text:
                    latest_text = text
        except TranscriptionError:
            raise
        except Exception as exc:
            raise self._to_error(exc) from exc
        return latest_text

    def _raise_for_status(self, chunk: object) -> None:
        if not isinstance(chunk, dict):
            return
        status = chunk.get("status_code")
        if status is None or status == 200:
            return
        message = str(chunk.get("message") or chunk.get("code") or f"HTTP {status}")
        code = AUTH_FAILED if status in (401, 403) else TRANSCRIPTION_FAILED
        raise TranscriptionError(code, f"Transcription failed: {message}")

    def _extract_text(self, chunk: object) -> str:
        """Pull text from a dashscope streaming chunk dict."""
        if isinstance(chunk, dict):
            output = chunk.get("output") or {}
            choices = output.get("choices", [])
            if not choices:
                return ""
            message = choices[0].get("message", {})
            content = message.get("content", [])
            if not content:
                return ""
            value = content[0]
            if isinstance(value, dict):
                return str(value.get("text", ""))
        return ""

    def _to_error(self, exc: Exception) -> TranscriptionError:
        """Map an SDK/network exception to a coded TranscriptionError."""
        message = str(exc)
        low = message.lower()
        if "401" in low or "auth" in low or "api key" in low:
            code = AUTH_FAILED
        elif "timeout" in low or "network" in low or "connection" in low:
            code = NETWORK_ERROR
        else:
            code = TRANSCRIPTION_FAILED
        return TranscriptionError(code, f"{ERROR_MESSAGES[code]} {message}".strip())
