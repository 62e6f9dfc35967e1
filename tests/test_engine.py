"""Tests for DashscopeFileTranscriber."""

from __future__ import annotations

import base64
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from engine import DashscopeFileTranscriber, _file_to_data_uri
from errors import (
    AUTH_FAILED,
    FILE_NOT_FOUND,
    NETWORK_ERROR,
    TRANSCRIPTION_FAILED,
    UNSUPPORTED_FORMAT,
    TranscriptionError,
)
from history import JsonHistoryStore
from models import TranscriptionProgress


# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------

def _audio_file(tmp_path: Path, name: str = "clip.mp3") -> Path:
    path = tmp_path / name
    path.write_bytes(b"ID3\x00\x00fake-mp3")
    return path


def _fake_streaming_response():
    """Simulate dashscope streaming chunks."""
    yield {"status_code": 200, "output": {"choices": [{"message": {"content": [{"text": "Hel"}]}}]}}
    yield {"status_code": 200, "output": {"choices": [{"message": {"content": []}}]}}
    yield {"status_code": 200, "output": {"choices": [{"message": {"content": [{"text": "Hello world"}]}}]}}


# ---------------------------------------------------------------
# _file_to_data_uri
# ---------------------------------------------------------------

def test_file_to_data_uri_encodes_contents(tmp_path: Path) -> None:
    path = _audio_file(tmp_path, "voice.WAV")
    uri = _file_to_data_uri(path)

    prefix = "data:audio/wav;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]) == path.read_bytes()


# ---------------------------------------------------------------
# Validation
# ---------------------------------------------------------------

def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    engine = DashscopeFileTranscriber(api_key="test-key")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(tmp_path / "missing.wav"))

    assert info.value.code == FILE_NOT_FOUND
    assert "missing.wav" in str(info.value)


def test_unsupported_extension_raises(tmp_path: Path) -> None:
    path = _audio_file(tmp_path, "notes.txt")
    engine = DashscopeFileTranscriber(api_key="test-key")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(path))

    assert info.value.code == UNSUPPORTED_FORMAT
    assert ".txt" in str(info.value)


@patch("engine.dashscope", MagicMock())
@patch.dict("os.environ", {"DASHSCOPE_API_KEY": ""}, clear=False)
def test_missing_api_key_raises_auth_failed(tmp_path: Path) -> None:
    engine = DashscopeFileTranscriber(api_key="")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(_audio_file(tmp_path)))

    assert info.value.code == AUTH_FAILED


@patch("engine.dashscope", None)
def test_missing_sdk_raises(tmp_path: Path) -> None:
    engine = DashscopeFileTranscriber(api_key="test-key")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(_audio_file(tmp_path)))

    assert info.value.code == TRANSCRIPTION_FAILED


# ---------------------------------------------------------------
# Mock dashscope streaming response
# ---------------------------------------------------------------

@patch("engine.dashscope")
def test_successful_stream_returns_latest_text(mock_ds: MagicMock, tmp_path: Path) -> None:
    mock_ds.MultiModalConversation.call.return_value = _fake_streaming_response()
    progress: list[TranscriptionProgress] = []
    history = JsonHistoryStore(path=tmp_path / "history.json")
    engine = DashscopeFileTranscriber(api_key="test-key", on_progress=progress.append, history=history)

    result = engine.transcribe(str(_audio_file(tmp_path)))

    assert result.text == "Hello world"
    assert result.file_name == "clip.mp3"
    assert result.duration_ms >= 0
    assert [p.stage for p in progress] == ["decoding", "loading_model", "transcribing", "saving"]

    kwargs = mock_ds.MultiModalConversation.call.call_args.kwargs
    assert kwargs["api_key"] == "test-key"
    assert kwargs["stream"] is True
    audio = kwargs["messages"][1]["content"][0]["audio"]
    assert audio.startswith("data:audio/mpeg;base64,")

    entries = history.entries()
    assert [(e.file_name, e.text) for e in entries] == [("clip.mp3", "Hello world")]


@patch("engine.dashscope")
def test_empty_stream_returns_empty_text(mock_ds: MagicMock, tmp_path: Path) -> None:
    mock_ds.MultiModalConversation.call.return_value = iter([])
    engine = DashscopeFileTranscriber(api_key="test-key")

    result = engine.transcribe(str(_audio_file(tmp_path)))

    assert result.text == ""


@patch("engine.dashscope")
def test_error_status_chunk_raises(mock_ds: MagicMock, tmp_path: Path) -> None:
    mock_ds.MultiModalConversation.call.return_value = iter(
        [{"status_code": 401, "code": "InvalidApiKey", "message": "Invalid API-key provided."}]
    )
    engine = DashscopeFileTranscriber(api_key="test-key")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(_audio_file(tmp_path)))

    assert info.value.code == AUTH_FAILED
    assert "Invalid API-key" in str(info.value)


@pytest.mark.parametrize(
    ("message", "code"),
    [
        ("Connection reset by peer", NETWORK_ERROR),
        ("HTTP 401 Unauthorized", AUTH_FAILED),
        ("model overloaded", TRANSCRIPTION_FAILED),
    ],
)
@patch("engine.dashscope")
def test_sdk_exception_is_mapped(mock_ds: MagicMock, message: str, code: str, tmp_path: Path) -> None:
    mock_ds.MultiModalConversation.call.side_effect = RuntimeError(message)
    engine = DashscopeFileTranscriber(api_key="test-key")

    with pytest.raises(TranscriptionError) as info:
        engine.transcribe(str(_audio_file(tmp_path)))

    assert info.value.code == code
    assert message in str(info.value)


@patch("engine.dashscope")
def test_history_failure_does_not_fail_call(mock_ds: MagicMock, tmp_path: Path) -> None:
    mock_ds.MultiModalConversation.call.return_value = _fake_streaming_response()
    history = MagicMock()
    history.save.side_effect = OSError("disk full")
    engine = DashscopeFileTranscriber(api_key="test-key", history=history)

    result = engine.transcribe(str(_audio_file(tmp_path)))

    assert result.text == "Hello world"
    history.save.assert_called_once()
