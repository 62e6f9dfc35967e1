"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".config" / "file2text"
DEFAULT_MODEL = "qwen3-asr-flash"
DEFAULT_HISTORY_LIMIT = 50


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or APP_DIR / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", "")) or os.getenv("DASHSCOPE_API_KEY", "")

    def set_api_key(self, key: str) -> None:
        data = self._read_all()
        data["api_key"] = key
        self._write_all(data)

    def get_model(self) -> str:
        data = self._read_all()
        return str(data.get("model", DEFAULT_MODEL)) or DEFAULT_MODEL

    def get_history_limit(self) -> int:
        data = self._read_all()
        try:
            return max(0, int(data.get("history_limit", DEFAULT_HISTORY_LIMIT)))
        except (TypeError, ValueError):
            return DEFAULT_HISTORY_LIMIT

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
