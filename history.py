"""JSON-backed history of completed file transcriptions."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path

from config import APP_DIR, DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    file_name: str
    text: str
    duration_ms: int
    created_at: float


class JsonHistoryStore:
    def __init__(self, path: Path | None = None, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._path = path or APP_DIR / "history.json"
        self._limit = limit
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def save(self, file_name: str, text: str, duration_ms: int) -> HistoryEntry:
        """Prepend an entry and trim to the configured limit."""
        entry = HistoryEntry(
            file_name=file_name,
            text=text,
            duration_ms=duration_ms,
            created_at=time.time(),
        )
        entries = [entry] + self.entries()
        data = [asdict(e) for e in entries[: self._limit]]
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        return entry

    def entries(self) -> list[HistoryEntry]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable history %s: %s", self._path, exc)
            return []
        if not isinstance(raw, list):
            return []
        result = []
        for item in raw:
            try:
                result.append(HistoryEntry(**item))
            except TypeError:
                continue
        return result
