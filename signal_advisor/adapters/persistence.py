import json
import logging
import threading
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from signal_advisor.core.models import AnalysisRecord


logger = logging.getLogger(__name__)


class JsonHistoryStore:
    """Persist analysis records as a newest-first JSON array."""

    def __init__(self, history_path: Path, max_entries: int = 500) -> None:
        self.history_path = history_path
        self.max_entries = max(max_entries, 1)
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def append(self, record: AnalysisRecord) -> None:
        with self._lock:
            existing = self._read_raw()
            existing.insert(0, record.model_dump(mode="json"))
            self._write_raw(existing[: self.max_entries])

    def list(self, limit: Optional[int] = None) -> List[AnalysisRecord]:
        if limit is not None and limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        with self._lock:
            raw = self._read_raw()
        if limit is not None:
            raw = raw[:limit]
        records: List[AnalysisRecord] = []
        for item in raw:
            try:
                records.append(AnalysisRecord.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed history entry %s", item.get("id"))
        return records

    def get(self, record_id: str) -> Optional[AnalysisRecord]:
        with self._lock:
            raw = self._read_raw()
        for item in raw:
            if item.get("id") != record_id:
                continue
            try:
                return AnalysisRecord.model_validate(item)
            except ValidationError:
                logger.warning("Skipping malformed history entry %s", record_id)
                return None
        return None

    def delete(self, record_id: str) -> bool:
        with self._lock:
            existing = self._read_raw()
            remaining = [item for item in existing if item.get("id") != record_id]
            if len(remaining) == len(existing):
                return False
            self._write_raw(remaining)
            return True

    def clear(self) -> None:
        with self._lock:
            self._write_raw([])

    def _read_raw(self) -> List[dict]:
        if not self.history_path.exists():
            return []
        try:
            payload = json.loads(self.history_path.read_text())
        except (json.JSONDecodeError, OSError):
            return []
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]

    def _write_raw(self, entries: List[dict]) -> None:
        # An interrupted write leaves the previous file intact.
        staging = self.history_path.with_name(self.history_path.name + ".tmp")
        staging.write_text(json.dumps(entries, indent=2))
        staging.replace(self.history_path)
