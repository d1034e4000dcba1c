"""Bounded scan history.

The analyzer never touches storage directly; callers wire in a
:class:`HistoryStore`. Both stores keep the newest record at the head and
drop the oldest once ``capacity`` is exceeded. Mutations are serialised with
a lock; concurrent writers get last-write-wins semantics.
"""

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.models.scan import ScanRecord

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10

_records_adapter = TypeAdapter(List[ScanRecord])


class HistoryStore(Protocol):
    capacity: int

    def append(self, record: ScanRecord) -> None: ...

    def list(self) -> List[ScanRecord]: ...

    def get(self, record_id: str) -> Optional[ScanRecord]: ...

    def remove(self, record_id: str) -> bool: ...

    def clear(self) -> None: ...


class InMemoryHistoryStore:
    """Process-local history."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.capacity = capacity
        self._records: List[ScanRecord] = []
        self._lock = threading.Lock()

    # Records are copied in and out so callers never share nested lists with the store
    def _load(self) -> List[ScanRecord]:
        return [r.model_copy(deep=True) for r in self._records]

    def _save(self, records: List[ScanRecord]) -> None:
        self._records = [r.model_copy(deep=True) for r in records]

    def append(self, record: ScanRecord) -> None:
        with self._lock:
            records = [record] + self._load()
            self._save(records[: self.capacity])

    def list(self) -> List[ScanRecord]:
        with self._lock:
            return self._load()

    def get(self, record_id: str) -> Optional[ScanRecord]:
        with self._lock:
            for record in self._load():
                if record.id == record_id:
                    return record
        return None

    def remove(self, record_id: str) -> bool:
        with self._lock:
            records = self._load()
            kept = [r for r in records if r.id != record_id]
            if len(kept) == len(records):
                return False
            self._save(kept)
            return True

    def clear(self) -> None:
        with self._lock:
            self._save([])


class JsonFileHistoryStore(InMemoryHistoryStore):
    """History persisted as a JSON array in a single file.

    An unreadable or corrupt file is treated as an empty history rather than
    an error, the same way a browser treats bad local-storage data.
    """

    def __init__(self, path, capacity: int = DEFAULT_CAPACITY) -> None:
        super().__init__(capacity)
        self.path = Path(path)

    def _load(self) -> List[ScanRecord]:
        if not self.path.exists():
            return []
        try:
            return _records_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, exc)
            return []

    def _save(self, records: List[ScanRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


@lru_cache(maxsize=1)
def get_history_store() -> HistoryStore:
    """Return the process-wide store configured by ``SEO_HISTORY_PATH`` / ``SEO_HISTORY_CAPACITY``."""
    if settings.HISTORY_PATH:
        return JsonFileHistoryStore(settings.HISTORY_PATH, settings.HISTORY_CAPACITY)
    return InMemoryHistoryStore(settings.HISTORY_CAPACITY)
