from typing import Dict, List, Optional
from dataclasses import replace
import itertools, threading

from recordseal_core.storage.models import UserRecord
from recordseal_core.utils import normalize_iso
from recordseal_core.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    def __init__(self):
        self.records: Dict[int, UserRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get(self, record_id: int) -> Optional[UserRecord]:
        rec = self.records.get(record_id)
        return replace(rec) if rec else None

    def put(self, rec: UserRecord) -> UserRecord:
        with self._lock:
            if rec.id is None:
                rec = replace(rec, id=next(self._ids), created_at=normalize_iso(rec.created_at))
            elif rec.id not in self.records:
                raise KeyError(rec.id)
            self.records[rec.id] = replace(rec)
        return replace(rec)

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self.records.pop(record_id, None) is not None

    def find_by_identifier(self, identifier: str) -> Optional[UserRecord]:
        rec = next((r for r in self.records.values() if r.identifier == identifier), None)
        return replace(rec) if rec else None

    def list_records(self) -> List[UserRecord]:
        recs = sorted(self.records.values(), key=lambda r: (r.created_at, r.id), reverse=True)
        return [replace(r) for r in recs]
