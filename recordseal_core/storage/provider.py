# recordseal_core/storage/provider.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from recordseal_core.storage.models import UserRecord


class StorageProvider(ABC):
    """
    Minimal record store used by the directory.

    put() writes every column of a record in one step, so a record's
    identifier, digest and signature are never observed half-updated.
    """

    @abstractmethod
    def get(self, record_id: int) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def put(self, rec: UserRecord) -> UserRecord:
        """Insert when rec.id is None, else replace. Returns the stored record."""

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        ...

    @abstractmethod
    def find_by_identifier(self, identifier: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def list_records(self) -> List[UserRecord]:
        """All records, newest first."""

    def close(self) -> None:
        return
