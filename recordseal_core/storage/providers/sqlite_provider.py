from __future__ import annotations
from typing import List, Optional
import os, sqlite3

from recordseal_core.storage.provider import StorageProvider
from recordseal_core.storage.models import UserRecord
from recordseal_core.utils import normalize_iso

_COLUMNS = "id, identifier, role, status, digest, signature, created_at"


class SQLiteStorage(StorageProvider):
    def __init__(self, path="db/recordseal.db"):
        # If no directory, default to current working directory
        if path != ":memory:":
            dir_path = os.path.dirname(path) or "."
            os.makedirs(dir_path, exist_ok=True)
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        self.db.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              identifier TEXT UNIQUE NOT NULL,
              role TEXT CHECK(role IN ('admin', 'user')) NOT NULL DEFAULT 'user',
              status TEXT CHECK(status IN ('active', 'inactive')) NOT NULL DEFAULT 'active',
              digest TEXT,
              signature TEXT,
              created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
            )
            """
        )
        self.db.commit()

    @staticmethod
    def _row(row) -> UserRecord:
        rec_id, identifier, role, status, digest, signature, created_at = row
        return UserRecord(
            id=rec_id,
            identifier=identifier,
            role=role,
            status=status,
            digest=digest,
            signature=signature,
            created_at=created_at,
        )

    def get(self, record_id: int) -> Optional[UserRecord]:
        cur = self.db.execute(f"SELECT {_COLUMNS} FROM users WHERE id=?", (record_id,))
        row = cur.fetchone()
        return self._row(row) if row else None

    def put(self, rec: UserRecord) -> UserRecord:
        if rec.id is None:
            cur = self.db.execute(
                "INSERT INTO users(identifier,role,status,digest,signature,created_at) VALUES(?,?,?,?,?,?)",
                (rec.identifier, rec.role, rec.status, rec.digest, rec.signature, normalize_iso(rec.created_at)),
            )
            record_id = cur.lastrowid
        else:
            cur = self.db.execute(
                "UPDATE users SET identifier=?, role=?, status=?, digest=?, signature=? WHERE id=?",
                (rec.identifier, rec.role, rec.status, rec.digest, rec.signature, rec.id),
            )
            if cur.rowcount == 0:
                self.db.rollback()
                raise KeyError(rec.id)
            record_id = rec.id
        self.db.commit()
        return self.get(record_id)

    def delete(self, record_id: int) -> bool:
        cur = self.db.execute("DELETE FROM users WHERE id=?", (record_id,))
        self.db.commit()
        return cur.rowcount > 0

    def find_by_identifier(self, identifier: str) -> Optional[UserRecord]:
        cur = self.db.execute(f"SELECT {_COLUMNS} FROM users WHERE identifier=?", (identifier,))
        row = cur.fetchone()
        return self._row(row) if row else None

    def list_records(self) -> List[UserRecord]:
        cur = self.db.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at DESC, id DESC")
        return [self._row(r) for r in cur.fetchall()]

    def close(self):
        self.db.close()
