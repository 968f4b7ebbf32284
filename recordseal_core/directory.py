"""
recordseal_core.directory
-------------------------
UserDirectory ties the record store to the integrity pipeline.

Every create seals the identifier; every identifier change reseals it and
writes identifier, digest and signature in a single put(). Verification
results are plain booleans so a full sweep runs past bad records.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Optional

from recordseal_core.codec import encode
from recordseal_core.constants import DEFAULT_ROLE, DEFAULT_STATUS, ROLES, STATUSES
from recordseal_core.errors import DuplicateIdentifier, InvalidInput, RecordNotFound
from recordseal_core.integrity import check, reseal, seal
from recordseal_core.keys import KeyManager
from recordseal_core.logger import get_logger
from recordseal_core.storage import StorageProvider, UserRecord

log = get_logger("RecordSeal.Directory")


def _validate(role: str, status: str) -> None:
    if role not in ROLES:
        raise InvalidInput(f"Role must be one of {ROLES}, got {role!r}")
    if status not in STATUSES:
        raise InvalidInput(f"Status must be one of {STATUSES}, got {status!r}")


class UserDirectory:
    def __init__(self, store: StorageProvider, keys: KeyManager):
        self.store = store
        self.keys = keys
        # startup phase: the keypair exists before any request is served
        self.keys.generate()

    def get(self, record_id: int) -> UserRecord:
        rec = self.store.get(record_id)
        if rec is None:
            raise RecordNotFound(f"User not found: {record_id}")
        return rec

    def list(self) -> List[UserRecord]:
        return self.store.list_records()

    def create(self, identifier: str, role: str = DEFAULT_ROLE, status: str = DEFAULT_STATUS) -> UserRecord:
        if not identifier:
            raise InvalidInput("Identifier is required")
        _validate(role, status)
        # sealing validates the identifier before it reaches the store
        sealed = seal(identifier, self.keys)
        if self.store.find_by_identifier(identifier) is not None:
            raise DuplicateIdentifier("Identifier already exists")

        rec = self.store.put(UserRecord(
            identifier=identifier,
            role=role,
            status=status,
            digest=sealed.digest,
            signature=sealed.signature,
        ))
        log.info(f"Created user id={rec.id}")
        return rec

    def update(
        self,
        record_id: int,
        identifier: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> UserRecord:
        current = self.get(record_id)
        identifier = current.identifier if identifier is None else identifier
        role = current.role if role is None else role
        status = current.status if status is None else status
        if not identifier:
            raise InvalidInput("Identifier is required")
        _validate(role, status)

        changes = {"role": role, "status": status}
        if identifier != current.identifier:
            sealed = reseal(current.integrity(), identifier, self.keys)
            other = self.store.find_by_identifier(identifier)
            if other is not None and other.id != record_id:
                raise DuplicateIdentifier("Identifier already exists")
            changes.update(identifier=sealed.identifier, digest=sealed.digest, signature=sealed.signature)
            log.info(f"Identifier changed for user id={record_id}, record resealed")

        return self.store.put(replace(current, **changes))

    def delete(self, record_id: int) -> None:
        if not self.store.delete(record_id):
            raise RecordNotFound(f"User not found: {record_id}")
        log.info(f"Deleted user id={record_id}")

    def verify(self, record_id: int) -> bool:
        rec = self.get(record_id)
        ok = check(rec.integrity(), keys=self.keys)
        if not ok:
            log.warning(f"Integrity could not be confirmed for user id={record_id}")
        return ok

    def verify_all(self) -> Dict[int, bool]:
        results = {}
        for rec in self.store.list_records():
            results[rec.id] = check(rec.integrity(), keys=self.keys)
        failed = [rid for rid, ok in results.items() if not ok]
        if failed:
            log.warning(f"Integrity sweep: {len(failed)} of {len(results)} records failed: {failed}")
        return results

    def export(self) -> bytes:
        return encode(self.store.list_records())
