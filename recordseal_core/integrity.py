"""
recordseal_core.integrity
-------------------------
IntegrityRecord: an identifier bound to its digest and signature.

digest and signature always change together. reseal() returns a new
record instead of patching fields one at a time.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from recordseal_core.crypto import PublicKeyLike, hash_identifier, sign_digest, verify_signature
from recordseal_core.keys import KeyManager


@dataclass(frozen=True)
class IntegrityRecord:
    identifier: str
    digest: str
    signature: str


def seal(identifier: str, keys: KeyManager) -> IntegrityRecord:
    digest = hash_identifier(identifier, keys.settings)
    return IntegrityRecord(identifier=identifier, digest=digest, signature=sign_digest(digest, keys))


def reseal(record: IntegrityRecord, identifier: str, keys: KeyManager) -> IntegrityRecord:
    if record.identifier == identifier:
        return record
    return seal(identifier, keys)


def check(
    record: IntegrityRecord,
    keys: Optional[KeyManager] = None,
    public_key: Optional[PublicKeyLike] = None,
) -> bool:
    """True when the digest matches the identifier and the signature verifies."""
    settings = keys.settings if keys is not None else None
    try:
        expected = hash_identifier(record.identifier, settings)
    except ValueError:
        return False
    if record.digest != expected:
        return False
    return verify_signature(record.digest, record.signature, public_key=public_key,
                            keys=keys, settings=settings)


def check_many(
    records: Iterable[IntegrityRecord],
    keys: Optional[KeyManager] = None,
    public_key: Optional[PublicKeyLike] = None,
) -> List[Tuple[str, bool]]:
    return [(rec.identifier, check(rec, keys=keys, public_key=public_key)) for rec in records]
