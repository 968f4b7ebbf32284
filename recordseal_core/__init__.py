"""
RecordSeal Core Package
=======================
Record-integrity and binary-export primitives for the user admin panel.

Provides:
- One process-wide RSA keypair (KeyManager)
- SHA-384 identifier digests with RSA-PSS signatures and verification
- Schema-driven protobuf codec for exporting the record set
- Pluggable record storage (memory, SQLite)
"""

from recordseal_core.constants import SCHEMA_FILE, SCHEMA_VERSION
from recordseal_core.errors import (
    RecordSealError, InvalidInput, KeyUnavailable, KeyNotInitialized,
    MalformedPayload, RecordNotFound, DuplicateIdentifier,
)
from recordseal_core.keys import KeyManager, Keypair, KeyStatus
from recordseal_core.crypto import (
    hash_identifier, sign_digest, verify_signature, looks_like_signature,
)
from recordseal_core.integrity import IntegrityRecord, seal, reseal, check, check_many
from recordseal_core.codec import ExportedRecord, encode, decode

__version__ = "0.1.0"

__all__ = [
    "SCHEMA_FILE",
    "SCHEMA_VERSION",
    "RecordSealError",
    "InvalidInput",
    "KeyUnavailable",
    "KeyNotInitialized",
    "MalformedPayload",
    "RecordNotFound",
    "DuplicateIdentifier",
    "KeyManager",
    "Keypair",
    "KeyStatus",
    "hash_identifier",
    "sign_digest",
    "verify_signature",
    "looks_like_signature",
    "IntegrityRecord",
    "seal",
    "reseal",
    "check",
    "check_many",
    "ExportedRecord",
    "encode",
    "decode",
]
