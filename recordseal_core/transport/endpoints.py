# recordseal_core/transport/endpoints.py
"""
Framework-neutral response documents for the two read-only endpoints:

    GET /api/users/public-key  -> public_key_document()
    GET /api/users/export      -> export_document()

The HTTP layer only has to serialize these.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Tuple

from recordseal_core.codec import encode
from recordseal_core.constants import EXPORT_CONTENT_TYPE, SCHEMA_HEADER
from recordseal_core.keys import KeyManager
from recordseal_core.schema import CURRENT_SCHEMA

PUBLIC_KEY_PATH = "/api/users/public-key"
EXPORT_PATH = "/api/users/export"


def public_key_document(keys: KeyManager) -> Dict[str, Any]:
    return {
        "publicKey": keys.get_public_key_pem(),
        "status": keys.get_status().to_dict(),
    }


def export_document(records: Iterable[Any]) -> Tuple[bytes, Dict[str, str]]:
    body = encode(records, CURRENT_SCHEMA)
    headers = {
        "Content-Type": EXPORT_CONTENT_TYPE,
        "Content-Length": str(len(body)),
        SCHEMA_HEADER: CURRENT_SCHEMA.header_value,
    }
    return body, headers
