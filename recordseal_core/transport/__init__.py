# recordseal_core/transport/__init__.py
import os
from recordseal_core.transport.endpoints import export_document, public_key_document
from recordseal_core.transport.errors import TransportError, TransportPermanentError
from recordseal_core.transport.transport_http import HTTPAdapter


def client_factory(base_url: str = None) -> HTTPAdapter:
    return HTTPAdapter(base_url or os.getenv("RECORDSEAL_URL", "http://localhost:5000"))


__all__ = [
    "HTTPAdapter",
    "TransportError",
    "TransportPermanentError",
    "client_factory",
    "export_document",
    "public_key_document",
]
