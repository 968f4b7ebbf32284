# recordseal_core/transport/transport_http.py
import requests

from recordseal_core.codec import decode
from recordseal_core.constants import EXPORT_CONTENT_TYPE, SCHEMA_HEADER
from recordseal_core.crypto import load_public_key, looks_like_signature
from recordseal_core.errors import InvalidInput
from recordseal_core.logger import get_logger
from recordseal_core.schema import CURRENT_SCHEMA
from recordseal_core.transport.endpoints import EXPORT_PATH, PUBLIC_KEY_PATH
from recordseal_core.transport.errors import TransportError, TransportPermanentError

log = get_logger("RecordSeal.Transport.HTTP")


class HTTPAdapter:
    """
    Client for the public-key and binary export endpoints.

    The public key is fetched once and pinned for the life of the adapter;
    it stays untrusted until the caller compares it against a known value.
    """
    def __init__(self, base_url: str, timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._public_key_pem = None
        self._key_status = None

    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        log.debug(f"[HTTP GET] → {url}")
        try:
            res = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"[HTTP GET] {url} failed: {e}")
            raise TransportError(f"GET {url} failed: {e}") from e
        if not res.ok:
            log.error(f"[HTTP GET] {res.status_code}: {res.text}")
            raise TransportError(f"GET {url} returned HTTP {res.status_code}")
        return res

    # ------------------------------------------------------------------
    # Public key distribution
    # ------------------------------------------------------------------
    def fetch_public_key(self) -> str:
        if self._public_key_pem is not None:
            return self._public_key_pem

        try:
            doc = self._get(PUBLIC_KEY_PATH).json()
        except ValueError as e:
            raise TransportPermanentError(f"Public key response is not JSON: {e}") from e
        pem = doc.get("publicKey")
        if not pem:
            raise TransportPermanentError("Public key missing from response")
        try:
            load_public_key(pem)
        except InvalidInput as e:
            raise TransportPermanentError(str(e)) from e

        self._public_key_pem = pem
        self._key_status = doc.get("status", {})
        log.info(f"Public key pinned ({len(pem)} characters)")
        return pem

    @property
    def key_status(self) -> dict:
        return dict(self._key_status or {})

    def is_pinned(self) -> bool:
        return self._public_key_pem is not None

    def check_signature_shape(self, signature: str) -> bool:
        """
        Advisory only: see looks_like_signature(). A True here says the
        signature is well-formed for the pinned key size, never that it is
        genuine. Use verify_signature() with the pinned key for that.
        """
        key = load_public_key(self.fetch_public_key())
        return looks_like_signature(signature, key.key_size)

    # ------------------------------------------------------------------
    # Binary export
    # ------------------------------------------------------------------
    def fetch_export(self):
        res = self._get(EXPORT_PATH)
        content_type = res.headers.get("Content-Type", "").split(";")[0].strip()
        if content_type != EXPORT_CONTENT_TYPE:
            raise TransportPermanentError(f"Unexpected content type: {content_type!r}")
        schema = res.headers.get(SCHEMA_HEADER)
        if schema != CURRENT_SCHEMA.header_value:
            raise TransportPermanentError(
                f"Export schema {schema!r} does not match {CURRENT_SCHEMA.header_value!r}"
            )

        records = decode(res.content)
        log.info(f"Decoded export: {len(records)} records")
        return records
