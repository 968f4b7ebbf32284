"""
recordseal_core.utils
---------------------
Lightweight helpers for base64, hex checks and timestamp normalization.
Store timestamps are ISO-8601 text; the wire carries epoch milliseconds.
"""

from __future__ import annotations
import base64, binascii, re
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_LOWER_HEX = re.compile(r"\A[0-9a-f]+\Z")


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    # strict: rejects characters outside the base64 alphabet
    return base64.b64decode(s.encode("ascii"), validate=True)


def try_b64d(s) -> bytes | None:
    if not isinstance(s, str) or not s:
        return None
    try:
        return b64d(s)
    except (binascii.Error, UnicodeEncodeError):
        return None


def is_lower_hex(s, length: int) -> bool:
    return isinstance(s, str) and len(s) == length and bool(_LOWER_HEX.match(s))


def now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def to_iso(dt: datetime) -> str:
    # Same shape as JavaScript Date.prototype.toISOString()
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Accepts the SQLite CURRENT_TIMESTAMP shape ("2024-01-01 10:00:00") as
    well as "Z"-suffixed and offset forms.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("timestamp must be a non-empty string")
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def iso_to_epoch_ms(text: str) -> int:
    # floor division drops sub-millisecond precision, also before 1970
    return (parse_iso(text) - EPOCH) // _ONE_MS


def epoch_ms_to_iso(ms: int) -> str:
    return to_iso(EPOCH + timedelta(milliseconds=ms))


def normalize_iso(text: str) -> str:
    # one textual shape in storage, so created_at sorts chronologically as text
    return to_iso(parse_iso(text))
