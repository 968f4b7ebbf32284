"""
recordseal_core.keys
--------------------
KeyManager owns the single RSA signing keypair of the process.

The pair is generated once, either eagerly at startup or lazily on first
use, and then held read-only in memory for the lifetime of the process.
There is no rotation and no persistence: after a restart, signatures made
by the previous pair only verify against its redistributed public key.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import threading

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from recordseal_core.config import CryptoSettings, load_crypto_settings
from recordseal_core.errors import KeyNotInitialized, KeyUnavailable
from recordseal_core.logger import get_logger

log = get_logger("RecordSeal.Keys")


@dataclass(frozen=True)
class Keypair:
    public_key: rsa.RSAPublicKey
    public_key_pem: str
    private_key: rsa.RSAPrivateKey

    def __repr__(self) -> str:
        return f"Keypair(key_size={self.public_key.key_size})"


@dataclass(frozen=True)
class KeyStatus:
    initialized: bool
    has_private: bool
    has_public: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyPairGenerated": self.initialized,
            "hasPrivateKey": self.has_private,
            "hasPublicKey": self.has_public,
        }


class KeyManager:
    """
    Single-instance holder of the signing keypair.

    Construct one at startup and inject it wherever signing or
    verification happens. generate() is safe under concurrent first use:
    exactly one keypair is produced and every caller sees it.
    """

    def __init__(self, settings: Optional[CryptoSettings] = None):
        self.settings = settings or load_crypto_settings()
        self._lock = threading.Lock()
        self._keypair: Optional[Keypair] = None

    def generate(self) -> Keypair:
        pair = self._keypair
        if pair is not None:
            return pair

        with self._lock:
            if self._keypair is None:
                self._keypair = self._new_keypair()
            return self._keypair

    def _new_keypair(self) -> Keypair:
        log.info(f"Generating RSA keypair (key_size={self.settings.key_size})")
        sk = rsa.generate_private_key(
            public_exponent=self.settings.public_exponent,
            key_size=self.settings.key_size,
        )
        pk = sk.public_key()
        pem = pk.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")
        log.info(f"RSA keypair generated, public key length={len(pem)} characters")
        return Keypair(public_key=pk, public_key_pem=pem, private_key=sk)

    @property
    def initialized(self) -> bool:
        return self._keypair is not None

    def get_public_key(self) -> rsa.RSAPublicKey:
        if self._keypair is None:
            raise KeyNotInitialized("Keypair not generated yet")
        return self._keypair.public_key

    def get_public_key_pem(self) -> str:
        if self._keypair is None:
            raise KeyNotInitialized("Keypair not generated yet")
        return self._keypair.public_key_pem

    def private_key(self) -> rsa.RSAPrivateKey:
        # Only the signer reaches for this; it never leaves the process.
        if self._keypair is None:
            raise KeyUnavailable("Private key not available. Generate keypair first.")
        return self._keypair.private_key

    def get_status(self) -> KeyStatus:
        pair = self._keypair
        return KeyStatus(
            initialized=pair is not None,
            has_private=pair is not None and pair.private_key is not None,
            has_public=pair is not None and pair.public_key is not None,
        )
