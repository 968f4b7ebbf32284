"""
recordseal_core.config
----------------------
Algorithm and key-size settings for the integrity pipeline.

The outer digest and the PSS padding hash are two independent choices:
the default pair (sha384 digest, sha256 padding) is deliberate.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import hashlib, os

from cryptography.hazmat.primitives import hashes

from recordseal_core.constants import (
    DEFAULT_KEY_SIZE, DEFAULT_PUBLIC_EXPONENT, DEFAULT_DIGEST_ALG, DEFAULT_SIGNATURE_HASH,
)

MIN_KEY_SIZE = 2048

# digest algorithms at least as strong as SHA-384
DIGEST_ALGORITHMS = ("sha384", "sha512", "sha3_384", "sha3_512")

SIGNATURE_HASHES = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3_256": hashes.SHA3_256,
    "sha3_384": hashes.SHA3_384,
    "sha3_512": hashes.SHA3_512,
}


@dataclass(frozen=True)
class CryptoSettings:
    key_size: int = DEFAULT_KEY_SIZE
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT
    digest_algorithm: str = DEFAULT_DIGEST_ALG
    signature_hash: str = DEFAULT_SIGNATURE_HASH

    def __post_init__(self):
        if self.key_size < MIN_KEY_SIZE or self.key_size % 256:
            raise ValueError(f"Unsupported RSA key size: {self.key_size}")
        if self.digest_algorithm not in DIGEST_ALGORITHMS:
            raise ValueError(f"Digest algorithm too weak or unknown: {self.digest_algorithm}")
        if self.signature_hash not in SIGNATURE_HASHES:
            raise ValueError(f"Unknown signature hash: {self.signature_hash}")

    @property
    def digest_hex_length(self) -> int:
        return hashlib.new(self.digest_algorithm).digest_size * 2

    @property
    def signature_bytes(self) -> int:
        return self.key_size // 8

    def padding_hash(self) -> hashes.HashAlgorithm:
        return SIGNATURE_HASHES[self.signature_hash]()


def load_crypto_settings(config: Optional[Dict[str, Any]] = None) -> CryptoSettings:
    """
    Resolve settings from an explicit dict, then environment, then defaults.

    Env:
        RECORDSEAL_KEY_SIZE, RECORDSEAL_DIGEST_ALG, RECORDSEAL_SIGNATURE_HASH
    """
    config = config or {}
    key_size = config.get("key_size") or os.getenv("RECORDSEAL_KEY_SIZE", DEFAULT_KEY_SIZE)
    digest_alg = config.get("digest_algorithm") or os.getenv("RECORDSEAL_DIGEST_ALG", DEFAULT_DIGEST_ALG)
    sig_hash = config.get("signature_hash") or os.getenv("RECORDSEAL_SIGNATURE_HASH", DEFAULT_SIGNATURE_HASH)

    try:
        key_size = int(key_size)
    except (TypeError, ValueError):
        raise ValueError(f"RSA key size must be an integer: {key_size!r}") from None

    return CryptoSettings(
        key_size=key_size,
        public_exponent=int(config.get("public_exponent", DEFAULT_PUBLIC_EXPONENT)),
        digest_algorithm=str(digest_alg).lower(),
        signature_hash=str(sig_hash).lower(),
    )
