"""
recordseal_core.crypto
----------------------
Cryptographic primitives for record integrity:

- hash_identifier(): SHA-384 (configurable, never weaker) hex digest
- sign_digest(): RSA-PSS signature over the raw digest bytes
- verify_signature(): boolean check, invalid signatures are not errors
- looks_like_signature(): advisory structural check only

The PSS padding hash (sha256 by default) is independent of the digest
algorithm (sha384 by default). Signing is probabilistic: the same digest
signed twice yields two different signatures, both valid.
"""

from __future__ import annotations
from typing import Optional, Union
import hashlib

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from recordseal_core.config import CryptoSettings, load_crypto_settings
from recordseal_core.errors import InvalidInput, KeyUnavailable
from recordseal_core.keys import KeyManager
from recordseal_core.logger import get_logger
from recordseal_core.utils import b64e, try_b64d, is_lower_hex

log = get_logger("RecordSeal.Crypto")

PublicKeyLike = Union[rsa.RSAPublicKey, str, bytes]


def _settings(keys: Optional[KeyManager], settings: Optional[CryptoSettings]) -> CryptoSettings:
    if settings is not None:
        return settings
    if keys is not None:
        return keys.settings
    return load_crypto_settings()


# --------- Digest ----------
def hash_identifier(identifier: str, settings: Optional[CryptoSettings] = None) -> str:
    if not isinstance(identifier, str) or not identifier:
        raise InvalidInput("Identifier must be a non-empty string")
    algorithm = (settings or load_crypto_settings()).digest_algorithm
    try:
        data = identifier.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInput(f"Identifier is not encodable as UTF-8: {e}") from e
    digest = hashlib.new(algorithm, data).hexdigest()
    log.debug(f"{algorithm} digest: {digest[:16]}...")
    return digest


# --------- Sign / verify ----------
def sign_digest(digest: str, keys: KeyManager) -> str:
    if keys is None or not keys.initialized:
        raise KeyUnavailable("Private key not available. Generate keypair first.")
    settings = keys.settings
    if not is_lower_hex(digest, settings.digest_hex_length):
        raise InvalidInput(
            f"Digest must be {settings.digest_hex_length} lowercase hex characters"
        )

    pss = padding.PSS(
        mgf=padding.MGF1(settings.padding_hash()),
        salt_length=padding.PSS.MAX_LENGTH,
    )
    sig = keys.private_key().sign(bytes.fromhex(digest), pss, settings.padding_hash())
    signature = b64e(sig)
    log.debug(f"Signature created: {signature[:16]}...")
    return signature


def load_public_key(public_key: PublicKeyLike) -> rsa.RSAPublicKey:
    if isinstance(public_key, rsa.RSAPublicKey):
        return public_key
    if isinstance(public_key, str):
        public_key = public_key.encode("ascii")
    if not isinstance(public_key, bytes):
        raise InvalidInput(f"Unsupported public key type: {type(public_key).__name__}")
    try:
        loaded = serialization.load_pem_public_key(public_key)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise InvalidInput(f"Public key is not a valid PEM key: {e}") from e
    if not isinstance(loaded, rsa.RSAPublicKey):
        raise InvalidInput("Expected an RSA public key")
    return loaded


def verify_signature(
    digest: Optional[str],
    signature: Optional[str],
    public_key: Optional[PublicKeyLike] = None,
    keys: Optional[KeyManager] = None,
    settings: Optional[CryptoSettings] = None,
) -> bool:
    """
    Check a (digest, signature) pair against an RSA public key.

    Uses `public_key` when given, otherwise the KeyManager's cached key.
    Returns False for anything that does not verify, including malformed
    digests or signatures. Raises only when no key is available or when
    both digest and signature are missing.
    """
    if public_key is not None:
        key = load_public_key(public_key)
    elif keys is not None and keys.initialized:
        key = keys.get_public_key()
    else:
        raise KeyUnavailable("Public key not available for verification")

    if digest is None and signature is None:
        raise InvalidInput("Digest and signature are required for verification")

    settings = _settings(keys, settings)
    if not is_lower_hex(digest, settings.digest_hex_length):
        log.debug("Verification rejected: malformed digest")
        return False
    raw_sig = try_b64d(signature)
    if not raw_sig:
        log.debug("Verification rejected: signature is not base64")
        return False

    pss = padding.PSS(
        mgf=padding.MGF1(settings.padding_hash()),
        salt_length=padding.PSS.AUTO,
    )
    try:
        key.verify(raw_sig, bytes.fromhex(digest), pss, settings.padding_hash())
    except InvalidSignature:
        log.debug("Signature verification: INVALID")
        return False
    log.debug("Signature verification: VALID")
    return True


def looks_like_signature(signature, key_size: int = 2048) -> bool:
    """
    Advisory structural check for callers without crypto primitives.

    HEURISTIC ONLY: confirms the value is strict base64 whose decoded
    length matches an RSA modulus of `key_size` bits. It cannot detect a
    forged or mismatched signature, only a malformed one. Never use it in
    place of verify_signature().
    """
    raw = try_b64d(signature)
    if raw is None:
        return False
    return len(raw) == key_size // 8
