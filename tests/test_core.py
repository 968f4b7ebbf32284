import base64
import string

import pytest

from recordseal_core.config import CryptoSettings
from recordseal_core.crypto import (
    hash_identifier, sign_digest, verify_signature, looks_like_signature,
)
from recordseal_core.errors import InvalidInput, KeyUnavailable
from recordseal_core.keys import KeyManager
from recordseal_core.utils import b64e

IDENTIFIERS = ["alice@example.com", "bob@example.com", "a", "ünïcødé@exämple.org", " spaced @x.com "]


@pytest.mark.parametrize("identifier", IDENTIFIERS)
def test_hash_is_deterministic_lowercase_hex(identifier):
    d1 = hash_identifier(identifier)
    d2 = hash_identifier(identifier)
    assert d1 == d2
    assert len(d1) == 96
    assert set(d1) <= set(string.hexdigits.lower())


def test_hash_matches_sha384():
    # sha384("abc"), FIPS 180-2 test vector
    assert hash_identifier("abc") == (
        "cb00753f45a35e8bb5a03d699ac65007272c32ab0eded1631a8b605a43ff5bed"
        "8086072ba1e7cc2358baeca134c825a7"
    )


@pytest.mark.parametrize("bad", ["", None, 42, b"alice@example.com", "a\ud800@x.com"])
def test_hash_rejects_non_string(bad):
    with pytest.raises(InvalidInput):
        hash_identifier(bad)


def test_sign_verify(keys):
    digest = hash_identifier("alice@example.com")
    sig = sign_digest(digest, keys)
    assert verify_signature(digest, sig, keys.get_public_key())
    assert verify_signature(digest, sig, keys=keys)
    assert verify_signature(digest, sig, keys.get_public_key_pem())


def test_signing_is_probabilistic_but_both_verify(keys):
    digest = hash_identifier("alice@example.com")
    s1 = sign_digest(digest, keys)
    s2 = sign_digest(digest, keys)
    assert s1 != s2
    assert verify_signature(digest, s1, keys=keys)
    assert verify_signature(digest, s2, keys=keys)


def test_cross_digest_signature_fails(keys):
    alice = hash_identifier("alice@example.com")
    bob = hash_identifier("bob@example.com")
    bob_sig = sign_digest(bob, keys)
    assert len(alice) == 96
    assert verify_signature(alice, sign_digest(alice, keys), keys=keys)
    assert verify_signature(alice, bob_sig, keys=keys) is False


def test_wrong_public_key_fails(keys, other_keys):
    digest = hash_identifier("alice@example.com")
    sig = sign_digest(digest, keys)
    assert verify_signature(digest, sig, other_keys.get_public_key()) is False


def test_identifier_change_invalidates_old_pair(keys):
    old_digest = hash_identifier("a@x.com")
    old_sig = sign_digest(old_digest, keys)
    new_digest = hash_identifier("b@x.com")
    assert verify_signature(new_digest, old_sig, keys=keys) is False
    assert verify_signature(new_digest, sign_digest(new_digest, keys), keys=keys)


@pytest.mark.parametrize("bad_digest", [
    "abc",
    "g" * 96,
    "A" * 96,
    hash_identifier("x")[:-2],
    hash_identifier("x") + "00",
])
def test_sign_rejects_malformed_digest(keys, bad_digest):
    with pytest.raises(InvalidInput):
        sign_digest(bad_digest, keys)


def test_sign_requires_keys():
    digest = hash_identifier("alice@example.com")
    with pytest.raises(KeyUnavailable):
        sign_digest(digest, KeyManager())


def test_verify_malformed_inputs_return_false(keys):
    digest = hash_identifier("alice@example.com")
    sig = sign_digest(digest, keys)
    assert verify_signature(digest, "", keys=keys) is False
    assert verify_signature(digest, None, keys=keys) is False
    assert verify_signature(digest, "not base64 !!", keys=keys) is False
    assert verify_signature(digest, b64e(b"short"), keys=keys) is False
    assert verify_signature("zz" * 48, sig, keys=keys) is False
    assert verify_signature(None, sig, keys=keys) is False
    assert verify_signature(digest[:10], sig, keys=keys) is False


def test_verify_both_missing_is_invalid_input(keys):
    with pytest.raises(InvalidInput):
        verify_signature(None, None, keys=keys)


def test_verify_without_any_key():
    digest = hash_identifier("alice@example.com")
    with pytest.raises(KeyUnavailable):
        verify_signature(digest, "AAAA")
    with pytest.raises(KeyUnavailable):
        verify_signature(digest, "AAAA", keys=KeyManager())


def test_verify_rejects_garbage_public_key():
    digest = hash_identifier("alice@example.com")
    with pytest.raises(InvalidInput):
        verify_signature(digest, "AAAA", "-----BEGIN PUBLIC KEY-----\nnope\n-----END PUBLIC KEY-----\n")


def test_tampered_signature_fails(keys):
    digest = hash_identifier("alice@example.com")
    raw = bytearray(base64.b64decode(sign_digest(digest, keys)))
    raw[10] ^= 0x01
    assert verify_signature(digest, b64e(bytes(raw)), keys=keys) is False


def test_padding_hash_is_independent_setting(keys):
    # a verifier configured with a different padding hash cannot confirm the signature
    digest = hash_identifier("alice@example.com")
    sig = sign_digest(digest, keys)
    other = CryptoSettings(signature_hash="sha384")
    assert verify_signature(digest, sig, keys.get_public_key(), settings=other) is False
    assert verify_signature(digest, sig, keys.get_public_key(), settings=CryptoSettings())


def test_heuristic_accepts_wellformed_but_cannot_detect_forgery(keys):
    digest = hash_identifier("alice@example.com")
    assert looks_like_signature(sign_digest(digest, keys))

    forged = b64e(bytes(256))
    assert looks_like_signature(forged)
    assert verify_signature(digest, forged, keys=keys) is False


@pytest.mark.parametrize("bad", [None, "", "***", b64e(b"x" * 40), "QUJD"])
def test_heuristic_rejects_malformed(bad):
    assert looks_like_signature(bad) is False
