import pytest

from recordseal_core.keys import KeyManager


@pytest.fixture(scope="session")
def keys():
    """One 2048-bit keypair for the whole run; RSA generation is slow."""
    km = KeyManager()
    km.generate()
    return km


@pytest.fixture(scope="session")
def other_keys():
    km = KeyManager()
    km.generate()
    return km
