import os
import sys

import pytest

target_path = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))
if target_path not in sys.path:
    sys.path.insert(0, target_path)

from quantcrypt import errors as qc_errors

from kdt import config
from kdt.kem import KEM_ALGORITHMS
from kdt.keys import OwnedKeySet
from kdt.sign import SIG_ALGORITHMS
from kdt.store import KeyStore


@pytest.fixture(scope="session")
def alice() -> OwnedKeySet:
    return OwnedKeySet.generate("Alice")


@pytest.fixture(scope="session")
def bob() -> OwnedKeySet:
    return OwnedKeySet.generate("Bob")


@pytest.fixture
def store() -> KeyStore:
    return KeyStore()


@pytest.fixture
def db_file(tmp_path) -> str:
    return str(tmp_path / "keys.sqlite")


class _MissingBinaries(qc_errors.QuantCryptError):
    def __init__(self):
        Exception.__init__(self, "PQClean binaries are not available")


class _UnavailableBackend:
    """Stands in for a quantcrypt algorithm whose compiled backend is missing."""

    def __init__(self):
        raise _MissingBinaries()


@pytest.fixture
def backend_unavailable(monkeypatch):
    monkeypatch.setitem(KEM_ALGORITHMS, config.KEM_ALGORITHM, _UnavailableBackend)
    monkeypatch.setitem(SIG_ALGORITHMS, config.SIG_ALGORITHM, _UnavailableBackend)
