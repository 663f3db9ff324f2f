import pytest

from recordcrypto.crypto import backend
from recordcrypto.crypto.keys import generate_keypair


TEST_HASH_KEY = "69fa4195670576c0160d660c3be36556ff8d504725be8a59b5a96509e0c994bc"


@pytest.fixture(autouse=True)
def initialized_backend():
    backend.initialize(TEST_HASH_KEY)
    yield
    backend.reset()


@pytest.fixture
def keypair(initialized_backend):
    return generate_keypair()
