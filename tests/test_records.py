import pytest

import recordcrypto
from recordcrypto.errors import (
    InvalidInputKind,
    InvalidKeyFormat,
    InvalidSignatureFormat,
    MissingRequiredField,
    MissingSignature,
)


def test_sign_obj_attaches_envelope(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)

    assert set(record["sign"]) == {"owner", "sig"}
    assert record["sign"]["owner"] == keypair.public_key
    assert recordcrypto.verify_obj(record) is True


def test_signature_covers_digest_without_envelope(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    digest = recordcrypto.hash_obj(record, remove_sign=True)
    assert recordcrypto.verify(digest, record["sign"]["sig"], keypair.public_key)


def test_modified_record_fails_verification(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    record["test"] = "modified"
    assert recordcrypto.verify_obj(record) is False


def test_added_field_fails_verification(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    record["extra"] = 1
    assert recordcrypto.verify_obj(record) is False


def test_changed_owner_fails_verification(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    record["sign"]["owner"] = recordcrypto.generate_keypair().public_key
    assert recordcrypto.verify_obj(record) is False


def test_verification_ignores_key_order(keypair):
    record = {"a": 1, "b": {"c": 2, "d": 3}}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    reordered = {"sign": record["sign"], "b": {"d": 3, "c": 2}, "a": 1}
    assert recordcrypto.verify_obj(reordered) is True


def test_resigning_replaces_envelope(keypair):
    other = recordcrypto.generate_keypair()
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    recordcrypto.sign_obj(record, other.secret_key, other.public_key)

    assert record["sign"]["owner"] == other.public_key
    assert recordcrypto.verify_obj(record) is True


def test_sign_obj_normalizes_owner_case(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key.upper())
    assert record["sign"]["owner"] == keypair.public_key
    assert recordcrypto.verify_obj(record)


def test_failed_sign_does_not_mutate(keypair):
    other = recordcrypto.generate_keypair()
    record = {"test": "value"}
    with pytest.raises(InvalidKeyFormat):
        recordcrypto.sign_obj(record, keypair.secret_key, other.public_key)
    with pytest.raises(InvalidKeyFormat):
        recordcrypto.sign_obj(record, "00", keypair.public_key)
    assert record == {"test": "value"}


def test_sign_obj_rejects_non_record(keypair):
    with pytest.raises(InvalidInputKind):
        recordcrypto.sign_obj("not a record", keypair.secret_key, keypair.public_key)
    with pytest.raises(InvalidInputKind):
        recordcrypto.sign_obj([1, 2], keypair.secret_key, keypair.public_key)


def test_signed_copy_leaves_original(keypair):
    record = {"test": "value", "nested": {"x": 1}}
    signed = recordcrypto.signed_copy(record, keypair.secret_key, keypair.public_key)

    assert "sign" not in record
    assert signed["sign"]["owner"] == keypair.public_key
    assert recordcrypto.verify_obj(signed)

    record["nested"]["x"] = 2
    assert recordcrypto.verify_obj(signed)


@pytest.mark.parametrize("record", [
    {"test": "value"},
    {"test": "value", "sign": None},
    {"test": "value", "sign": "abc"},
    {"test": "value", "sign": {"owner": "abc"}},
    {"test": "value", "sign": {"sig": "abc"}},
    {"test": "value", "sign": {"owner": 1, "sig": "abc"}},
])
def test_verify_obj_without_envelope_raises(record):
    with pytest.raises(MissingSignature):
        recordcrypto.verify_obj(record)


def test_verify_obj_rejects_non_record():
    with pytest.raises(InvalidInputKind):
        recordcrypto.verify_obj(["sign"])


def test_verify_obj_malformed_owner_raises(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    record["sign"]["owner"] = "nothex"
    with pytest.raises(InvalidKeyFormat):
        recordcrypto.verify_obj(record)


def test_verify_obj_malformed_sig_raises(keypair):
    record = {"test": "value"}
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)
    record["sign"]["sig"] = "abcd"
    with pytest.raises(InvalidSignatureFormat):
        recordcrypto.verify_obj(record)


def test_tag_and_authenticate_obj():
    alice = recordcrypto.generate_keypair()
    bob = recordcrypto.generate_keypair()
    shared = recordcrypto.generate_shared_key(alice.secret_key, bob.public_key)

    record = {"b": 2, "a": 1}
    recordcrypto.tag_obj(record, shared)
    assert len(record["tag"]) == 64

    peer_view = {"a": 1, "b": 2, "tag": record["tag"]}
    peer_key = recordcrypto.generate_shared_key(bob.secret_key, alice.public_key)
    assert recordcrypto.authenticate_obj(peer_view, peer_key) is True

    peer_view["a"] = 5
    assert recordcrypto.authenticate_obj(peer_view, peer_key) is False


def test_authenticate_obj_wrong_key():
    record = {"a": 1}
    recordcrypto.tag_obj(record, "11" * 32)
    assert recordcrypto.authenticate_obj(record, "22" * 32) is False


def test_authenticate_obj_without_tag_raises():
    with pytest.raises(MissingRequiredField):
        recordcrypto.authenticate_obj({"a": 1}, "11" * 32)


def test_tag_then_sign(keypair):
    record = {"a": 1}
    recordcrypto.tag_obj(record, "11" * 32)
    recordcrypto.sign_obj(record, keypair.secret_key, keypair.public_key)

    assert recordcrypto.authenticate_obj(record, "11" * 32)
    assert recordcrypto.verify_obj(record)


class Vote:
    def __init__(self, choice):
        self.choice = choice

    def to_record(self):
        return {"choice": self.choice}


def test_hash_obj_accepts_canonicalizable():
    assert recordcrypto.hash_obj(Vote("yes")) == recordcrypto.hash_obj({"choice": "yes"})
