"""
recordcrypto Record Envelopes

Attaches provenance to a record through reserved fields instead of a side
channel.

Signature envelope:
    record["sign"] = {"owner": <public key hex>, "sig": <signature hex>}
    The signature covers hash_obj(record) with "sign" left out.

Tag envelope:
    record["tag"] = <tag hex>
    The tag covers the canonical record with "tag" and "sign" left out,
    so a record can be tagged and then signed: the signature covers the
    tag, the tag does not cover the signature.

A record verifies only while no field other than its own envelope has
changed since it was signed or tagged.
"""

import copy
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict

from .canonical import canonicalize
from .crypto.auth import authenticate, tag
from .crypto.backend import require_initialized
from .crypto.keys import keypair_from_secret_key, load_verify_key
from .crypto.signing import sign, verify
from .errors import InvalidInputKind, InvalidKeyFormat, MissingRequiredField, MissingSignature
from .hashing import SIGN_FIELD, hash, hash_obj


logger = logging.getLogger(__name__)

# Reserved field holding the shared-key tag
TAG_FIELD = "tag"


def _require_record(record: Any, mutable: bool = False) -> None:
    kind = MutableMapping if mutable else Mapping
    if not isinstance(record, kind):
        raise InvalidInputKind(f"Expected a record mapping, got {type(record).__name__}")


def _build_envelope(record: Mapping, secret_key: str, public_key: str) -> Dict[str, str]:
    load_verify_key(public_key)
    owner = public_key.lower()
    if keypair_from_secret_key(secret_key).public_key != owner:
        raise InvalidKeyFormat("Public key does not belong to the secret key")

    digest = hash(canonicalize(record, exclude_keys=(SIGN_FIELD,)))
    return {"owner": owner, "sig": sign(digest, secret_key)}


def sign_obj(record: MutableMapping, secret_key: str, public_key: str) -> None:
    """
    Sign a record in place.

    Any existing envelope is replaced. Nothing is written to the record
    unless signing succeeds.

    Args:
        record: Record to sign (mutated)
        secret_key: 64-byte Ed25519 secret key (hex)
        public_key: Matching 32-byte public key (hex), stored as owner

    Raises:
        InvalidInputKind: If record is not a mutable mapping
        InvalidKeyFormat: If a key is malformed or the keys do not match
    """
    require_initialized()
    _require_record(record, mutable=True)
    envelope = _build_envelope(record, secret_key, public_key)
    record[SIGN_FIELD] = envelope


def signed_copy(record: Mapping, secret_key: str, public_key: str) -> Dict[str, Any]:
    """Return a signed deep copy of record, leaving record untouched."""
    require_initialized()
    _require_record(record)
    signed = copy.deepcopy(dict(record))
    sign_obj(signed, secret_key, public_key)
    return signed


def verify_obj(record: Mapping) -> bool:
    """
    Verify a record's signature envelope.

    Returns:
        bool: True if the envelope matches the record's current content

    Raises:
        InvalidInputKind: If record is not a mapping
        MissingSignature: If the envelope or its owner/sig is missing
        InvalidKeyFormat: If the owner is not a valid public key
        InvalidSignatureFormat: If sig is not a valid signature encoding
    """
    require_initialized()
    _require_record(record)

    envelope = record.get(SIGN_FIELD)
    if not isinstance(envelope, Mapping):
        raise MissingSignature(f"Record has no '{SIGN_FIELD}' envelope")

    owner = envelope.get("owner")
    sig = envelope.get("sig")
    if not isinstance(owner, str) or not isinstance(sig, str):
        raise MissingSignature(f"'{SIGN_FIELD}' envelope must contain owner and sig strings")

    valid = verify(hash_obj(record, remove_sign=True), sig, owner)
    if not valid:
        logger.debug(f"Record signature by {owner[:16]}... does not match")
    return valid


def tag_obj(record: MutableMapping, shared_key: str) -> None:
    """
    Tag a record in place with a shared-key MAC.

    Args:
        record: Record to tag (mutated)
        shared_key: 32-byte shared key (hex)
    """
    require_initialized()
    _require_record(record, mutable=True)
    record_tag = tag(canonicalize(record, exclude_keys=(TAG_FIELD, SIGN_FIELD)), shared_key)
    record[TAG_FIELD] = record_tag


def authenticate_obj(record: Mapping, shared_key: str) -> bool:
    """
    Check a record's shared-key tag.

    Raises:
        MissingRequiredField: If the record has no tag string
    """
    require_initialized()
    _require_record(record)

    record_tag = record.get(TAG_FIELD)
    if not isinstance(record_tag, str):
        raise MissingRequiredField(f"Record has no '{TAG_FIELD}' field")

    return authenticate(
        canonicalize(record, exclude_keys=(TAG_FIELD, SIGN_FIELD)),
        record_tag,
        shared_key,
    )
