"""
recordcrypto - Deterministic record hashing and signing

Hashes, signs and verifies structured records so that the result does
not depend on the order their fields were inserted in.

This package contains:
- crypto/      : Primitives, keys, signatures, shared-key tags
- canonical    : Deterministic record canonicalization
- hashing      : Keyed BLAKE2b over text, bytes and records
- records      : Signature and tag envelopes on records
- config       : TOML configuration

Usage:
    import recordcrypto

    recordcrypto.initialize(hash_key_hex)
    keys = recordcrypto.generate_keypair()
    record = {"amount": 10, "to": "abc"}
    recordcrypto.sign_obj(record, keys.secret_key, keys.public_key)
    assert recordcrypto.verify_obj(record)
"""

__version__ = "0.1.0"
__author__ = "recordcrypto Project"

from .errors import (
    CryptoError,
    NotInitialized,
    InvalidArgument,
    InvalidInputKind,
    InvalidKeyFormat,
    InvalidSignatureFormat,
    MissingRequiredField,
    MissingSignature,
)

from .crypto import (
    initialize,
    is_initialized,
    Keypair,
    generate_keypair,
    keypair_from_secret_key,
    random_bytes,
    secret_key_to_curve,
    public_key_to_curve,
    generate_shared_key,
    sign,
    verify,
    tag,
    authenticate,
)

from .canonical import (
    Canonicalizable,
    canonicalize,
    stringify,
)

from .hashing import (
    SIGN_FIELD,
    hash,
    hash_obj,
)

from .records import (
    TAG_FIELD,
    sign_obj,
    signed_copy,
    verify_obj,
    tag_obj,
    authenticate_obj,
)

__all__ = [
    # Errors
    'CryptoError',
    'NotInitialized',
    'InvalidArgument',
    'InvalidInputKind',
    'InvalidKeyFormat',
    'InvalidSignatureFormat',
    'MissingRequiredField',
    'MissingSignature',
    # Setup
    'initialize',
    'is_initialized',
    # Keys
    'Keypair',
    'generate_keypair',
    'keypair_from_secret_key',
    'random_bytes',
    'secret_key_to_curve',
    'public_key_to_curve',
    'generate_shared_key',
    # Signatures and tags
    'sign',
    'verify',
    'tag',
    'authenticate',
    # Canonical form and hashing
    'Canonicalizable',
    'canonicalize',
    'stringify',
    'SIGN_FIELD',
    'hash',
    'hash_obj',
    # Envelopes
    'TAG_FIELD',
    'sign_obj',
    'signed_copy',
    'verify_obj',
    'tag_obj',
    'authenticate_obj',
]
