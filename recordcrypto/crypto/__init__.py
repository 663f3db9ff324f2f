"""
recordcrypto Cryptographic Module

Provides the primitive operations the record protocol is built on:
- Backend initialization (hash key)
- Key generation and conversion (Ed25519, X25519)
- Digital signatures (Ed25519, combined form)
- Shared-key authentication tags (HMAC-SHA512-256)
- Hashing (keyed BLAKE2b)

Implementations use python3-cryptography (OpenSSL backend). Keyed BLAKE2b
uses hashlib, and Ed25519 point checks and Ed25519 -> X25519 conversion
use PyNaCl (libsodium).
"""

from .primitives import (
    blake2b_hash,
    constant_time_compare,
    decode_hex,
)

from .backend import (
    initialize,
    is_initialized,
    require_initialized,
    reset,
)

from .keys import (
    Keypair,
    generate_keypair,
    keypair_from_secret_key,
    load_signing_key,
    load_verify_key,
    random_bytes,
    secret_key_to_curve,
    public_key_to_curve,
    generate_shared_key,
)

from .signing import (
    sign,
    verify,
)

from .auth import (
    tag,
    authenticate,
)

__all__ = [
    # Primitives
    'blake2b_hash',
    'constant_time_compare',
    'decode_hex',
    # Backend
    'initialize',
    'is_initialized',
    'require_initialized',
    'reset',
    # Keys
    'Keypair',
    'generate_keypair',
    'keypair_from_secret_key',
    'load_signing_key',
    'load_verify_key',
    'random_bytes',
    'secret_key_to_curve',
    'public_key_to_curve',
    'generate_shared_key',
    # Signatures
    'sign',
    'verify',
    # Authentication
    'tag',
    'authenticate',
]
