"""
recordcrypto Backend Initialization

One-time setup that every hashing, signing and key operation depends on:
- Validates and stores the BLAKE2b hash key
- Self-tests the cryptography backend for Ed25519 and X25519

Calling initialize() again replaces the hash key.
"""

import logging
import threading
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from ..errors import CryptoError, InvalidKeyFormat, NotInitialized
from .primitives import decode_hex, HASH_KEY_MIN_SIZE, HASH_KEY_MAX_SIZE


logger = logging.getLogger(__name__)

_lock = threading.Lock()
_hash_key: Optional[bytes] = None


def _self_test() -> None:
    """Check that the backend can sign, verify and agree keys."""
    try:
        signing_key = Ed25519PrivateKey.generate()
        signing_key.public_key().verify(signing_key.sign(b""), b"")
        X25519PrivateKey.generate().public_key()
    except UnsupportedAlgorithm as e:
        raise CryptoError(f"cryptography backend lacks Ed25519/X25519 support: {e}") from e


def initialize(hash_key: str) -> None:
    """
    Initialize the backend with the key used for all hashing.

    Args:
        hash_key: Hex-encoded BLAKE2b key (16-64 bytes)

    Raises:
        InvalidKeyFormat: If the key is not hex or has an invalid length
        CryptoError: If the backend lacks the required algorithms
    """
    global _hash_key

    key = decode_hex(hash_key, "Hash key", error=InvalidKeyFormat)
    if not HASH_KEY_MIN_SIZE <= len(key) <= HASH_KEY_MAX_SIZE:
        raise InvalidKeyFormat(
            f"Hash key must be {HASH_KEY_MIN_SIZE}-{HASH_KEY_MAX_SIZE} bytes (got {len(key)})"
        )

    with _lock:
        _self_test()
        _hash_key = key

    logger.debug("Crypto backend initialized")


def is_initialized() -> bool:
    """Return True once initialize() has completed."""
    return _hash_key is not None


def require_initialized() -> None:
    """Raise NotInitialized unless initialize() has completed."""
    if _hash_key is None:
        raise NotInitialized("recordcrypto.initialize() must be called first")


def get_hash_key() -> bytes:
    """Return the configured hash key."""
    key = _hash_key
    if key is None:
        raise NotInitialized("recordcrypto.initialize() must be called first")
    return key


def reset() -> None:
    """Forget the hash key, returning to the uninitialized state."""
    global _hash_key

    with _lock:
        _hash_key = None
