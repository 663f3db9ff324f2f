"""
recordcrypto Cryptographic Primitives

Low-level byte-in/byte-out functions. Nothing here knows about records,
hex boundaries of the public API, or initialization state.

SECURITY NOTES:
- All randomness from os.urandom (kernel CSPRNG)
- All comparisons use constant-time operations
- Secret key material is never logged

Dependencies:
- cryptography (OpenSSL backend) for HMAC-SHA512
- hashlib.blake2b for keyed BLAKE2b (cryptography's BLAKE2b has no key
  parameter and only a 64-byte digest)
"""

import os
import hmac
import binascii
import hashlib
from typing import Optional, Type, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from ..errors import CryptoError, InvalidArgument


# Hash constants
HASH_SIZE = 32  # bytes
HASH_KEY_MIN_SIZE = 16  # bytes
HASH_KEY_MAX_SIZE = 64  # bytes

# Signature constants
ED25519_SEED_SIZE = 32  # bytes
ED25519_PUBLIC_KEY_SIZE = 32  # bytes
ED25519_SECRET_KEY_SIZE = 64  # bytes (seed || public key)
ED25519_SIGNATURE_SIZE = 64  # bytes

# Key agreement / authentication constants
AUTH_KEY_SIZE = 32  # bytes
AUTH_TAG_SIZE = 32  # bytes (HMAC-SHA512 truncated)


def random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of random bytes to generate

    Returns:
        bytes: Cryptographically secure random bytes

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError("Length must be non-negative")
    return os.urandom(length)


def blake2b_hash(
    data: bytes,
    digest_size: int = HASH_SIZE,
    key: Optional[bytes] = None,
) -> bytes:
    """
    Compute BLAKE2b hash of data.

    With a key this is BLAKE2b's native keyed mode, byte-compatible with
    libsodium's crypto_generichash.

    Args:
        data: Data to hash
        digest_size: Output hash size in bytes (1-64, default 32)
        key: Optional key for keyed hashing (at most 64 bytes)

    Returns:
        bytes: BLAKE2b hash digest

    Raises:
        ValueError: If parameters are invalid
    """
    if not 1 <= digest_size <= 64:
        raise ValueError("Digest size must be 1-64 bytes")

    if key is not None and len(key) > 64:
        raise ValueError("Key must be at most 64 bytes")

    hasher = hashlib.blake2b(digest_size=digest_size, key=key or b"")
    hasher.update(data)
    return hasher.digest()


def hmac_sha512_256(key: bytes, data: bytes) -> bytes:
    """
    Compute HMAC-SHA512 truncated to 32 bytes.

    Same construction as libsodium's crypto_auth.

    Args:
        key: 32-byte authentication key
        data: Data to authenticate

    Returns:
        bytes: 32-byte tag
    """
    if len(key) != AUTH_KEY_SIZE:
        raise ValueError(f"Key must be {AUTH_KEY_SIZE} bytes")

    mac = crypto_hmac.HMAC(key, hashes.SHA512())
    mac.update(data)
    return mac.finalize()[:AUTH_TAG_SIZE]


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in constant time.

    Uses hmac.compare_digest() which is designed for this purpose.

    Args:
        a: First byte string
        b: Second byte string

    Returns:
        bool: True if equal, False otherwise
    """
    return hmac.compare_digest(a, b)


def decode_hex(
    value: str,
    name: str,
    length: Optional[int] = None,
    error: Type[CryptoError] = InvalidArgument,
) -> bytes:
    """
    Decode a hex string crossing the API boundary.

    Args:
        value: Hex string (either case, no whitespace)
        name: What the value is, for error messages
        length: Required decoded length in bytes, if any
        error: Exception class to raise on failure

    Returns:
        bytes: Decoded bytes
    """
    if not isinstance(value, str):
        raise error(f"{name} must be given as a hex string")

    try:
        data = binascii.unhexlify(value)
    except (binascii.Error, ValueError):
        raise error(f"{name} must be in hex format")

    if length is not None and len(data) != length:
        raise error(f"{name} must be {length} bytes (got {len(data)})")

    return data


def ensure_bytes(data: Union[str, bytes], name: str) -> bytes:
    """Return str input as UTF-8 bytes and pass bytes through."""
    if isinstance(data, str):
        try:
            return data.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidArgument(f"{name} is not encodable as UTF-8: {e}") from e
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    raise InvalidArgument(f"{name} must be a string or bytes, not {type(data).__name__}")
