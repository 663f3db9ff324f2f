"""
recordcrypto Key Management

Handles:
- Ed25519 keypair generation (hex encoded)
- Loading signing / verification keys from hex
- Ed25519 -> X25519 key conversion
- Shared key agreement between two Ed25519 identities
- Random byte generation

Key Types:
- Public Key: 32-byte Ed25519 public key
- Secret Key: 64-byte signing key, seed (32) || public key (32)
- Shared Key: 32-byte X25519 shared secret

SECURITY NOTES:
- Secret keys are never logged
- Secret keys must never leave the owning process
"""

import logging
from dataclasses import dataclass
from typing import Dict

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from cryptography.hazmat.primitives import serialization
import nacl.bindings
import nacl.exceptions

from ..errors import InvalidArgument, InvalidKeyFormat
from .backend import require_initialized
from . import primitives
from .primitives import (
    constant_time_compare,
    decode_hex,
    ED25519_PUBLIC_KEY_SIZE,
    ED25519_SECRET_KEY_SIZE,
    ED25519_SEED_SIZE,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Keypair:
    """
    Hex-encoded Ed25519 keypair.

    The secret key embeds the public key as its last 32 bytes.
    """

    public_key: str
    secret_key: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the wire field names."""
        return {"publicKey": self.public_key, "secretKey": self.secret_key}


def _raw_public(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _raw_seed(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _keypair_from_private(private_key: Ed25519PrivateKey) -> Keypair:
    public = _raw_public(private_key.public_key())
    secret = _raw_seed(private_key) + public
    return Keypair(public_key=public.hex(), secret_key=secret.hex())


def generate_keypair() -> Keypair:
    """
    Generate a new Ed25519 keypair.

    Returns:
        Keypair: 64-hex-char public key, 128-hex-char secret key
    """
    require_initialized()
    keypair = _keypair_from_private(Ed25519PrivateKey.generate())
    logger.debug(f"Generated keypair {keypair.public_key[:16]}...")
    return keypair


def load_signing_key(secret_key: str) -> Ed25519PrivateKey:
    """
    Load an Ed25519 signing key from its 64-byte hex form.

    Raises:
        InvalidKeyFormat: If the key is malformed or its embedded
            public key does not belong to its seed
    """
    data = decode_hex(
        secret_key, "Secret key", ED25519_SECRET_KEY_SIZE, error=InvalidKeyFormat
    )
    private_key = Ed25519PrivateKey.from_private_bytes(data[:ED25519_SEED_SIZE])

    if not constant_time_compare(_raw_public(private_key.public_key()), data[ED25519_SEED_SIZE:]):
        raise InvalidKeyFormat("Secret key does not embed its own public key")

    return private_key


def load_verify_key(public_key: str) -> Ed25519PublicKey:
    """
    Load an Ed25519 public key from its 32-byte hex form.

    Raises:
        InvalidKeyFormat: If the key is malformed or not a point on the curve
    """
    data = decode_hex(
        public_key, "Public key", ED25519_PUBLIC_KEY_SIZE, error=InvalidKeyFormat
    )
    if not nacl.bindings.crypto_core_ed25519_is_valid_point(data):
        raise InvalidKeyFormat("Public key is not a valid Ed25519 point")
    try:
        return Ed25519PublicKey.from_public_bytes(data)
    except ValueError as e:
        raise InvalidKeyFormat(f"Invalid public key: {e}") from e


def keypair_from_secret_key(secret_key: str) -> Keypair:
    """Rebuild the full keypair from a secret key."""
    return _keypair_from_private(load_signing_key(secret_key))


def random_bytes(n: int = 32) -> str:
    """
    Generate n random bytes, hex encoded.

    Args:
        n: Number of bytes (positive integer, default 32)

    Returns:
        str: 2n lowercase hex characters

    Raises:
        InvalidArgument: If n is not a positive integer
    """
    require_initialized()
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidArgument(f"Byte count must be a positive integer, not {n!r}")
    return primitives.random_bytes(n).hex()


def secret_key_to_curve(secret_key: str) -> str:
    """
    Convert an Ed25519 secret key to an X25519 private key.

    Returns:
        str: 32-byte X25519 private key, hex encoded
    """
    load_signing_key(secret_key)
    curve_secret = nacl.bindings.crypto_sign_ed25519_sk_to_curve25519(
        bytes.fromhex(secret_key)
    )
    return curve_secret.hex()


def public_key_to_curve(public_key: str) -> str:
    """
    Convert an Ed25519 public key to an X25519 public key.

    Returns:
        str: 32-byte X25519 public key, hex encoded

    Raises:
        InvalidKeyFormat: If the key is malformed or not a valid point
    """
    load_verify_key(public_key)
    try:
        curve_public = nacl.bindings.crypto_sign_ed25519_pk_to_curve25519(
            bytes.fromhex(public_key)
        )
    except nacl.exceptions.CryptoError as e:
        raise InvalidKeyFormat(f"Public key has no curve25519 form: {e}") from e
    return curve_public.hex()


def generate_shared_key(secret_key: str, public_key: str) -> str:
    """
    Agree a shared key between our secret key and a peer's public key.

    Both sides obtain the same value:
        generate_shared_key(sk_a, pk_b) == generate_shared_key(sk_b, pk_a)

    Args:
        secret_key: Our 64-byte Ed25519 secret key (hex)
        public_key: Peer's 32-byte Ed25519 public key (hex)

    Returns:
        str: 32-byte X25519 shared secret, hex encoded
    """
    require_initialized()
    curve_private = X25519PrivateKey.from_private_bytes(
        bytes.fromhex(secret_key_to_curve(secret_key))
    )
    curve_public = X25519PublicKey.from_public_bytes(
        bytes.fromhex(public_key_to_curve(public_key))
    )

    try:
        shared = curve_private.exchange(curve_public)
    except ValueError as e:
        # Low-order peer points yield an all-zero secret
        raise InvalidKeyFormat(f"Key agreement failed: {e}") from e

    return shared.hex()
