"""
recordcrypto Signatures

Ed25519 signatures over hex-encoded messages (normally digests).

Signature format (libsodium "combined" form):
    signature (64 bytes) || message

Verification opens the signature with the public key and compares the
embedded message with the expected one.

Outcome rules:
- Malformed key or signature encoding -> raises
- Signature that does not open under the key -> False
- Opened message differs from the expected message -> False
"""

import logging

from cryptography.exceptions import InvalidSignature

from ..errors import InvalidSignatureFormat
from .backend import require_initialized
from .keys import load_signing_key, load_verify_key
from .primitives import constant_time_compare, decode_hex, ED25519_SIGNATURE_SIZE


logger = logging.getLogger(__name__)


def sign(message: str, secret_key: str) -> str:
    """
    Sign a hex-encoded message.

    Args:
        message: Message (usually a digest) as hex
        secret_key: 64-byte Ed25519 secret key as hex

    Returns:
        str: Combined signature as hex

    Raises:
        InvalidArgument: If the message is not hex
        InvalidKeyFormat: If the secret key is malformed
    """
    require_initialized()
    data = decode_hex(message, "Message")
    private_key = load_signing_key(secret_key)

    signature = private_key.sign(data)
    return (signature + data).hex()


def verify(message: str, signature: str, public_key: str) -> bool:
    """
    Verify a combined signature against an expected message.

    Args:
        message: Expected message as hex
        signature: Combined signature as hex
        public_key: 32-byte Ed25519 public key as hex

    Returns:
        bool: True if the signature is valid for this message and key

    Raises:
        InvalidArgument: If the message is not hex
        InvalidKeyFormat: If the public key is malformed
        InvalidSignatureFormat: If the signature is malformed
    """
    require_initialized()
    expected = decode_hex(message, "Message")
    verify_key = load_verify_key(public_key)
    signed = decode_hex(signature, "Signature", error=InvalidSignatureFormat)

    if len(signed) < ED25519_SIGNATURE_SIZE:
        raise InvalidSignatureFormat(
            f"Signature must be at least {ED25519_SIGNATURE_SIZE} bytes (got {len(signed)})"
        )

    detached = signed[:ED25519_SIGNATURE_SIZE]
    opened = signed[ED25519_SIGNATURE_SIZE:]

    try:
        verify_key.verify(detached, opened)
    except InvalidSignature:
        logger.debug(f"Signature does not open under {public_key[:16]}...")
        return False

    return constant_time_compare(opened, expected)
