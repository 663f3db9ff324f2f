"""
recordcrypto Shared-Key Authentication

MAC tags for parties holding a shared key (see keys.generate_shared_key).

Tag = HMAC-SHA512(shared_key, message)[:32]
"""

from typing import Union

from ..errors import InvalidKeyFormat
from .backend import require_initialized
from .primitives import (
    constant_time_compare,
    decode_hex,
    ensure_bytes,
    hmac_sha512_256,
    AUTH_KEY_SIZE,
    AUTH_TAG_SIZE,
)


def _tag_bytes(message: Union[str, bytes], shared_key: str) -> bytes:
    require_initialized()
    data = ensure_bytes(message, "Message")
    key = decode_hex(shared_key, "Shared key", AUTH_KEY_SIZE, error=InvalidKeyFormat)
    return hmac_sha512_256(key, data)


def tag(message: Union[str, bytes], shared_key: str) -> str:
    """
    Compute an authentication tag for a message.

    Args:
        message: Text (UTF-8 encoded) or bytes
        shared_key: 32-byte shared key as hex

    Returns:
        str: 32-byte tag as hex
    """
    return _tag_bytes(message, shared_key).hex()


def authenticate(message: Union[str, bytes], tag_hex: str, shared_key: str) -> bool:
    """
    Check a tag against a message in constant time.

    Returns:
        bool: True if the tag matches

    Raises:
        InvalidArgument: If the tag is not hex of the right length
        InvalidKeyFormat: If the shared key is malformed
    """
    expected = _tag_bytes(message, shared_key)
    provided = decode_hex(tag_hex, "Tag", AUTH_TAG_SIZE)
    return constant_time_compare(expected, provided)
