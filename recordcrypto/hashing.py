"""
recordcrypto Hashing

Keyed BLAKE2b-256 over text, bytes, and canonicalized records. The key is
the one passed to initialize().
"""

from collections.abc import Mapping
from typing import Union

from .canonical import Record, canonicalize, to_node
from .crypto.backend import get_hash_key, require_initialized
from .crypto.primitives import blake2b_hash, ensure_bytes, HASH_SIZE
from .errors import InvalidArgument, MissingRequiredField


# Reserved field holding the signature envelope
SIGN_FIELD = "sign"

# Output formats
FORMAT_HEX = "hex"
FORMAT_BYTES = "bytes"
HASH_FORMATS = (FORMAT_HEX, FORMAT_BYTES)


def hash(data: Union[str, bytes], fmt: str = FORMAT_HEX) -> Union[str, bytes]:
    """
    Hash text or bytes.

    Args:
        data: Text (UTF-8 encoded) or bytes
        fmt: "hex" for a 64-char hex string, "bytes" for 32 raw bytes

    Returns:
        Digest in the requested format

    Raises:
        NotInitialized: If initialize() has not been called
        InvalidArgument: If data or fmt is invalid
    """
    key = get_hash_key()
    if fmt not in HASH_FORMATS:
        raise InvalidArgument(f"Unsupported output format {fmt!r} (expected one of {HASH_FORMATS})")

    digest = blake2b_hash(ensure_bytes(data, "Hash input"), digest_size=HASH_SIZE, key=key)
    return digest.hex() if fmt == FORMAT_HEX else digest


def hash_obj(
    record: Record,
    remove_sign: bool = False,
    fmt: str = FORMAT_HEX,
) -> Union[str, bytes]:
    """
    Hash a record independently of key insertion order.

    Args:
        record: Mapping, sequence, or Canonicalizable object
        remove_sign: Leave the "sign" field out of the digest
        fmt: "hex" or "bytes"

    Returns:
        Digest in the requested format

    Raises:
        InvalidInputKind: If record is not a record
        MissingRequiredField: If remove_sign is set but the record has
            no "sign" field
    """
    require_initialized()
    node = to_node(record)

    exclude = ()
    if remove_sign:
        if not isinstance(node, Mapping) or SIGN_FIELD not in node:
            raise MissingRequiredField(
                f"Record must contain a '{SIGN_FIELD}' field when remove_sign is set"
            )
        exclude = (SIGN_FIELD,)

    return hash(canonicalize(node, exclude_keys=exclude), fmt)
