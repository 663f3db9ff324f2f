"""
recordcrypto Record Canonicalization

Turns a record into a byte-stable string so that records with the same
content hash identically, whatever order their keys were inserted in.

Canonical form (compact JSON with fixed rules):
- Mapping keys sorted byte-wise on their UTF-8 encoding, at every level
- Sequences keep their element order
- Strings JSON-escaped, non-ASCII left literal
- true / false / null literals
- Integers in decimal
- Floats in shortest round-trip form; integral floats below 1e21 drop
  the fraction (1.0 -> 1) and exponents carry no leading zeros
  (1e-07 -> 1e-7)
- bytes as lowercase hex strings
- No whitespace

Top-level fields named in exclude_keys are left out, which is how the
reserved envelope fields are kept out of the bytes they certify.
"""

import json
import math
from collections.abc import Mapping
from typing import Any, Iterable, List, Protocol, Set, Union, runtime_checkable

from .errors import InvalidArgument, InvalidInputKind


# Largest magnitude at which integral floats are written without exponent
_PLAIN_FLOAT_LIMIT = 1e21


@runtime_checkable
class Canonicalizable(Protocol):
    """Anything that can present itself as a record."""

    def to_record(self) -> Mapping:
        ...


Record = Union[Mapping, list, tuple, Canonicalizable]


def to_node(record: Any) -> Union[Mapping, list, tuple]:
    """
    Resolve a top-level record to a mapping or sequence.

    Raises:
        InvalidInputKind: If record is a primitive, None, or another
            non-record value
    """
    if isinstance(record, (Mapping, list, tuple)):
        return record
    if isinstance(record, Canonicalizable):
        node = record.to_record()
        if not isinstance(node, Mapping):
            raise InvalidInputKind(
                f"{type(record).__name__}.to_record() must return a mapping"
            )
        return node
    raise InvalidInputKind(f"Expected a record, got {type(record).__name__}")


def _encode_key(key: Any) -> bytes:
    if not isinstance(key, str):
        raise InvalidArgument(f"Record keys must be strings, got {type(key).__name__}")
    try:
        return key.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidArgument(f"Record key {key!r} is not encodable as UTF-8") from e


def _encode_float(value: float) -> str:
    if not math.isfinite(value):
        raise InvalidArgument(f"Cannot canonicalize non-finite number {value!r}")

    if value.is_integer() and abs(value) < _PLAIN_FLOAT_LIMIT:
        return str(int(value))

    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        sign = "-" if exponent.startswith("-") else "+"
        digits = exponent.lstrip("+-").lstrip("0") or "0"
        text = f"{mantissa}e{sign}{digits}"
    return text


def _encode_mapping(
    mapping: Mapping,
    exclude_keys: Set[str],
    parts: List[str],
    active: Set[int],
) -> None:
    entries = sorted(
        ((_encode_key(key), key, value) for key, value in mapping.items()
         if key not in exclude_keys),
        key=lambda entry: entry[0],
    )

    parts.append("{")
    for index, (_, key, value) in enumerate(entries):
        if index:
            parts.append(",")
        parts.append(json.dumps(key, ensure_ascii=False))
        parts.append(":")
        _encode(value, parts, active)
    parts.append("}")


def _encode(value: Any, parts: List[str], active: Set[int]) -> None:
    if value is None:
        parts.append("null")
    elif value is True:
        parts.append("true")
    elif value is False:
        parts.append("false")
    elif isinstance(value, str):
        parts.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, int):
        parts.append(str(int(value)))
    elif isinstance(value, float):
        parts.append(_encode_float(float(value)))
    elif isinstance(value, (bytes, bytearray)):
        parts.append(json.dumps(bytes(value).hex()))
    elif isinstance(value, (Mapping, list, tuple)) or isinstance(value, Canonicalizable):
        node = to_node(value)
        marker = id(node)
        if marker in active:
            raise InvalidArgument("Cannot canonicalize a record containing a cycle")
        active.add(marker)
        try:
            if isinstance(node, Mapping):
                _encode_mapping(node, set(), parts, active)
            else:
                parts.append("[")
                for index, item in enumerate(node):
                    if index:
                        parts.append(",")
                    _encode(item, parts, active)
                parts.append("]")
        finally:
            active.discard(marker)
    else:
        raise InvalidArgument(f"Cannot canonicalize value of type {type(value).__name__}")


def stringify(record: Record, exclude_keys: Iterable[str] = ()) -> str:
    """
    Return the canonical string form of a record.

    Args:
        record: Mapping, sequence, or Canonicalizable object
        exclude_keys: Top-level field names to leave out; names that are
            not present are ignored

    Returns:
        str: Canonical compact JSON text

    Raises:
        InvalidInputKind: If record is not a record
        InvalidArgument: If record contains unsupported values, or
            exclude_keys is a single string
    """
    if isinstance(exclude_keys, (str, bytes)):
        raise InvalidArgument(
            "exclude_keys must be a collection of field names, not a string"
        )

    node = to_node(record)
    parts: List[str] = []

    if isinstance(node, Mapping):
        _encode_mapping(node, set(exclude_keys), parts, {id(node)})
    else:
        _encode(node, parts, set())

    return "".join(parts)


def canonicalize(record: Record, exclude_keys: Iterable[str] = ()) -> bytes:
    """Return the canonical UTF-8 bytes of a record."""
    text = stringify(record, exclude_keys)
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidArgument(f"Record contains text not encodable as UTF-8: {e}") from e
