from collections import OrderedDict

import pytest

from recordcrypto.canonical import canonicalize, stringify
from recordcrypto.errors import InvalidArgument, InvalidInputKind


class Transfer:
    def __init__(self, to, amount):
        self.to = to
        self.amount = amount

    def to_record(self):
        return {"to": self.to, "amount": self.amount}


def test_keys_sorted_at_every_level():
    record = {"b": {"z": 1, "a": 2}, "a": [3, {"y": None, "x": True}]}
    assert stringify(record) == '{"a":[3,{"x":true,"y":null}],"b":{"a":2,"z":1}}'


def test_insertion_order_does_not_matter():
    first = OrderedDict([("a", 1), ("b", 2)])
    second = OrderedDict([("b", 2), ("a", 1)])
    assert canonicalize(first) == canonicalize(second)


def test_arrays_keep_their_order():
    assert stringify({"a": [3, 1, 2]}) == '{"a":[3,1,2]}'
    assert stringify({"a": [3, 1, 2]}) != stringify({"a": [1, 2, 3]})


def test_keys_sorted_bytewise_on_utf8():
    # UTF-16 code units would put U+1F600 before U+FF21
    record = {"\U0001F600": 1, "Ａ": 2, "B": 3, "a": 4}
    assert stringify(record) == '{"B":3,"a":4,"Ａ":2,"\U0001F600":1}'


def test_primitive_encodings():
    record = {
        "s": 'quote " and é',
        "i": -12,
        "f": 1.5,
        "whole": 2.0,
        "small": 1e-7,
        "big": 1e21,
        "t": True,
        "f2": False,
        "n": None,
        "raw": b"\x01\xff",
    }
    assert stringify(record) == (
        '{"big":1e+21,"f":1.5,"f2":false,"i":-12,"n":null,'
        '"raw":"01ff","s":"quote \\" and é","small":1e-7,"t":true,"whole":2}'
    )


def test_canonical_bytes_are_utf8():
    assert canonicalize({"k": "é"}) == '{"k":"é"}'.encode("utf-8")


def test_exclude_keys_only_at_top_level():
    record = {"sign": 1, "inner": {"sign": 2}}
    assert stringify(record, exclude_keys=("sign",)) == '{"inner":{"sign":2}}'


def test_exclude_missing_key_is_not_an_error():
    assert stringify({"a": 1}, exclude_keys=("sign",)) == '{"a":1}'


def test_exclude_keys_as_bare_string_rejected():
    with pytest.raises(InvalidArgument):
        stringify({"sign": 1, "s": 2}, exclude_keys="sign")


def test_top_level_sequence():
    assert stringify([{"b": 1, "a": 2}, "x"]) == '[{"a":2,"b":1},"x"]'


def test_canonicalizable_objects():
    assert stringify(Transfer("bob", 5)) == '{"amount":5,"to":"bob"}'
    assert stringify({"t": Transfer("bob", 5)}) == '{"t":{"amount":5,"to":"bob"}}'


@pytest.mark.parametrize("value", [None, "text", 5, 1.5, True, b"bytes"])
def test_non_record_input_rejected(value):
    with pytest.raises(InvalidInputKind):
        canonicalize(value)


@pytest.mark.parametrize("value", [
    {1: "int key"},
    {"a": {1, 2}},
    {"a": float("nan")},
    {"a": float("inf")},
    {"a": object()},
])
def test_unsupported_values_rejected(value):
    with pytest.raises(InvalidArgument):
        canonicalize(value)


def test_cycles_rejected():
    record = {"a": 1}
    record["self"] = record
    with pytest.raises(InvalidArgument):
        canonicalize(record)


def test_shared_references_are_not_cycles():
    shared = {"x": 1}
    assert stringify({"a": shared, "b": shared}) == '{"a":{"x":1},"b":{"x":1}}'
