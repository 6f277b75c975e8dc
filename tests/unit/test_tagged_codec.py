"""
Unit tests for typed_storage/codec/tagged.py

Tests type-tagged encode/decode and the best-effort read policy.
"""
import logging
from datetime import date
from decimal import Decimal

import pytest

from typed_storage.codec.resolvers import RegistryTypeResolver
from typed_storage.codec.tagged import SEPARATOR, TypeTaggedCodec
from typed_storage.errors import InvalidArgument

from sample_types import Color, Note, Opaque, Point, Reading, Thing


@pytest.fixture
def codec(resolver):
    return TypeTaggedCodec(resolver=resolver)


def test_encode_integer_record_format(codec):
    """Integers are tagged with their builtin type name."""
    assert codec.encode(42) == "builtins.int@@@42"


def test_encode_string_record_format(codec):
    assert codec.encode("hello") == 'builtins.str@@@"hello"'


@pytest.mark.parametrize("value", [
    42,
    1.5,
    True,
    "plain text",
    [1, 2, 3],
    {"a": 1, "nested": {"b": [1, 2]}},
    date(2024, 1, 2),
    Decimal("1.50"),
    Color.GREEN,
    Point(1, 2),
    Thing(uid="t1", label="lamp", tags=["living-room"], location=Point(3, 4)),
    Note(text="remember the milk", tags=["todo"], uses=2),
])
def test_roundtrip_preserves_value_and_type(codec, value):
    """Decoding an encoded value gives back an equal value of the same type."""
    decoded = codec.decode(codec.encode(value))

    assert decoded == value
    assert type(decoded) is type(value)


def test_body_containing_separator_roundtrips(codec):
    """Only the first separator splits the record."""
    value = Thing(uid="x@@@y", label=f"a{SEPARATOR}b{SEPARATOR}c")

    record = codec.encode(value)
    assert record.count(SEPARATOR) == 4
    assert codec.decode(record) == value


def test_decode_none_returns_none(codec, caplog):
    """None means 'no record' and is not logged as a failure."""
    with caplog.at_level(logging.WARNING):
        assert codec.decode(None) is None

    assert caplog.records == []


def test_encode_none_raises(codec):
    with pytest.raises(InvalidArgument, match="cannot serialize a null value"):
        codec.encode(None)


def test_encode_unserializable_value_raises(codec):
    with pytest.raises(InvalidArgument):
        codec.encode(Opaque(payload=1))


@pytest.mark.parametrize("record", [
    "no.such.module.Thing@@@{}",        # unresolvable type
    "builtins.int@@@not a number",      # malformed body
    "builtins.len@@@1",                 # not a class
    "builtins.int",                     # no separator
    "@@@42",                            # empty type name
    ".x@@@1",                           # empty module segment
    ".Gone@@@{}",
    "builtins..int@@@1",
    'builtins.int@@@"42"',                 # string body for an int
    'builtins.float@@@null',
    "",
])
def test_decode_bad_record_returns_none_and_warns(codec, caplog, record):
    """Bad records degrade to None with a warning naming the record."""
    with caplog.at_level(logging.WARNING, logger="typed_storage.codec.tagged"):
        assert codec.decode(record) is None

    assert "Couldn't deserialize value" in caplog.text
    assert record in caplog.text


def test_decode_uses_configured_resolver():
    """Types missing from a registry-only resolver are not imported."""
    codec = TypeTaggedCodec(resolver=RegistryTypeResolver([Point]))

    assert codec.decode("builtins.int@@@42") is None
    assert codec.decode(codec.encode(Point(5, 6))) == Point(5, 6)


def test_value_type_rejects_wrong_instances():
    codec = TypeTaggedCodec(value_type=int)

    assert codec.encode(7) == "builtins.int@@@7"
    with pytest.raises(InvalidArgument):
        codec.encode("seven")


def test_value_type_rejects_wrong_stored_type():
    """A stored record of the wrong type decodes to None."""
    codec = TypeTaggedCodec(value_type=int)

    assert codec.decode('builtins.str@@@"seven"') is None
    assert codec.decode("builtins.bool@@@true") is True


@pytest.mark.parametrize("value", [
    float("inf"),
    float("-inf"),
    float("nan"),
    [1.0, float("inf")],
    {"ratio": float("nan")},
    Reading(sensor="s1", value=float("-inf")),
])
def test_encode_non_finite_floats_rejected(codec, value):
    """inf/nan have no JSON form and must not be written as null."""
    with pytest.raises(InvalidArgument, match="non-finite"):
        codec.encode(value)


def test_finite_floats_roundtrip(codec):
    value = Reading(sensor="s1", value=-0.25)
    assert codec.decode(codec.encode(value)) == value


def test_mismatched_body_is_not_coerced(codec, caplog):
    with caplog.at_level(logging.WARNING, logger="typed_storage.codec.tagged"):
        assert codec.decode('builtins.int@@@"42"') is None
        assert codec.decode("builtins.str@@@42") is None

    assert "Couldn't deserialize value" in caplog.text
