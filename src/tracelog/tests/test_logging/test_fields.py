# src/tracelog/tests/test_logging/test_fields.py
from dataclasses import dataclass

import pytest

from tracelog.core.logging.fields import (
    Field,
    SourceLocation,
    ValueKind,
    classify,
    encode_fields,
    source_location,
    trace_context,
)


@dataclass
class Point:
    x: int
    y: int


def as_pairs(fields):
    return [(f.key, f.value) for f in fields]


def test_empty_input_gives_no_fields():
    assert encode_fields([]) == []


def test_odd_trailing_key_is_dropped():
    assert encode_fields(["lonely"]) == encode_fields([])
    assert as_pairs(encode_fields(["a", "1", "b"])) == [("a", "1")]


def test_error_key_with_exception_uses_configured_key():
    fields = encode_fields(["error", ValueError("boom")], error_key="err")
    assert as_pairs(fields) == [("err", "boom")]


def test_configured_error_key_is_recognized():
    fields = encode_fields(["failure", KeyError("missing")], error_key="failure")
    assert as_pairs(fields) == [("failure", "'missing'")]


@pytest.mark.parametrize("value", ["not-an-error", 3, None, b"bytes"])
def test_error_key_without_exception_is_dropped(value):
    assert encode_fields(["error", value]) == []
    assert encode_fields(["err", value], error_key="err") == []


def test_integers_render_base_ten():
    assert as_pairs(encode_fields(["n", 42, "neg", -7, "big", 2**63 - 1])) == [
        ("n", "42"),
        ("neg", "-7"),
        ("big", "9223372036854775807"),
    ]


def test_strings_bytes_and_none():
    fields = encode_fields(["s", "plain", "b", b"caf\xc3\xa9", "ba", bytearray(b"xy"), "missing", None])
    assert as_pairs(fields) == [("s", "plain"), ("b", "café"), ("ba", "xy")]


def test_invalid_utf8_bytes_do_not_raise():
    [field] = encode_fields(["b", b"\xff\xfe"])
    assert field.key == "b"
    assert isinstance(field.value, str)


def test_other_values_fall_back_to_repr():
    fields = encode_fields(["flag", True, "pt", Point(1, 2), "ratio", 0.5, "tags", ["a", "b"]])
    assert as_pairs(fields) == [
        ("flag", "True"),
        ("pt", "Point(x=1, y=2)"),
        ("ratio", "0.5"),
        ("tags", "['a', 'b']"),
    ]


def test_exception_under_plain_key_renders_message():
    assert as_pairs(encode_fields(["cause", RuntimeError("disk full")])) == [("cause", "disk full")]


def test_non_string_keys_are_skipped():
    assert as_pairs(encode_fields([1, "one", "two", "2"])) == [("two", "2")]


def test_order_is_stable_and_duplicates_are_kept():
    fields = encode_fields(["k", "first", "other", "x", "k", "second"])
    assert as_pairs(fields) == [("k", "first"), ("other", "x"), ("k", "second")]
    assert all(f.label for f in fields)


def test_extra_mapping_is_appended_after_pairs():
    fields = encode_fields(["a", "1"], extra={"b": 2, "error": OSError("eof")})
    assert as_pairs(fields) == [("a", "1"), ("b", "2"), ("err", "eof")]


@pytest.mark.parametrize(
    "value, kind",
    [
        ("s", ValueKind.STRING),
        (None, ValueKind.NONE),
        (b"b", ValueKind.BYTES),
        (memoryview(b"m"), ValueKind.BYTES),
        (5, ValueKind.INTEGER),
        (False, ValueKind.OTHER),
        (ValueError("v"), ValueKind.ERROR),
        (1.5, ValueKind.OTHER),
    ],
)
def test_classify(value, kind):
    assert classify(value) is kind


def test_payload_fields_are_not_labels():
    loc = source_location(SourceLocation("app/views.py", 12, "index"))
    assert loc.label is False
    assert loc.rendered() == {"file": "app/views.py", "line": "12", "function": "index"}

    fields = trace_context("abc", "def", True, "my-project")
    assert [(f.key, f.value) for f in fields] == [
        ("logging.googleapis.com/trace", "projects/my-project/traces/abc"),
        ("logging.googleapis.com/spanId", "def"),
        ("logging.googleapis.com/trace_sampled", True),
    ]
    assert Field("k", "v").rendered() == "v"
