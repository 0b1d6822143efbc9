from datetime import timedelta

import pytest

from istio_crd_schema.codec import (
    BOOLEAN, DURATION, INT32, PERCENT, STRING, UINT32, UINT64,
    IntegerOutOfRange, InvalidDuration, TypeMismatch,
    format_duration, parse_duration,
)


def test_duration_milliseconds():
    assert DURATION.decode("30ms") == timedelta(milliseconds=30)


def test_duration_zero_is_accepted():
    assert DURATION.decode("0ms") == timedelta(0)


def test_duration_without_unit_is_rejected():
    with pytest.raises(InvalidDuration) as exc:
        DURATION.decode("30")
    assert exc.value.raw == "30"


@pytest.mark.parametrize("raw", ["", "1.5s", "-1s", "10us", "1h30m", " 5s", "5S", "ms"])
def test_duration_grammar(raw):
    with pytest.raises(InvalidDuration):
        parse_duration(raw)


@pytest.mark.parametrize("raw", ["100000000000h", "9" * 30 + "ms"])
def test_duration_beyond_timedelta_range(raw):
    with pytest.raises(InvalidDuration) as exc:
        DURATION.decode(raw)
    assert exc.value.raw == raw


def test_duration_units():
    assert parse_duration("1h") == timedelta(hours=1)
    assert parse_duration("5m") == timedelta(minutes=5)
    assert parse_duration("10s") == timedelta(seconds=10)


def test_duration_must_be_a_string():
    with pytest.raises(TypeMismatch) as exc:
        DURATION.decode(30)
    assert exc.value.actual_kind == "integer"


@pytest.mark.parametrize("millis, expected", [
    (0, "0s"),
    (30, "30ms"),
    (1500, "1500ms"),
    (90 * 1000, "90s"),
    (60 * 1000, "1m"),
    (2 * 3600 * 1000, "2h"),
    (90 * 60 * 1000, "90m"),
])
def test_format_duration_uses_largest_exact_unit(millis, expected):
    assert format_duration(timedelta(milliseconds=millis)) == expected


def test_duration_canonicalization():
    assert DURATION.encode(DURATION.decode("60000ms")) == "1m"
    assert DURATION.decode("60000ms") == DURATION.decode("1m")


def test_format_duration_truncates_below_millisecond():
    assert format_duration(timedelta(microseconds=1500)) == "1ms"


def test_format_duration_rejects_negative():
    with pytest.raises(ValueError):
        format_duration(timedelta(seconds=-1))


def test_integer_type_mismatch():
    with pytest.raises(TypeMismatch) as exc:
        INT32.decode("80")
    assert exc.value.expected_kind == "int32"
    assert exc.value.actual_kind == "string"


@pytest.mark.parametrize("value", [True, 1.0, None, [1]])
def test_integer_rejects_other_kinds(value):
    with pytest.raises(TypeMismatch):
        UINT32.decode(value)


def test_integer_width():
    assert UINT64.decode(2 ** 64 - 1) == 2 ** 64 - 1
    with pytest.raises(IntegerOutOfRange):
        UINT32.decode(-1)
    with pytest.raises(IntegerOutOfRange) as exc:
        INT32.decode(2 ** 31)
    assert exc.value.kind == "int32"


def test_percent_is_not_clamped():
    assert PERCENT.decode(150) == 150.0
    assert PERCENT.decode(-5.5) == -5.5


def test_percent_accepts_wrapped_value():
    assert PERCENT.decode({"value": 0.5}) == 0.5


def test_percent_encodes_as_float():
    encoded = PERCENT.encode(50)
    assert encoded == 50.0
    assert isinstance(encoded, float)


def test_percent_too_large_for_double():
    with pytest.raises(IntegerOutOfRange) as exc:
        PERCENT.decode(10 ** 400)
    assert exc.value.kind == "double"


@pytest.mark.parametrize("value", ["50", True, {"other": 1}])
def test_percent_type_mismatch(value):
    with pytest.raises(TypeMismatch):
        PERCENT.decode(value)


def test_string_and_boolean():
    assert STRING.decode("reviews") == "reviews"
    assert BOOLEAN.decode(False) is False
    with pytest.raises(TypeMismatch):
        STRING.decode(1)
    with pytest.raises(TypeMismatch):
        BOOLEAN.decode("true")
