"""Test limit expression parsing."""
import re

import pytest

from vebben.errors import SpecError
from vebben.limits import (
    FloatRange, IntRange, IntSet, Length, Pattern, StringSet, parse_int, parse_limit,
)


def test_empty_limit_is_no_constraint():
    """An empty limit leaves the field unconstrained."""
    assert parse_limit("string", "") is None
    assert parse_limit("bool", "") is None


def test_length_limit():
    """A bare positive integer is an exact length, for strings and ints only."""
    assert parse_limit("string", "6") == Length(6)
    assert parse_limit("int", "3") == Length(3)
    assert parse_limit("int64", "12") == Length(12)

    for t in ("float", "bool", "date"):
        with pytest.raises(SpecError, match=f"Length limit does not apply to {t}"):
            parse_limit(t, "6")

    with pytest.raises(SpecError, match="length limit"):
        parse_limit("string", "2147483648")


def test_int_range_limit():
    """'a-b' is an inclusive integer range; upper < lower is rejected."""
    assert parse_limit("int", "0-100") == IntRange(0, 100)
    assert parse_limit("string", "1-10") == IntRange(1, 10)
    assert parse_limit("float", "1-10") == IntRange(1, 10)
    assert parse_limit("int", "5-5") == IntRange(5, 5)

    with pytest.raises(SpecError, match="upper < lower"):
        parse_limit("int", "10-1")


def test_int_range_bit_width():
    """Range bounds are 32-bit unless the field is int64 or float."""
    with pytest.raises(SpecError, match="range limit"):
        parse_limit("int", "0-4294967296")
    with pytest.raises(SpecError, match="range limit"):
        parse_limit("string", "0-4294967296")

    assert parse_limit("int64", "0-4294967296") == IntRange(0, 4294967296)
    assert parse_limit("float", "0-4294967296") == IntRange(0, 4294967296)


def test_float_range_limit():
    """'a.b-c.d' is a float range, for float fields only."""
    assert parse_limit("float", "0.5-2.5") == FloatRange(0.5, 2.5)
    assert parse_limit("float", ".5-1.0") == FloatRange(0.5, 1.0)

    with pytest.raises(SpecError, match="Float limit requires float type, not int"):
        parse_limit("int", "0.5-2.5")
    with pytest.raises(SpecError, match="upper < lower"):
        parse_limit("float", "2.5-0.5")


def test_list_limit():
    """Comma-separated values become a string or integer set."""
    assert parse_limit("string", "a,b,c") == StringSet(("a", "b", "c"))
    assert parse_limit("int", "1,3,5") == IntSet((1, 3, 5))
    assert parse_limit("int64", "-1,20002147483647") == IntSet((-1, 20002147483647))

    # a single odd value is a one-item list
    assert parse_limit("string", "x=20") == StringSet(("x=20",))

    with pytest.raises(SpecError, match="Bad integer in list"):
        parse_limit("int", "1,x,3")
    with pytest.raises(SpecError, match="Value list not compatible with type float"):
        parse_limit("float", "a,b")


def test_unknown_limit():
    """Lists with empty items are not understood."""
    with pytest.raises(SpecError, match="Unknown limit: a,,b"):
        parse_limit("string", "a,,b")
    with pytest.raises(SpecError, match="Unknown limit"):
        parse_limit("int", "1,2,")


def test_regexp_limit():
    """'re:' compiles the rest as a regular expression."""
    c = parse_limit("string", r"re:^\w\d+$")
    assert isinstance(c, Pattern)
    assert c.regex.pattern == r"^\w\d+$"
    assert isinstance(c.regex, re.Pattern)

    # 're:' wins over every other shape
    c = parse_limit("string", "re:1-10")
    assert isinstance(c, Pattern)

    with pytest.raises(SpecError, match="Error compiling limit regexp"):
        parse_limit("string", "re:(")


def test_parse_int():
    """Signed decimal integers, bounded by bit width."""
    assert parse_int("2147483647", 32) == 2147483647
    assert parse_int("-2147483648", 32) == -2147483648
    assert parse_int("+7", 32) == 7

    for bad in ("2147483648", "", " 1", "1_000", "1.0", "0x10", "12\n"):
        with pytest.raises(ValueError):
            parse_int(bad, 32)

    assert parse_int("9223372036854775807", 64) == 9223372036854775807
    with pytest.raises(ValueError):
        parse_int("9223372036854775808", 64)
