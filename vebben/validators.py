# vebben/validators.py
# Default validators for the standard types. Each is called with the spec
# and the converted value, and raises FormError on the first failed check.
from __future__ import annotations

from .errors import FormError
from .glyphs import glyph_length
from .limits import FloatRange, IntRange, IntSet, Length, Pattern, StringSet


def _fail(spec, what: str) -> FormError:
    return FormError(f"{spec.name} {what}", key=spec.key)


def string_validator(spec, v) -> None:
    if not isinstance(v, str):
        raise _fail(spec, f"({type(v).__name__}) is not a string")

    c = spec.constraint
    if isinstance(c, Length) and glyph_length(v) != c.n:
        raise _fail(spec, "has the wrong length")
    if isinstance(c, IntRange):
        n = glyph_length(v)
        if n < c.lower:
            raise _fail(spec, "is too short")
        if n > c.upper:
            raise _fail(spec, "is too long")
    if isinstance(c, Pattern) and not c.regex.search(v):
        raise _fail(spec, "has the wrong format")
    if isinstance(c, StringSet) and v not in c.values:
        raise _fail(spec, "has the wrong value")


def int_validator(spec, v) -> None:
    """Shared by int and int64; the converter already enforced the bit width."""
    if isinstance(v, bool) or not isinstance(v, int):
        raise _fail(spec, f"({type(v).__name__}) is not an integer")

    c = spec.constraint
    # length of the decimal form, sign included
    if isinstance(c, Length) and len(str(v)) != c.n:
        raise _fail(spec, "has the wrong length")
    if isinstance(c, IntRange):
        if v < c.lower:
            raise _fail(spec, "is too low")
        if v > c.upper:
            raise _fail(spec, "is too high")
    if isinstance(c, IntSet) and v not in c.values:
        raise _fail(spec, "has the wrong value")


def float_validator(spec, v) -> None:
    if not isinstance(v, float):
        raise _fail(spec, f"({type(v).__name__}) is not a floating point number")

    c = spec.constraint
    if isinstance(c, (FloatRange, IntRange)):
        if v < c.lower:
            raise _fail(spec, "is too low")
        if v > c.upper:
            raise _fail(spec, "is too high")
