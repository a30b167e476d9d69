# vebben/limits.py
"""
Limit expressions, parsed once per spec:

    "123"          exact length (string, int, int64)
    "1-10"         range of value (numeric) or of length (string)
    "0.5-2.5"      range of value (float only)
    "a,b,c"        accepted string values
    "1,3,5"        accepted integer values (int, int64)
    "re:^\\w\\d+$"   regular expression (strings only)
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Union

from .errors import SpecError

_LENGTH_RE = re.compile(r"^[1-9][0-9]*\Z")
_RANGE_INT_RE = re.compile(r"^([0-9]+)-([0-9]+)\Z")
_RANGE_FLOAT_RE = re.compile(r"^([0-9]*[.][0-9]+)-([0-9]*[.][0-9]+)\Z")
_INT_RE = re.compile(r"^[+-]?[0-9]+\Z")


@dataclass(frozen=True)
class Length:
    n: int

@dataclass(frozen=True)
class IntRange:
    lower: int
    upper: int

@dataclass(frozen=True)
class FloatRange:
    lower: float
    upper: float

@dataclass(frozen=True)
class StringSet:
    values: tuple[str, ...]

@dataclass(frozen=True)
class IntSet:
    values: tuple[int, ...]

@dataclass(frozen=True)
class Pattern:
    regex: re.Pattern


Constraint = Union[Length, IntRange, FloatRange, StringSet, IntSet, Pattern]


def parse_int(s: str, bits: int) -> int:
    """Signed decimal integer that fits in `bits`; ValueError otherwise."""
    if not _INT_RE.match(s):
        raise ValueError(f"invalid syntax: {s!r}")
    i = int(s)
    if not -(1 << (bits - 1)) <= i < (1 << (bits - 1)):
        raise ValueError(f"value out of range: {s!r}")
    return i


def parse_limit(type_name: str, expr: str) -> Constraint | None:
    """Parse `expr` for a field of `type_name`. Raises SpecError if it makes no sense."""
    if expr == "":
        return None

    if expr.startswith("re:"):
        try:
            return Pattern(re.compile(expr[len("re:"):]))
        except re.error as e:
            raise SpecError(f"Error compiling limit regexp: {e}") from e

    if _LENGTH_RE.match(expr):
        if type_name not in ("string", "int", "int64"):
            raise SpecError(f"Length limit does not apply to {type_name}")
        try:
            return Length(parse_int(expr, 32))
        except ValueError as e:
            raise SpecError(f"Error parsing int for length limit: {e}") from e

    m = _RANGE_INT_RE.match(expr)
    if m:
        bits = 64 if type_name in ("int64", "float") else 32
        try:
            lower = parse_int(m.group(1), bits)
            upper = parse_int(m.group(2), bits)
        except ValueError as e:
            raise SpecError(f"Error parsing int for range limit: {e}") from e
        if upper < lower:
            raise SpecError("Bad range limit: upper < lower.")
        return IntRange(lower, upper)

    m = _RANGE_FLOAT_RE.match(expr)
    if m:
        if type_name != "float":
            raise SpecError(f"Float limit requires float type, not {type_name}")
        lower, upper = float(m.group(1)), float(m.group(2))
        if upper < lower:
            raise SpecError("Bad range limit: upper < lower.")
        return FloatRange(lower, upper)

    items = expr.split(",")
    if all(items):
        if type_name == "string":
            return StringSet(tuple(items))
        if type_name in ("int", "int64"):
            try:
                return IntSet(tuple(parse_int(s, 64) for s in items))
            except ValueError as e:
                raise SpecError(f"Bad integer in list: {e}") from e
        raise SpecError(f"Value list not compatible with type {type_name}")

    raise SpecError(f"Unknown limit: {expr}")
