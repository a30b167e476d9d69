# vebben/fieldtypes.py
"""
Field types: a converter (raw string -> (value, ok)) plus an optional
default validator, looked up by name.

    "string"     str
    "int"        int, 32-bit range
    "int64"      int, 64-bit range
    "float"      float
    "bool"       bool: "true" or "false"
    "date"       datetime, no time part (see DATE_FORMATS)
    "datetime"   datetime to the minute (see DATETIME_FORMATS)
    "dateflex"   either of the above

Dates are parsed in config.TIME_ZONE. Empty input converts to the type's
zero value (None for the date types); required-ness is checked by the
decoder before any converter runs.
"""
from __future__ import annotations
import datetime
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from . import config
from ._log import log
from .limits import parse_int
from .validators import float_validator, int_validator, string_validator

Converter = Callable[[str], tuple[Any, bool]]
Validator = Callable[[Any, Any], None]

# Date formats accepted in forms (dates only, no times). Extend as needed,
# before any decoding happens.
DATE_FORMATS = [
    "%Y. %m. %d.",
    "%Y. %m. %d",
    "%Y.%m.%d.",
    "%Y.%m.%d",
    "%Y-%m-%d",
    "%Y %m %d",
    "%Y%m%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
]

# Date-time formats accepted in forms; all require a time, to the minute.
DATETIME_FORMATS = [
    "%Y. %m. %d. %H:%M",
    "%Y. %m. %d %H:%M",
    "%Y.%m.%d. %H:%M",
    "%Y.%m.%d %H:%M",
    "%Y-%m-%d %H:%M",
    "%Y %m %d %H:%M",
    "%Y%m%d%H%M%S",
    "%d.%m.%Y %H:%M",
    "%m/%d/%Y %H:%M",
]

_FLOAT_RE = re.compile(r"^[^\s_]+\Z")

# strptime takes one-digit fields; the compact layouts need every digit
_DIGITS_ONLY = {
    "%Y%m%d": re.compile(r"^[0-9]{8}\Z"),
    "%Y%m%d%H%M%S": re.compile(r"^[0-9]{14}\Z"),
}


# ---- Converters --------------------------------------------------------------
def bool_converter(raw: str):
    if raw == "true":
        return True, True
    if raw in ("false", ""):
        return False, True
    return None, False

def string_converter(raw: str):
    return raw, True

def _int_converter(bits: int) -> Converter:
    def convert(raw: str):
        if raw == "":
            return 0, True
        try:
            return parse_int(raw, bits), True
        except ValueError:
            return None, False
    return convert

int_converter = _int_converter(32)
int64_converter = _int_converter(64)

def float_converter(raw: str):
    if raw == "":
        return 0.0, True
    if not raw.isascii() or not _FLOAT_RE.match(raw):
        return None, False
    try:
        f = float(raw)
    except ValueError:
        return None, False
    # out of range, unless infinity was asked for
    if math.isinf(f) and raw.lstrip("+-").lower() not in ("inf", "infinity"):
        return None, False
    return f, True

def _parse_time(raw: str, layouts: list[str]) -> Optional[datetime.datetime]:
    for layout in layouts:
        exact = _DIGITS_ONLY.get(layout)
        if exact is not None and not exact.match(raw):
            continue
        try:
            d = datetime.datetime.strptime(raw, layout)
        except ValueError:
            continue
        return d.replace(tzinfo=config.TIME_ZONE)
    return None

def date_converter(raw: str):
    if raw == "":
        return None, True
    d = _parse_time(raw, DATE_FORMATS)
    return d, d is not None

def datetime_converter(raw: str):
    if raw == "":
        return None, True
    d = _parse_time(raw, DATETIME_FORMATS)
    return d, d is not None

def dateflex_converter(raw: str):
    if raw == "":
        return None, True
    d = _parse_time(raw, DATE_FORMATS) or _parse_time(raw, DATETIME_FORMATS)
    return d, d is not None


# ---- Registry ----------------------------------------------------------------
@dataclass(frozen=True)
class SpecType:
    converter: Converter
    validator: Optional[Validator] = None
    custom: bool = False  # custom types handle their own limits

    def convert(self, raw: str):
        return self.converter(raw)


class TypeRegistry:
    """Type name -> SpecType. Meant to be filled at startup, then only read."""

    def __init__(self):
        self._types: dict[str, SpecType] = {}

    @classmethod
    def with_builtins(cls) -> "TypeRegistry":
        r = cls()
        r._types.update({
            "bool":     SpecType(bool_converter),
            "date":     SpecType(date_converter),
            "dateflex": SpecType(dateflex_converter),
            "datetime": SpecType(datetime_converter),
            "float":    SpecType(float_converter, float_validator),
            "int":      SpecType(int_converter, int_validator),
            "int64":    SpecType(int64_converter, int_validator),
            "string":   SpecType(string_converter, string_validator),
        })
        return r

    def register(self, name: str, converter: Converter,
                 validator: Optional[Validator] = None) -> None:
        """
        Add or replace type `name`. The converter returns (value, ok); the
        optional validator becomes the default for specs of this type.
        Limits are not parsed for registered types: the validator should
        interpret spec.limit itself.
        """
        log("register type", name, "(replacing)" if name in self._types else "")
        self._types[name] = SpecType(converter, validator, custom=True)

    def lookup(self, name: str) -> Optional[SpecType]:
        return self._types.get(name)

    def names(self) -> list[str]:
        return sorted(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types


registry = TypeRegistry.with_builtins()

def register_type(name: str, converter: Converter,
                  validator: Optional[Validator] = None) -> None:
    registry.register(name, converter, validator)
