# vebben/cli.py
from __future__ import annotations

import argparse
import datetime
import json
import shlex
from typing import Optional

from vebben.errors import MultiError, SpecError
from vebben.fieldtypes import registry
from vebben.forms import FormValues, decode_form, new_spec
from vebben.glyphs import glyph_length


# ---------- helpers -----------------------------------------------------------

def _parse_field(text: str, required: bool):
    """'key type [limit [name]]', shell-quoted, e.g. "bar int 0-100 'Bar Percentage'"."""
    parts = shlex.split(text)
    if not 2 <= len(parts) <= 4:
        raise SpecError(f"Bad field definition: {text!r} (want: key type [limit [name]])")
    key, typ = parts[0], parts[1]
    limit = parts[2] if len(parts) > 2 else ""
    name = parts[3] if len(parts) > 3 else ""
    return new_spec(required, key, typ, limit, name)


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for p in pairs:
        k, sep, v = p.partition("=")
        if not sep:
            raise SpecError(f"Bad value {p!r} (want: key=value)")
        out[k] = v
    return out


def _json_default(v):
    if isinstance(v, datetime.date):
        return v.isoformat()
    raise TypeError(f"Not JSON serializable: {type(v).__name__}")


# ---------- commands ----------------------------------------------------------

def cmd_decode(required: list[str], optional: list[str], pairs: list[str],
               query: str = "") -> int:
    try:
        specs = [_parse_field(f, True) for f in required]
        specs += [_parse_field(f, False) for f in optional]
        data = _parse_pairs(pairs)
    except SpecError as e:
        print(f"Bad spec: {e}")
        return 2

    source = FormValues.from_query(query) if query else FormValues()
    source.data.update(data)

    target: dict = {}
    try:
        decode_form(source, specs, target)
    except MultiError as e:
        for err in e:
            print(f"❌ {err}")
        return 1
    print(json.dumps(target, ensure_ascii=False, indent=2, default=_json_default))
    return 0


def cmd_glyphs(texts: list[str]) -> int:
    for t in texts:
        print(f"{glyph_length(t)}\t{t}")
    return 0


def cmd_types() -> int:
    for name in registry.names():
        t = registry.lookup(name)
        print(f"  {name}{' (custom)' if t.custom else ''}")
    return 0


def cmd_version() -> int:
    """Print the current vebben version."""
    import importlib.metadata
    try:
        version = importlib.metadata.version("vebben")
        print(f"vebben {version}")
    except importlib.metadata.PackageNotFoundError:
        print("vebben (development version)")
    return 0


# ---------- MAIN --------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="vebben", description="Check form values against field specs")
    p.add_argument("--version", action="store_true", help="Show version and exit")

    sub = p.add_subparsers(dest="cmd", required=False)

    p_dec = sub.add_parser("decode", help="Decode key=value pairs against field specs")
    p_dec.add_argument("pairs", nargs="*", help="Form values as key=value")
    p_dec.add_argument("-r", "--required", action="append", default=[],
                       help="Required field: \"key type [limit [name]]\"")
    p_dec.add_argument("-o", "--optional", action="append", default=[],
                       help="Optional field: \"key type [limit [name]]\"")
    p_dec.add_argument("--query", default="", help="URL-encoded form values, e.g. 'foo=1&bar=2'")

    p_gl = sub.add_parser("glyphs", help="Print the glyph length of each argument")
    p_gl.add_argument("texts", nargs="+")

    sub.add_parser("types", help="List registered field types")

    args = p.parse_args(argv)

    if args.version:
        return cmd_version()

    if args.cmd == "decode":
        return cmd_decode(args.required, args.optional, args.pairs, args.query)
    if args.cmd == "glyphs":
        return cmd_glyphs(args.texts)
    if args.cmd == "types":
        return cmd_types()

    p.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
