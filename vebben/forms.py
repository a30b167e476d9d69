# vebben/forms.py
from __future__ import annotations
import dataclasses
import typing
from collections.abc import Mapping, MutableMapping
from copy import copy as _shallow_copy
from types import UnionType
from typing import Any, Callable, Iterable, Optional, Union
from urllib.parse import parse_qs

from . import config, fieldtypes
from ._log import log
from .errors import FormError, MultiError, ShapeError, SpecError
from .limits import Constraint, parse_limit


class FormSpec:
    """
    One expected form value, found under `key`.

    `type` is a registered type name (see vebben.fieldtypes), `limit` an
    optional limit expression (see vebben.limits), `name` the display name
    used in error messages ("<name> is too long"); it defaults to the key.

    The limit is parsed by init(), which also picks the type's default
    validator unless one was given. Bad specs are programmer errors and
    raise SpecError. Use required_spec / optional_spec rather than calling
    init() yourself.

    A validator is called as validator(spec, value) with the converted value
    and raises FormError to reject it.
    """
    def __init__(self, key: str, type: str, required: bool = False, limit: str = "",
                 name: str = "", validator: Optional[Callable[[FormSpec, Any], None]] = None,
                 registry: Optional[fieldtypes.TypeRegistry] = None):
        self.key = key
        self.type = type
        self.required = required
        self.limit = limit
        self.name = name or key
        self.validator = validator
        self.registry = fieldtypes.registry if registry is None else registry
        self._constraint: Constraint | None = None

    @property
    def constraint(self) -> Constraint | None:
        """The parsed limit, if the limit was parsed."""
        return self._constraint

    def init(self) -> "FormSpec":
        if not self.key.strip():
            raise SpecError("Empty FormSpec key.")
        t = self.registry.lookup(self.type)
        if t is None:
            raise SpecError(f"Unsupported FormSpec type: {self.type}")
        # custom types interpret their own limits
        if not t.custom:
            self._constraint = parse_limit(self.type, self.limit)
        if self.validator is None:
            self.validator = t.validator
        log("spec", self.key, self.type, repr(self.limit), "->", self._constraint)
        return self

    def convert(self, raw: str) -> Any:
        """Convert raw to this spec's type, or raise FormError."""
        t = self.registry.lookup(self.type)
        if t is None:
            raise SpecError(f"Unsupported FormSpec type: {self.type}")
        val, ok = t.convert(raw)
        if not ok:
            raise FormError(f"{self.name} could not be converted to {self.type}", key=self.key)
        return val

    def validate(self, value: Any) -> None:
        if self.validator is not None:
            self.validator(self, value)

    def copy(self, key: str, name: str = "") -> "FormSpec":
        """
        Same spec under a new key and name (name defaults to the key).
        Nothing is re-parsed: use it to stamp out many identical fields
        cheaply, e.g. lots of required strings.
        """
        key = key.strip()
        if not key:
            raise SpecError("Empty FormSpec key.")
        dup = _shallow_copy(self)
        dup.key = key
        dup.name = name.strip() or key
        return dup

    def __repr__(self) -> str:
        flag = "required" if self.required else "optional"
        return f"<FormSpec {self.key!r} {self.type} {flag} limit={self.limit!r}>"


def new_spec(required: bool, key: str, type: str, limit: str = "", name: str = "", *,
             validator=None, registry=None) -> FormSpec:
    """Initialized FormSpec; raises SpecError if the spec is not understood."""
    key = key.strip()
    if not key:
        raise SpecError("key may not be empty")
    return FormSpec(key, type, required, limit, name, validator, registry).init()

def required_spec(key: str, type: str, limit: str = "", name: str = "", **kw) -> FormSpec:
    return new_spec(True, key, type, limit, name, **kw)

def optional_spec(key: str, type: str, limit: str = "", name: str = "", **kw) -> FormSpec:
    return new_spec(False, key, type, limit, name, **kw)


# ---- Value sources -----------------------------------------------------------
class FormValues:
    """Plain form data (request.form, parse_qs output) as a value source."""

    def __init__(self, data: Mapping[str, str | list[str]] | None = None):
        data = data or {}
        # normalize multi-values to a single string (first)
        self.data: dict[str, str] = {
            k: (v if isinstance(v, str) else (v[0] if v else ""))
            for k, v in data.items()
        }

    @classmethod
    def from_query(cls, qs: str | bytes):
        if isinstance(qs, bytes):
            qs = qs.decode()
        return cls(parse_qs(qs.lstrip("?"), keep_blank_values=True))

    def form_value(self, key: str) -> str:
        return self.data.get(key, "")


def as_value_source(source):
    """Anything with form_value(key), a mapping, or a request with a .form mapping."""
    if callable(getattr(source, "form_value", None)):
        return source
    if isinstance(source, Mapping):
        return FormValues(source)
    form = getattr(source, "form", None)
    if isinstance(form, Mapping):
        return FormValues(form)
    raise TypeError(f"Not a form value source: {type(source).__name__}")


# ---- Decoding ----------------------------------------------------------------
def decode_form(source, specs: Iterable[FormSpec], target, *,
                trim_space: Optional[bool] = None) -> None:
    """
    Populate target from the values of a submitted form (or any other value
    source, see as_value_source).

    Values are whitespace-trimmed first unless config.TRIM_SPACE (or
    trim_space) is off. Missing values are the type's zero value unless the
    spec is required. Values without a spec are ignored.

    Every bad value is reported: on failure a MultiError is raised and
    target is left untouched. On success each value is set on the target
    member whose name (or dataclass field metadata "form") matches the
    spec key, case-insensitively; a mapping target gets items instead.
    """
    src = as_value_source(source)
    trim = config.TRIM_SPACE if trim_space is None else trim_space

    errors: list[FormError] = []
    values: dict[str, Any] = {}

    for spec in specs:
        raw = src.form_value(spec.key) or ""
        if trim:
            raw = raw.strip()
        if spec.required and raw == "":
            errors.append(FormError(f"{spec.name} is required", key=spec.key))
            continue
        try:
            val = spec.convert(raw)
            spec.validate(val)
        except FormError as e:
            if e.key is None:
                e.key = spec.key
            errors.append(e)
            continue
        values[spec.key] = val

    if errors:
        log("decode_form:", len(errors), "error(s):", [e.key for e in errors])
        raise MultiError(errors)

    transfer(values, target)
    log("decode_form: ok,", len(values), "value(s) into", type(target).__name__)


def transfer(values: Mapping[str, Any], target) -> None:
    """Set decoded values on target; ShapeError if a type does not fit."""
    if isinstance(target, MutableMapping):
        target.update(values)
        return

    exact, folded = _members(target)
    plan = []
    for key, val in values.items():
        m = exact.get(key) or folded.get(key.lower())
        if m is None:
            continue
        attr, ann = m
        if not _fits(val, ann):
            raise ShapeError(
                f"Cannot set {type(target).__name__}.{attr} ({ann!r}) "
                f"from {key!r} ({type(val).__name__})")
        plan.append((attr, val))

    # all checked: now write
    for attr, val in plan:
        setattr(target, attr, val)


def _members(target) -> tuple[dict, dict]:
    cls = type(target)
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = dict(getattr(cls, "__annotations__", {}))

    pairs: list[tuple[str, str]] = []  # (tag, attribute)
    if dataclasses.is_dataclass(target):
        pairs = [(f.metadata.get("form", f.name), f.name) for f in dataclasses.fields(target)]
    else:
        names = list(hints) + [n for n in getattr(target, "__dict__", {}) if n not in hints]
        pairs = [(n, n) for n in names if not n.startswith("_")]

    exact: dict[str, tuple[str, Any]] = {}
    folded: dict[str, tuple[str, Any]] = {}
    for tag, attr in pairs:
        m = (attr, hints.get(attr, Any))
        exact.setdefault(tag, m)
        folded.setdefault(tag.lower(), m)
    return exact, folded


def _fits(val, ann) -> bool:
    if val is None or ann is Any or isinstance(ann, (str, typing.ForwardRef)):
        return True
    origin = typing.get_origin(ann)
    if origin is Union or origin is UnionType:
        return any(_fits(val, a) for a in typing.get_args(ann))
    if origin is typing.Annotated:
        return _fits(val, typing.get_args(ann)[0])
    if origin is typing.Literal:
        return val in typing.get_args(ann)
    if origin is not None:
        ann = origin
    if not isinstance(ann, type):
        return True
    if isinstance(val, bool):
        return ann is bool or ann is object
    if ann is float and isinstance(val, int):
        return True
    return isinstance(val, ann)


# ---- Template helper ---------------------------------------------------------
class Form(FormValues):
    """
    Tiny helper for classic HTML forms.
    - Build from request.form (urlencoded) or a query string
    - Decode against specs into a target, errors kept per field
    - Refill fields in templates: {{ form['email'] }}
    - Show errors: {% for e in form.errors_for('email') %}...{% endfor %}
    """
    def __init__(self, data: Mapping[str, str | list[str]] | None = None):
        super().__init__(data)
        self.errors: dict[str, list[str]] = {}

    # ----- API -----
    @property
    def ok(self) -> bool:
        return not self.errors

    def decode(self, specs: Iterable[FormSpec], target) -> bool:
        self.errors = {}
        try:
            decode_form(self, specs, target)
        except MultiError as e:
            for err in e:
                self._err(getattr(err, "key", None) or "", str(err))
        return self.ok

    # templating sugar
    def __getitem__(self, key: str) -> str:
        return self.data.get(key, "")

    def errors_for(self, field: str) -> list[str]:
        return self.errors.get(field, [])

    def to_dict(self) -> dict[str, str]:
        return dict(self.data)

    # ----- internals -----
    def _err(self, field: str, msg: str):
        self.errors.setdefault(field, []).append(msg)
