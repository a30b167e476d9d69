# vebben/errors.py
from __future__ import annotations
from typing import Iterator


class SpecError(Exception):
    """A bad spec: unknown type, bad limit, empty key. Programmer error."""


class ShapeError(SpecError, TypeError):
    """Decoded value does not fit the target's declared member type."""


class FormError(ValueError):
    """A single user-facing problem with one form value."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class MultiError(Exception):
    """
    All the FormErrors of one decode pass, in spec order.
    str() joins the messages with a newline; the errors themselves stay
    available for per-field display:

        except MultiError as e:
            for err in e: ...
            e.errors_for("email")
    """
    def __init__(self, errors: list[Exception]):
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.errors)

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def errors_for(self, key: str) -> list[str]:
        return [str(e) for e in self.errors if getattr(e, "key", None) == key]

    def as_dict(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for e in self.errors:
            out.setdefault(getattr(e, "key", None) or "", []).append(str(e))
        return out
