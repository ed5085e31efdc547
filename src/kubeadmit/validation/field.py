#!/usr/bin/env python3
"""
KUBEADMIT FIELD PATHS - Error Locations
---------------------------------------
Every validation failure is pinned to the exact place in the object graph
that caused it (e.g. ``spec.template.spec.containers[0].image``).

Paths are immutable: ``child``/``index``/``key`` return a new Path, so two
sibling checks can never corrupt each other's location. Failures are
collected in an ErrorList that validators append to and never raise.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple

from kubeadmit.core.models import IntOrString


class ErrorType(str, Enum):
    """Failure kinds. The value is the text used when rendering an error."""
    NOT_FOUND = "Not found"
    REQUIRED = "Required value"
    DUPLICATE = "Duplicate value"
    INVALID = "Invalid value"
    NOT_SUPPORTED = "Unsupported value"
    FORBIDDEN = "Forbidden"
    TOO_LONG = "Too long"
    INTERNAL = "Internal error"


# These kinds never echo the offending value
_VALUELESS_TYPES = (ErrorType.REQUIRED, ErrorType.FORBIDDEN, ErrorType.TOO_LONG, ErrorType.INTERNAL)


@dataclass(frozen=True)
class Path:
    """An append-only locator into a nested object."""
    steps: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def root(cls, name: str, *more: str) -> "Path":
        return cls().child(name, *more)

    def child(self, name: str, *more: str) -> "Path":
        steps = self.steps + (("child", name),)
        steps += tuple(("child", m) for m in more)
        return Path(steps)

    def index(self, i: int) -> "Path":
        return Path(self.steps + (("index", i),))

    def key(self, k: str) -> "Path":
        return Path(self.steps + (("key", k),))

    def render(self) -> str:
        out = []
        for kind, value in self.steps:
            if kind == "child":
                if out:
                    out.append(".")
                out.append(str(value))
            else:
                out.append(f"[{value}]")
        return "".join(out)

    def __str__(self) -> str:
        return self.render()


def render_value(value: Any) -> str:
    """Renders a bad value the way it would appear in a manifest."""
    if isinstance(value, IntOrString):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return repr(value)


@dataclass
class FieldError:
    """A single failure: where, what kind, which value and why."""
    field: str
    type: ErrorType
    bad_value: Any = None
    detail: str = ""

    def error_body(self) -> str:
        if self.type in _VALUELESS_TYPES:
            body = self.type.value
        else:
            body = f"{self.type.value}: {render_value(self.bad_value)}"
        if self.detail:
            body += f": {self.detail}"
        return body

    def error(self) -> str:
        return f"{self.field}: {self.error_body()}"

    def __str__(self) -> str:
        return self.error()


class ErrorList(list):
    """
    The error accumulator shared by one validation call.

    Keeps first-detection order. Validators only ever append to it; the
    caller reads the verdict through ``errors()`` (empty means valid).
    """

    def add(self, err: FieldError) -> FieldError:
        self.append(err)
        return err

    def add_required(self, path: Path, detail: str = "") -> FieldError:
        return self.add(FieldError(str(path), ErrorType.REQUIRED, "", detail))

    def add_invalid(self, path: Path, value: Any, detail: str = "") -> FieldError:
        return self.add(FieldError(str(path), ErrorType.INVALID, value, detail))

    def add_not_supported(self, path: Path, value: Any, allowed: Iterable[str]) -> FieldError:
        quoted = ", ".join(str(a) for a in allowed)
        detail = f"supported values: {quoted}" if quoted else ""
        return self.add(FieldError(str(path), ErrorType.NOT_SUPPORTED, value, detail))

    def add_forbidden(self, path: Path, detail: str = "") -> FieldError:
        return self.add(FieldError(str(path), ErrorType.FORBIDDEN, "", detail))

    def add_duplicate(self, path: Path, value: Any) -> FieldError:
        return self.add(FieldError(str(path), ErrorType.DUPLICATE, value, ""))

    def add_not_found(self, path: Path, value: Any) -> FieldError:
        return self.add(FieldError(str(path), ErrorType.NOT_FOUND, value, ""))

    def add_too_long(self, path: Path, value: Any, max_length: int) -> FieldError:
        return self.add(FieldError(str(path), ErrorType.TOO_LONG, value,
                                   f"must have at most {max_length} characters"))

    def errors(self) -> List[FieldError]:
        return list(self)

    def filter(self, predicate: Callable[[FieldError], bool]) -> "ErrorList":
        """Returns the errors that do NOT satisfy ``predicate``."""
        return ErrorList(e for e in self if not predicate(e))

    def first(self) -> Optional[FieldError]:
        return self[0] if self else None

    def __str__(self) -> str:
        return "; ".join(e.error() for e in self)
