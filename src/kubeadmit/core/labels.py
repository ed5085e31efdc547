#!/usr/bin/env python3
"""
KUBEADMIT LABELS - Selector Matching
------------------------------------
Evaluates whether a label set satisfies a selector. Used by validators to
check selector/template consistency and by read paths to filter lists.

Empty-selector semantics (fixed here, per selector form):
  * ``None``                    -> selects nothing
  * ``LabelSelector()`` (empty) -> selects everything
  * ``{}`` (plain label map)    -> selects everything

Kinds that require a non-empty selector enforce that in their validator,
not here.

Author: KubeAdmit Team
Date: 2026-10-17
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from kubeadmit.core.models import (
    LabelSelector,
    SELECTOR_OP_DOES_NOT_EXIST,
    SELECTOR_OP_EXISTS,
    SELECTOR_OP_IN,
    SELECTOR_OP_NOT_IN,
)

# Operator "=" is what a matchLabels pair turns into
_OP_EQUALS = "="


class SelectorError(ValueError):
    """Raised when a LabelSelector cannot be turned into a Selector."""


@dataclass(frozen=True)
class Requirement:
    key: str
    operator: str
    values: FrozenSet[str] = frozenset()

    def matches(self, label_set: Mapping[str, str]) -> bool:
        present = self.key in label_set
        if self.operator in (_OP_EQUALS, SELECTOR_OP_IN):
            return present and label_set[self.key] in self.values
        if self.operator == SELECTOR_OP_NOT_IN:
            return not present or label_set[self.key] not in self.values
        if self.operator == SELECTOR_OP_EXISTS:
            return present
        if self.operator == SELECTOR_OP_DOES_NOT_EXIST:
            return not present
        return False

    def __str__(self) -> str:
        if self.operator == _OP_EQUALS:
            return f"{self.key}={next(iter(self.values))}"
        if self.operator == SELECTOR_OP_EXISTS:
            return self.key
        if self.operator == SELECTOR_OP_DOES_NOT_EXIST:
            return f"!{self.key}"
        op = "in" if self.operator == SELECTOR_OP_IN else "notin"
        return f"{self.key} {op} ({','.join(sorted(self.values))})"


@dataclass(frozen=True)
class Selector:
    """A conjunction of requirements. ``select_none`` short-circuits to False."""
    requirements: Tuple[Requirement, ...] = ()
    select_none: bool = False

    def empty(self) -> bool:
        return not self.requirements and not self.select_none

    def matches(self, label_set: Optional[Mapping[str, str]]) -> bool:
        if self.select_none:
            return False
        label_set = label_set or {}
        return all(req.matches(label_set) for req in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self.requirements)


def everything() -> Selector:
    return Selector()


def nothing() -> Selector:
    return Selector(select_none=True)


def selector_from_set(label_set: Optional[Mapping[str, str]]) -> Selector:
    """Equality selector over a plain label map; an empty map selects everything."""
    if not label_set:
        return everything()
    reqs = tuple(
        Requirement(k, _OP_EQUALS, frozenset([v]))
        for k, v in sorted(label_set.items())
    )
    return Selector(reqs)


def selector_from_label_selector(ls: Optional[LabelSelector]) -> Selector:
    if ls is None:
        return nothing()
    if not ls.match_labels and not ls.match_expressions:
        return everything()

    reqs = list(selector_from_set(ls.match_labels).requirements)
    for expr in ls.match_expressions:
        if expr.operator not in (SELECTOR_OP_IN, SELECTOR_OP_NOT_IN,
                                 SELECTOR_OP_EXISTS, SELECTOR_OP_DOES_NOT_EXIST):
            raise SelectorError(f"{expr.operator!r} is not a valid selector operator")
        reqs.append(Requirement(expr.key, expr.operator, frozenset(expr.values)))
    return Selector(tuple(reqs))


SelectorLike = Union[Selector, LabelSelector, Dict[str, str], None]


def as_selector(selector: SelectorLike) -> Selector:
    if isinstance(selector, Selector):
        return selector
    if isinstance(selector, LabelSelector) or selector is None:
        return selector_from_label_selector(selector)
    return selector_from_set(selector)


def matches(selector: SelectorLike, label_set: Optional[Mapping[str, str]]) -> bool:
    """True iff ``label_set`` satisfies ``selector`` (see module docstring for empties)."""
    return as_selector(selector).matches(label_set)
