"""Rounding transforms and the ordered accept/reject filter stage.

Filters are evaluated in a fixed order and short-circuit on the first
rejection:

1. exclude list
2. include list (only when non-empty)
3. no-repeat
4. prefix, 5. suffix, 6. contains

The string filters match against :func:`diceroll.report.render_fixed` at the
configured output precision, i.e. exactly what would be printed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Container, FrozenSet, Mapping, Optional, Tuple

from diceroll.constants import NUMERIC_FILTER_CHARS
from diceroll.data import Configuration, RoundingMode
from diceroll.report import render_fixed


def round_half_away(value: float) -> float:
    """Round to the nearest integer, ties away from zero."""

    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), value)


ROUNDING_FUNCTIONS: Mapping[RoundingMode, Callable[[float], float]] = {
    RoundingMode.NONE: float,
    RoundingMode.CEIL: lambda v: float(math.ceil(v)),
    RoundingMode.FLOOR: lambda v: float(math.floor(v)),
    RoundingMode.ROUND: round_half_away,
    RoundingMode.TRUNC: lambda v: float(math.trunc(v)),
}


def apply_rounding(value: float, mode: RoundingMode) -> float:
    return ROUNDING_FUNCTIONS[mode](value)


def is_numeric_filter(text: str) -> bool:
    """True when ``text`` uses only digits and at most one decimal point."""

    return set(text) <= NUMERIC_FILTER_CHARS and text.count(".") <= 1


class Rejection(str, Enum):
    EXCLUDED = "excluded"
    NOT_INCLUDED = "not-included"
    REPEATED = "repeated"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    CONTAINS = "contains"


@dataclass(frozen=True, slots=True)
class FilterStage:
    precision: int
    exclude: FrozenSet[float] = frozenset()
    include: FrozenSet[float] = frozenset()
    norepeat: bool = False
    prefix: Tuple[str, ...] = ()
    suffix: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: Configuration) -> "FilterStage":
        return cls(
            precision=config.precision,
            exclude=frozenset(config.exclude),
            include=frozenset(config.include),
            norepeat=config.norepeat,
            prefix=config.prefix,
            suffix=config.suffix,
            contains=config.contains,
        )

    def check(self, value: float, accepted: Container[float] = ()) -> Optional[Rejection]:
        """Return the first reason ``value`` is rejected, or ``None`` to accept it.

        ``accepted`` is only consulted for the no-repeat filter.
        """

        if value in self.exclude:
            return Rejection.EXCLUDED
        if self.include and value not in self.include:
            return Rejection.NOT_INCLUDED
        if self.norepeat and value in accepted:
            return Rejection.REPEATED

        if not (self.prefix or self.suffix or self.contains):
            return None

        text = render_fixed(value, self.precision)
        if self.prefix and not any(text.startswith(p) for p in self.prefix):
            return Rejection.PREFIX
        if self.suffix and not any(text.endswith(s) for s in self.suffix):
            return Rejection.SUFFIX
        if self.contains and not any(c in text for c in self.contains):
            return Rejection.CONTAINS
        return None
