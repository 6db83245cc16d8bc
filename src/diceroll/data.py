"""Domain data model for diceroll.

This module is intentionally *pure*: it defines the enums and the resolved
run configuration, with no knowledge of the command line.

Argument parsing and the ordered validation that maps failures to exit codes
live in :mod:`diceroll.cli`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from diceroll.constants import (
    DEFAULT_DELIM,
    DEFAULT_GENERATOR,
    DEFAULT_LBOUND,
    DEFAULT_NUMBER,
    DEFAULT_PRECISION,
    DEFAULT_UBOUND,
    MAX_PRECISION,
)


class RoundingMode(str, Enum):
    """Transform applied to each generated value before filtering."""

    NONE = "none"
    CEIL = "ceil"
    FLOOR = "floor"
    ROUND = "round"
    TRUNC = "trunc"


class Statistic(str, Enum):
    """Summary statistics that can be requested with ``--stat-*`` flags.

    Declaration order is the order statistics are printed in.
    """

    MIN = "min"
    MAX = "max"
    MEDIAN = "median"
    AVG = "avg"
    VAR = "var"
    STD = "std"
    COEF = "coef"

    @property
    def flag(self) -> str:
        return f"--stat-{self.value}"


@dataclass(frozen=True, slots=True)
class Configuration:
    """Fully resolved settings for one run.

    Notes
    -----
    ``precision`` is the *effective* output precision: the CLI forces it to 0
    when a rounding mode is active. ``stats_precision`` keeps the precision the
    user asked for, so statistics of rounded values are not truncated too;
    ``None`` means statistics follow ``precision``.
    """

    number: int = DEFAULT_NUMBER
    lbound: float = DEFAULT_LBOUND
    ubound: float = DEFAULT_UBOUND
    rounding: RoundingMode = RoundingMode.NONE
    precision: int = DEFAULT_PRECISION
    stats_precision: Optional[int] = None
    generator: str = DEFAULT_GENERATOR

    exclude: Tuple[float, ...] = ()
    include: Tuple[float, ...] = ()
    norepeat: bool = False
    prefix: Tuple[str, ...] = ()
    suffix: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()

    list_positions: bool = False
    quiet: bool = False
    numbers_force: bool = False
    delim: str = DEFAULT_DELIM

    stats: FrozenSet[Statistic] = field(default_factory=frozenset)
    show_flags: bool = False

    seed: Optional[int] = None
    verbose: int = 0

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("Configuration.number must be >= 1")
        if not 0 <= self.precision <= MAX_PRECISION:
            raise ValueError(f"Configuration.precision must be within [0, {MAX_PRECISION}]")
        if self.stats_precision is not None and not 0 <= self.stats_precision <= MAX_PRECISION:
            raise ValueError(f"Configuration.stats_precision must be within [0, {MAX_PRECISION}]")

    @property
    def statistics_precision(self) -> int:
        return self.precision if self.stats_precision is None else self.stats_precision

    @property
    def requested_stats(self) -> Tuple[Statistic, ...]:
        """Requested statistics in print order."""

        return tuple(s for s in Statistic if s in self.stats)
