"""Uniform real number generation over ``[lbound, ubound]``."""

from __future__ import annotations

import math
from dataclasses import dataclass

from diceroll.data import Configuration
from diceroll.engines import UnitSampler, create_engine


def validate_bounds(lbound: float, ubound: float) -> None:
    """Raise ``ValueError`` unless ``[lbound, ubound]`` is a usable interval."""

    if not (math.isfinite(lbound) and math.isfinite(ubound)):
        raise ValueError(f"bounds must be finite (got lbound={lbound}, ubound={ubound})")
    if lbound > ubound:
        raise ValueError(f"lbound ({lbound}) cannot be greater than ubound ({ubound})")
    if not math.isfinite(ubound - lbound):
        raise ValueError(f"the range [{lbound}, {ubound}] is too wide to sample")


@dataclass(slots=True)
class UniformRealGenerator:
    """Stateful source of uniformly distributed reals.

    Owns its engine; every :meth:`next_value` call advances the engine state.
    A degenerate range (``lbound == ubound``) always yields ``lbound``.
    """

    engine: UnitSampler
    lbound: float
    ubound: float

    def __post_init__(self) -> None:
        validate_bounds(self.lbound, self.ubound)

    @classmethod
    def from_config(cls, config: Configuration) -> "UniformRealGenerator":
        return cls(
            engine=create_engine(config.generator, seed=config.seed),
            lbound=config.lbound,
            ubound=config.ubound,
        )

    def next_value(self) -> float:
        return self.lbound + (self.ubound - self.lbound) * self.engine.random()
