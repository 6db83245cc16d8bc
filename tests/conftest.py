from __future__ import annotations

import itertools
from typing import Callable, Iterable

import pytest

from diceroll.generate import UniformRealGenerator


class ScriptedSampler:
    """Unit sampler that replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, draws: Iterable[float]) -> None:
        self.draws = list(draws)
        self._it = itertools.cycle(self.draws)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._it)


@pytest.fixture
def scripted_generator() -> Callable[..., UniformRealGenerator]:
    """Build a generator over [0, 1] whose values are exactly the scripted draws."""

    def build(draws: Iterable[float], *, lbound: float = 0.0, ubound: float = 1.0) -> UniformRealGenerator:
        return UniformRealGenerator(engine=ScriptedSampler(draws), lbound=lbound, ubound=ubound)

    return build
