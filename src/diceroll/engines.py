"""Pseudo-random engines selectable with ``--generator``.

Every engine exposes a single operation, ``random()``, returning a float in
``[0, 1)``. Engines are built through :data:`ENGINE_FACTORIES`, a mapping from
menu name to a factory taking an optional seed.

Two families live here:

- numpy bit generators (``mt19937``, ``pcg64``, ``philox``, ``sfc64``), driven
  through :class:`numpy.random.Generator`.
- integer engines with the classic parameterisations (``minstd_rand*``,
  ``ranlux*``, ``knuth_b``, ``mt19937_64``). These produce raw integers in
  ``[min, max]`` and are adapted to the unit interval by
  :class:`CanonicalSampler`.

``badrandom`` is the odd one out: it draws from the process-wide
:mod:`random` state, seeded once from wall-clock seconds, and scales 31-bit
draws over the *closed* interval ``[0, 1]``.
"""

from __future__ import annotations

import logging
import math
import random
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

import numpy as np

from diceroll.constants import CANONICAL_BITS

logger = logging.getLogger(__name__)


class UnitSampler(Protocol):
    def random(self) -> float: ...


class IntegerEngine(Protocol):
    min: int
    max: int

    def __call__(self) -> int: ...


def entropy_seed() -> int:
    """A fresh 32-bit seed from the operating system's entropy pool."""

    return secrets.randbits(32)


# --- Integer engines ---


class LinearCongruentialEngine:
    """``x' = (a * x + c) mod m``."""

    def __init__(self, multiplier: int, increment: int, modulus: int, seed: int) -> None:
        self.multiplier = multiplier
        self.increment = increment
        self.modulus = modulus
        self.min = 1 if increment % modulus == 0 else 0
        self.max = modulus - 1
        self.seed(seed)

    def seed(self, value: int) -> None:
        state = value % self.modulus
        if self.increment % self.modulus == 0 and state == 0:
            state = 1
        self._state = state

    def __call__(self) -> int:
        self._state = (self.multiplier * self._state + self.increment) % self.modulus
        return self._state


class SubtractWithCarryEngine:
    """Lagged-Fibonacci subtract-with-carry engine over ``word_size``-bit words.

    ``x[i] = (x[i - short_lag] - x[i - long_lag] - carry) mod 2**word_size``
    """

    _SEED_MULTIPLIER = 40014
    _SEED_MODULUS = 2147483563
    DEFAULT_SEED = 19780503

    def __init__(self, word_size: int, short_lag: int, long_lag: int, seed: int) -> None:
        if not 0 < short_lag < long_lag:
            raise ValueError("SubtractWithCarryEngine requires 0 < short_lag < long_lag")
        self.word_size = word_size
        self.short_lag = short_lag
        self.long_lag = long_lag
        self._modulus = 1 << word_size
        self.min = 0
        self.max = self._modulus - 1
        self.seed(seed)

    def seed(self, value: int) -> None:
        # The lag table is filled from a Lehmer generator, 32 bits at a time.
        seeder = LinearCongruentialEngine(
            self._SEED_MULTIPLIER,
            0,
            self._SEED_MODULUS,
            self.DEFAULT_SEED if value == 0 else value,
        )
        words_per_value = (self.word_size + 31) // 32
        table: List[int] = []
        for _ in range(self.long_lag):
            total = 0
            factor = 1
            for _ in range(words_per_value):
                total += (seeder() & 0xFFFFFFFF) * factor
                factor <<= 32
            table.append(total % self._modulus)
        self._x = table
        self._carry = 1 if table[-1] == 0 else 0
        self._k = 0

    def __call__(self) -> int:
        k = self._k
        short_index = k - self.short_lag
        if short_index < 0:
            short_index += self.long_lag

        value = self._x[short_index] - self._x[k] - self._carry
        self._carry = 1 if value < 0 else 0
        value %= self._modulus

        self._x[k] = value
        self._k = (k + 1) % self.long_lag
        return value


class DiscardBlockEngine:
    """Keeps ``used`` outputs of every ``block`` produced by ``base``."""

    def __init__(self, base: IntegerEngine, block: int, used: int) -> None:
        if not 0 < used <= block:
            raise ValueError("DiscardBlockEngine requires 0 < used <= block")
        self.base = base
        self.block = block
        self.used = used
        self.min = base.min
        self.max = base.max
        self._n = 0

    def __call__(self) -> int:
        if self._n >= self.used:
            for _ in range(self.block - self._n):
                self.base()
            self._n = 0
        self._n += 1
        return self.base()


class ShuffleOrderEngine:
    """Bays-Durham shuffle of ``base`` outputs through a table of ``size`` slots."""

    def __init__(self, base: IntegerEngine, size: int) -> None:
        self.base = base
        self.size = size
        self.min = base.min
        self.max = base.max
        self._table = [base() for _ in range(size)]
        self._y = base()

    def __call__(self) -> int:
        j = int(self.size * (self._y - self.min) / (self.max - self.min + 1.0))
        self._y = self._table[j]
        self._table[j] = self.base()
        return self._y


class MersenneTwister64:
    """64-bit Mersenne Twister (MT19937-64)."""

    _N = 312
    _M = 156
    _MATRIX_A = 0xB5026F5AA96619E9
    _UPPER_MASK = 0xFFFFFFFF80000000
    _LOWER_MASK = 0x7FFFFFFF
    _MASK = 0xFFFFFFFFFFFFFFFF
    DEFAULT_SEED = 5489

    min = 0
    max = _MASK

    def __init__(self, seed: int) -> None:
        self.seed(seed)

    def seed(self, value: int) -> None:
        mt = [value & self._MASK]
        for i in range(1, self._N):
            prev = mt[i - 1]
            mt.append((6364136223846793005 * (prev ^ (prev >> 62)) + i) & self._MASK)
        self._mt = mt
        self._index = self._N

    def _twist(self) -> None:
        mt = self._mt
        n, m = self._N, self._M
        for i in range(n):
            x = (mt[i] & self._UPPER_MASK) | (mt[(i + 1) % n] & self._LOWER_MASK)
            x_a = x >> 1
            if x & 1:
                x_a ^= self._MATRIX_A
            mt[i] = mt[(i + m) % n] ^ x_a
        self._index = 0

    def __call__(self) -> int:
        if self._index >= self._N:
            self._twist()
        y = self._mt[self._index]
        self._index += 1

        y ^= (y >> 29) & 0x5555555555555555
        y ^= (y << 17) & 0x71D67FFFEDA60000
        y ^= (y << 37) & 0xFFF7EEE000000000
        y ^= y >> 43
        return y & self._MASK


def minstd_rand0(seed: int) -> LinearCongruentialEngine:
    return LinearCongruentialEngine(16807, 0, 2147483647, seed)


def minstd_rand(seed: int) -> LinearCongruentialEngine:
    return LinearCongruentialEngine(48271, 0, 2147483647, seed)


def ranlux24_base(seed: int) -> SubtractWithCarryEngine:
    return SubtractWithCarryEngine(24, 10, 24, seed)


def ranlux48_base(seed: int) -> SubtractWithCarryEngine:
    return SubtractWithCarryEngine(48, 5, 12, seed)


def ranlux24(seed: int) -> DiscardBlockEngine:
    return DiscardBlockEngine(ranlux24_base(seed), 223, 23)


def ranlux48(seed: int) -> DiscardBlockEngine:
    return DiscardBlockEngine(ranlux48_base(seed), 389, 11)


def knuth_b(seed: int) -> ShuffleOrderEngine:
    return ShuffleOrderEngine(minstd_rand0(seed), 256)


# --- Unit-interval samplers ---


@dataclass(slots=True)
class CanonicalSampler:
    """Turns raw integer engine output into floats in ``[0, 1)``.

    Consumes as many raw draws as needed to fill ``bits`` of mantissa and
    combines them base ``max - min + 1``.
    """

    engine: IntegerEngine
    bits: int = CANONICAL_BITS

    def random(self) -> float:
        span = self.engine.max - self.engine.min + 1
        draws = max(1, math.ceil(self.bits / math.log2(span)))

        total = 0
        scale = 1
        for _ in range(draws):
            total += (self.engine() - self.engine.min) * scale
            scale *= span

        value = total / scale
        if value >= 1.0:
            value = math.nextafter(1.0, 0.0)
        return value


class NumpySampler:
    """Unit floats from a numpy bit generator."""

    def __init__(self, bit_generator: np.random.BitGenerator) -> None:
        self._generator = np.random.Generator(bit_generator)

    def random(self) -> float:
        return float(self._generator.random())


class WallClockSampler:
    """Low-quality sampler on the shared :mod:`random` module state.

    Seeding is process-wide: constructing a second instance reseeds the
    first. Without an explicit seed the state is seeded from the current
    wall-clock second, so two runs started within the same second repeat.
    """

    RAND_MAX = 2**31 - 1

    def __init__(self, seed: Optional[int] = None) -> None:
        random.seed(int(time.time()) if seed is None else seed)

    def random(self) -> float:
        return random.getrandbits(31) / self.RAND_MAX


# --- Factory table ---

EngineFactory = Callable[[Optional[int]], UnitSampler]


def _integer_engine(build: Callable[[int], IntegerEngine]) -> EngineFactory:
    def factory(seed: Optional[int]) -> UnitSampler:
        return CanonicalSampler(build(entropy_seed() if seed is None else seed))

    return factory


def _numpy_engine(build: Callable[[int], np.random.BitGenerator]) -> EngineFactory:
    def factory(seed: Optional[int]) -> UnitSampler:
        return NumpySampler(build(entropy_seed() if seed is None else seed))

    return factory


ENGINE_FACTORIES: Dict[str, EngineFactory] = {
    "minstd_rand0": _integer_engine(minstd_rand0),
    "minstd_rand": _integer_engine(minstd_rand),
    "mt19937": _numpy_engine(np.random.MT19937),
    "mt19937_64": _integer_engine(MersenneTwister64),
    "ranlux24_base": _integer_engine(ranlux24_base),
    "ranlux48_base": _integer_engine(ranlux48_base),
    "ranlux24": _integer_engine(ranlux24),
    "ranlux48": _integer_engine(ranlux48),
    "knuth_b": _integer_engine(knuth_b),
    "default_random_engine": _integer_engine(minstd_rand0),
    "pcg64": _numpy_engine(np.random.PCG64),
    "philox": _numpy_engine(np.random.Philox),
    "sfc64": _numpy_engine(np.random.SFC64),
    "badrandom": WallClockSampler,
}


def engine_names() -> tuple[str, ...]:
    return tuple(ENGINE_FACTORIES)


def create_engine(name: str, *, seed: Optional[int] = None) -> UnitSampler:
    """Build the engine registered under ``name``.

    Raises
    ------
    ValueError
        If ``name`` is not in :data:`ENGINE_FACTORIES`.
    """

    try:
        factory = ENGINE_FACTORIES[name]
    except KeyError as e:
        raise ValueError(f"Unknown generator {name!r}. Choose one of: {', '.join(engine_names())}") from e

    logger.debug("Creating engine %s (seed=%s)", name, "entropy" if seed is None else seed)
    return factory(seed)
