"""Project-wide constants for :mod:`diceroll`.

This module keeps literal defaults centralized so the CLI, the domain objects
and the tests agree on them.
"""

from __future__ import annotations

import math
import sys

# Digits needed to round-trip any IEEE double through a decimal rendering.
MAX_PRECISION: int = math.ceil(1 + sys.float_info.mant_dig * math.log10(2))

DEFAULT_NUMBER: int = 1
DEFAULT_LBOUND: float = 0.0
DEFAULT_UBOUND: float = 1.0
DEFAULT_PRECISION: int = MAX_PRECISION
DEFAULT_DELIM: str = "\n"
DEFAULT_GENERATOR: str = "mt19937"

# Characters allowed in --prefix/--suffix/--contains entries.
NUMERIC_FILTER_CHARS: frozenset[str] = frozenset("0123456789.")

# Bits of mantissa filled when turning raw engine output into a unit float.
CANONICAL_BITS: int = sys.float_info.mant_dig
