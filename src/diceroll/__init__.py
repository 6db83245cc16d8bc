"""Generate, transform, filter and summarise pseudo-random numbers.

The run is a single linear pipeline:

- :mod:`diceroll.cli` parses and validates the command line into a
  :class:`~diceroll.data.Configuration`
- :mod:`diceroll.generate` draws uniform reals from an engine in
  :mod:`diceroll.engines`
- :mod:`diceroll.filters` rounds and accepts or rejects each value
- :mod:`diceroll.pipeline` collects accepted values and writes the report
  rendered by :mod:`diceroll.report` and :mod:`diceroll.stats`
"""

from .data import Configuration, RoundingMode, Statistic
from .engines import ENGINE_FACTORIES, create_engine
from .filters import FilterStage, Rejection
from .generate import UniformRealGenerator
from .pipeline import RunResult, collect, run
from .stats import Summary, summarise

__all__ = [
    "Configuration",
    "RoundingMode",
    "Statistic",
    "ENGINE_FACTORIES",
    "create_engine",
    "FilterStage",
    "Rejection",
    "UniformRealGenerator",
    "RunResult",
    "collect",
    "run",
    "Summary",
    "summarise",
]
