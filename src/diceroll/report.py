"""Text rendering for values, statistics and the flags dump.

Nothing here writes to a stream; the pipeline decides where lines go.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from diceroll.data import Configuration, RoundingMode, Statistic
from diceroll.stats import Summary


def render_fixed(value: float, precision: int) -> str:
    """Fixed-point rendering with exactly ``precision`` fractional digits.

    This is both the printed form of a value and the text the string filters
    match against.
    """

    return f"{value:.{precision}f}"


def format_entry(
    value: float,
    *,
    precision: int,
    delim: str,
    attempt: Optional[int] = None,
    position: Optional[int] = None,
) -> str:
    """One accepted value with its optional list labels and trailing delimiter.

    ``position`` (the 1-based index among accepted values) is printed before
    ``attempt`` (the 1-based loop iteration) when both are given.
    """

    labels = "".join(f"{n}.\t" for n in (position, attempt) if n is not None)
    return f"{labels}{render_fixed(value, precision)}{delim}"


def statistic_value(summary: Summary, statistic: Statistic) -> float:
    return {
        Statistic.MIN: summary.minimum,
        Statistic.MAX: summary.maximum,
        Statistic.MEDIAN: summary.median,
        Statistic.AVG: summary.mean,
        Statistic.VAR: summary.variance,
        Statistic.STD: summary.std_dev,
        Statistic.COEF: summary.coef_of_variation,
    }[statistic]


def format_statistics(summary: Summary, statistics: Sequence[Statistic], *, precision: int) -> List[str]:
    return [f"{s.value}: {render_fixed(statistic_value(summary, s), precision)}" for s in statistics]


def _join(values: Sequence[object]) -> str:
    return " ".join(str(v) for v in values)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def flag_rows(config: Configuration) -> List[Tuple[str, str]]:
    """Every option with its effective value, in ``--help`` order."""

    stats = set(config.stats)
    rows: List[Tuple[str, str]] = [
        # --help returns before a run, so it is never set here.
        ("help,h", _flag(False)),
        ("number,n", str(config.number)),
        ("lbound,l", str(config.lbound)),
        ("ubound,u", str(config.ubound)),
        ("seed,s", "entropy" if config.seed is None else str(config.seed)),
        ("generator,g", config.generator),
        ("ceil,c", _flag(config.rounding is RoundingMode.CEIL)),
        ("floor,f", _flag(config.rounding is RoundingMode.FLOOR)),
        ("round,r", _flag(config.rounding is RoundingMode.ROUND)),
        ("trunc,t", _flag(config.rounding is RoundingMode.TRUNC)),
        ("exclude,x", _join(config.exclude)),
        ("include", _join(config.include)),
        ("norepeat", _flag(config.norepeat)),
        ("prefix", _join(config.prefix)),
        ("suffix", _join(config.suffix)),
        ("contains", _join(config.contains)),
        ("precision,p", str(config.precision)),
        ("list", _flag(config.list_positions)),
        ("delim", repr(config.delim)),
        ("quiet,q", _flag(config.quiet)),
        ("numbers-force", _flag(config.numbers_force)),
    ]
    rows.append(("stat-all", _flag(stats == set(Statistic))))
    rows.extend((s.flag.lstrip("-"), _flag(s in stats)) for s in Statistic)
    rows.append(("flags", _flag(config.show_flags)))
    rows.append(("verbose,v", str(config.verbose)))
    return rows


def format_flags(config: Configuration) -> List[str]:
    return [f"{name}: {value}" for name, value in flag_rows(config)]
