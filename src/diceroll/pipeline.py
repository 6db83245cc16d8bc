"""Generate -> transform -> filter -> collect -> report.

:func:`run` is the top-level entrypoint once a :class:`~diceroll.data.Configuration`
has been resolved. It writes values, statistics and the optional flags dump to
``out``; diagnostics go through :mod:`logging`.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, TextIO, Tuple

from diceroll.data import Configuration
from diceroll.errors import AttemptsExhausted
from diceroll.filters import FilterStage, apply_rounding
from diceroll.generate import UniformRealGenerator
from diceroll.report import format_entry, format_flags, format_statistics
from diceroll.stats import summarise


def configure_logging(*, level: int = logging.WARNING) -> None:
    """Configure a simple root logger that writes to stderr.

    This is safe to call multiple times.
    """

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
    else:
        root.setLevel(level)


def log_level_for(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    accepted: Tuple[float, ...]
    attempts: int


def collect(
    config: Configuration,
    *,
    generator: UniformRealGenerator,
    on_accept: Optional[Callable[[float, int, int], None]] = None,
    max_attempts: Optional[int] = None,
) -> RunResult:
    """Draw, transform and filter values until the loop condition is met.

    Uncapped mode makes exactly ``config.number`` attempts. Forced mode
    (``config.numbers_force``) keeps drawing until ``config.number`` values
    are accepted, which never terminates if the filters cannot be satisfied
    unless ``max_attempts`` is given.

    ``on_accept(value, position, attempt)`` is called for every accepted
    value, with 1-based ``position`` among accepted values and 1-based
    ``attempt`` among all draws.

    Raises
    ------
    AttemptsExhausted
        If ``max_attempts`` draws were made in forced mode without accepting
        ``config.number`` values.
    """

    stage = FilterStage.from_config(config)
    accepted: List[float] = []
    seen: Set[float] = set()
    attempts = 0

    while True:
        if config.numbers_force:
            if len(accepted) >= config.number:
                break
            if max_attempts is not None and attempts >= max_attempts:
                raise AttemptsExhausted(accepted=len(accepted), requested=config.number, attempts=attempts)
        elif attempts >= config.number:
            break

        attempts += 1
        value = apply_rounding(generator.next_value(), config.rounding)

        rejection = stage.check(value, seen)
        if rejection is not None:
            logger.debug("attempt %d: rejected %r (%s)", attempts, value, rejection.value)
            continue

        accepted.append(value)
        seen.add(value)
        if on_accept is not None:
            on_accept(value, len(accepted), attempts)

    logger.info("Accepted %d of %d requested values in %d attempts", len(accepted), config.number, attempts)
    return RunResult(accepted=tuple(accepted), attempts=attempts)


def run(
    config: Configuration,
    *,
    out: Optional[TextIO] = None,
    generator: Optional[UniformRealGenerator] = None,
    max_attempts: Optional[int] = None,
) -> RunResult:
    """Run the whole pipeline for ``config`` and write the report to ``out``."""

    out = out or sys.stdout
    if generator is None:
        generator = UniformRealGenerator.from_config(config)
    logger.info(
        "Generating %d value(s) in [%s, %s] with %s (rounding=%s, precision=%d, forced=%s)",
        config.number,
        config.lbound,
        config.ubound,
        config.generator,
        config.rounding.value,
        config.precision,
        config.numbers_force,
    )

    def emit(value: float, position: int, attempt: int) -> None:
        if config.quiet:
            return
        out.write(
            format_entry(
                value,
                precision=config.precision,
                delim=config.delim,
                attempt=attempt if config.list_positions else None,
                position=position if config.list_positions and config.numbers_force else None,
            )
        )

    result = collect(config, generator=generator, on_accept=emit, max_attempts=max_attempts)

    if config.delim != "\n" and not config.quiet:
        out.write("\n")

    requested = config.requested_stats
    if requested:
        if not config.quiet:
            out.write("\n")
        if result.accepted:
            summary = summarise(result.accepted)
            logger.debug("Summarising %d accepted value(s)", summary.count)
            for line in format_statistics(summary, requested, precision=config.statistics_precision):
                out.write(line + "\n")
        else:
            logger.warning("No values were accepted; skipping statistics (%s)", ", ".join(s.value for s in requested))

    if config.show_flags:
        out.write("\n")
        for line in format_flags(config):
            out.write(line + "\n")

    return result
