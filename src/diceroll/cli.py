"""Command-line entry point for :mod:`diceroll`.

Example
-------
python -m diceroll -n 10 -l 1 -u 6 --round --stat-all
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional, Sequence, TextIO

from diceroll.constants import (
    DEFAULT_DELIM,
    DEFAULT_GENERATOR,
    DEFAULT_LBOUND,
    DEFAULT_NUMBER,
    DEFAULT_PRECISION,
    DEFAULT_UBOUND,
    MAX_PRECISION,
)
from diceroll.data import Configuration, RoundingMode, Statistic
from diceroll.engines import engine_names
from diceroll.errors import ConfigurationError, DicerollError, ExitCode, UsageError
from diceroll.filters import is_numeric_filter
from diceroll.generate import validate_bounds
from diceroll.pipeline import configure_logging, log_level_for, run

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so ``main`` owns exit codes."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0 (got {n})")
    return n


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="diceroll",
        description="Generate, filter and summarise pseudo-random numbers.",
        add_help=False,
    )

    general = parser.add_argument_group("general")
    general.add_argument("-h", "--help", action="store_true", help="produce this help message")
    general.add_argument(
        "-n",
        "--number",
        type=int,
        default=DEFAULT_NUMBER,
        help=f"count of numbers to be generated (default: {DEFAULT_NUMBER})",
    )
    general.add_argument(
        "-l",
        "--lbound",
        type=float,
        default=DEFAULT_LBOUND,
        help=f"minimum number to be generated (default: {DEFAULT_LBOUND}); "
        "write exponent negatives as --lbound=-1e-3",
    )
    general.add_argument(
        "-u",
        "--ubound",
        type=float,
        default=DEFAULT_UBOUND,
        help=f"maximum number to be generated (default: {DEFAULT_UBOUND}); "
        "write exponent negatives as --ubound=-1e-3",
    )
    general.add_argument(
        "-g",
        "--generator",
        default=DEFAULT_GENERATOR,
        help="algorithm for the random number generator: "
        + ", ".join(f"{name} (default)" if name == DEFAULT_GENERATOR else name for name in engine_names()),
    )
    general.add_argument(
        "-s",
        "--seed",
        type=_non_negative_int,
        default=None,
        help="seed the generator for a reproducible run (default: OS entropy; badrandom uses the clock)",
    )

    rounding = parser.add_argument_group("rounding (mutually exclusive, force --precision 0)")
    rounding.add_argument("-c", "--ceil", action="store_true", help="apply ceiling function to numbers")
    rounding.add_argument("-f", "--floor", action="store_true", help="apply floor function to numbers")
    rounding.add_argument("-r", "--round", action="store_true", help="round numbers, halves away from zero")
    rounding.add_argument("-t", "--trunc", action="store_true", help="apply truncation to numbers")

    filters = parser.add_argument_group("filters")
    filters.add_argument(
        "-x",
        "--exclude",
        type=float,
        nargs="*",
        default=None,
        help="exclude numbers from being printed, best with a rounding option",
    )
    filters.add_argument(
        "--include",
        type=float,
        nargs="+",
        default=None,
        help="only print these numbers, best with a rounding option",
    )
    filters.add_argument(
        "--norepeat",
        action="store_true",
        help="exclude repeated numbers from being printed, best with a rounding option",
    )
    filters.add_argument("--prefix", nargs="+", default=None, help="only print when the number begins with string(s)")
    filters.add_argument("--suffix", nargs="+", default=None, help="only print when the number ends with string(s)")
    filters.add_argument("--contains", nargs="+", default=None, help="only print when the number contains string(s)")

    output = parser.add_argument_group("output")
    output.add_argument(
        "-p",
        "--precision",
        type=int,
        default=DEFAULT_PRECISION,
        help=f"output precision, not internal precision (0..{MAX_PRECISION}, default: {DEFAULT_PRECISION})",
    )
    output.add_argument("--list", action="store_true", help="print numbers in a list with positional numbers prefixed")
    output.add_argument("--delim", default=DEFAULT_DELIM, help="change the delimiter (default: newline)")
    output.add_argument("-q", "--quiet", action="store_true", help="disable number output, useful when paired with stats")
    output.add_argument(
        "--numbers-force",
        action="store_true",
        help="keep generating until the count of numbers output equals --number",
    )

    stats = parser.add_argument_group("statistics")
    stats.add_argument("--stat-all", action="store_true", help="print every statistic below")
    stats.add_argument("--stat-min", action="store_true", help="print the lowest value generated")
    stats.add_argument("--stat-max", action="store_true", help="print the highest value generated")
    stats.add_argument("--stat-median", action="store_true", help="print the median of the values generated")
    stats.add_argument("--stat-avg", action="store_true", help="print the average of the values generated")
    stats.add_argument("--stat-var", action="store_true", help="print the population variance of the values generated")
    stats.add_argument("--stat-std", action="store_true", help="print the standard deviation of the values generated")
    stats.add_argument(
        "--stat-coef",
        action="store_true",
        help="print the coefficient of variation (std / mean) of the values generated",
    )

    debug = parser.add_argument_group("debugging")
    debug.add_argument("--flags", action="store_true", help="print the resolved flags after the run")
    debug.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress to stderr (-v info, -vv debug)",
    )
    return parser


def _resolve_rounding(args: argparse.Namespace) -> RoundingMode:
    chosen = [
        mode
        for mode, flag in (
            (RoundingMode.CEIL, args.ceil),
            (RoundingMode.FLOOR, args.floor),
            (RoundingMode.ROUND, args.round),
            (RoundingMode.TRUNC, args.trunc),
        )
        if flag
    ]
    if len(chosen) > 1:
        raise ConfigurationError(
            ExitCode.ROUNDING_CONFLICT,
            "--ceil, --floor, --round, and --trunc are mutually exclusive",
        )
    return chosen[0] if chosen else RoundingMode.NONE


def _resolve_stats(args: argparse.Namespace) -> frozenset[Statistic]:
    if args.stat_all:
        return frozenset(Statistic)
    return frozenset(s for s in Statistic if getattr(args, f"stat_{s.value}"))


def validate(args: argparse.Namespace) -> Configuration:
    """Turn parsed arguments into a :class:`Configuration`.

    Checks run in a fixed order and the first failure wins.

    Raises
    ------
    ConfigurationError
        With the ``kind`` matching the failed check.
    """

    if args.number < 1:
        raise ConfigurationError(
            ExitCode.ZERO_OR_NEGATIVE_COUNT,
            "the argument for option '--number' is invalid (n must be >= 1)",
        )

    rounding = _resolve_rounding(args)
    precision = 0 if rounding is not RoundingMode.NONE else args.precision
    # Rounded runs skip the precision checks, so clamp what statistics use.
    stats_precision = None if rounding is RoundingMode.NONE else min(max(args.precision, 0), MAX_PRECISION)

    if precision > MAX_PRECISION:
        raise ConfigurationError(
            ExitCode.PRECISION_TOO_HIGH,
            f"--precision cannot be greater than the precision of a float ({MAX_PRECISION})",
        )
    if precision < 0:
        raise ConfigurationError(ExitCode.PRECISION_NEGATIVE, "--precision cannot be less than zero")

    if args.exclude is not None and not args.exclude:
        raise ConfigurationError(
            ExitCode.EXCLUDE_MISSING_ARGS,
            "--exclude was specified without arguments (arguments are separated by spaces)",
        )

    for entries in (args.prefix, args.suffix, args.contains):
        for entry in entries or ():
            if not is_numeric_filter(entry):
                raise ConfigurationError(
                    ExitCode.NON_NUMERIC_FILTER,
                    f"--prefix, --suffix, and --contains can only be numbers (got {entry!r})",
                )

    if args.generator not in engine_names():
        raise ConfigurationError(
            ExitCode.UNKNOWN_GENERATOR,
            f"--generator must be one of: {', '.join(engine_names())}",
        )

    try:
        validate_bounds(args.lbound, args.ubound)
    except ValueError as e:
        raise ConfigurationError(ExitCode.INVALID_BOUNDS, str(e)) from e

    return Configuration(
        number=args.number,
        lbound=args.lbound,
        ubound=args.ubound,
        rounding=rounding,
        precision=precision,
        stats_precision=stats_precision,
        generator=args.generator,
        exclude=tuple(args.exclude or ()),
        include=tuple(args.include or ()),
        norepeat=args.norepeat,
        prefix=tuple(args.prefix or ()),
        suffix=tuple(args.suffix or ()),
        contains=tuple(args.contains or ()),
        list_positions=args.list,
        quiet=args.quiet,
        numbers_force=args.numbers_force,
        delim=args.delim,
        stats=_resolve_stats(args),
        show_flags=args.flags,
        seed=args.seed,
        verbose=args.verbose,
    )


def parse_configuration(argv: Sequence[str] | None = None, *, out: TextIO | None = None) -> Optional[Configuration]:
    """Parse and validate ``argv``.

    Returns ``None`` after printing the help text when ``--help`` was given.

    Raises
    ------
    UsageError
        If argparse rejects the command line.
    ConfigurationError
        If a validation check fails.
    """

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.help:
        (out or sys.stdout).write(parser.format_help())
        return None

    return validate(args)


def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = parse_configuration(argv)
        if config is None:
            return ExitCode.SUCCESS

        configure_logging(level=log_level_for(config.verbose))
        run(config, out=sys.stdout)
        return ExitCode.SUCCESS

    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return e.kind

    except (DicerollError, ArithmeticError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.KNOWN_ERROR

    except Exception:
        logger.debug("unhandled exception", exc_info=True)
        print("error: exception of unknown type!", file=sys.stderr)
        return ExitCode.OTHER_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
