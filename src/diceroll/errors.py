"""Exit codes and exceptions for :mod:`diceroll`.

Library code raises; only :func:`diceroll.cli.main` turns exceptions into exit
codes and ``error: ...`` lines on stderr.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes.

    The numbering is stable. Codes 8 and 11 are retired and must not be
    reused.
    """

    SUCCESS = 0
    KNOWN_ERROR = 1
    OTHER_ERROR = 2
    ZERO_OR_NEGATIVE_COUNT = 3
    ROUNDING_CONFLICT = 4
    PRECISION_TOO_HIGH = 5
    PRECISION_NEGATIVE = 6
    EXCLUDE_MISSING_ARGS = 7
    NON_NUMERIC_FILTER = 9
    UNKNOWN_GENERATOR = 10
    INVALID_BOUNDS = 12


class DicerollError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(DicerollError):
    """A command-line configuration failed validation.

    ``kind`` is the :class:`ExitCode` the process should terminate with.
    """

    def __init__(self, kind: ExitCode, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class UsageError(DicerollError):
    """argparse rejected the command line (unknown flag, malformed value)."""


class AttemptsExhausted(DicerollError):
    """Forced mode hit its attempt limit before accepting enough values."""

    def __init__(self, *, accepted: int, requested: int, attempts: int) -> None:
        super().__init__(
            f"accepted {accepted} of {requested} values after {attempts} attempts; "
            "the filters may be unsatisfiable"
        )
        self.accepted = accepted
        self.requested = requested
        self.attempts = attempts
