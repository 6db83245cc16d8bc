from __future__ import annotations

import pytest

from diceroll.cli import main, parse_configuration
from diceroll.constants import MAX_PRECISION
from diceroll.data import RoundingMode, Statistic
from diceroll.errors import ConfigurationError, ExitCode, UsageError


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_help_prints_grouped_usage_and_succeeds(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = _run(capsys, "--help", "--number", "0")
    assert code == ExitCode.SUCCESS == 0
    assert "--numbers-force" in out
    for group in ("general", "rounding", "filters", "output", "statistics", "debugging"):
        assert group in out
    assert err == ""


def test_parse_configuration_returns_none_for_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert parse_configuration(["-h"]) is None
    assert "usage: diceroll" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["-n", "0"], ExitCode.ZERO_OR_NEGATIVE_COUNT),
        (["-n", "-3"], ExitCode.ZERO_OR_NEGATIVE_COUNT),
        (["--ceil", "--floor"], ExitCode.ROUNDING_CONFLICT),
        (["-r", "-t"], ExitCode.ROUNDING_CONFLICT),
        (["-p", str(MAX_PRECISION + 1)], ExitCode.PRECISION_TOO_HIGH),
        (["-p", "-1"], ExitCode.PRECISION_NEGATIVE),
        (["--exclude"], ExitCode.EXCLUDE_MISSING_ARGS),
        (["--exclude", "--norepeat"], ExitCode.EXCLUDE_MISSING_ARGS),
        (["--prefix", "12a"], ExitCode.NON_NUMERIC_FILTER),
        (["--suffix", "1.2.3"], ExitCode.NON_NUMERIC_FILTER),
        (["--contains", "5", "x"], ExitCode.NON_NUMERIC_FILTER),
        (["-g", "lcg9000"], ExitCode.UNKNOWN_GENERATOR),
        (["-l", "5", "-u", "1"], ExitCode.INVALID_BOUNDS),
        (["-l", "nan"], ExitCode.INVALID_BOUNDS),
    ],
)
def test_validation_errors_map_to_exit_codes(
    capsys: pytest.CaptureFixture[str], argv: list[str], expected: ExitCode
) -> None:
    code, out, err = _run(capsys, *argv)
    assert code == expected
    assert out == ""
    assert err.startswith("error: ")


def test_exit_code_numbers_are_stable() -> None:
    assert {c.name: int(c) for c in ExitCode} == {
        "SUCCESS": 0,
        "KNOWN_ERROR": 1,
        "OTHER_ERROR": 2,
        "ZERO_OR_NEGATIVE_COUNT": 3,
        "ROUNDING_CONFLICT": 4,
        "PRECISION_TOO_HIGH": 5,
        "PRECISION_NEGATIVE": 6,
        "EXCLUDE_MISSING_ARGS": 7,
        "NON_NUMERIC_FILTER": 9,
        "UNKNOWN_GENERATOR": 10,
        "INVALID_BOUNDS": 12,
    }


def test_first_failure_wins() -> None:
    with pytest.raises(ConfigurationError) as ei:
        parse_configuration(["-n", "0", "--ceil", "--floor", "-g", "nope"])
    assert ei.value.kind is ExitCode.ZERO_OR_NEGATIVE_COUNT

    with pytest.raises(ConfigurationError) as ei:
        parse_configuration(["--ceil", "--floor", "-p", "-4"])
    assert ei.value.kind is ExitCode.ROUNDING_CONFLICT


def test_rounding_forces_precision_zero() -> None:
    config = parse_configuration(["--trunc", "-p", "9"])
    assert config is not None
    assert config.rounding is RoundingMode.TRUNC
    assert config.precision == 0
    assert config.stats_precision == 9


def test_rounding_masks_out_of_range_precision() -> None:
    config = parse_configuration(["--round", "-p", "99"])
    assert config is not None
    assert config.precision == 0
    assert config.stats_precision == MAX_PRECISION


def test_unrounded_statistics_follow_output_precision() -> None:
    config = parse_configuration(["-p", "3"])
    assert config is not None
    assert config.stats_precision is None
    assert config.statistics_precision == 3


def test_main_rounded_run_prints_statistics_at_requested_precision(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run(capsys, "-n", "3", "-l", "2.5", "-u", "2.5", "--round", "-p", "2", "-q", "--stat-all")
    assert code == ExitCode.SUCCESS
    assert out.splitlines()[:4] == ["min: 3.00", "max: 3.00", "median: 3.00", "avg: 3.00"]


def test_negative_exponent_bound_needs_the_equals_form() -> None:
    config = parse_configuration(["--lbound=-1e-3", "--ubound=0"])
    assert config is not None
    assert config.lbound == -0.001


def test_malformed_value_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(UsageError):
        parse_configuration(["--number", "abc"])

    code, _out, err = _run(capsys, "--bogus-flag")
    assert code == ExitCode.KNOWN_ERROR
    assert "error:" in err


def test_parse_full_configuration() -> None:
    config = parse_configuration(
        [
            "-n", "7",
            "-l", "-2.5",
            "-u", "10",
            "-g", "ranlux48",
            "-s", "5",
            "-x", "1", "-1",
            "--include", "2", "3",
            "--norepeat",
            "--prefix", "1", "2.",
            "--suffix", "0",
            "--contains", ".5",
            "--list",
            "--delim", ",",
            "-q",
            "--numbers-force",
            "--stat-min",
            "--stat-coef",
            "--flags",
            "-vv",
        ]
    )
    assert config is not None
    assert config.number == 7
    assert (config.lbound, config.ubound) == (-2.5, 10.0)
    assert config.generator == "ranlux48"
    assert config.seed == 5
    assert config.exclude == (1.0, -1.0)
    assert config.include == (2.0, 3.0)
    assert config.norepeat
    assert config.prefix == ("1", "2.")
    assert config.suffix == ("0",)
    assert config.contains == (".5",)
    assert config.list_positions and config.quiet and config.numbers_force and config.show_flags
    assert config.delim == ","
    assert config.stats == frozenset({Statistic.MIN, Statistic.COEF})
    assert config.verbose == 2


def test_stat_all_selects_every_statistic() -> None:
    config = parse_configuration(["--stat-all"])
    assert config is not None
    assert config.stats == frozenset(Statistic)


def test_negative_seed_is_rejected() -> None:
    with pytest.raises(UsageError):
        parse_configuration(["--seed", "-1"])


def test_main_degenerate_range(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run(capsys, "--number", "5", "--lbound", "2", "--ubound", "2", "-p", "0")
    assert code == ExitCode.SUCCESS
    assert out == "2\n" * 5


def test_main_include_and_exclude_same_value_prints_nothing(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run(capsys, "-n", "20", "-l", "0", "-u", "1", "--round", "--include", "0.5", "--exclude", "0.5")
    assert code == ExitCode.SUCCESS
    assert out == ""


def test_main_seeded_runs_are_reproducible(capsys: pytest.CaptureFixture[str]) -> None:
    argv = ["-n", "6", "-l", "1", "-u", "6", "-g", "knuth_b", "-s", "2024", "-p", "4", "--stat-all"]
    first = _run(capsys, *argv)
    second = _run(capsys, *argv)
    assert first == second
    assert first[1].count("\n") == 6 + 1 + 7


def test_main_forced_mode_reaches_requested_count(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _err = _run(
        capsys, "-n", "4", "-l", "0", "-u", "9", "--floor", "--exclude", "0", "1", "2", "--numbers-force", "-s", "1"
    )
    assert code == ExitCode.SUCCESS
    values = [float(line) for line in out.splitlines()]
    assert len(values) == 4
    assert all(v >= 3 for v in values)


def test_main_reports_unknown_exceptions(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr("diceroll.cli.run", boom)
    code, _out, err = _run(capsys)
    assert code == ExitCode.OTHER_ERROR
    assert err == "error: exception of unknown type!\n"


def test_main_reports_recognized_exceptions(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def boom(*_args, **_kwargs):
        raise ZeroDivisionError("division by zero")

    monkeypatch.setattr("diceroll.cli.run", boom)
    code, _out, err = _run(capsys)
    assert code == ExitCode.KNOWN_ERROR
    assert err == "error: division by zero\n"
