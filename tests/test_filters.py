from __future__ import annotations

import pytest

from diceroll.data import Configuration, RoundingMode
from diceroll.filters import FilterStage, Rejection, apply_rounding, is_numeric_filter, round_half_away


@pytest.mark.parametrize(
    ("mode", "value", "expected"),
    [
        (RoundingMode.NONE, 2.5, 2.5),
        (RoundingMode.CEIL, 2.1, 3.0),
        (RoundingMode.CEIL, -2.9, -2.0),
        (RoundingMode.FLOOR, 2.9, 2.0),
        (RoundingMode.FLOOR, -2.1, -3.0),
        (RoundingMode.ROUND, 2.5, 3.0),
        (RoundingMode.ROUND, -2.5, -3.0),
        (RoundingMode.ROUND, 2.4999, 2.0),
        (RoundingMode.TRUNC, 2.9, 2.0),
        (RoundingMode.TRUNC, -2.9, -2.0),
    ],
)
def test_apply_rounding(mode: RoundingMode, value: float, expected: float) -> None:
    result = apply_rounding(value, mode)
    assert result == expected
    assert isinstance(result, float)


def test_round_half_away_differs_from_bankers_rounding() -> None:
    assert round(0.5) == 0
    assert round_half_away(0.5) == 1.0
    assert round_half_away(0.49999999999999994) == 0.0


@pytest.mark.parametrize("text", ["12", "1.5", ".5", "5.", "", "0123456789"])
def test_is_numeric_filter_accepts(text: str) -> None:
    assert is_numeric_filter(text)


@pytest.mark.parametrize("text", ["12a", "1.2.3", "-1", "1e5", " 1"])
def test_is_numeric_filter_rejects(text: str) -> None:
    assert not is_numeric_filter(text)


def test_exclude_rejects_exact_members() -> None:
    stage = FilterStage(precision=0, exclude=frozenset({1.0, 3.0}))
    assert stage.check(1.0) is Rejection.EXCLUDED
    assert stage.check(2.0) is None


def test_include_acts_as_whitelist_when_non_empty() -> None:
    stage = FilterStage(precision=0, include=frozenset({2.0}))
    assert stage.check(2.0) is None
    assert stage.check(1.0) is Rejection.NOT_INCLUDED


def test_exclude_wins_over_include() -> None:
    stage = FilterStage.from_config(Configuration(include=(0.5,), exclude=(0.5,)))
    assert stage.check(0.5) is Rejection.EXCLUDED


def test_norepeat_consults_accepted_values() -> None:
    stage = FilterStage(precision=0, norepeat=True)
    assert stage.check(4.0, {4.0}) is Rejection.REPEATED
    assert stage.check(5.0, {4.0}) is None


def test_accepted_values_ignored_without_norepeat() -> None:
    stage = FilterStage(precision=0)
    assert stage.check(4.0, {4.0}) is None


def test_string_filters_match_fixed_point_rendering() -> None:
    # 0.5 renders as "0.50" at precision 2.
    stage = FilterStage(precision=2, suffix=("50",))
    assert stage.check(0.5) is None
    assert stage.check(0.55) is Rejection.SUFFIX


def test_string_filters_use_output_precision_not_raw_value() -> None:
    # 0.126 is "0.13" at precision 2, so "0.12" never matches.
    stage = FilterStage(precision=2, prefix=("0.12",))
    assert stage.check(0.126) is Rejection.PREFIX
    assert stage.check(0.121) is None


def test_prefix_any_entry_matches() -> None:
    stage = FilterStage(precision=0, prefix=("1", "3"))
    assert stage.check(12.0) is None
    assert stage.check(30.0) is None
    assert stage.check(20.0) is Rejection.PREFIX


def test_contains_filter() -> None:
    stage = FilterStage(precision=3, contains=("77",))
    assert stage.check(1.775) is None
    assert stage.check(1.234) is Rejection.CONTAINS


def test_filters_short_circuit_in_order() -> None:
    stage = FilterStage(
        precision=0,
        exclude=frozenset({7.0}),
        norepeat=True,
        prefix=("9",),
        suffix=("1",),
    )
    assert stage.check(7.0, {7.0}) is Rejection.EXCLUDED
    assert stage.check(8.0, {8.0}) is Rejection.REPEATED
    assert stage.check(8.0) is Rejection.PREFIX
    assert stage.check(92.0) is Rejection.SUFFIX
    assert stage.check(91.0) is None
