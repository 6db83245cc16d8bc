"""Descriptive statistics over the accepted sequence."""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class Summary:
    count: int
    minimum: float
    maximum: float
    median: float
    mean: float
    variance: float
    std_dev: float
    coef_of_variation: float


def coefficient_of_variation(std_dev: float, mean: float) -> float:
    """``std_dev / mean``.

    A zero mean gives ``inf`` (or ``nan`` when the spread is zero too) rather
    than raising.
    """

    if mean == 0:
        return math.nan if std_dev == 0 else math.inf
    return std_dev / mean


def summarise(values: Sequence[float]) -> Summary:
    """Summarise ``values``.

    Variance is the population variance (divisor N). For an even number of
    values the median is the mean of the two central elements.

    Raises
    ------
    ValueError
        If ``values`` is empty.
    """

    if not values:
        raise ValueError("cannot summarise an empty sequence")

    mean = statistics.fmean(values)
    variance = statistics.pvariance(values, mu=mean)
    std_dev = math.sqrt(variance)

    return Summary(
        count=len(values),
        minimum=min(values),
        maximum=max(values),
        median=float(statistics.median(values)),
        mean=mean,
        variance=variance,
        std_dev=std_dev,
        coef_of_variation=coefficient_of_variation(std_dev, mean),
    )
