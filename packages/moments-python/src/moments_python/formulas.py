"""Shared mathematical contract for all three statistics implementations.

Holds the minimum-count table, the spread and overflow rules and the
bias corrections that turn population skewness/kurtosis into their
sample forms. Each implementation computes its own moments; this module
only decides when a statistic exists and how the sample forms are derived.
"""

from __future__ import annotations

import math
import sys
from typing import NamedTuple

from moments_python.errors import NotEnoughDataError, UndefinedError

# Minimum number of observations for each statistic, in reporting order.
MIN_COUNT: dict[str, int] = {
    "min": 1,
    "max": 1,
    "sum": 1,
    "mean": 1,
    "population_variance": 2,
    "sample_variance": 2,
    "population_standard_deviation": 2,
    "sample_standard_deviation": 2,
    "population_skewness": 2,
    "sample_skewness": 3,
    "population_kurtosis": 2,
    "sample_kurtosis": 4,
}

STATISTICS: tuple[str, ...] = ("count",) + tuple(MIN_COUNT)

# Smallest variance whose power variance ** (order / 2) is still a normal float.
_MIN_SPREAD: dict[int, float] = {
    order: sys.float_info.min ** (2.0 / order) for order in (3, 4)
}


class DescriptiveSummary(NamedTuple):
    """Every descriptive statistic of one dataset."""

    count: int
    min: float
    max: float
    sum: float
    mean: float
    population_variance: float
    sample_variance: float
    population_standard_deviation: float
    sample_standard_deviation: float
    population_skewness: float
    sample_skewness: float
    population_kurtosis: float  # excess
    sample_kurtosis: float  # excess


def require_count(statistic: str, count: int) -> None:
    """Raise NotEnoughDataError if count is below the statistic's minimum."""
    required = MIN_COUNT[statistic]
    if count < required:
        raise NotEnoughDataError(statistic, count, required)


def require_spread(statistic: str, variance: float, order: int) -> None:
    """Check that a standardized moment of the given order can divide by its spread.

    The divisor is variance ** (order / 2). It must be a finite, normal
    (non-subnormal) float, otherwise the ratio is either a division by zero
    or has lost all precision. The threshold is compared against the
    variance itself, so the check cannot overflow.

    Args:
        statistic: Name of the requested statistic, for the error
        variance: Population variance of the data
        order: Order of the standardized moment (3 for skewness, 4 for kurtosis)

    Raises:
        UndefinedError: If the variance is zero, too small, or not finite
    """
    if variance == 0.0:
        raise UndefinedError(statistic)
    if not math.isfinite(variance):
        raise UndefinedError(statistic, reason="overflow")
    if variance < _MIN_SPREAD[order]:
        raise UndefinedError(statistic, reason="variance underflow")


def require_finite(statistic: str, value: float) -> float:
    """Return value, or raise UndefinedError if it overflowed to inf or NaN."""
    if not math.isfinite(value):
        raise UndefinedError(statistic, reason="overflow")
    return value


def sample_skewness_from_population(n: int, population_skewness: float) -> float:
    """Adjusted Fisher-Pearson skewness, G1 = sqrt(n(n-1))/(n-2) * g1."""
    return math.sqrt(n * (n - 1.0)) / (n - 2.0) * population_skewness


def sample_kurtosis_from_population(n: int, population_kurtosis: float) -> float:
    """Bias-corrected excess kurtosis, G2 = (n-1)/((n-2)(n-3)) * ((n+1) g2 + 6)."""
    return (n - 1.0) / ((n - 2.0) * (n - 3.0)) * ((n + 1.0) * population_kurtosis + 6.0)


def summarize(source) -> DescriptiveSummary:
    """Collect every statistic from an object exposing the query methods.

    Statistics are queried in reporting order; the first error propagates.
    """
    return DescriptiveSummary(*(getattr(source, name)() for name in STATISTICS))
