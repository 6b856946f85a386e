"""Batch descriptive statistics with Numba acceleration.

Each public function takes the whole sample array and recomputes what it
needs from scratch with the textbook two-pass formulas: one pass for the
mean, a second one for the centered power sums. Nothing is shared between
calls, which makes this the reference implementation that the incremental
and cached-vector paths are checked against.

Every function validates its input first, so a NaN or infinite sample is
reported as InvalidDataError rather than leaking into a result. Finite
samples whose power sums overflow raise UndefinedError, never inf or NaN.

Example:
    >>> from moments_python import batch
    >>> batch.sample_variance([1.0, 2.0, 3.0, 4.0, 5.0])
    2.5
"""

from __future__ import annotations

import math

import numpy as np
from loguru import logger
from numba import njit

from moments_python.errors import InvalidDataError
from moments_python.formulas import (
    require_count,
    require_finite,
    require_spread,
    sample_kurtosis_from_population,
    sample_skewness_from_population,
)


@njit
def _first_invalid_index(values):
    """Return the index of the first non-finite value, or -1."""
    for i in range(len(values)):
        if not np.isfinite(values[i]):
            return i
    return -1


@njit
def _min(values):
    lowest = values[0]
    for v in values:
        if v < lowest:
            lowest = v
    return lowest


@njit
def _max(values):
    highest = values[0]
    for v in values:
        if v > highest:
            highest = v
    return highest


@njit
def _sum(values):
    total = 0.0
    for v in values:
        total += v
    return total


@njit
def _centered_power_sum(values, center, power):
    """Sum of (v - center) ** power, multiplied out term by term."""
    total = 0.0
    for v in values:
        delta = v - center
        term = delta
        for _ in range(power - 1):
            term *= delta
        total += term
    return total


def bounded_mean(total: float, n: int, lowest: float, highest: float) -> float:
    """Return total / n clamped into [lowest, highest].

    The true mean always lies between the extremes. Clamping keeps rounding
    in total / n from pushing it outside, so constant data has a mean equal
    to its value and an exactly-zero variance.
    """
    mean_val = total / n
    if mean_val < lowest:
        return lowest
    if mean_val > highest:
        return highest
    return mean_val


def as_samples(values) -> np.ndarray:
    """Convert a sequence of samples to a 1-D float64 array.

    Float64 arrays are passed through without a copy.

    Raises:
        ValueError: If the input is not one-dimensional
    """
    data = np.asarray(values, dtype=np.float64)
    if data.ndim != 1:
        raise ValueError(f"Expected a 1-D sequence of samples, got shape {data.shape}")
    return data


def validate(values) -> None:
    """Check that every sample is finite.

    Raises:
        InvalidDataError: On the first NaN or +/-Infinity, with its index
    """
    data = as_samples(values)
    if len(data) == 0:
        return
    idx = _first_invalid_index(data)
    if idx >= 0:
        value = float(data[idx])
        logger.bind(context={"index": int(idx), "value": repr(value)}).debug(
            "Rejected non-finite sample"
        )
        raise InvalidDataError(value, int(idx))


def _checked(values) -> np.ndarray:
    data = as_samples(values)
    validate(data)
    return data


def _mean_from(data: np.ndarray, total: float, lowest: float, highest: float) -> float:
    """Mean of data given its precomputed sum.

    When the sum overflowed, the samples are averaged pre-divided by n
    instead, which cannot overflow.
    """
    n = len(data)
    if math.isinf(total):
        return bounded_mean(_sum(data / n), 1, lowest, highest)
    return bounded_mean(total, n, lowest, highest)


def _mean(data: np.ndarray) -> float:
    return _mean_from(data, _sum(data), _min(data), _max(data))


def _population_variance(data: np.ndarray) -> float:
    return _centered_power_sum(data, _mean(data), 2) / len(data)


def _population_skewness(data: np.ndarray, statistic: str) -> float:
    n = len(data)
    center = _mean(data)
    variance = _centered_power_sum(data, center, 2) / n
    require_spread(statistic, variance, 3)
    sigma = math.sqrt(variance)
    return require_finite(
        statistic, _centered_power_sum(data, center, 3) / n / (sigma * sigma * sigma)
    )


def _population_kurtosis(data: np.ndarray, statistic: str) -> float:
    n = len(data)
    center = _mean(data)
    variance = _centered_power_sum(data, center, 2) / n
    require_spread(statistic, variance, 4)
    return require_finite(
        statistic, _centered_power_sum(data, center, 4) / (variance * variance) / n - 3.0
    )


def count(values) -> int:
    """Number of samples."""
    return len(_checked(values))


def min(values) -> float:
    """Smallest sample."""
    data = _checked(values)
    require_count("min", len(data))
    return float(_min(data))


def max(values) -> float:
    """Largest sample."""
    data = _checked(values)
    require_count("max", len(data))
    return float(_max(data))


def sum(values) -> float:
    """Sum of the samples.

    Raises:
        UndefinedError: If the sum overflows
    """
    data = _checked(values)
    require_count("sum", len(data))
    return require_finite("sum", float(_sum(data)))


def mean(values) -> float:
    """Arithmetic mean. Finite even when the plain sum would overflow."""
    data = _checked(values)
    require_count("mean", len(data))
    return float(_mean(data))


def population_variance(values) -> float:
    """Population variance (denominator n).

    R: var.pop=function(x){(length(x)-1)/length(x)*var(x)}
    Octave: var(a, 1)
    """
    data = _checked(values)
    require_count("population_variance", len(data))
    return require_finite("population_variance", float(_population_variance(data)))


def sample_variance(values) -> float:
    """Sample variance (denominator n - 1).

    R: var(a)
    Octave: var(a)
    """
    data = _checked(values)
    n = len(data)
    require_count("sample_variance", n)
    return require_finite(
        "sample_variance", float(_centered_power_sum(data, _mean(data), 2) / (n - 1))
    )


def population_standard_deviation(values) -> float:
    """Square root of the population variance."""
    data = _checked(values)
    require_count("population_standard_deviation", len(data))
    return require_finite("population_standard_deviation", math.sqrt(_population_variance(data)))


def sample_standard_deviation(values) -> float:
    """Square root of the sample variance."""
    data = _checked(values)
    n = len(data)
    require_count("sample_standard_deviation", n)
    return require_finite(
        "sample_standard_deviation",
        math.sqrt(_centered_power_sum(data, _mean(data), 2) / (n - 1)),
    )


def population_skewness(values) -> float:
    """Population skewness g1 = m3 / m2^1.5 (moments as means).

    Raises:
        NotEnoughDataError: Fewer than 2 samples
        UndefinedError: All samples are equal, the spread underflows, or a
            power sum overflows
    """
    data = _checked(values)
    require_count("population_skewness", len(data))
    return float(_population_skewness(data, "population_skewness"))


def sample_skewness(values) -> float:
    """Adjusted Fisher-Pearson sample skewness.

    Raises:
        NotEnoughDataError: Fewer than 3 samples
        UndefinedError: As for population_skewness
    """
    data = _checked(values)
    n = len(data)
    require_count("sample_skewness", n)
    return sample_skewness_from_population(n, _population_skewness(data, "sample_skewness"))


def population_kurtosis(values) -> float:
    """Population excess kurtosis g2 = m4 / m2^2 - 3 (moments as means).

    Raises:
        NotEnoughDataError: Fewer than 2 samples
        UndefinedError: All samples are equal, the spread underflows, or a
            power sum overflows
    """
    data = _checked(values)
    require_count("population_kurtosis", len(data))
    return float(_population_kurtosis(data, "population_kurtosis"))


def sample_kurtosis(values) -> float:
    """Bias-corrected sample excess kurtosis.

    Raises:
        NotEnoughDataError: Fewer than 4 samples
        UndefinedError: As for population_kurtosis
    """
    data = _checked(values)
    n = len(data)
    require_count("sample_kurtosis", n)
    return sample_kurtosis_from_population(n, _population_kurtosis(data, "sample_kurtosis"))
