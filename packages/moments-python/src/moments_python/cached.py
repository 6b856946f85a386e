"""Memoized descriptive statistics over a stored sample array.

CachedVectorStatistics borrows an immutable array and computes each
statistic at most once. Higher moments depend on lower ones (kurtosis on
variance, variance on the mean), so every intermediate result is cached
and reused by the statistics built on it.

The input is validated once, at construction. Afterwards no query can hit
a NaN or infinite sample.
"""

from __future__ import annotations

import functools
import math

import numpy as np

from moments_python.batch import (
    _centered_power_sum,
    _max,
    _mean_from,
    _min,
    _sum,
    as_samples,
    validate,
)
from moments_python.formulas import (
    DescriptiveSummary,
    require_count,
    require_finite,
    require_spread,
    sample_kurtosis_from_population,
    sample_skewness_from_population,
    summarize,
)


def _memoized(method):
    """Cache a zero-argument method's result in the instance's memo cells.

    Errors are not cached; they are cheap and deterministic.
    """
    name = method.__name__

    @functools.wraps(method)
    def wrapper(self):
        cells = self._cells
        if name in cells:
            return cells[name]
        value = method(self)
        cells[name] = value
        return value

    return wrapper


class CachedVectorStatistics:
    """Descriptive statistics of one immutable sample array.

    The array is borrowed: float64 input is not copied, and the instance
    only holds a read-only view of it. Callers must not mutate the original
    array while the instance is in use.

    Not thread-safe: memo cells are filled without locking.

    Raises:
        InvalidDataError: At construction, if any sample is NaN or infinite
    """

    def __init__(self, values) -> None:
        data = as_samples(values).view()
        validate(data)
        data.flags.writeable = False
        self._data = data
        self._cells: dict[str, float] = {}

    @property
    def values(self) -> np.ndarray:
        """The borrowed samples (read-only)."""
        return self._data

    def count(self) -> int:
        return len(self._data)

    @_memoized
    def min(self) -> float:
        require_count("min", self.count())
        return float(_min(self._data))

    @_memoized
    def max(self) -> float:
        require_count("max", self.count())
        return float(_max(self._data))

    @_memoized
    def _total(self) -> float:
        return float(_sum(self._data))

    @_memoized
    def sum(self) -> float:
        require_count("sum", self.count())
        return require_finite("sum", self._total())

    @_memoized
    def mean(self) -> float:
        require_count("mean", self.count())
        return _mean_from(self._data, self._total(), self.min(), self.max())

    @_memoized
    def _sum_squared_deltas(self) -> float:
        return float(_centered_power_sum(self._data, self.mean(), 2))

    @_memoized
    def _sum_cubed_deltas(self) -> float:
        return float(_centered_power_sum(self._data, self.mean(), 3))

    @_memoized
    def _sum_quartic_deltas(self) -> float:
        return float(_centered_power_sum(self._data, self.mean(), 4))

    @_memoized
    def _variance(self) -> float:
        # unchecked: may be inf or NaN when the squared deltas overflow
        return self._sum_squared_deltas() / self.count()

    @_memoized
    def population_variance(self) -> float:
        require_count("population_variance", self.count())
        return require_finite("population_variance", self._variance())

    @_memoized
    def sample_variance(self) -> float:
        require_count("sample_variance", self.count())
        return require_finite("sample_variance", self._sum_squared_deltas() / (self.count() - 1))

    @_memoized
    def population_standard_deviation(self) -> float:
        require_count("population_standard_deviation", self.count())
        return require_finite("population_standard_deviation", math.sqrt(self._variance()))

    @_memoized
    def sample_standard_deviation(self) -> float:
        require_count("sample_standard_deviation", self.count())
        return require_finite(
            "sample_standard_deviation",
            math.sqrt(self._sum_squared_deltas() / (self.count() - 1)),
        )

    def _population_skewness(self, statistic: str) -> float:
        variance = self._variance()
        require_spread(statistic, variance, 3)
        sigma = math.sqrt(variance)
        return require_finite(
            statistic, self._sum_cubed_deltas() / self.count() / (sigma * sigma * sigma)
        )

    def _population_kurtosis(self, statistic: str) -> float:
        variance = self._variance()
        require_spread(statistic, variance, 4)
        return require_finite(
            statistic,
            self._sum_quartic_deltas() / (variance * variance) / self.count() - 3.0,
        )

    @_memoized
    def population_skewness(self) -> float:
        require_count("population_skewness", self.count())
        return self._population_skewness("population_skewness")

    @_memoized
    def sample_skewness(self) -> float:
        n = self.count()
        require_count("sample_skewness", n)
        if "population_skewness" in self._cells:
            return sample_skewness_from_population(n, self._cells["population_skewness"])
        return sample_skewness_from_population(n, self._population_skewness("sample_skewness"))

    @_memoized
    def population_kurtosis(self) -> float:
        """Population excess kurtosis (normal distribution = 0.0)."""
        require_count("population_kurtosis", self.count())
        return self._population_kurtosis("population_kurtosis")

    @_memoized
    def sample_kurtosis(self) -> float:
        n = self.count()
        require_count("sample_kurtosis", n)
        if "population_kurtosis" in self._cells:
            return sample_kurtosis_from_population(n, self._cells["population_kurtosis"])
        return sample_kurtosis_from_population(n, self._population_kurtosis("sample_kurtosis"))

    def summary(self) -> DescriptiveSummary:
        """All statistics at once; raises the first error encountered."""
        return summarize(self)

    def __repr__(self) -> str:
        return f"CachedVectorStatistics(count={self.count()}, cached={sorted(self._cells)})"


def describe(values) -> DescriptiveSummary:
    """Compute every descriptive statistic of a sample array.

    Raises:
        InvalidDataError: If any sample is NaN or infinite
        NotEnoughDataError: If there are fewer than 4 samples
        UndefinedError: If all samples are equal
    """
    return CachedVectorStatistics(values).summary()
