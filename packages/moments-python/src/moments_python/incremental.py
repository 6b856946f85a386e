"""Single-pass incremental moments with Numba acceleration.

IncrementalMoments keeps a fixed-size accumulator (count, min, max, sum,
mean and the centered power sums m2, m3, m4) and updates it in O(1) per
observation. It never stores the samples, so it can characterize a stream
of data as it arrives.

The update is the Terriberry/Pebay generalization of Welford's online
algorithm to the third and fourth moments:

    n1       = n;  n += 1
    delta    = x - mean
    delta_n  = delta / n
    term1    = delta * delta_n * n1
    mean    += delta_n
    m4      += term1 * delta_n^2 * (n^2 - 3n + 3) + 6 delta_n^2 m2 - 4 delta_n m3
    m3      += term1 * delta_n * (n - 2) - 3 delta_n m2
    m2      += term1

m4 and m3 are updated before m2 (and m4 before m3) because each uses the
previous value of the lower sums. Nothing subtracts sum(x)^2 / n from
sum(x^2), so there is no catastrophic cancellation.

The mean stays finite for any finite input. The power sums may overflow
for values near the top of the float range; the affected statistics then
raise UndefinedError instead of returning inf or NaN.

Example:
    >>> from moments_python import IncrementalMoments
    >>> stats = IncrementalMoments()
    >>> stats.update_array([1.0, 2.0, 3.0])
    >>> stats.update(4.0)
    >>> stats.sample_variance()
    1.6666666666666667
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
from loguru import logger
from numba import njit

from moments_python.batch import as_samples
from moments_python.errors import InvalidDataError
from moments_python.formulas import (
    DescriptiveSummary,
    require_count,
    require_finite,
    require_spread,
    sample_kurtosis_from_population,
    sample_skewness_from_population,
    summarize,
)


class MomentState(NamedTuple):
    """Snapshot of the accumulator. Sums of centered powers, not means."""

    count: int
    min: float
    max: float
    sum: float
    mean: float
    m2: float
    m3: float
    m4: float


_EMPTY_STATE = MomentState(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


@njit
def _update_moments(n, lowest, highest, total, mean, m2, m3, m4, x):
    """Fold one finite observation into the accumulator state."""
    if n == 0:
        # delta * delta_n * 0 would be inf * 0 for |x| above ~1e154
        return 1, x, x, x, x, 0.0, 0.0, 0.0
    if x < lowest:
        lowest = x
    if x > highest:
        highest = x
    total += x

    n1 = float(n)
    n += 1
    nf = float(n)
    delta = x - mean
    if np.isfinite(delta):
        delta_n = delta / nf
    else:
        # x and mean lie near opposite ends of the float range
        delta_n = x / nf - mean / nf
    delta_n2 = delta_n * delta_n
    term1 = delta * delta_n * n1

    mean += delta_n
    m4 += term1 * delta_n2 * (nf * nf - 3.0 * nf + 3.0) + 6.0 * delta_n2 * m2 - 4.0 * delta_n * m3
    m3 += term1 * delta_n * (nf - 2.0) - 3.0 * delta_n * m2
    m2 += term1

    return n, lowest, highest, total, mean, m2, m3, m4


@njit
def _update_moments_array(n, lowest, highest, total, mean, m2, m3, m4, values):
    """Fold values in order, stopping at the first non-finite one.

    Returns the updated state plus the index of the rejected value (-1 if
    every value was applied). Values before the rejected one stay applied.
    """
    for i in range(len(values)):
        x = values[i]
        if not np.isfinite(x):
            return n, lowest, highest, total, mean, m2, m3, m4, i
        n, lowest, highest, total, mean, m2, m3, m4 = _update_moments(
            n, lowest, highest, total, mean, m2, m3, m4, x
        )
    return n, lowest, highest, total, mean, m2, m3, m4, -1


class IncrementalMoments:
    """Running descriptive statistics over a stream of observations.

    Statistics can be queried at any point, interleaved with further
    updates. Queries never modify the accumulator.

    Not thread-safe: concurrent use of one instance needs external locking.
    """

    def __init__(self) -> None:
        self._set_state(_EMPTY_STATE)

    def _set_state(self, state) -> None:
        (
            self._n,
            self._min,
            self._max,
            self._sum,
            self._mean,
            self._m2,
            self._m3,
            self._m4,
        ) = state
        self._n = int(self._n)

    @property
    def state(self) -> MomentState:
        """Current accumulator state."""
        return MomentState(
            self._n, self._min, self._max, self._sum,
            self._mean, self._m2, self._m3, self._m4,
        )

    def update(self, x: float) -> None:
        """Add one observation.

        Raises:
            InvalidDataError: If x is NaN or infinite. The state is unchanged.
        """
        x = float(x)
        if not math.isfinite(x):
            logger.bind(context={"value": repr(x), "count": self._n}).debug(
                "Rejected non-finite observation"
            )
            raise InvalidDataError(x)
        self._set_state(_update_moments(*self.state, x))

    def update_array(self, values) -> None:
        """Add observations in order.

        Not transactional: if a value is NaN or infinite, the values before
        it remain applied and the error reports the offending index.

        Raises:
            InvalidDataError: On the first non-finite value
        """
        data = as_samples(values)
        if len(data) == 0:
            return
        *state, idx = _update_moments_array(*self.state, data)
        self._set_state(state)
        if idx >= 0:
            value = float(data[idx])
            logger.bind(context={"index": int(idx), "value": repr(value), "count": self._n}).debug(
                "Rejected non-finite observation in array update"
            )
            raise InvalidDataError(value, int(idx))

    def count(self) -> int:
        return self._n

    def min(self) -> float:
        require_count("min", self._n)
        return self._min

    def max(self) -> float:
        require_count("max", self._n)
        return self._max

    def sum(self) -> float:
        require_count("sum", self._n)
        return require_finite("sum", self._sum)

    def mean(self) -> float:
        require_count("mean", self._n)
        return self._mean

    def population_variance(self) -> float:
        require_count("population_variance", self._n)
        return require_finite("population_variance", self._m2 / self._n)

    def sample_variance(self) -> float:
        require_count("sample_variance", self._n)
        return require_finite("sample_variance", self._m2 / (self._n - 1))

    def population_standard_deviation(self) -> float:
        require_count("population_standard_deviation", self._n)
        return require_finite("population_standard_deviation", math.sqrt(self._m2 / self._n))

    def sample_standard_deviation(self) -> float:
        require_count("sample_standard_deviation", self._n)
        return require_finite(
            "sample_standard_deviation", math.sqrt(self._m2 / (self._n - 1))
        )

    def _population_skewness(self, statistic: str) -> float:
        require_spread(statistic, self._m2 / self._n, 3)
        m2 = self._m2
        return require_finite(statistic, math.sqrt(self._n) * self._m3 / (m2 * math.sqrt(m2)))

    def _population_kurtosis(self, statistic: str) -> float:
        require_spread(statistic, self._m2 / self._n, 4)
        return require_finite(statistic, self._n * self._m4 / (self._m2 * self._m2) - 3.0)

    def population_skewness(self) -> float:
        require_count("population_skewness", self._n)
        return self._population_skewness("population_skewness")

    def sample_skewness(self) -> float:
        require_count("sample_skewness", self._n)
        return sample_skewness_from_population(
            self._n, self._population_skewness("sample_skewness")
        )

    def population_kurtosis(self) -> float:
        """Population excess kurtosis (normal distribution = 0.0).

        Negative values indicate a platykurtic (flat) distribution, positive
        values a leptokurtic (peaked) one.
        """
        require_count("population_kurtosis", self._n)
        return self._population_kurtosis("population_kurtosis")

    def sample_kurtosis(self) -> float:
        require_count("sample_kurtosis", self._n)
        return sample_kurtosis_from_population(
            self._n, self._population_kurtosis("sample_kurtosis")
        )

    def summary(self) -> DescriptiveSummary:
        """All statistics at once; raises the first error encountered."""
        return summarize(self)

    def __repr__(self) -> str:
        return f"IncrementalMoments(count={self._n})"
