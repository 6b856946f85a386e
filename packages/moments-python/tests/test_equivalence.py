"""Cross-implementation equivalence tests.

The incremental, batch and cached-vector paths must agree on every
statistic, both in value and in the kind of error raised.
"""

import math

import numpy as np
import pytest

from checks import (
    ASCENDING,
    HUGE,
    ONES,
    OPPOSITE_EXTREMES,
    QUERIES,
    SUM_OVERFLOW,
    TINY,
    VALUES,
    ZEROS,
    assert_same_outcome,
    outcome,
)
from moments_python import (
    STATISTICS,
    CachedVectorStatistics,
    IncrementalMoments,
    batch,
    cross_validate,
)
from moments_python.equivalence import IMPLEMENTATIONS


def _assert_equivalent(values) -> None:
    incremental = IncrementalMoments()
    incremental.update_array(values)
    cached = CachedVectorStatistics(values)

    for name in QUERIES:
        expected = outcome(lambda fn=getattr(batch, name): fn(values))
        assert_same_outcome(outcome(getattr(incremental, name)), expected)
        assert_same_outcome(outcome(getattr(cached, name)), expected)


class TestImplementationsAgree:
    """Every dataset and prefix gives matching outcomes across implementations."""

    @pytest.mark.parametrize("n", range(len(VALUES) + 1))
    def test_values_prefixes(self, n: int):
        _assert_equivalent(VALUES[:n])

    @pytest.mark.parametrize("n", range(len(ZEROS) + 1))
    def test_zeros_prefixes(self, n: int):
        _assert_equivalent(ZEROS[:n])

    @pytest.mark.parametrize("n", range(len(ONES) + 1))
    def test_ones_prefixes(self, n: int):
        _assert_equivalent(ONES[:n])

    def test_ascending(self):
        _assert_equivalent(ASCENDING)

    def test_random_values(self, random_values: np.ndarray):
        _assert_equivalent(random_values)

    def test_skewed_values(self, skewed_values: np.ndarray):
        _assert_equivalent(skewed_values)

    def test_rounding_prone_constant(self):
        """Both paths see exactly zero variance for repeated 0.1."""
        _assert_equivalent([0.1] * 10)

    @pytest.mark.parametrize(
        "values",
        [TINY, HUGE, SUM_OVERFLOW, OPPOSITE_EXTREMES, [1e200, 1e200]],
        ids=["tiny", "huge", "sum_overflow", "opposite_extremes", "huge_constant"],
    )
    def test_magnitude_extremes(self, values):
        """Underflowing and overflowing data are classified the same way everywhere."""
        _assert_equivalent(values)

    def test_small_scale(self):
        """Data scaled far down still agrees while the spread is representable."""
        _assert_equivalent([v * 1e-60 for v in VALUES])


class TestCrossValidate:
    """Tests for the cross_validate() report."""

    def test_report_structure(self):
        report = cross_validate(VALUES)
        assert set(report) == {
            "aligned",
            "count",
            "statistic_count",
            "discrepancy_count",
            "discrepancies",
            "results",
        }
        assert report["count"] == 10
        assert report["statistic_count"] == len(STATISTICS)
        assert set(report["results"]) == set(IMPLEMENTATIONS)
        for impl in IMPLEMENTATIONS:
            assert set(report["results"][impl]) == set(STATISTICS)

    def test_aligned_on_reference_data(self):
        report = cross_validate(VALUES)
        assert report["aligned"] is True
        assert report["discrepancy_count"] == 0
        assert report["discrepancies"] == []

    def test_aligned_on_random_data(self, skewed_values: np.ndarray):
        assert cross_validate(skewed_values)["aligned"] is True

    def test_errors_reported_by_kind(self):
        """Too little data is reported as a matching error kind, not a discrepancy."""
        report = cross_validate([1.0, 2.0])
        assert report["aligned"] is True
        for impl in IMPLEMENTATIONS:
            assert report["results"][impl]["sample_kurtosis"] == {"error": "not_enough_data"}
            assert report["results"][impl]["population_variance"] == {"value": 0.25}

    def test_constant_data(self):
        report = cross_validate(ONES)
        assert report["aligned"] is True
        for impl in IMPLEMENTATIONS:
            assert report["results"][impl]["population_skewness"] == {"error": "undefined"}

    def test_tiny_spread_is_aligned(self):
        """Divisors that underflow are reported as undefined, not raised."""
        report = cross_validate(TINY)
        assert report["aligned"] is True
        for impl in IMPLEMENTATIONS:
            results = report["results"][impl]
            assert results["population_skewness"] == {"error": "undefined"}
            assert results["population_kurtosis"] == {"error": "undefined"}
            assert results["population_variance"]["value"] > 0.0

    def test_overflow_is_aligned(self):
        report = cross_validate(HUGE)
        assert report["aligned"] is True
        assert report["count"] == 3
        for impl in IMPLEMENTATIONS:
            assert report["results"][impl]["population_variance"] == {"error": "undefined"}

    def test_invalid_data_everywhere(self):
        """NaN input yields invalid_data from every implementation."""
        report = cross_validate([1.0, math.nan, 3.0])
        assert report["aligned"] is True
        assert report["count"] == 0
        for impl in IMPLEMENTATIONS:
            for name in STATISTICS:
                assert report["results"][impl][name] == {"error": "invalid_data"}

    def test_detects_value_mismatch(self, monkeypatch: pytest.MonkeyPatch):
        """A deviating implementation is reported with both values."""
        monkeypatch.setattr(CachedVectorStatistics, "max", lambda self: 1e9)
        report = cross_validate(VALUES)

        assert report["aligned"] is False
        assert report["discrepancy_count"] == 1
        (entry,) = report["discrepancies"]
        assert entry["type"] == "value_mismatch"
        assert entry["statistic"] == "max"
        assert entry["implementation"] == "cached"
        assert entry["batch"] == 115.0
        assert entry["cached"] == 1e9

    def test_detects_outcome_mismatch(self, monkeypatch: pytest.MonkeyPatch):
        """A value where the reference raises is an outcome mismatch."""
        monkeypatch.setattr(IncrementalMoments, "sample_kurtosis", lambda self: 0.0)
        report = cross_validate(ASCENDING[:3])

        (entry,) = report["discrepancies"]
        assert entry["type"] == "outcome_mismatch"
        assert entry["statistic"] == "sample_kurtosis"
        assert entry["batch"] == "not_enough_data"
        assert entry["incremental"] == 0.0

    def test_explicit_tolerances(self):
        """Explicit tolerances override the configured ones."""
        report = cross_validate(VALUES, rtol=1e-6, atol=1e-6)
        assert report["aligned"] is True

    def test_accepts_arrays_and_lists(self, values10: np.ndarray):
        assert cross_validate(values10)["results"] == cross_validate(VALUES)["results"]
