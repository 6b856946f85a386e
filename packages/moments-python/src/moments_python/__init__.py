"""moments-python - Descriptive statistics from running central moments.

Count, min, max, sum, mean, variance, standard deviation, skewness and
excess kurtosis, in population and sample (bias-corrected) forms, computed
three interchangeable ways:

- IncrementalMoments: single-pass accumulator, O(1) memory per stream
- batch: stateless two-pass reference functions over a full array
- CachedVectorStatistics: memoized statistics over a borrowed array

Example:
    >>> from moments_python import IncrementalMoments, batch, describe
    >>> stats = IncrementalMoments()
    >>> stats.update_array([1.0, 2.0, 3.0, 4.0, 5.0])
    >>> stats.sample_variance()
    2.5
"""

__version__ = "0.1.0"

# Core algorithm modules
from moments_python import batch

# Error taxonomy
from moments_python.errors import (
    InvalidDataError,
    NotEnoughDataError,
    StatsError,
    UndefinedError,
)

# Shared contract
from moments_python.formulas import MIN_COUNT, STATISTICS, DescriptiveSummary

# Implementations
from moments_python.incremental import IncrementalMoments, MomentState
from moments_python.cached import CachedVectorStatistics, describe

# Cross-implementation checks
from moments_python.equivalence import cross_validate

# Configuration and logging
from moments_python.config import MomentsConfig, load_moments_config
from moments_python.ndjson_logger import configure_logging, setup_ndjson_logger

__all__ = [
    # Version
    "__version__",
    # Modules
    "batch",
    # Errors
    "StatsError",
    "InvalidDataError",
    "NotEnoughDataError",
    "UndefinedError",
    # Shared contract
    "MIN_COUNT",
    "STATISTICS",
    "DescriptiveSummary",
    # Implementations
    "IncrementalMoments",
    "MomentState",
    "CachedVectorStatistics",
    "describe",
    # Cross-implementation checks
    "cross_validate",
    # Configuration and logging
    "MomentsConfig",
    "load_moments_config",
    "configure_logging",
    "setup_ndjson_logger",
]
