"""Configuration Module for moments-python.

Loads and validates config/moments.toml (equivalence tolerances, logging).
"""

from moments_python.config.moments import (
    EquivalenceConfig,
    LoggingConfig,
    MomentsConfig,
    load_moments_config,
    validate_moments_config,
)

__all__ = [
    "EquivalenceConfig",
    "LoggingConfig",
    "MomentsConfig",
    "load_moments_config",
    "validate_moments_config",
]
