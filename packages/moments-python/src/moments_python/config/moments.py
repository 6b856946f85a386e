"""Moments Configuration Loader and Validator.

Loads config/moments.toml and provides typed access to configuration.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from moments_python.paths import get_default_config_path

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EquivalenceConfig:
    """Tolerances used when comparing implementations.

    A value matches its reference when |value - reference| <= atol + rtol * |reference|.
    """

    rtol: float = 1e-13
    atol: float = 1e-13


@dataclass
class LoggingConfig:
    """NDJSON logging configuration."""

    component: str = "moments"
    level: str = "DEBUG"
    console_level: str | None = "WARNING"
    log_dir: str | None = None  # None: repo logs/ndjson/
    rotation: str = "10 MB"
    retention: str = "7 days"


@dataclass
class MomentsConfig:
    """Complete moments-python configuration."""

    equivalence: EquivalenceConfig = field(default_factory=EquivalenceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_moments_config(config_path: Path | str | None = None) -> MomentsConfig:
    """Load moments configuration from TOML file.

    Args:
        config_path: Path to config file. Defaults to config/moments.toml
                     at the repository root; built-in defaults are used
                     when that file does not exist.

    Returns:
        MomentsConfig with all settings loaded.

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist.
    """
    if config_path is None:
        config_path = get_default_config_path()
        if not config_path.exists():
            return MomentsConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    eq_raw = raw.get("equivalence", {})
    equivalence = EquivalenceConfig(
        rtol=float(eq_raw.get("rtol", 1e-13)),
        atol=float(eq_raw.get("atol", 1e-13)),
    )

    log_raw = raw.get("logging", {})
    console_level = log_raw.get("console_level", "WARNING")
    logging = LoggingConfig(
        component=log_raw.get("component", "moments"),
        level=log_raw.get("level", "DEBUG"),
        # TOML has no null; an empty string disables the console sink
        console_level=console_level or None,
        log_dir=log_raw.get("log_dir") or None,
        rotation=log_raw.get("rotation", "10 MB"),
        retention=log_raw.get("retention", "7 days"),
    )

    return MomentsConfig(equivalence=equivalence, logging=logging)


def validate_moments_config(config: MomentsConfig) -> tuple[bool, list[str]]:
    """Validate moments configuration.

    Args:
        config: MomentsConfig to validate.

    Returns:
        Tuple of (is_valid, list of error messages).
    """
    errors = []

    eq = config.equivalence
    for name, value in (("rtol", eq.rtol), ("atol", eq.atol)):
        if not math.isfinite(value) or value < 0:
            errors.append(f"equivalence.{name} must be finite and non-negative, got {value}")

    log = config.logging
    if not log.component:
        errors.append("logging.component must not be empty")
    if log.level not in LOG_LEVELS:
        errors.append(f"Unknown logging.level: {log.level}")
    if log.console_level is not None and log.console_level not in LOG_LEVELS:
        errors.append(f"Unknown logging.console_level: {log.console_level}")

    return len(errors) == 0, errors
