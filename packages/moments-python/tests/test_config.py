"""Tests for configuration loading and validation."""

from dataclasses import replace
from pathlib import Path

import pytest

from moments_python.config import (
    EquivalenceConfig,
    LoggingConfig,
    MomentsConfig,
    load_moments_config,
    validate_moments_config,
)
from moments_python.paths import get_default_config_path


class TestDefaults:
    """Tests for built-in defaults."""

    def test_default_config_values(self):
        """Default config should have the documented values."""
        config = MomentsConfig()

        assert config.equivalence.rtol == 1e-13
        assert config.equivalence.atol == 1e-13
        assert config.logging.component == "moments"
        assert config.logging.level == "DEBUG"
        assert config.logging.console_level == "WARNING"
        assert config.logging.log_dir is None

    def test_defaults_are_valid(self):
        is_valid, errors = validate_moments_config(MomentsConfig())
        assert is_valid
        assert errors == []

    def test_repository_config_loads(self):
        """The tracked config/moments.toml parses and validates."""
        assert get_default_config_path().name == "moments.toml"
        config = load_moments_config()
        is_valid, errors = validate_moments_config(config)
        assert is_valid, errors


class TestLoadFromFile:
    """Tests for load_moments_config() with explicit paths."""

    def test_load_full_file(self, temp_dir: Path):
        path = temp_dir / "moments.toml"
        path.write_text(
            "[equivalence]\n"
            "rtol = 1e-9\n"
            "atol = 0.0\n"
            "\n"
            "[logging]\n"
            'component = "bench"\n'
            'level = "INFO"\n'
            'console_level = "ERROR"\n'
            f'log_dir = "{temp_dir.as_posix()}"\n'
            'rotation = "1 day"\n'
            'retention = "3 files"\n'
        )

        config = load_moments_config(path)

        assert config.equivalence == EquivalenceConfig(rtol=1e-9, atol=0.0)
        assert config.logging == LoggingConfig(
            component="bench",
            level="INFO",
            console_level="ERROR",
            log_dir=temp_dir.as_posix(),
            rotation="1 day",
            retention="3 files",
        )

    def test_missing_sections_use_defaults(self, temp_dir: Path):
        """An empty file yields the built-in defaults."""
        path = temp_dir / "empty.toml"
        path.write_text("")
        assert load_moments_config(path) == MomentsConfig()

    def test_integer_tolerances_become_floats(self, temp_dir: Path):
        path = temp_dir / "ints.toml"
        path.write_text("[equivalence]\natol = 0\n")
        config = load_moments_config(str(path))
        assert isinstance(config.equivalence.atol, float)
        assert config.equivalence.atol == 0.0

    def test_empty_strings_map_to_none(self, temp_dir: Path):
        """Empty console_level and log_dir mean "disabled" and "default"."""
        path = temp_dir / "blank.toml"
        path.write_text('[logging]\nconsole_level = ""\nlog_dir = ""\n')
        config = load_moments_config(path)
        assert config.logging.console_level is None
        assert config.logging.log_dir is None

    def test_missing_explicit_path_raises(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_moments_config(temp_dir / "nope.toml")


class TestValidation:
    """Tests for validate_moments_config()."""

    @pytest.mark.parametrize("rtol", [-1e-3, float("nan"), float("inf")])
    def test_rejects_bad_rtol(self, rtol: float):
        config = MomentsConfig(equivalence=EquivalenceConfig(rtol=rtol))
        is_valid, errors = validate_moments_config(config)
        assert not is_valid
        assert any("equivalence.rtol" in e for e in errors)

    def test_rejects_negative_atol(self):
        config = MomentsConfig(equivalence=EquivalenceConfig(atol=-1.0))
        is_valid, errors = validate_moments_config(config)
        assert not is_valid
        assert any("equivalence.atol" in e for e in errors)

    def test_rejects_unknown_levels(self):
        logging = replace(LoggingConfig(), level="VERBOSE", console_level="LOUD")
        is_valid, errors = validate_moments_config(MomentsConfig(logging=logging))
        assert not is_valid
        assert len(errors) == 2

    def test_rejects_empty_component(self):
        logging = replace(LoggingConfig(), component="")
        is_valid, errors = validate_moments_config(MomentsConfig(logging=logging))
        assert not is_valid
        assert errors == ["logging.component must not be empty"]

    def test_disabled_console_is_valid(self):
        logging = replace(LoggingConfig(), console_level=None)
        is_valid, _ = validate_moments_config(MomentsConfig(logging=logging))
        assert is_valid

    def test_collects_all_errors(self):
        config = MomentsConfig(
            equivalence=EquivalenceConfig(rtol=-1.0, atol=-1.0),
            logging=replace(LoggingConfig(), level="nope"),
        )
        is_valid, errors = validate_moments_config(config)
        assert not is_valid
        assert len(errors) == 3
