"""Repository-local path configuration.

All paths are relative to the repository root.
"""
from pathlib import Path

# Navigate from packages/moments-python/src/moments_python/ to repo root
REPO_ROOT = Path(__file__).parent.parent.parent.parent.parent


def get_config_dir() -> Path:
    """Return the configuration directory (tracked in git)."""
    return REPO_ROOT / "config"


def get_default_config_path() -> Path:
    """Return the default moments.toml location."""
    return get_config_dir() / "moments.toml"


def get_log_dir() -> Path:
    """Return the logs directory (gitignored)."""
    return REPO_ROOT / "logs"


def get_ndjson_log_dir() -> Path:
    """Return the NDJSON log directory."""
    return get_log_dir() / "ndjson"
