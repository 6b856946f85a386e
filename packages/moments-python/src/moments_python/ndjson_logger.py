"""NDJSON structured logging for moments-python.

Library modules log through loguru's global ``logger`` and attach their
structured data as a single ``context`` dict:

    logger.bind(context={"index": 2, "value": "nan"}).debug("Rejected non-finite sample")

The keys in use are ``value``, ``index`` and ``count`` (rejected input) and
``rtol``, ``atol`` and ``discrepancy_count`` (cross-validation). This
module installs sinks that write those records as NDJSON lines. Other
``extra`` keys are not part of the schema and are dropped.

Schema:
{
    "ts": "2026-01-20T00:00:00.000000Z",  # record time, UTC ISO 8601
    "level": "DEBUG",
    "msg": "Rejected non-finite observation",
    "component": "moments",                # sink name, from [logging] component
    "module": "moments_python.incremental",
    "env": "development",
    "pid": 12345,
    "tid": 67890,
    "trace_id": "abc123",                  # one per process
    "context": {"value": "nan", "count": 3}
}

A record that cannot be serialized becomes an ERROR line describing the
failure; logging never raises into library code.
"""

from __future__ import annotations

import json
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from moments_python.config import LoggingConfig, MomentsConfig
from moments_python.paths import get_ndjson_log_dir

_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def get_trace_id() -> str:
    """Get or create the trace ID shared by every record of this process."""
    if not hasattr(get_trace_id, "_trace_id"):
        get_trace_id._trace_id = uuid.uuid4().hex[:16]
    return get_trace_id._trace_id


def _escape_braces(line: str) -> str:
    # loguru runs format_map() over the formatter's output
    return line.replace("{", "{{").replace("}", "}}") + "\n"


class NDJSONFormatter:
    """Format loguru records as NDJSON lines with a fixed schema."""

    def __init__(self, component: str, env: str = "development"):
        self.component = component
        self.env = env

    def _entry(self, record: dict) -> dict:
        entry = {
            "ts": record["time"].astimezone(timezone.utc).strftime(_TS_FORMAT),
            "level": record["level"].name,
            "msg": record["message"],
            "component": self.component,
            "module": record["name"],
            "env": self.env,
            "pid": record["process"].id,
            "tid": record["thread"].id,
            "trace_id": get_trace_id(),
        }

        context = record["extra"].get("context")
        if context:
            entry["context"] = dict(context)

        exc = record.get("exception")
        if exc:
            entry["exception"] = {
                "type": exc.type.__name__ if exc.type else None,
                "value": str(exc.value) if exc.value else None,
            }
        return entry

    def format(self, record: dict) -> str:
        """Format a loguru record as one NDJSON line."""
        try:
            # default=str: numpy scalars and other context values become strings
            return _escape_braces(json.dumps(self._entry(record), default=str))
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            fallback = {
                "ts": datetime.now(timezone.utc).strftime(_TS_FORMAT),
                "level": "ERROR",
                "msg": f"Logging format error ({type(e).__name__}): {e}",
                "component": self.component,
                "trace_id": get_trace_id(),
            }
            return _escape_braces(json.dumps(fallback))


def setup_ndjson_logger(
    component: str,
    log_dir: Path | str | None = None,
    env: str = "development",
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    console_level: str | None = "WARNING",
    enqueue: bool = True,
) -> logger:
    """Setup NDJSON logging for a component.

    Removes any previously installed loguru handlers.

    Args:
        component: Component name (e.g., "moments", "cross_validation")
        log_dir: Directory for log files (default: repo logs/ndjson/)
        env: Environment name
        level: Minimum log level for file logging
        rotation: Log rotation policy (e.g., "10 MB", "1 day")
        retention: Log retention policy (e.g., "7 days", "3 files")
        console_level: Minimum log level for console output (None disables it)
        enqueue: Write through loguru's background queue (thread-safe)

    Returns:
        Configured loguru logger instance
    """
    log_dir = get_ndjson_log_dir() if log_dir is None else Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = NDJSONFormatter(component=component, env=env)

    logger.remove()

    log_file = log_dir / f"{component}.jsonl"
    logger.add(
        str(log_file),
        format=lambda r: formatter.format(r),
        level=level,
        rotation=rotation,
        retention=retention,
        compression="gz",
        enqueue=enqueue,
        catch=True,
    )

    if console_level:
        logger.add(
            sys.stderr,
            format="<level>{level}</level>: <level>{message}</level>",
            level=console_level,
            catch=True,
        )

    return logger


def configure_logging(config: MomentsConfig | LoggingConfig, **overrides) -> logger:
    """Install NDJSON logging from the [logging] section of the configuration.

    Args:
        config: Full configuration or its logging section
        **overrides: Keyword arguments passed through to setup_ndjson_logger

    Returns:
        Configured loguru logger instance
    """
    log_cfg = config.logging if isinstance(config, MomentsConfig) else config
    kwargs = {
        "log_dir": log_cfg.log_dir,
        "level": log_cfg.level,
        "rotation": log_cfg.rotation,
        "retention": log_cfg.retention,
        "console_level": log_cfg.console_level,
    }
    kwargs.update(overrides)
    return setup_ndjson_logger(log_cfg.component, **kwargs)
