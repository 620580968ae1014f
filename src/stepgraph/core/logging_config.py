"""Logging setup for stepgraph.

Library modules only ever ask for a logger; handlers are installed by the
application (the ``stepgraph`` CLI does it at startup).

Usage:
    from stepgraph.core.logging_config import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)

Environment Variables:
    STEPGRAPH_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    STEPGRAPH_LOG_FORMAT: Output format ("text" or "json")
    STEPGRAPH_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_FORMAT_WITH_MS = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ENV_LEVEL = "STEPGRAPH_LOG_LEVEL"
ENV_FORMAT = "STEPGRAPH_LOG_FORMAT"
ENV_FILE = "STEPGRAPH_LOG_FILE"

# Attributes every LogRecord carries; anything else was passed via ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

_configured = False


@dataclass
class LogConfig:
    """Resolved logging settings.

    Attributes:
        level: Log level name.
        format: "text" or "json".
        file_path: Optional file to mirror log output into.
        include_ms: Include milliseconds in text timestamps.
    """

    level: str = "INFO"
    format: Literal["text", "json"] = "text"
    file_path: str | None = None
    include_ms: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> LogConfig:
        """Build a config from STEPGRAPH_LOG_* variables, explicit values winning."""
        values: dict[str, Any] = {
            "level": os.environ.get(ENV_LEVEL, "INFO"),
            "format": os.environ.get(ENV_FORMAT, "text"),
            "file_path": os.environ.get(ENV_FILE),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if values["format"] not in ("text", "json"):
            raise ValueError(f"Unknown log format: {values['format']!r}")
        return cls(**values)


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    {"timestamp": "...", "level": "WARNING", "logger": "stepgraph.core...",
     "message": "...", "extra": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


def _make_formatter(config: LogConfig) -> logging.Formatter:
    if config.format == "json":
        return JsonFormatter()
    fmt = TEXT_FORMAT_WITH_MS if config.include_ms else TEXT_FORMAT
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    include_ms: bool = True,
    force: bool = False,
) -> LogConfig | None:
    """Install handlers on the root logger.

    Only the first call has an effect unless ``force`` is set. Arguments
    left as None fall back to the STEPGRAPH_LOG_* environment variables.

    Args:
        level: Log level name.
        format: Output format, "text" or "json".
        file_path: Also write log records to this file.
        include_ms: Include milliseconds in text timestamps.
        force: Reconfigure even if logging was already configured.

    Returns:
        The applied configuration, or None if the call was a no-op.
    """
    global _configured
    if _configured and not force:
        return None

    config = LogConfig.from_env(
        level=level, format=format, file_path=file_path, include_ms=include_ms
    )
    formatter = _make_formatter(config)

    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper()))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if config.file_path:
        file_handler = logging.FileHandler(config.file_path)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured = True
    return config


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


def set_level(level: str, logger_name: str | None = None) -> None:
    """Change the level of one logger, or of the root logger when name is None."""
    logging.getLogger(logger_name).setLevel(getattr(logging, level.upper()))
