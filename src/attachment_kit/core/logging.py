"""Loguru logging configuration.

Logs go to stderr as formatted text, or as one JSON object per line when
``json_logs`` is set.  A ``log_dir`` adds a rotating log file in the same
format.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None, json_logs: bool = False) -> None:
    """Replace Loguru's sinks with the configured ones.

    Args:
        log_level: Minimum log level to emit, case-insensitive.
        log_dir: Optional directory for ``attachment-kit.log``, rotated every
            24 hours and kept for 7 days.
        json_logs: Serialize records as JSON instead of formatting them.
    """
    level = log_level.upper()
    sink_options = {"serialize": True} if json_logs else {"format": _LOG_FORMAT}

    logger.remove()
    logger.add(sys.stderr, level=level, **sink_options)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "attachment-kit.log",
            level=level,
            rotation="24h",
            retention="7 days",
            **sink_options,
        )
