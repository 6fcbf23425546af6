"""Process-wide logging setup for runtime entrypoints."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def config_configure_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure root logging handlers and return the package logger.

    Args:
        log_level: Logging level name such as `INFO` or `DEBUG`.

    Returns:
        logging.Logger: Logger scoped to the `agent_pipeline` package.

    Raises:
        ValueError: Raised when the level name is unknown.
    """

    normalized_level = log_level.strip().upper()
    resolved_level = logging.getLevelName(normalized_level)
    if not isinstance(resolved_level, int):
        raise ValueError(f"unsupported log_level={log_level}")

    logging.basicConfig(
        level=resolved_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    logger = logging.getLogger("agent_pipeline")
    logger.debug("Logging configured with level %s", normalized_level)
    return logger
