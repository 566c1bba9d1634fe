"""Core logging implementation for laylder."""

import logging
import sys

__all__ = ["get_logger", "setup_logging", "parse_level"]

DEFAULT_LOGGER_NAME = "laylder"


def parse_level(level: int | str) -> int:
    """Convert a level name ("debug", "INFO") or number to a logging level.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, as a number or a level name.
        stream: Output stream.
    """
    logging.basicConfig(
        level=parse_level(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Names are placed under the ``laylder`` namespace so a single
    ``setup_logging`` call governs the whole engine.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    if not name:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    if name == DEFAULT_LOGGER_NAME or name.startswith(f"{DEFAULT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
