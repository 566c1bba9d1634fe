"""Core utilities shared across laylder packages."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
