"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Loggers are namespaced under laylder."""
        logger = get_logger("normalize")
        assert logger.name == "laylder.normalize"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        assert get_logger().name == "laylder"

    @pytest.mark.unit
    def test_get_logger_keeps_qualified_name(self) -> None:
        """Already-qualified names are not prefixed twice."""
        assert get_logger("laylder.links").name == "laylder.links"

    @pytest.mark.unit
    def test_parse_level(self) -> None:
        """Level names and numbers both resolve."""
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" WARNING ") == logging.WARNING
        assert parse_level(logging.ERROR) == logging.ERROR
        assert parse_level("nonsense") == logging.INFO

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET
