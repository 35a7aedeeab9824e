"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from blockmap_cli.log import configure_logging, get_logger


class TestLogging:
    def test_logger_names(self):
        assert get_logger().name == "blockmap"
        assert get_logger("registry").name == "blockmap.registry"

    def test_configure_replaces_handlers(self):
        configure_logging()
        logger = configure_logging(verbose=True)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_quiet_by_default(self):
        assert configure_logging().level == logging.WARNING
