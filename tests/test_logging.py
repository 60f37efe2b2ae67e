"""Tests for tagnorm.logging — package logger configuration."""

from tagnorm.logging import PACKAGE_LOGGER
from tagnorm.logging import configure_logging

import io
import logging


class TestConfigureLogging:
    """Test level and handler setup."""

    def test_default_is_info(self):
        configure_logging()
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_verbose_is_debug(self):
        configure_logging(verbose=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_quiet_is_warning(self):
        configure_logging(quiet=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_replaces_handlers(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1

    def test_writes_to_given_stream(self):
        stream = io.StringIO()
        configure_logging(stream=stream)
        logging.getLogger("tagnorm.dispatcher").info("hello")
        assert stream.getvalue() == "hello\n"

    def test_verbose_names_module(self):
        stream = io.StringIO()
        configure_logging(verbose=True, stream=stream)
        logging.getLogger("tagnorm.batch").debug("detail")
        assert stream.getvalue() == "DEBUG tagnorm.batch: detail\n"
