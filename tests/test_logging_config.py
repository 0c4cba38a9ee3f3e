"""Tests for logging configuration"""
import logging
from unittest.mock import patch

from git_branchdates.logging_config import ColoredFormatter, get_logger


def make_record(level=logging.WARNING):
    return logging.LogRecord("services.git_service", level, __file__, 1, "careful", None, None)


class TestColoredFormatter:
    """Test level name coloring."""

    def test_colors_level_on_terminal(self):
        formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
        with patch("sys.stderr") as stderr:
            stderr.isatty.return_value = True
            output = formatter.format(make_record())
        assert output == "\033[33mWARNING\033[0m careful"

    def test_plain_when_not_terminal(self):
        formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
        with patch("sys.stderr") as stderr:
            stderr.isatty.return_value = False
            assert formatter.format(make_record()) == "WARNING careful"

    def test_record_left_untouched_for_other_handlers(self):
        """A file handler formatting the same record sees the bare level name."""
        record = make_record()
        with patch("sys.stderr") as stderr:
            stderr.isatty.return_value = True
            ColoredFormatter(fmt="%(levelname)s").format(record)
        assert record.levelname == "WARNING"
        assert logging.Formatter(fmt="%(levelname)s %(message)s").format(record) == "WARNING careful"


class TestGetLogger:
    """Test logger naming."""

    def test_strips_package_prefix(self):
        assert get_logger("git_branchdates.services.git_service").name == "git_service"
        assert get_logger("git_branchdates.core.branch_dates").name == "core.branch_dates"
