"""Unit tests for logging setup and command line overrides."""

import argparse
import logging
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from bimcall.utils.logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    apply_command_line_overrides,
    get_log_level,
    setup_logging,
)


def _args(**overrides: Any) -> argparse.Namespace:
    values = {
        "log_level": None,
        "verbose": False,
        "quiet": False,
        "log_dir": None,
        "no_log_colors": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLogLevels:
    """Test level name resolution."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("verbose", VERBOSE),
            ("Info", logging.INFO),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_get_log_level(self, name: str, expected: int) -> None:
        """Test standard and VERBOSE level names, case-insensitively."""
        assert get_log_level(name) == expected

    def test_get_log_level_unknown(self) -> None:
        """Test that unknown level names raise AttributeError."""
        with pytest.raises(AttributeError):
            get_log_level("CHATTY")

    def test_verbose_level_registered(self) -> None:
        """Test the VERBOSE level name and logger method."""
        assert logging.getLevelName(VERBOSE) == "VERBOSE"
        assert hasattr(logging.getLogger("bimcall.test"), "verbose")


class TestCommandLineOverrides:
    """Test --log-level, --verbose, --quiet, --log-dir and --no-log-colors."""

    def test_log_level_sets_console_and_file(self, test_settings: Any) -> None:
        """Test --log-level applies to both handlers."""
        apply_command_line_overrides(test_settings, _args(log_level="WARNING"))

        assert test_settings.logging.console_level == "WARNING"
        assert test_settings.logging.file_level == "WARNING"

    def test_verbose_and_quiet(self, test_settings: Any) -> None:
        """Test --verbose raises detail and --quiet limits the console."""
        apply_command_line_overrides(test_settings, _args(verbose=True))
        assert test_settings.logging.console_level == "VERBOSE"

        apply_command_line_overrides(test_settings, _args(quiet=True))
        assert test_settings.logging.console_level == "ERROR"
        assert test_settings.logging.file_level == "VERBOSE"

    def test_log_dir_enables_file_logging(self, test_settings: Any, tmp_path: Path) -> None:
        """Test --log-dir turns file logging on."""
        apply_command_line_overrides(test_settings, _args(log_dir=str(tmp_path)))

        assert test_settings.logging.file_enabled is True
        assert test_settings.logging.file_directory == str(tmp_path)

    def test_no_overrides_leaves_settings(self, test_settings: Any) -> None:
        """Test that absent flags change nothing."""
        before = test_settings.logging.model_copy()
        apply_command_line_overrides(test_settings, argparse.Namespace())
        assert test_settings.logging == before


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_only(self, test_settings: Any) -> None:
        """Test that a single console handler is installed by default."""
        logger = setup_logging(test_settings)

        assert logger.name == "bimcall"
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.INFO
        assert isinstance(logger.handlers[0].formatter, AutoColoredFormatter)

    def test_file_handler_when_enabled(self, test_settings: Any, tmp_path: Path) -> None:
        """Test a timestamped log file is created in the log directory."""
        test_settings.logging.file_enabled = True
        test_settings.logging.file_directory = str(tmp_path / "logs")
        test_settings.data_dir = tmp_path

        logger = setup_logging(test_settings)
        file_handlers = [h for h in logger.handlers if isinstance(h, TimestampedFileHandler)]

        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG
        assert list((tmp_path / "logs").glob("bimcall_*.log"))

    def test_setup_is_repeatable(self, test_settings: Any) -> None:
        """Test repeated setup does not stack handlers."""
        setup_logging(test_settings)
        logger = setup_logging(test_settings)
        assert len(logger.handlers) == 1

    def test_third_party_levels(self, test_settings: Any) -> None:
        """Test httpx logging is limited to the configured level."""
        setup_logging(test_settings)
        assert logging.getLogger("httpx").level == logging.WARNING


class TestFormattingAndFiles:
    """Test color detection and log file rotation."""

    def test_formatter_without_tty_has_no_colors(self) -> None:
        """Test that output redirected away from a terminal is uncolored."""
        with patch("sys.stderr") as mock_stderr:
            mock_stderr.isatty.return_value = False
            formatter = AutoColoredFormatter("%(levelname)s %(message)s")

        record = logging.LogRecord("bimcall", logging.ERROR, __file__, 1, "boom", None, None)
        assert formatter.format(record) == "ERROR boom"

    def test_formatter_colors_level_name(self) -> None:
        """Test that a color terminal gets an ANSI-wrapped level name."""
        with patch("sys.stderr") as mock_stderr, patch.dict(
            "os.environ", {"TERM": "xterm-256color"}, clear=True
        ):
            mock_stderr.isatty.return_value = True
            formatter = AutoColoredFormatter("%(levelname)s %(message)s")

        record = logging.LogRecord("bimcall", logging.ERROR, __file__, 1, "boom", None, None)
        assert formatter.format(record) == "\033[31mERROR\033[0m boom"

    def test_old_log_files_are_removed(self, tmp_path: Path) -> None:
        """Test only max_files log files are kept."""
        for i in range(4):
            (tmp_path / f"bimcall_2024010{i}_000000.log").write_text("old")

        handler = TimestampedFileHandler(tmp_path, prefix="bimcall", max_files=2)
        handler.close()

        assert len(list(tmp_path.glob("bimcall_*.log"))) == 2
