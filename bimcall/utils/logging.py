"""Logging setup for the BIMCall command line tools.

Console output goes to stderr with optional ANSI colors, file output goes to
one timestamped file per run, and the ``VERBOSE`` level (15) sits between
INFO and DEBUG for per-record import progress.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, TextIO, Union

if TYPE_CHECKING:
    from ..config.settings import BIMCallSettings

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

PACKAGE_LOGGER = "bimcall"
THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "asyncio")

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT_WITH_CALLER = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)


def _log_verbose(self: logging.Logger, msg: Any, *args: Any, **kwargs: Any) -> None:
    """``logger.verbose(...)``: log at the VERBOSE level."""
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, msg, args, **kwargs)


logging.Logger.verbose = _log_verbose  # type: ignore[attr-defined]


def get_log_level(level_name: str) -> int:
    """Resolve a level name such as ``"info"`` or ``"VERBOSE"`` to its number.

    Raises:
        AttributeError: If the name is not a logging level
    """
    name = level_name.upper()
    if name == "VERBOSE":
        return VERBOSE
    return int(getattr(logging, name))


def stream_supports_color(stream: Optional[TextIO] = None) -> bool:
    """Check whether ANSI colors should be written to the stream (stderr by default)."""
    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return False
    if "NO_COLOR" in os.environ:
        return False

    term = os.environ.get("TERM", "").lower()
    if term in ("", "dumb"):
        return os.name == "nt" and "WT_SESSION" in os.environ
    return True


class AutoColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when the terminal supports it."""

    LEVEL_COLORS = {
        "DEBUG": "\033[35m",
        "VERBOSE": "\033[32m",
        "INFO": "\033[34m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, *args: Any, enable_colors: bool = True, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.use_colors = enable_colors and stream_supports_color()

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if not color:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


class TimestampedFileHandler(logging.FileHandler):
    """Writes each run to ``<prefix>_<YYYYmmdd_HHMMSS>.log`` and prunes old runs."""

    def __init__(
        self, log_dir: Union[str, Path], prefix: str = "bimcall", max_files: int = 5
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.max_files = max_files

        self.log_dir.mkdir(parents=True, exist_ok=True)
        started = datetime.now().strftime("%Y%m%d_%H%M%S")
        super().__init__(self.log_dir / f"{prefix}_{started}.log", encoding="utf-8")

        self.prune()

    def prune(self) -> None:
        """Delete all but the ``max_files`` most recently modified log files."""
        runs = sorted(
            self.log_dir.glob(f"{self.prefix}_*.log"),
            key=lambda path: path.stat().st_mtime,
            reverse=True,
        )
        for stale in runs[self.max_files :]:
            try:
                stale.unlink()
            except OSError as e:
                logging.getLogger(__name__).debug(f"Could not remove old log file {stale}: {e}")


def setup_logging(settings: "BIMCallSettings") -> logging.Logger:
    """Install console and file handlers on the ``bimcall`` logger.

    Calling it again replaces the handlers of the previous call.

    Returns:
        The package logger
    """
    config = settings.logging
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if config.console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(get_log_level(config.console_level))
        console.setFormatter(
            AutoColoredFormatter(
                CONSOLE_FORMAT, datefmt="%H:%M:%S", enable_colors=config.console_colors
            )
        )
        logger.addHandler(console)

    if config.file_enabled:
        log_file = TimestampedFileHandler(
            settings.log_dir, prefix=config.file_prefix, max_files=config.max_log_files
        )
        log_file.setLevel(get_log_level(config.file_level))
        file_format = FILE_FORMAT_WITH_CALLER if config.include_function_names else FILE_FORMAT
        log_file.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(log_file)
        logger.debug(f"Writing log file {log_file.baseFilename}")

    quiet_level = get_log_level(config.third_party_level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return logger


def apply_command_line_overrides(settings: "BIMCallSettings", args: Any) -> "BIMCallSettings":
    """Fold the logging flags of the CLI into ``settings.logging``.

    Command line flags beat environment variables, YAML and defaults. The
    settings object is modified in place and returned.
    """
    config = settings.logging

    level = getattr(args, "log_level", None)
    if level:
        config.console_level = config.file_level = level
    if getattr(args, "verbose", False):
        config.console_level = config.file_level = "VERBOSE"
    if getattr(args, "quiet", False):
        config.console_level = "ERROR"

    log_dir = getattr(args, "log_dir", None)
    if log_dir:
        config.file_directory = log_dir
        config.file_enabled = True
    if getattr(args, "no_log_colors", False):
        config.console_colors = False

    return settings
