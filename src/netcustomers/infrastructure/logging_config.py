"""
Logging setup for the netcustomers CLI.

Provides colored console output and optional plain file output.
"""

import copy
import logging
import os
import sys
from pathlib import Path


RESET = "\033[0m"

# Level -> ANSI prefix
LEVEL_STYLES = {
    logging.DEBUG: "\033[2;37m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;97;41m",
}
LOGGER_NAME_STYLE = "\033[2m"


class ColoredFormatter(logging.Formatter):
    """Colors the level and dims the logger name; plain when use_colors is off."""

    def __init__(self, fmt: str, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        # The same record also reaches the file handler
        painted = copy.copy(record)
        style = LEVEL_STYLES.get(record.levelno, "")
        painted.levelname = f"{style}{record.levelname:<8}{RESET}"
        painted.name = f"{LOGGER_NAME_STYLE}{record.name}{RESET}"
        return super().format(painted)


def _enable_windows_ansi() -> None:
    """Enable ANSI escape sequences on Windows."""
    if sys.platform == "win32":
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            pass  # No colors on older Windows consoles


CONSOLE_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("openpyxl", "asyncio")


def _colors_wanted() -> bool:
    """Colors only on an interactive stderr, and never when NO_COLOR is set."""
    return sys.stderr.isatty() and "NO_COLOR" not in os.environ


def _console_handler(level: int) -> logging.Handler:
    """stderr handler, so command output on stdout stays pipeable."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(CONSOLE_FORMAT, datefmt="%H:%M:%S", use_colors=_colors_wanted())
    )
    handler.setLevel(level)
    return handler


def _file_handler(log_file: str | Path) -> logging.Handler:
    """Plain UTF-8 file handler that always records DEBUG."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Console logging level (logging.DEBUG, "INFO", ...)
        log_file: Optional path to log file (always logs at DEBUG)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    _enable_windows_ansi()

    handlers = [_console_handler(level)]
    if log_file:
        handlers.append(_file_handler(log_file))

    # Root captures everything; each handler filters
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("NetCustomers logging initialized (level %s)", logging.getLevelName(level))
    if log_file:
        logger.debug("Log file: %s", log_file)
