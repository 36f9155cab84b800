"""
Logging Configuration Module

Logs go to stderr so the CLI can keep stdout for answers, facts and
suggestions. A file handler is added when LOG_FILE is set.

Usage:
    from customerbot.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Retrieved 3 facts")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Held at WARNING unless running at DEBUG
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "urllib3", "asyncio", "httpx")


class ColoredFormatter(logging.Formatter):
    """Colours the level name; the record itself is left untouched."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # File handlers share the record
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _console_handler(level: int, use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter_cls = ColoredFormatter if use_colors and sys.stderr.isatty() else logging.Formatter
    handler.setFormatter(formatter_cls(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(level: int, log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Optional path to a log file (parent directories are created)
        use_colors: Colour the console output when stderr is a terminal
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(numeric_level, use_colors))
    if log_file:
        root_logger.addHandler(_file_handler(numeric_level, log_file))

    third_party_level = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (pass __name__)."""
    return logging.getLogger(name)


_initialized = False


def init_logging() -> None:
    """
    Configure logging from settings once per process.

    Entry points (server, CLI) call this; library modules only call get_logger.
    """
    global _initialized
    if _initialized:
        return

    from customerbot.config import settings
    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.file,
        use_colors=settings.logging.use_colors
    )
    _initialized = True
