"""Logging setup for gitwalk.

Menus and command output own stdout. Log records go to stderr through rich,
and optionally to a debug log file.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "gitwalk"

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_file: Optional[Path] = None,
    verbose: bool = False,
    level: int = logging.WARNING,
) -> logging.Logger:
    """Configure the gitwalk logger.

    Args:
        log_file: Optional debug log file, always written at DEBUG
        verbose: Show DEBUG records on stderr, with source paths
        level: Console level when not verbose

    Returns:
        The configured gitwalk logger
    """
    console_level = logging.DEBUG if verbose else level

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if log_file else console_level)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


class LogCapture:
    """Collects records of a logger inside a with block (for tests)."""

    def __init__(self, logger_name: str = LOGGER_NAME, level: int = logging.DEBUG):
        self.logger_name = logger_name
        self.level = level
        self.records: list[logging.LogRecord] = []
        self._handler = _ListHandler(self.records)
        self._previous_level: Optional[int] = None

    def __enter__(self) -> "LogCapture":
        logger = logging.getLogger(self.logger_name)
        self._previous_level = logger.level
        logger.setLevel(self.level)
        logger.addHandler(self._handler)
        return self

    def __exit__(self, *args) -> None:
        logger = logging.getLogger(self.logger_name)
        logger.removeHandler(self._handler)
        if self._previous_level is not None:
            logger.setLevel(self._previous_level)

    @property
    def messages(self) -> list[str]:
        return [record.getMessage() for record in self.records]

    def has_message(self, substring: str) -> bool:
        """True if any captured message contains the substring."""
        return any(substring in message for message in self.messages)


class _ListHandler(logging.Handler):
    def __init__(self, records: list[logging.LogRecord]):
        super().__init__()
        self.records = records

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)
