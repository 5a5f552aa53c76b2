"""Utility functions for gitwalk."""

from .logging import LOGGER_NAME, LogCapture, setup_logging

__all__ = [
    "LOGGER_NAME",
    "LogCapture",
    "setup_logging",
]
