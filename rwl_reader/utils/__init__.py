"""Shared utilities and helper functions."""

from rwl_reader.utils.error_log import ERROR_CODES, ErrorLog, LogEntry
from rwl_reader.utils.logging_setup import setup_logging
from rwl_reader.utils.persistence import save_frame

__all__ = [
    "ERROR_CODES",
    "ErrorLog",
    "LogEntry",
    "setup_logging",
    "save_frame",
]
