"""Logging setup shared by the library and the batch script."""

import logging
from pathlib import Path
from typing import Optional

from rwl_reader.config.settings import LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None, verbose: bool = False) -> logging.Logger:
    """Configure logging for the reader.

    Args:
        config: Logging section of the settings. Defaults are used when None.
        verbose: If True, force DEBUG level regardless of the configured level.

    Returns:
        The package logger ('rwl_reader')
    """
    config = config or LoggingConfig()
    log_level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.INFO)

    handlers = []
    if config.console:
        handlers.append(logging.StreamHandler())
    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format=config.format,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers or None,
        force=True,
    )

    logger = logging.getLogger("rwl_reader")
    logger.setLevel(log_level)
    return logger
