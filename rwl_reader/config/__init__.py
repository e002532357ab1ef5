"""Configuration management for the RWL reader."""

from rwl_reader.config.settings import (
    FormatConfig,
    LoggingConfig,
    OutputConfig,
    PathConfig,
    ReaderConfig,
    Settings,
    get_settings,
)

__all__ = [
    "get_settings",
    "Settings",
    "ReaderConfig",
    "FormatConfig",
    "PathConfig",
    "OutputConfig",
    "LoggingConfig",
]
