"""Pipeline orchestration and entry points."""

from rwl_reader.orchestration.reader import RwlReader, RwlResult, read, read_lines, read_text

__all__ = [
    "RwlReader",
    "RwlResult",
    "read",
    "read_lines",
    "read_text",
]
