"""Fixed-width record loading and the shared character buffer."""

from rwl_reader.buffer.record_buffer import (
    Record,
    RecordBuffer,
    load_file,
    load_records,
    split_lines,
)
from rwl_reader.buffer.splice import insert_columns

__all__ = [
    "Record",
    "RecordBuffer",
    "load_file",
    "load_records",
    "split_lines",
    "insert_columns",
]
