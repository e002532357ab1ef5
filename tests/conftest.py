"""Shared fixtures for building fixed-width decadal files."""

import sys
from pathlib import Path
from typing import List, Sequence

import numpy as np
import pytest

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rwl_reader.buffer import load_records  # noqa: E402
from rwl_reader.cleaners import filter_lines, normalize_columns  # noqa: E402
from rwl_reader.config.settings import FormatConfig  # noqa: E402
from rwl_reader.utils.error_log import ErrorLog  # noqa: E402

HEADER = [
    "ABC    1 Pine Valley                                  PIPO",
    "ABC    2 California      3000M  3740-11900          1650 1980",
    "ABC    3 A. Researcher                                      ",
]


def decade_row(core_id: str, year: int, values: Sequence) -> str:
    """One decade row: identifier in 8 columns, year in 4, values in 6."""
    return f"{core_id:<8}{year:>4}" + "".join(f"{v:>6}" for v in values)


def core_lines(core_id: str, start: int, values: Sequence, stop: int = 999) -> List[str]:
    """
    Decade rows of one core, closed by a stop marker.

    The marker goes after the last value, or on its own next-decade row when
    the last decade is full.
    """
    lines = []
    year = start
    i = 0
    while i < len(values):
        size = 10 - year % 10
        chunk = list(values[i:i + size])
        lines.append((year, chunk))
        i += size
        year = year - year % 10 + 10

    last_year, last_chunk = lines[-1]
    if len(last_chunk) < 10 - last_year % 10:
        lines[-1] = (last_year, last_chunk + [stop])
    else:
        lines.append((year, [stop]))
    return [decade_row(core_id, y, chunk) for y, chunk in lines]


def serialize(matrix: np.ndarray, years: np.ndarray, core_ids: Sequence[str]) -> List[str]:
    """Write a gap-free result back as decadal lines."""
    lines = []
    for j, core_id in enumerate(core_ids):
        present = np.flatnonzero(~np.isnan(matrix[:, j]))
        first, last = present[0], present[-1]
        values = [int(v) for v in matrix[first:last + 1, j]]
        lines.extend(core_lines(core_id, int(years[first]), values))
    return lines


def prepare(lines: Sequence[str], fmt: FormatConfig = None):
    """Load, filter and normalize lines; returns (buffer, layout, log)."""
    fmt = fmt or FormatConfig()
    log = ErrorLog()
    buffer = filter_lines(load_records(lines), log, fmt)
    layout = normalize_columns(buffer, log, fmt)
    return buffer, layout, log


@pytest.fixture
def fmt():
    return FormatConfig()


@pytest.fixture
def two_cores():
    """Two clean cores, 1901-1925 and 1895-1912."""
    return core_lines("ab01", 1901, list(range(100, 125))) + core_lines("ab02", 1895, list(range(200, 218)))
