"""
Decade row parsing.

Each core's rows are read in order through a CoreCursor that applies the
first-row rules (leading fill values, start year), the last-row rules
(trailing fill values, stop marker, end year) and accumulates the values of
all rows into one annual series.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from rwl_reader.boundaries.segmenter import Core
from rwl_reader.buffer import RecordBuffer
from rwl_reader.cleaners.column_normalizer import FileLayout
from rwl_reader.config.settings import FormatConfig
from rwl_reader.utils.error_log import (
    BLANK_GAP,
    FILL_VALUE,
    STOP_MARKER_ABSENT,
    YEAR_MISMATCH,
    ErrorLog,
)

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")

MISSING_TOKEN = "NaN"


def parse_values(text: str) -> List[float]:
    """
    Parse blank-separated numbers; touching signed numbers are split apart.

    Example:
        >>> parse_values("   123   NaN  45-12")
        [123.0, nan, 45.0, -12.0]
    """
    values: List[float] = []
    for token in text.split():
        try:
            values.append(float(token))
        except ValueError:
            values.extend(float(part) for part in _NUMBER.findall(token))
    return values


def fill_blank_gaps(text: str, width: int, rotate_by: int = 0) -> Tuple[str, bool]:
    """
    Replace blank value fields with explicit missing-value tokens.

    A gap is a run of `width` blanks, and only counts when fewer values parse
    than the text has fields. When `rotate_by` is set the leading characters
    are moved to the end first, since partial decades in such rows are
    right-aligned.

    Args:
        text: Value region of one row.
        width: Field width.
        rotate_by: Number of leading characters to move to the end.

    Returns:
        Tuple of (new text, whether a gap was found).
    """
    blank = " " * width
    if blank not in text or len(parse_values(text)) >= len(text) / width:
        return text, False

    if rotate_by:
        text = text[rotate_by:] + text[:rotate_by]

    pos = text.find(blank)
    while pos >= 0:
        end = pos + width
        text = text[:end - len(MISSING_TOKEN)] + MISSING_TOKEN + text[end:]
        pos = text.find(blank)
    return text, True


def _first_change(values: List[float]) -> Optional[int]:
    """1-based position of the first value that differs from its successor."""
    changes = np.flatnonzero(np.diff(np.asarray(values, dtype=float)))
    return int(changes[0]) + 1 if len(changes) else None


def _last_change(values: List[float]) -> Optional[int]:
    """1-based position of the last value that differs from its successor."""
    changes = np.flatnonzero(np.diff(np.asarray(values, dtype=float)))
    return int(changes[-1]) + 1 if len(changes) else None


@dataclass
class DecadeRow:
    """One decade row of a core after gap filling."""

    row: int
    line: int
    year: int
    values: List[float]
    tail: str = ""

    @property
    def ones(self) -> int:
        return self.year % 10

    @property
    def decade_start(self) -> int:
        return self.year - self.ones


def read_decade_row(
    buffer: RecordBuffer,
    layout: FileLayout,
    row: int,
    trim: bool,
    rotate: bool,
    log: ErrorLog,
) -> DecadeRow:
    """
    Extract the values of one row, filling blank gaps (7.1).

    Args:
        buffer: Record buffer.
        layout: File layout.
        row: Buffer row.
        trim: Right-trim the row (first and last rows of a core only; interior
            rows keep trailing blanks so a blank last field counts as a gap).
        rotate: Allow the right-alignment of partial decades in gap rows.
        log: Anomaly log.

    Returns:
        DecadeRow with parsed values.
    """
    year = int(buffer.text(row, layout.year_start, layout.data_start))
    text = buffer.text(row, layout.data_start, layout.value_stop)
    if trim:
        text = text.rstrip()

    ones = year % 10
    rotate_by = (layout.values_per_row - ones) * layout.field_width if rotate and ones > 0 else 0
    text, gap = fill_blank_gaps(text, layout.field_width, rotate_by)
    if gap:
        log.add(BLANK_GAP, buffer.lines[row])

    return DecadeRow(
        row=row,
        line=int(buffer.lines[row]),
        year=year,
        values=parse_values(text),
        tail=buffer.text(row, layout.value_stop - 1),
    )


class CoreCursor:
    """
    Running state while the rows of one core are read.

    Example:
        >>> cursor = CoreCursor(core, log, fmt)
        >>> for k, row in enumerate(core.rows):
        ...     cursor.feed(read_decade_row(...), first=k == 0, last=k == core.n_rows - 1)
        >>> cursor.finish()
    """

    def __init__(self, core: Core, log: ErrorLog, fmt: FormatConfig, slots: int = 10):
        self.core = core
        self.log = log
        self.fmt = fmt
        self.slots = slots
        self.start_year: Optional[int] = None
        self.end_year: Optional[int] = None
        self.last_line: Optional[int] = None
        self.values: List[float] = []

    def _is_stop(self, value: float) -> bool:
        return value in self.fmt.stop_markers

    def first_row(self, drow: DecadeRow) -> List[float]:
        """Trim leading fill values, consume an early stop marker, set the start year."""
        values = drow.values
        ones = drow.ones

        if values and values[0] == self.fmt.fill_value and _first_change(values) == ones:
            values = values[ones:]
            self.log.add(FILL_VALUE, drow.line)

        # a stop marker on the first row leaves the rest of the decade missing
        if values and self._is_stop(values[-1]):
            values = values[:-1]
            values = values + [np.nan] * max(0, self.slots - len(values) - ones)

        if ones != self.slots - len(values):
            self.start_year = drow.year - ones + self.slots - len(values)
            self.log.add(YEAR_MISMATCH, drow.line)
        else:
            self.start_year = drow.year
        return values

    def last_row(self, drow: DecadeRow, values: List[float], single: bool) -> List[float]:
        """Trim trailing fill values, consume the stop marker, set the end year."""
        if values and values[-1] == self.fmt.fill_value:
            self.log.add(FILL_VALUE, drow.line)
            last = _last_change(values)
            if last is not None:
                values = values[:last]

        if values and self._is_stop(values[-1]):
            values = values[:-1]
        elif not single and not any(str(m) in drow.tail for m in self.fmt.stop_markers):
            self.log.add(STOP_MARKER_ABSENT, drow.line)

        # continuation rows are anchored to their decade
        anchor = drow.year if single else drow.decade_start
        self.end_year = anchor + len(values) - 1
        self.last_line = drow.line
        return values

    def feed(self, drow: DecadeRow, first: bool, last: bool) -> None:
        values = drow.values
        if first:
            values = self.first_row(drow)
        if last:
            values = self.last_row(drow, values, single=first)
        self.values.extend(values)

    def finish(self) -> Core:
        """Store the series and its year span on the core."""
        series = np.asarray(self.values, dtype=float)
        start, end = self.start_year, self.end_year
        if end - start + 1 != len(series):
            if (YEAR_MISMATCH, self.last_line) not in self.log:
                self.log.add(YEAR_MISMATCH, self.last_line)
            logger.debug(
                "Core %s: %d values for %d-%d, span taken from the start year",
                self.core.label,
                len(series),
                start,
                end,
            )
            end = start + len(series) - 1

        self.core.start_year = start
        self.core.end_year = end
        self.core.values = series
        return self.core


def parse_core(
    buffer: RecordBuffer, layout: FileLayout, core: Core, log: ErrorLog, fmt: FormatConfig
) -> Core:
    """
    Parse all decade rows of one core into its annual series.

    Args:
        buffer: Record buffer.
        layout: File layout.
        core: Core to parse (updated in place).
        log: Anomaly log.
        fmt: Format constants.

    Returns:
        The core with start_year, end_year and values set.
    """
    cursor = CoreCursor(core, log, fmt, slots=layout.values_per_row)
    for k, row in enumerate(core.rows):
        first = k == 0
        last = k == core.n_rows - 1
        drow = read_decade_row(buffer, layout, row, trim=first or last, rotate=not first, log=log)
        cursor.feed(drow, first=first, last=last)
    return cursor.finish()


def parse_cores(
    buffer: RecordBuffer, layout: FileLayout, cores: List[Core], log: ErrorLog, fmt: FormatConfig
) -> List[Core]:
    """Parse every core in file order."""
    for core in cores:
        parse_core(buffer, layout, core, log, fmt)
    logger.debug("Parsed %d cores", len(cores))
    return cores
