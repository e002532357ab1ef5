"""
Removal of records that carry no ring data.

Short lines, header lines and notation lines are dropped before any column is
interpreted. Dropped rows are logged with their original line numbers.
"""

import logging
from typing import List

import numpy as np

from rwl_reader.buffer import Record, RecordBuffer
from rwl_reader.config.settings import FormatConfig
from rwl_reader.utils.error_log import NOTATION_LINE, SHORT_LINE, UNREADABLE_YEAR, ErrorLog

logger = logging.getLogger(__name__)

HEADER_LINES = 3


def drop_short_lines(records: List[Record], log: ErrorLog, fmt: FormatConfig) -> List[Record]:
    """
    Drop records too short to hold any value after the identifier and year.

    Args:
        records: Loaded records.
        log: Anomaly log (3.1 per dropped line).
        fmt: Format constants.

    Returns:
        Records long enough to carry data.
    """
    kept = [r for r in records if len(r.text) > fmt.data_start]
    short = [r.line for r in records if len(r.text) <= fmt.data_start]
    if short:
        log.add(SHORT_LINE, short)
        logger.debug("Dropped %d short lines", len(short))
    return kept


def has_header(buffer: RecordBuffer, fmt: FormatConfig) -> bool:
    """Check the three-line header signature (markers '1', '2', '3' in column 8)."""
    if buffer.n < HEADER_LINES:
        return False
    markers = buffer.chars[:HEADER_LINES, fmt.header_marker_column - 1]
    return bool(np.all(markers == np.array(fmt.header_markers[:HEADER_LINES])))


def drop_header_lines(buffer: RecordBuffer, fmt: FormatConfig) -> bool:
    """
    Drop the regular three-line header if present. Headers are not anomalies.

    Returns:
        True if a header was found and removed.
    """
    if not has_header(buffer, fmt):
        return False
    mask = np.ones(buffer.n, dtype=bool)
    mask[:HEADER_LINES] = False
    buffer.keep(mask)
    logger.debug("Removed 3-line header")
    return True


def drop_notation_lines(buffer: RecordBuffer, log: ErrorLog, fmt: FormatConfig) -> None:
    """
    Drop lines with letters between column 9 and the end of the value region.

    Irregular headers within the first three physical lines are removed
    without a log entry.

    Args:
        buffer: Record buffer (modified in place).
        log: Anomaly log (3.2 per dropped line after line 3).
        fmt: Format constants.
    """
    region = buffer.chars[:, fmt.id_width:fmt.value_region_end]
    notation = np.char.isalpha(region).any(axis=1)
    if not notation.any():
        return
    dropped = buffer.keep(~notation)
    # letters within the first three lines count as an irregular header, even on data rows
    log.add(NOTATION_LINE, [line for line in dropped if line > HEADER_LINES])
    logger.debug("Dropped %d notation lines", len(dropped))


def drop_unreadable_years(buffer: RecordBuffer, year_start: int, log: ErrorLog, fmt: FormatConfig) -> None:
    """
    Drop records whose year field does not hold an integer.

    Args:
        buffer: Record buffer (modified in place).
        year_start: 0-based first column of the year field.
        log: Anomaly log (3.3 per dropped line).
        fmt: Format constants.
    """
    readable = buffer.field_is_integer(year_start, fmt.data_start)
    if readable.all():
        return
    dropped = buffer.keep(readable)
    log.add(UNREADABLE_YEAR, dropped)
    logger.debug("Dropped %d lines with unreadable years", len(dropped))


def filter_lines(records: List[Record], log: ErrorLog, fmt: FormatConfig) -> RecordBuffer:
    """
    Run the line filter: short lines, header, notation lines.

    Args:
        records: Loaded records.
        log: Anomaly log.
        fmt: Format constants.

    Returns:
        RecordBuffer holding the remaining records.
    """
    records = drop_short_lines(records, log, fmt)
    buffer = RecordBuffer.from_records(records, min_width=fmt.value_region_end)
    drop_header_lines(buffer, fmt)
    drop_notation_lines(buffer, log, fmt)
    return buffer
