"""
Correction of single-row decade errors.

A record whose decade breaks with both neighbours (or the last record, when it
breaks with its predecessor) is an isolated decade. Three patterns are
recognized, each rewriting the year field from a neighbouring decade.
"""

import logging

import numpy as np

from rwl_reader.boundaries.classifier import BoundarySignals, classify_boundaries, record_years
from rwl_reader.buffer import RecordBuffer
from rwl_reader.cleaners.column_normalizer import FileLayout
from rwl_reader.config.settings import FormatConfig
from rwl_reader.utils.error_log import DECADE_FIRST_ROW, DECADE_INTERIOR, DECADE_LAST_ROW, ErrorLog

logger = logging.getLogger(__name__)


def isolated_decades(signals: BoundarySignals) -> np.ndarray:
    """Rows whose decade breaks with the previous and the next row."""
    new_decade = signals.new_decade
    isolated = new_decade.copy()
    isolated[:-1] = new_decade[:-1] & new_decade[1:]
    return np.flatnonzero(isolated)


def _write_year(buffer: RecordBuffer, layout: FileLayout, row: int, year: int) -> None:
    buffer.write(row, layout.year_start, layout.data_start, str(year))


def correct_years(
    buffer: RecordBuffer,
    layout: FileLayout,
    signals: BoundarySignals,
    log: ErrorLog,
    fmt: FormatConfig,
) -> BoundarySignals:
    """
    Rewrite isolated decades and refresh the boundary signals once.

    Patterns, in priority order:
    1. Interior row (1.1): neither the row nor its successor is a confirmed
       core start, and the neighbours are two decades apart. The row gets the
       predecessor's decade + 1, keeping its ones digit.
    2. First row of a new core (1.2): the row is a confirmed core start and the
       two following rows continue it. The row gets the successor's decade - 1,
       keeping its ones digit.
    3. Last row of a core (1.3): the successor is a confirmed core start (or
       the end of the file) and the predecessor is not a boundary. The row gets
       the predecessor's decade + 1 with ones digit 0.

    Args:
        buffer: Record buffer; year fields are rewritten in place.
        layout: File layout.
        signals: Boundary signals after identifier correction.
        log: Anomaly log.
        fmt: Format constants.

    Returns:
        Boundary signals recomputed from the corrected buffer.
    """
    n = buffer.n
    confirmed = np.append(signals.confirmed, True)
    starts = signals.starts
    corrected = 0

    for row in isolated_decades(signals):
        years = record_years(buffer, layout)
        decades = np.floor_divide(years, 10)
        ones = int(years[row]) % 10

        if (
            0 < row < n - 1
            and not confirmed[row]
            and not confirmed[row + 1]
            and decades[row - 1] + 2 == decades[row + 1]
        ):
            _write_year(buffer, layout, row, (int(decades[row - 1]) + 1) * 10 + ones)
            log.add(DECADE_INTERIOR, buffer.lines[row])
            corrected += 1
        elif row < n - 2 and confirmed[row] and not confirmed[row + 1] and not starts[row + 2]:
            _write_year(buffer, layout, row, (int(decades[row + 1]) - 1) * 10 + ones)
            log.add(DECADE_FIRST_ROW, buffer.lines[row])
            corrected += 1
        elif row > 1 and not confirmed[row] and confirmed[row + 1] and not starts[row - 1]:
            _write_year(buffer, layout, row, (int(decades[row - 1]) + 1) * 10)
            log.add(DECADE_LAST_ROW, buffer.lines[row])
            corrected += 1

    if corrected:
        logger.debug("Corrected %d decade fields", corrected)
    return classify_boundaries(buffer, layout, fmt)
