"""
Column layout detection and character cleanup.

File-wide decisions (year field width, value field width) are taken once from
all records and returned as a FileLayout that later stages receive instead of
re-deriving it per record.
"""

import logging
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from rwl_reader.buffer import RecordBuffer
from rwl_reader.cleaners.line_filter import drop_unreadable_years
from rwl_reader.config.settings import FormatConfig
from rwl_reader.utils.error_log import ILLEGAL_CHARACTER, STRAY_DECIMAL, ErrorLog

logger = logging.getLogger(__name__)

LEGAL_CHARACTERS = list("0123456789.- ")


@dataclass(frozen=True)
class FileLayout:
    """
    Column layout shared by all records of a file (0-based columns).

    Attributes:
        year_start: First column of the year field (7 for signed 5-digit years, else 8).
        data_start: First column of the value region.
        field_width: Width of one value field (6, or 7 after padding).
        values_per_row: Value slots per decade row.
    """

    year_start: int = 8
    data_start: int = 12
    field_width: int = 6
    values_per_row: int = 10

    @property
    def value_stop(self) -> int:
        return self.data_start + self.field_width * self.values_per_row

    @property
    def padded(self) -> bool:
        return self.field_width > 6


def resolve_year_field(buffer: RecordBuffer, fmt: FormatConfig) -> int:
    """
    Decide the year field start and split identifiers off the text.

    A '-' in column 8 on any record means years need five characters, so the
    year field starts at column 8 and the sign is removed from identifiers.

    Args:
        buffer: Record buffer; `ids` is filled in and column 8 is blanked on
            unsigned records in signed mode.
        fmt: Format constants.

    Returns:
        0-based first column of the year field.
    """
    sign_col = fmt.id_width - 1
    signed = buffer.chars[:, sign_col] == "-"
    if signed.any():
        id_chars = buffer.chars[:, :fmt.id_width].copy()
        id_chars[signed, sign_col] = " "
        buffer.ids = ["".join(row) for row in id_chars]
        buffer.chars[~signed, sign_col] = " "
        logger.debug("Signed years found, year field starts at column %d", sign_col + 1)
        return sign_col

    buffer.ids = ["".join(row) for row in buffer.chars[:, :fmt.id_width]]
    return fmt.id_width


def replace_illegal_characters(buffer: RecordBuffer, year_start: int, log: ErrorLog, fmt: FormatConfig) -> None:
    """
    Blank every character other than digits, '.', '-' and space from the year
    field to the end of the value region. Logs 6.1 once per affected line.
    """
    region = buffer.chars[:, year_start:fmt.value_region_end]
    illegal = np.isin(region, LEGAL_CHARACTERS, invert=True)
    if not illegal.any():
        return
    region[illegal] = " "
    rows = illegal.any(axis=1)
    log.add(ILLEGAL_CHARACTER, buffer.lines[rows])
    logger.debug("Blanked illegal characters on %d lines", int(rows.sum()))


def remove_stray_decimals(buffer: RecordBuffer, log: ErrorLog, fmt: FormatConfig) -> None:
    """
    Blank decimal points followed by a space or ending the line. Logs 6.2
    once per affected line.
    """
    region = buffer.chars[:, fmt.data_start:]
    if region.shape[1] == 0:
        return
    blank_right = np.ones(region.shape, dtype=bool)
    blank_right[:, :-1] = region[:, 1:] == " "
    stray = (region == ".") & blank_right
    if not stray.any():
        return
    region[stray] = " "
    rows = stray.any(axis=1)
    log.add(STRAY_DECIMAL, buffer.lines[rows])
    logger.debug("Blanked stray decimal points on %d lines", int(rows.sum()))


def has_fused_values(buffer: RecordBuffer, fmt: FormatConfig) -> bool:
    """
    Check for values written without a separating blank.

    A window of `field_width` consecutive non-blank characters anywhere in the
    value region means two values touch.
    """
    filled = buffer.chars[:, fmt.data_start:fmt.value_region_end] != " "
    if buffer.n == 0 or filled.shape[1] < fmt.field_width:
        return False
    run = sliding_window_view(filled, fmt.field_width, axis=1).sum(axis=2)
    return bool(run.max() >= fmt.field_width)


def pad_value_fields(buffer: RecordBuffer, fmt: FormatConfig) -> int:
    """
    Widen value fields by one blank column each when values are fused.

    The decision is all-or-nothing for the file: one blank column is spliced
    in front of each of the value slots of every record.

    Returns:
        Resulting field width.
    """
    if not has_fused_values(buffer, fmt):
        return fmt.field_width
    positions = [fmt.data_start + k * fmt.field_width for k in range(fmt.values_per_row)]
    buffer.splice_columns(positions)
    logger.debug("Fused values found, value fields widened to %d", fmt.field_width + 1)
    return fmt.field_width + 1


def normalize_columns(buffer: RecordBuffer, log: ErrorLog, fmt: FormatConfig) -> FileLayout:
    """
    Run the column normalizer and return the file layout.

    Steps: year field width, illegal characters (6.1), stray decimals (6.2),
    unreadable years (3.3), value field padding.

    Args:
        buffer: Record buffer (modified in place).
        log: Anomaly log.
        fmt: Format constants.

    Returns:
        FileLayout for all later stages.
    """
    year_start = resolve_year_field(buffer, fmt)  # 1. Year field width and identifiers
    replace_illegal_characters(buffer, year_start, log, fmt)  # 2. Illegal characters
    remove_stray_decimals(buffer, log, fmt)  # 3. Orphaned decimal points
    drop_unreadable_years(buffer, year_start, log, fmt)  # 4. Year fields that are not integers
    field_width = pad_value_fields(buffer, fmt)  # 5. Fused values
    return FileLayout(
        year_start=year_start,
        data_start=fmt.data_start,
        field_width=field_width,
        values_per_row=fmt.values_per_row,
    )
