"""
Sentinel, missing-value and duplicate resolution on the assembled table.
"""

import logging

import numpy as np
import pandas as pd

from rwl_reader.config.settings import FormatConfig
from rwl_reader.transformers.matrix_assembler import CoreTable
from rwl_reader.utils.error_log import DUPLICATE_EXACT, DUPLICATE_LABEL, ErrorLog

logger = logging.getLogger(__name__)

# stands in for NaN when comparing columns
MISSING_KEY = -0.1


def apply_missing_policy(table: CoreTable, zero_as_missing: bool = False) -> CoreTable:
    """Negative values become missing; zeros too when `zero_as_missing` is set."""
    values = table.values
    table.values = values.mask(values <= 0) if zero_as_missing else values.mask(values < 0)
    return table


def resolve_sentinel(table: CoreTable, fmt: FormatConfig) -> CoreTable:
    """
    Decide whether leftover 999 values are data or stray stop markers.

    When another value lies strictly inside the sentinel band (900-1100), the
    file legitimately measures in that range and 999 is kept; otherwise 999
    is turned into a missing value.
    """
    values = table.values
    is_sentinel = values == fmt.sentinel_value
    if not is_sentinel.to_numpy().any():
        return table

    low, high = fmt.sentinel_band
    in_band = (values > low) & (values < high) & ~is_sentinel
    if not in_band.to_numpy().any():
        table.values = values.mask(is_sentinel)
        logger.debug("Converted %d stray %d values to missing", int(is_sentinel.to_numpy().sum()), fmt.sentinel_value)
    return table


def drop_empty_cores(table: CoreTable) -> CoreTable:
    """Drop columns without a single value."""
    keep = table.values.notna().any(axis=0).tolist()
    return table.select(keep)


def drop_duplicate_cores(table: CoreTable, log: ErrorLog) -> CoreTable:
    """
    Drop columns identical to an earlier one in identifier and values (4.1).

    Missing values compare equal to each other. The first occurrence is kept.
    """
    if table.n_cores < 2:
        return table
    keys = table.values.fillna(MISSING_KEY).T.reset_index(drop=True)
    keys.insert(0, "core_id", [cid.casefold() for cid in table.core_ids])
    duplicated = keys.duplicated(keep="first").tolist()
    if not any(duplicated):
        return table
    log.add(DUPLICATE_EXACT, [line for line, dup in zip(table.lines, duplicated) if dup])
    logger.debug("Dropped %d duplicate cores", sum(duplicated))
    return table.select([not dup for dup in duplicated])


def flag_same_label_cores(table: CoreTable, log: ErrorLog) -> CoreTable:
    """Log columns whose identifier repeats an earlier one with different values (4.2)."""
    repeated = pd.Series([cid.casefold() for cid in table.core_ids]).duplicated(keep="first")
    log.add(DUPLICATE_LABEL, [line for line, rep in zip(table.lines, repeated) if rep])
    return table


def round_values(table: CoreTable) -> CoreTable:
    """Round to the nearest integer, halves away from zero."""
    values = table.values
    table.values = np.sign(values) * np.floor(np.abs(values) + 0.5)
    return table
