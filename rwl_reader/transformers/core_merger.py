"""
Merging of segmented core series.

Some files split one sparse series into several consecutive runs with the same
identifier. When the runs never share a year they are merged back into one
column; overlapping runs are left alone.
"""

import logging
from typing import List, Tuple

from rwl_reader.transformers.matrix_assembler import CoreTable
from rwl_reader.utils.error_log import SEGMENTED_CORE, ErrorLog

logger = logging.getLogger(__name__)


def same_label_runs(core_ids: List[str]) -> List[Tuple[int, int]]:
    """
    Runs of consecutive columns sharing an identifier (case-insensitive).

    Returns:
        List of (first, last) column positions for runs of two or more.
    """
    runs = []
    start = 0
    keys = [cid.casefold() for cid in core_ids]
    for j in range(1, len(keys) + 1):
        if j == len(keys) or keys[j] != keys[start]:
            if j - start > 1:
                runs.append((start, j - 1))
            start = j
    return runs


def merge_segmented_cores(table: CoreTable, log: ErrorLog) -> CoreTable:
    """
    Merge same-identifier runs whose columns never overlap in time (8).

    Every year of the run must have fewer than two values across its columns.
    The merged column is the missing-aware mean, which here is simply the one
    value present. Runs are processed from the last to the first.

    Args:
        table: Assembled core table.
        log: Anomaly log (8 at the first line of every merged core).

    Returns:
        Table with merged runs collapsed into their first column.
    """
    keep = [True] * table.n_cores
    values = table.values.copy()

    for first, last in reversed(same_label_runs(table.core_ids)):
        block = values.iloc[:, first:last + 1]
        if not (block.notna().sum(axis=1) < 2).all():
            continue
        log.add(SEGMENTED_CORE, table.lines[first:last + 1])
        values.iloc[:, first] = block.mean(axis=1, skipna=True)
        for j in range(first + 1, last + 1):
            keep[j] = False
        logger.debug("Merged %d segments of core %s", last - first + 1, table.core_ids[first])

    table.values = values
    return table.select(keep)
