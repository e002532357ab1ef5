"""
Correction of core identifier errors.

An identifier change that neither a decade break nor a stop marker confirms
is treated as a transcription error. Shifted identifiers (2.1) are relabelled
around the true split point; remaining single mistyped identifiers (2.2) take
the identifier of the previous record.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from rwl_reader.boundaries.classifier import BoundarySignals, refresh_identifiers
from rwl_reader.buffer import RecordBuffer
from rwl_reader.utils.error_log import ID_SHIFT, ID_SIMPLE, ErrorLog

logger = logging.getLogger(__name__)


def _shift_window(new_id: np.ndarray, row: int) -> Tuple[int, int]:
    """
    Window around an unconfirmed identifier change.

    Returns:
        (back, forward): the last identifier change before `row`, and the row
        before the second identifier change from `row` on (or `row` itself
        when no later change exists).
    """
    starts = np.flatnonzero(new_id)
    back = int(starts[starts < row][-1])
    ahead = starts[starts >= row]
    forward = int(ahead[1]) - 1 if len(ahead) >= 2 else int(ahead[0])
    return back, forward


def _find_split(genuine: np.ndarray, back: int, forward: int) -> Optional[int]:
    """Last row of the first core if exactly one genuine boundary lies in (back, forward]."""
    boundaries = np.flatnonzero(genuine[back + 1:forward + 1]) + back
    if len(boundaries) != 1:
        return None
    return int(boundaries[0])


def repair_shifted_identifiers(
    buffer: RecordBuffer, signals: BoundarySignals, log: ErrorLog
) -> BoundarySignals:
    """
    Relabel identifiers shifted away from the real core boundary (2.1).

    For each unconfirmed identifier change, the window between the previous
    identifier change and the one after next must contain exactly one genuine
    boundary. Rows up to it take the backward identifier, rows after it the
    forward one. Unrepairable rows stay in place for the simple repair.

    Args:
        buffer: Record buffer; `ids` is modified in place.
        signals: Current boundary signals.
        log: Anomaly log (2.1 for every relabelled line).

    Returns:
        Boundary signals after all repairs.
    """
    genuine = signals.genuine
    worklist: List[int] = [int(i) for i in np.flatnonzero(signals.id_only)]
    repaired = 0

    while worklist:
        row = worklist.pop(0)
        if not signals.id_only[row]:
            continue

        back, forward = _shift_window(signals.new_id, row)
        split = _find_split(genuine, back, forward)
        if split is None:
            continue

        ids = list(buffer.ids)
        ids[back:split + 1] = [buffer.ids[back]] * (split + 1 - back)
        ids[split + 1:forward + 1] = [buffer.ids[forward]] * (forward - split)
        if ids == buffer.ids:
            continue
        buffer.ids = ids

        if row > split:
            first, last = split + 1, row - 1
        else:
            first, last = row, split
        log.add(ID_SHIFT, buffer.lines[first:last + 1])
        repaired += 1

        signals = refresh_identifiers(signals, buffer.ids)
        worklist = [int(i) for i in np.flatnonzero(signals.id_only)]

    if repaired:
        logger.debug("Repaired %d shifted identifier runs", repaired)
    return signals


def repair_mistyped_identifiers(
    buffer: RecordBuffer, signals: BoundarySignals, log: ErrorLog
) -> BoundarySignals:
    """
    Overwrite each remaining unconfirmed identifier with the previous one (2.2).

    Args:
        buffer: Record buffer; `ids` is modified in place.
        signals: Current boundary signals.
        log: Anomaly log (2.2 per corrected line).

    Returns:
        Boundary signals after all repairs.
    """
    worklist = [int(i) for i in np.flatnonzero(signals.id_only)]
    repaired = 0

    while worklist:
        row = worklist.pop(0)
        buffer.ids[row] = buffer.ids[row - 1]
        log.add(ID_SIMPLE, buffer.lines[row])
        repaired += 1

        signals = refresh_identifiers(signals, buffer.ids)
        worklist = [int(i) for i in np.flatnonzero(signals.id_only)]

    if repaired:
        logger.debug("Replaced %d mistyped identifiers", repaired)
    return signals


def correct_identifiers(buffer: RecordBuffer, signals: BoundarySignals, log: ErrorLog) -> BoundarySignals:
    """Run the shift repair, then the simple repair."""
    signals = repair_shifted_identifiers(buffer, signals, log)
    return repair_mistyped_identifiers(buffer, signals, log)
