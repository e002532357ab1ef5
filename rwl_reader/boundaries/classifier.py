"""
Boundary signals between cores.

Three independent signals say whether a record may start a new core: its
identifier differs from the previous record, its decade does not follow the
previous one, or the previous record ended with a stop marker. The signals are
a pure function of the current buffer state and are recomputed after every
identifier or year correction.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from rwl_reader.buffer import RecordBuffer
from rwl_reader.cleaners.column_normalizer import FileLayout
from rwl_reader.config.settings import FormatConfig


@dataclass
class BoundarySignals:
    """Per-record boundary flags. The first record is a boundary on all three."""

    new_id: np.ndarray
    new_decade: np.ndarray
    after_stop: np.ndarray

    @property
    def starts(self) -> np.ndarray:
        """Records that start a core: any signal fired."""
        return self.new_id | self.new_decade | self.after_stop

    @property
    def id_only(self) -> np.ndarray:
        """Identifier changes that no decade break or stop marker confirms."""
        return self.new_id & ~self.new_decade & ~self.after_stop

    @property
    def genuine(self) -> np.ndarray:
        """Decade break right after a stop marker."""
        return self.new_decade & self.after_stop

    @property
    def confirmed(self) -> np.ndarray:
        """Identifier change right after a stop marker."""
        return self.new_id & self.after_stop


def stop_pattern(fmt: FormatConfig) -> "re.Pattern":
    """Regex matching a stop marker at the end of a value region."""
    alternatives = [re.escape(str(m)) if m < 0 else re.escape(f" {m}") for m in fmt.stop_markers]
    return re.compile(r"(" + "|".join(alternatives) + r")\s*$")


def identifier_changes(ids: Sequence[str]) -> np.ndarray:
    """Case-insensitive identifier change with respect to the previous record."""
    keys = [cid.casefold() for cid in ids]
    changed = np.ones(len(keys), dtype=bool)
    changed[1:] = [a != b for a, b in zip(keys[:-1], keys[1:])]
    return changed


def decade_breaks(years: np.ndarray) -> np.ndarray:
    """Records whose decade is not exactly one more than the previous one."""
    decades = np.floor_divide(years, 10)
    breaks = np.ones(len(decades), dtype=bool)
    breaks[1:] = decades[:-1] != decades[1:] - 1
    return breaks


def stop_marker_rows(buffer: RecordBuffer, layout: FileLayout, fmt: FormatConfig) -> np.ndarray:
    """Records whose value region ends with a stop marker."""
    pattern = stop_pattern(fmt)
    return np.array(
        [
            bool(pattern.search(buffer.text(i, layout.data_start, layout.value_stop)))
            for i in range(buffer.n)
        ],
        dtype=bool,
    )


def record_years(buffer: RecordBuffer, layout: FileLayout) -> np.ndarray:
    """Declared year of every record."""
    return buffer.field_ints(layout.year_start, layout.data_start)


def classify_boundaries(buffer: RecordBuffer, layout: FileLayout, fmt: FormatConfig) -> BoundarySignals:
    """
    Compute the three boundary signals for the current buffer state.

    Args:
        buffer: Record buffer with identifiers set.
        layout: File layout.
        fmt: Format constants.

    Returns:
        BoundarySignals aligned with the buffer rows.
    """
    stops = stop_marker_rows(buffer, layout, fmt)
    after_stop = np.ones(buffer.n, dtype=bool)
    after_stop[1:] = stops[:-1]
    return BoundarySignals(
        new_id=identifier_changes(buffer.ids),
        new_decade=decade_breaks(record_years(buffer, layout)),
        after_stop=after_stop,
    )


def refresh_identifiers(signals: BoundarySignals, ids: List[str]) -> BoundarySignals:
    """Recompute only the identifier signal after a relabelling."""
    return BoundarySignals(
        new_id=identifier_changes(ids),
        new_decade=signals.new_decade,
        after_stop=signals.after_stop,
    )
