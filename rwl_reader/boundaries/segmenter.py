"""
Partition of records into cores.

A record starts a new core when any boundary signal fires; the core spans all
following rows up to the next start.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from rwl_reader.boundaries.classifier import BoundarySignals
from rwl_reader.buffer import RecordBuffer


@dataclass
class Core:
    """
    One contiguous run of decade rows belonging to a single sample.

    Attributes:
        core_id: Identifier as written on the first row (untrimmed).
        first_row: Buffer index of the first row.
        n_rows: Number of decade rows.
        first_line: Original line number of the first row.
        start_year: First year of the series, set by the row parser.
        end_year: Last year of the series, set by the row parser.
        values: Parsed annual values, set by the row parser.
    """

    core_id: str
    first_row: int
    n_rows: int
    first_line: int
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    values: np.ndarray = field(default_factory=lambda: np.array([], dtype=float))

    @property
    def rows(self) -> range:
        return range(self.first_row, self.first_row + self.n_rows)

    @property
    def label(self) -> str:
        return self.core_id.strip()


def segment_cores(buffer: RecordBuffer, signals: BoundarySignals) -> List[Core]:
    """
    Split the buffer into cores at every boundary start.

    Args:
        buffer: Record buffer with corrected identifiers.
        signals: Final boundary signals.

    Returns:
        Cores in file order.
    """
    starts = np.flatnonzero(signals.starts)
    ends = np.append(starts[1:], buffer.n)
    return [
        Core(
            core_id=buffer.ids[start],
            first_row=int(start),
            n_rows=int(end - start),
            first_line=int(buffer.lines[start]),
        )
        for start, end in zip(starts, ends)
    ]
