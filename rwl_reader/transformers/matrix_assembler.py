"""
Year-aligned measurement table.

Parsed cores are laid out side by side on a contiguous year axis. Columns are
positional because identifiers may repeat until duplicates are resolved; the
identifier and first line of each column travel with the table.
"""

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np
import pandas as pd

from rwl_reader.boundaries.segmenter import Core

logger = logging.getLogger(__name__)


@dataclass
class CoreTable:
    """
    Year-by-core table with per-column metadata.

    Attributes:
        values: DataFrame indexed by year, one positional column per core,
            NaN for missing values.
        core_ids: Trimmed identifier of each column.
        lines: Original line number where each column's core starts.
    """

    values: pd.DataFrame
    core_ids: List[str] = field(default_factory=list)
    lines: List[int] = field(default_factory=list)

    @property
    def years(self) -> np.ndarray:
        return self.values.index.to_numpy(dtype=int)

    @property
    def n_cores(self) -> int:
        return int(self.values.shape[1])

    @property
    def empty(self) -> bool:
        return self.values.shape[0] == 0 or self.values.shape[1] == 0

    def select(self, keep: List[bool]) -> "CoreTable":
        """Keep the columns flagged True, renumbering positions."""
        keep = list(keep)
        values = self.values.loc[:, keep]
        values.columns = range(values.shape[1])
        return CoreTable(
            values=values,
            core_ids=[cid for cid, k in zip(self.core_ids, keep) if k],
            lines=[line for line, k in zip(self.lines, keep) if k],
        )

    def to_frame(self) -> pd.DataFrame:
        """Copy of the values with identifiers as column labels."""
        frame = self.values.copy()
        frame.columns = list(self.core_ids)
        frame.index.name = "year"
        return frame


def trim_empty_years(table: CoreTable) -> CoreTable:
    """
    Drop leading and trailing years with no value in any core.

    Interior all-missing years are kept so the axis stays contiguous.
    """
    present = table.values.notna().any(axis=1).to_numpy()
    if not present.any():
        table.values = table.values.iloc[0:0]
        return table
    first = int(np.argmax(present))
    last = len(present) - 1 - int(np.argmax(present[::-1]))
    table.values = table.values.iloc[first:last + 1]
    return table


def assemble_matrix(cores: List[Core]) -> CoreTable:
    """
    Scatter all cores onto one year axis.

    The axis covers the union of the cores' year spans; cores without values
    still get an (all-missing) column.

    Args:
        cores: Parsed cores.

    Returns:
        CoreTable trimmed of all-missing border years.
    """
    spans = [(c.start_year, c.end_year) for c in cores if len(c.values)]
    if spans:
        first = min(s for s, _ in spans)
        last = max(e for _, e in spans)
        years = np.arange(first, last + 1)
    else:
        years = np.array([], dtype=int)

    matrix = np.full((len(years), len(cores)), np.nan)
    for j, core in enumerate(cores):
        if len(core.values):
            offset = core.start_year - years[0]
            matrix[offset:offset + len(core.values), j] = core.values

    table = CoreTable(
        values=pd.DataFrame(matrix, index=pd.Index(years, name="year")),
        core_ids=[c.label for c in cores],
        lines=[c.first_line for c in cores],
    )
    logger.debug("Assembled %d cores over %d years", len(cores), len(years))
    return trim_empty_years(table)
