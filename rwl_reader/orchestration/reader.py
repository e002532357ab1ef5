"""
Reading pipeline for decadal tree-ring files.

This module provides the RwlReader class that runs the full detection and
correction pipeline on one file:
1. Load lines with their original numbers
2. Filter rows without ring data
3. Normalize columns (year field width, illegal characters, fused values)
4. Classify core boundaries
5. Correct identifier errors
6. Correct decade errors
7. Segment records into cores
8. Parse decade rows into annual series
9. Assemble the year-by-core table
10. Merge segmented cores
11. Resolve sentinels, missing values and duplicates
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Union

import numpy as np
import pandas as pd

from rwl_reader.boundaries import (
    classify_boundaries,
    correct_identifiers,
    correct_years,
    segment_cores,
)
from rwl_reader.buffer import Record, load_file, load_records, split_lines
from rwl_reader.cleaners import filter_lines, normalize_columns
from rwl_reader.config.settings import FormatConfig, ReaderConfig
from rwl_reader.transformers import (
    CoreTable,
    apply_missing_policy,
    assemble_matrix,
    drop_duplicate_cores,
    drop_empty_cores,
    flag_same_label_cores,
    merge_segmented_cores,
    parse_cores,
    resolve_sentinel,
    round_values,
    trim_empty_years,
)
from rwl_reader.utils.error_log import ErrorLog, LogEntry

logger = logging.getLogger(__name__)


class RwlResult(NamedTuple):
    """
    Output of a read: unpacks as (matrix, years, core_ids, log).

    Attributes:
        matrix: (n_years, n_cores) float array, NaN for missing values.
        years: Ascending contiguous years aligned with matrix rows.
        core_ids: Trimmed identifiers aligned with matrix columns.
        log: Anomalies as (code, line) entries in detection order.
    """

    matrix: np.ndarray
    years: np.ndarray
    core_ids: List[str]
    log: List[LogEntry]

    def to_frame(self) -> pd.DataFrame:
        """Measurement table indexed by year with identifiers as columns."""
        return pd.DataFrame(self.matrix, index=pd.Index(self.years, name="year"), columns=self.core_ids)

    def log_frame(self) -> pd.DataFrame:
        """Anomaly log as a DataFrame with code, line and description."""
        log = ErrorLog()
        log.entries.extend(self.log)
        return log.to_frame()


Options = Union[ReaderConfig, Iterable[str], None]


def _resolve_options(options: Options) -> ReaderConfig:
    if options is None:
        return ReaderConfig()
    if isinstance(options, ReaderConfig):
        return options
    if isinstance(options, str):
        return ReaderConfig.from_flags([options])
    return ReaderConfig.from_flags(options)


class RwlReader:
    """
    Orchestrator of the decadal reading pipeline.

    Methods:
        read: Read a file from disk.
        read_text: Read in-memory file content.
        read_records: Run the pipeline on loaded records.

    Example:
        >>> reader = RwlReader(ReaderConfig(round=True))
        >>> matrix, years, core_ids, log = reader.read("site.rwl")
    """

    def __init__(self, options: Options = None, fmt: Optional[FormatConfig] = None):
        self.options = _resolve_options(options)
        self.fmt = fmt or FormatConfig()

    def read(self, filename: str) -> RwlResult:
        """
        Read and correct one decadal file.

        Args:
            filename: Path of the file.

        Returns:
            RwlResult for the file.

        Raises:
            OSError: If the file cannot be opened; nothing else is fatal.
        """
        records = load_file(filename, encoding=self.options.encoding)
        result = self.read_records(records)
        logger.info(
            "Read %s: %d cores, %d years, %d anomalies",
            filename,
            len(result.core_ids),
            len(result.years),
            len(result.log),
        )
        return result

    def read_text(self, content: str) -> RwlResult:
        return self.read_records(split_lines(content))

    def read_lines(self, lines: Iterable[str]) -> RwlResult:
        return self.read_records(load_records(lines))

    def read_records(self, records: List[Record]) -> RwlResult:
        """
        Run the full pipeline on loaded records.

        Args:
            records: Records with original line numbers.

        Returns:
            RwlResult; the log is empty when no measurement survives.
        """
        fmt = self.fmt
        log = ErrorLog()

        buffer = filter_lines(records, log, fmt)  # 1. Drop short, header and notation lines
        layout = normalize_columns(buffer, log, fmt)  # 2. Layout, illegal characters, padding
        if buffer.n == 0:
            return self._result(None, log)

        signals = classify_boundaries(buffer, layout, fmt)  # 3. Boundary signals
        signals = correct_identifiers(buffer, signals, log)  # 4. Identifier shifts and typos
        signals = correct_years(buffer, layout, signals, log, fmt)  # 5. Isolated decades
        cores = segment_cores(buffer, signals)  # 6. Row ranges per core
        cores = parse_cores(buffer, layout, cores, log, fmt)  # 7. Annual series and year spans

        table = assemble_matrix(cores)  # 8. Year-aligned table
        table = merge_segmented_cores(table, log)  # 9. Segmented series
        table = apply_missing_policy(table, self.options.zero_as_missing)  # 10. Negative/zero values
        table = resolve_sentinel(table, fmt)  # 11. Leftover 999 values
        table = drop_empty_cores(table)  # 12. Columns without data
        table = drop_duplicate_cores(table, log)  # 13. Exact duplicates
        table = flag_same_label_cores(table, log)  # 14. Repeated identifiers
        table = trim_empty_years(table)  # 15. All-missing border years
        if self.options.round:
            table = round_values(table)  # 16. Integer output
        return self._result(table, log)

    @staticmethod
    def _result(table: Optional[CoreTable], log: ErrorLog) -> RwlResult:
        if table is None or table.empty:
            return RwlResult(
                matrix=np.empty((0, 0)),
                years=np.array([], dtype=int),
                core_ids=[],
                log=[],
            )
        return RwlResult(
            matrix=table.values.to_numpy(dtype=float),
            years=table.years,
            core_ids=list(table.core_ids),
            log=log.to_list(),
        )


def read(filename: str, options: Options = None) -> RwlResult:
    """
    Read a decadal tree-ring file.

    Args:
        filename: Path of the file.
        options: ReaderConfig, or string flags such as ['round', 'zero'].

    Returns:
        RwlResult, unpackable as (matrix, years, core_ids, log).

    Example:
        >>> matrix, years, core_ids, log = read("site.rwl", ["round"])
    """
    return RwlReader(options).read(filename)


def read_text(content: str, options: Options = None) -> RwlResult:
    """Read decadal file content already in memory."""
    return RwlReader(options).read_text(content)


def read_lines(lines: Iterable[str], options: Options = None) -> RwlResult:
    """Read decadal lines already in memory."""
    return RwlReader(options).read_lines(lines)
