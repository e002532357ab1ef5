"""
Anomaly log for the decadal reader.

Every detection or correction made while reading a file is recorded as a
(code, line) pair, where the code is an error type with an optional decimal
sub-code and the line is the 1-based line number in the original file.
"""

from typing import Dict, Iterable, Iterator, List, NamedTuple, Tuple, Union

import pandas as pd

# Time errors
DECADE_INTERIOR = 1.1
DECADE_FIRST_ROW = 1.2
DECADE_LAST_ROW = 1.3
YEAR_MISMATCH = 1.4

# Core ID errors
ID_SHIFT = 2.1
ID_SIMPLE = 2.2

# No data rows
SHORT_LINE = 3.1
NOTATION_LINE = 3.2
UNREADABLE_YEAR = 3.3

# Duplicate cores
DUPLICATE_EXACT = 4.1
DUPLICATE_LABEL = 4.2

STOP_MARKER_ABSENT = 5.0

# Special characters
ILLEGAL_CHARACTER = 6.1
STRAY_DECIMAL = 6.2

# Unexpected missing values
BLANK_GAP = 7.1
FILL_VALUE = 7.2

SEGMENTED_CORE = 8.0

ERROR_CODES: Dict[float, str] = {
    DECADE_INTERIOR: "Time error: interior decade corrected",
    DECADE_FIRST_ROW: "Time error: first decade of a core corrected",
    DECADE_LAST_ROW: "Time error: last decade of a core corrected",
    YEAR_MISMATCH: "Time error: start year does not match the number of values",
    ID_SHIFT: "Core ID error: shifted identifiers relabelled",
    ID_SIMPLE: "Core ID error: mistyped identifier replaced",
    SHORT_LINE: "No data row: short line removed",
    NOTATION_LINE: "No data row: notation line removed",
    UNREADABLE_YEAR: "No data row: unreadable year field removed",
    DUPLICATE_EXACT: "Duplicate core: identical series removed",
    DUPLICATE_LABEL: "Duplicate core: repeated identifier kept",
    STOP_MARKER_ABSENT: "Stop marker absent",
    ILLEGAL_CHARACTER: "Special characters: illegal characters blanked",
    STRAY_DECIMAL: "Special characters: stray decimal point blanked",
    BLANK_GAP: "Unexpected missing value: blank gap filled",
    FILL_VALUE: "Unexpected missing value: fill values trimmed",
    SEGMENTED_CORE: "Segmented core series merged",
}


class LogEntry(NamedTuple):
    """A single anomaly: error code and original line number."""

    code: float
    line: int

    @property
    def error_type(self) -> int:
        """Error type without its sub-code (e.g. 6 for 6.2)."""
        return int(self.code)

    @property
    def description(self) -> str:
        return ERROR_CODES.get(self.code, "Unknown error")


class ErrorLog:
    """
    Append-only, ordered collection of anomaly entries.

    Example:
        >>> log = ErrorLog()
        >>> log.add(ILLEGAL_CHARACTER, [12, 40])
        >>> list(log)
        [LogEntry(code=6.1, line=12), LogEntry(code=6.1, line=40)]
    """

    def __init__(self) -> None:
        self.entries: List[LogEntry] = []

    def add(self, code: float, lines: Union[int, Iterable[int]]) -> None:
        """
        Append one entry per line for the given code.

        Args:
            code: Error code from ERROR_CODES.
            lines: A single line number or an iterable of line numbers.
        """
        if isinstance(lines, Iterable):
            self.entries.extend(LogEntry(code, int(line)) for line in lines)
        else:
            self.entries.append(LogEntry(code, int(lines)))

    def count(self, code: float) -> int:
        return sum(1 for entry in self.entries if entry.code == code)

    def lines(self, code: float) -> List[int]:
        """Line numbers logged under a code, in logging order."""
        return [entry.line for entry in self.entries if entry.code == code]

    def to_list(self) -> List[LogEntry]:
        return list(self.entries)

    def to_frame(self) -> pd.DataFrame:
        """
        Convert the log into a DataFrame with code, line and description columns.

        Returns:
            DataFrame with one row per entry, in logging order.
        """
        return pd.DataFrame(
            {
                "code": [entry.code for entry in self.entries],
                "line": [entry.line for entry in self.entries],
                "description": [entry.description for entry in self.entries],
            }
        )

    def __contains__(self, item: Tuple[float, int]) -> bool:
        code, line = item
        return LogEntry(code, int(line)) in self.entries

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
