"""
Fixed-width record buffer.

Records are loaded from raw text with their original line numbers, then held
in a 2-D character array (one row per record, one column per text column) so
that every pipeline stage can work on column ranges of all records at once.
The mapping from buffer row to original line number survives every row drop.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from rwl_reader.buffer.splice import insert_columns

_INTEGER = re.compile(r"^-?\d+$")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class Record(NamedTuple):
    """One raw line of the input file."""

    line: int
    text: str


def load_records(lines: Iterable[str]) -> List[Record]:
    """
    Turn raw lines into records, right-trimmed and numbered from 1.

    Blank lines are skipped but still count towards the numbering, so logged
    line numbers match the physical file.

    Args:
        lines: Raw lines (with or without line terminators).

    Returns:
        List of non-blank records.

    Example:
        >>> load_records(["ab01    1900   12", "", "ab01    1910  999"])
        [Record(line=1, text='ab01    1900   12'), Record(line=3, text='ab01    1910  999')]
    """
    records = []
    for number, raw in enumerate(lines, start=1):
        text = raw.rstrip()
        if text:
            records.append(Record(number, text))
    return records


def split_lines(content: str) -> List[Record]:
    """Split file content on \\n, \\r\\n or \\r and load it as records.

    Other control characters (form feeds, 0x85) stay inside their record so the
    character cleanup can blank them.
    """
    return load_records(_LINE_BREAK.split(content))


def load_file(path: str, encoding: str = "latin-1") -> List[Record]:
    """
    Read a decadal file into records.

    Args:
        path: File to read.
        encoding: Text encoding; undecodable bytes are replaced.

    Returns:
        List of records.

    Raises:
        OSError: If the file cannot be opened.
    """
    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        content = f.read()
    return split_lines(content)


@dataclass
class RecordBuffer:
    """
    Character buffer over the records of one file.

    Attributes:
        chars: (n_records, width) array of single characters, blank padded.
        lines: Original line number of each buffer row.
        ids: Core identifier of each row, kept apart from the text so that
            identifier corrections never touch the year or value columns.
    """

    chars: np.ndarray
    lines: np.ndarray
    ids: List[str] = field(default_factory=list)

    @classmethod
    def from_records(cls, records: Sequence[Record], min_width: int = 72) -> "RecordBuffer":
        """
        Build a blank-padded buffer at least `min_width` columns wide.

        Args:
            records: Records to hold.
            min_width: Minimum number of columns.

        Returns:
            RecordBuffer with one row per record.
        """
        width = max([min_width] + [len(r.text) for r in records])
        if records:
            chars = np.array([list(r.text.ljust(width)) for r in records], dtype="<U1")
        else:
            chars = np.full((0, width), " ", dtype="<U1")
        lines = np.array([r.line for r in records], dtype=int)
        return cls(chars=chars, lines=lines)

    @property
    def n(self) -> int:
        return int(self.chars.shape[0])

    @property
    def width(self) -> int:
        return int(self.chars.shape[1])

    def text(self, row: int, start: int = 0, stop: Optional[int] = None) -> str:
        """Text of one row between two 0-based columns."""
        return "".join(self.chars[row, start:stop])

    def write(self, row: int, start: int, stop: int, text: str) -> None:
        """Overwrite a column range of one row, right-aligning `text`."""
        width = stop - start
        self.chars[row, start:stop] = list(text.rjust(width)[-width:])

    def keep(self, mask: np.ndarray) -> np.ndarray:
        """
        Keep only the rows selected by a boolean mask.

        Returns:
            Original line numbers of the dropped rows.
        """
        mask = np.asarray(mask, dtype=bool)
        dropped = self.lines[~mask]
        self.chars = self.chars[mask]
        self.lines = self.lines[mask]
        if self.ids:
            self.ids = [cid for cid, kept in zip(self.ids, mask) if kept]
        return dropped

    def splice_columns(self, positions: Sequence[int], filler: str = " ") -> None:
        """Insert one filler column in front of each 0-based column position."""
        self.chars = insert_columns(self.chars, positions, filler)

    def field_is_integer(self, start: int, stop: int) -> np.ndarray:
        """Boolean mask of rows whose column range holds a single integer."""
        return np.array(
            [bool(_INTEGER.match(self.text(i, start, stop).strip())) for i in range(self.n)],
            dtype=bool,
        )

    def field_ints(self, start: int, stop: int) -> np.ndarray:
        """Integer value of a column range for every row."""
        return np.array([int(self.text(i, start, stop)) for i in range(self.n)], dtype=int)
