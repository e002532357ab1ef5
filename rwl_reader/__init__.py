"""Decadal tree-ring measurement (.rwl) reader.

This package turns legacy fixed-width decadal ring-width files into a clean
year-by-core measurement table, correcting the formatting errors commonly
found in archived files and logging every anomaly it meets.

Main components:
- config: YAML configuration and reader options
- buffer: Fixed-width record buffer and column splicing
- cleaners: Line filtering and column normalization
- boundaries: Core boundary detection and identifier/year correction
- transformers: Decade row parsing, matrix assembly and post-processing
- orchestration: The reading pipeline and its entry points
- utils: Error log and shared helpers
"""

__version__ = "1.0.0"

from rwl_reader.orchestration import RwlReader, RwlResult, read, read_lines, read_text

__all__ = [
    "__version__",
    "RwlReader",
    "RwlResult",
    "read",
    "read_lines",
    "read_text",
]
