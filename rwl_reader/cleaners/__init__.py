"""Line filtering and column normalization."""

from rwl_reader.cleaners.column_normalizer import (
    FileLayout,
    has_fused_values,
    normalize_columns,
    pad_value_fields,
    remove_stray_decimals,
    replace_illegal_characters,
    resolve_year_field,
)
from rwl_reader.cleaners.line_filter import (
    drop_header_lines,
    drop_notation_lines,
    drop_short_lines,
    drop_unreadable_years,
    filter_lines,
    has_header,
)

__all__ = [
    # Line filter
    "drop_header_lines",
    "drop_notation_lines",
    "drop_short_lines",
    "drop_unreadable_years",
    "filter_lines",
    "has_header",
    # Column normalizer
    "FileLayout",
    "has_fused_values",
    "normalize_columns",
    "pad_value_fields",
    "remove_stray_decimals",
    "replace_illegal_characters",
    "resolve_year_field",
]
