"""Decade row parsing, matrix assembly and table post-processing."""

from rwl_reader.transformers.core_merger import merge_segmented_cores, same_label_runs
from rwl_reader.transformers.matrix_assembler import CoreTable, assemble_matrix, trim_empty_years
from rwl_reader.transformers.resolver import (
    apply_missing_policy,
    drop_duplicate_cores,
    drop_empty_cores,
    flag_same_label_cores,
    resolve_sentinel,
    round_values,
)
from rwl_reader.transformers.row_parser import (
    CoreCursor,
    DecadeRow,
    fill_blank_gaps,
    parse_core,
    parse_cores,
    parse_values,
    read_decade_row,
)

__all__ = [
    # Row parser
    "CoreCursor",
    "DecadeRow",
    "fill_blank_gaps",
    "parse_core",
    "parse_cores",
    "parse_values",
    "read_decade_row",
    # Matrix assembler
    "CoreTable",
    "assemble_matrix",
    "trim_empty_years",
    # Segmented-core merger
    "merge_segmented_cores",
    "same_label_runs",
    # Sentinel and duplicate resolver
    "apply_missing_policy",
    "drop_duplicate_cores",
    "drop_empty_cores",
    "flag_same_label_cores",
    "resolve_sentinel",
    "round_values",
]
