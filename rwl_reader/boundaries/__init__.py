"""Core boundary detection, identifier and year correction, segmentation."""

from rwl_reader.boundaries.classifier import (
    BoundarySignals,
    classify_boundaries,
    decade_breaks,
    identifier_changes,
    record_years,
    stop_marker_rows,
)
from rwl_reader.boundaries.identifier_corrector import (
    correct_identifiers,
    repair_mistyped_identifiers,
    repair_shifted_identifiers,
)
from rwl_reader.boundaries.segmenter import Core, segment_cores
from rwl_reader.boundaries.year_corrector import correct_years, isolated_decades

__all__ = [
    "BoundarySignals",
    "classify_boundaries",
    "decade_breaks",
    "identifier_changes",
    "record_years",
    "stop_marker_rows",
    "correct_identifiers",
    "repair_mistyped_identifiers",
    "repair_shifted_identifiers",
    "Core",
    "segment_cores",
    "correct_years",
    "isolated_decades",
]
