"""Tests for boundary classification, identifier and year correction."""

import numpy as np
from conftest import core_lines, decade_row, prepare

from rwl_reader.boundaries import (
    classify_boundaries,
    correct_identifiers,
    correct_years,
    decade_breaks,
    identifier_changes,
    isolated_decades,
    record_years,
    segment_cores,
)
from rwl_reader.config.settings import FormatConfig
from rwl_reader.utils.error_log import (
    DECADE_FIRST_ROW,
    DECADE_INTERIOR,
    DECADE_LAST_ROW,
    ID_SHIFT,
    ID_SIMPLE,
)


def run_corrections(lines):
    fmt = FormatConfig()
    buffer, layout, log = prepare(lines, fmt)
    signals = classify_boundaries(buffer, layout, fmt)
    signals = correct_identifiers(buffer, signals, log)
    signals = correct_years(buffer, layout, signals, log, fmt)
    return buffer, layout, signals, log


def test_identifier_changes_ignore_case():
    changed = identifier_changes(["ab01    ", "AB01    ", "ab02    "])
    assert changed.tolist() == [True, False, True]


def test_decade_breaks():
    breaks = decade_breaks(np.array([1901, 1910, 1920, 1901, 1930]))
    assert breaks.tolist() == [True, False, False, True, True]


def test_classify_two_cores(two_cores, fmt):
    buffer, layout, _ = prepare(two_cores, fmt)
    signals = classify_boundaries(buffer, layout, fmt)

    assert signals.starts.tolist() == [True, False, False, True, False, False]
    assert signals.after_stop.tolist() == [True, False, False, True, False, False]
    assert signals.genuine[3]
    assert signals.confirmed[3]
    assert not signals.id_only.any()


def test_negative_stop_marker_ends_core(fmt):
    lines = core_lines("ab01", 1901, [100, 101, 102], stop=-9999) + core_lines("ab02", 1901, [100, 101])
    buffer, layout, _ = prepare(lines, fmt)
    signals = classify_boundaries(buffer, layout, fmt)

    assert signals.after_stop.tolist() == [True, True]


def test_mistyped_identifier_takes_previous(fmt):
    lines = core_lines("ab01", 1901, list(range(100, 125)))
    lines[1] = "ab0l" + lines[1][4:]
    buffer, _, signals, log = run_corrections(lines)

    assert log.lines(ID_SIMPLE) == [2]
    assert log.count(ID_SHIFT) == 0
    assert buffer.ids == ["ab01    "] * 3
    assert signals.starts.tolist() == [True, False, False]


def test_shifted_identifier_is_relabelled():
    # the second core's identifier only appears on its second row
    lines = core_lines("ab01", 1901, list(range(100, 125))) + core_lines("ab02", 1901, list(range(200, 225)))
    lines[3] = "ab01" + lines[3][4:]
    buffer, _, signals, log = run_corrections(lines)

    assert log.lines(ID_SHIFT) == [4]
    assert log.count(ID_SIMPLE) == 0
    assert buffer.ids == ["ab01    "] * 3 + ["ab02    "] * 3
    assert signals.starts.tolist() == [True, False, False, True, False, False]


def test_interior_decade_is_corrected():
    lines = core_lines("ab01", 1920, list(range(100, 140)))
    lines[2] = lines[2][:8] + "1960" + lines[2][12:]
    buffer, layout, signals, log = run_corrections(lines)

    assert log.lines(DECADE_INTERIOR) == [3]
    assert record_years(buffer, layout).tolist() == [1920, 1930, 1940, 1950, 1960]
    assert signals.starts.tolist() == [True, False, False, False, False]


def test_first_decade_of_core_is_corrected():
    lines = core_lines("ab01", 1901, list(range(100, 125))) + core_lines("ab02", 1905, list(range(200, 230)))
    lines[3] = lines[3][:8] + "1855" + lines[3][12:]
    buffer, layout, _, log = run_corrections(lines)

    assert log.lines(DECADE_FIRST_ROW) == [4]
    assert record_years(buffer, layout)[3] == 1905


def test_last_decade_of_core_is_corrected():
    lines = core_lines("ab01", 1901, list(range(100, 132))) + core_lines("ab02", 1901, list(range(200, 225)))
    lines[3] = lines[3][:8] + "1970" + lines[3][12:]
    buffer, layout, signals, log = run_corrections(lines)

    assert log.lines(DECADE_LAST_ROW) == [4]
    assert record_years(buffer, layout)[3] == 1930
    assert signals.starts.tolist() == [True, False, False, False, True, False, False]


def test_last_row_of_file_is_corrected():
    lines = core_lines("ab01", 1901, list(range(100, 132)))
    lines[3] = lines[3][:8] + "1990" + lines[3][12:]
    buffer, layout, _, log = run_corrections(lines)

    assert log.lines(DECADE_LAST_ROW) == [4]
    assert record_years(buffer, layout)[3] == 1930


def test_single_row_cores_are_left_alone(fmt):
    lines = [
        decade_row("ab01", 1905, [100, 101, 999]),
        decade_row("ab02", 1935, [100, 101, 999]),
        decade_row("ab03", 1875, [100, 101, 999]),
    ]
    buffer, layout, signals, log = run_corrections(lines)

    assert isolated_decades(signals).tolist() == [0, 1, 2]
    assert len(log) == 0
    assert record_years(buffer, layout).tolist() == [1905, 1935, 1875]


def test_segment_cores(two_cores, fmt):
    buffer, layout, _ = prepare(two_cores, fmt)
    cores = segment_cores(buffer, classify_boundaries(buffer, layout, fmt))

    assert [c.label for c in cores] == ["ab01", "ab02"]
    assert [c.first_line for c in cores] == [1, 4]
    assert [c.n_rows for c in cores] == [3, 3]
    assert list(cores[1].rows) == [3, 4, 5]
