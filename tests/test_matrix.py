"""Tests for matrix assembly, segmented-core merging and the resolver."""

import numpy as np
import pandas as pd

from rwl_reader.boundaries import Core
from rwl_reader.config.settings import FormatConfig
from rwl_reader.transformers import (
    CoreTable,
    apply_missing_policy,
    assemble_matrix,
    drop_duplicate_cores,
    drop_empty_cores,
    flag_same_label_cores,
    merge_segmented_cores,
    resolve_sentinel,
    round_values,
    same_label_runs,
    trim_empty_years,
)
from rwl_reader.utils.error_log import DUPLICATE_EXACT, DUPLICATE_LABEL, SEGMENTED_CORE, ErrorLog

nan = np.nan


def make_core(core_id, first_line, start, values):
    values = np.asarray(values, dtype=float)
    return Core(
        core_id=f"{core_id:<8}",
        first_row=first_line - 1,
        n_rows=1,
        first_line=first_line,
        start_year=start,
        end_year=start + len(values) - 1,
        values=values,
    )


def make_table(columns, core_ids, start=1900, lines=None):
    matrix = np.array(columns, dtype=float).T
    years = np.arange(start, start + matrix.shape[0])
    return CoreTable(
        values=pd.DataFrame(matrix, index=pd.Index(years, name="year")),
        core_ids=list(core_ids),
        lines=list(lines or range(1, len(core_ids) + 1)),
    )


def test_assemble_aligns_cores_on_years():
    table = assemble_matrix(
        [
            make_core("ab01", 1, 1900, [1, 2, 3]),
            make_core("ab02", 4, 1902, [10, 11, 12]),
        ]
    )

    assert table.years.tolist() == [1900, 1901, 1902, 1903, 1904]
    assert table.core_ids == ["ab01", "ab02"]
    assert table.lines == [1, 4]
    np.testing.assert_array_equal(table.values[0].to_numpy(), [1, 2, 3, nan, nan])
    np.testing.assert_array_equal(table.values[1].to_numpy(), [nan, nan, 10, 11, 12])


def test_assemble_trims_missing_border_years():
    table = assemble_matrix([make_core("ab01", 1, 1905, [nan, 100, 101, nan, nan])])

    assert table.years.tolist() == [1906, 1907]


def test_assemble_keeps_empty_core_column():
    table = assemble_matrix(
        [
            make_core("ab01", 1, 1900, [1, 2]),
            make_core("ab02", 3, 1950, []),
        ]
    )

    assert table.n_cores == 2
    assert table.values[1].isna().all()


def test_trim_keeps_interior_gaps():
    table = trim_empty_years(make_table([[nan, 1, nan, 2, nan]], ["ab01"]))

    assert table.years.tolist() == [1901, 1902, 1903]


def test_same_label_runs():
    assert same_label_runs(["a", "A", "b", "c", "c", "c", "a"]) == [(0, 1), (3, 5)]


def test_segmented_cores_are_merged():
    log = ErrorLog()
    table = make_table(
        [[1, 2, nan, nan, nan], [nan, nan, nan, 4, 5], [7, 7, 7, 7, 7]],
        ["ab01", "AB01", "ab02"],
        lines=[1, 5, 9],
    )
    table = merge_segmented_cores(table, log)

    assert table.core_ids == ["ab01", "ab02"]
    assert table.lines == [1, 9]
    np.testing.assert_array_equal(table.values[0].to_numpy(), [1, 2, nan, 4, 5])
    assert log.lines(SEGMENTED_CORE) == [1, 5]


def test_overlapping_segments_are_not_merged():
    log = ErrorLog()
    table = make_table([[1, 2, 3], [nan, 5, 6]], ["ab01", "ab01"])
    table = merge_segmented_cores(table, log)

    assert table.n_cores == 2
    assert len(log) == 0


def test_negative_values_become_missing():
    table = apply_missing_policy(make_table([[1, -1, 0]], ["ab01"]))
    np.testing.assert_array_equal(table.values[0].to_numpy(), [1, nan, 0])


def test_zero_as_missing():
    table = apply_missing_policy(make_table([[1, -1, 0]], ["ab01"]), zero_as_missing=True)
    np.testing.assert_array_equal(table.values[0].to_numpy(), [1, nan, nan])


def test_sentinel_without_band_values_is_missing():
    table = resolve_sentinel(make_table([[100, 999, 102]], ["ab01"]), FormatConfig())
    np.testing.assert_array_equal(table.values[0].to_numpy(), [100, nan, 102])


def test_sentinel_kept_when_file_measures_in_band():
    table = resolve_sentinel(make_table([[950, 999, 1020]], ["ab01"]), FormatConfig())
    np.testing.assert_array_equal(table.values[0].to_numpy(), [950, 999, 1020])


def test_drop_empty_cores():
    table = drop_empty_cores(make_table([[nan, nan], [1, 2]], ["ab01", "ab02"], lines=[1, 4]))

    assert table.core_ids == ["ab02"]
    assert table.lines == [4]
    assert list(table.values.columns) == [0]


def test_exact_duplicates_are_dropped():
    log = ErrorLog()
    table = make_table(
        [[1, nan, 3], [1, nan, 3], [1, nan, 3]],
        ["ab01", "AB01", "ab02"],
        lines=[1, 4, 7],
    )
    table = drop_duplicate_cores(table, log)

    assert table.core_ids == ["ab01", "ab02"]
    assert log.lines(DUPLICATE_EXACT) == [4]


def test_same_label_with_different_values_is_flagged():
    log = ErrorLog()
    table = make_table([[1, 2], [3, 4]], ["ab01", "ab01"], lines=[1, 4])
    table = flag_same_label_cores(table, log)

    assert table.n_cores == 2
    assert log.lines(DUPLICATE_LABEL) == [4]


def test_round_half_away_from_zero():
    table = round_values(make_table([[0.5, 1.5, 2.4, -0.5, nan]], ["ab01"]))
    np.testing.assert_array_equal(table.values[0].to_numpy(), [1, 2, 2, -1, nan])


def test_to_frame_labels_columns():
    frame = make_table([[1, 2], [3, 4]], ["ab01", "ab02"]).to_frame()

    assert list(frame.columns) == ["ab01", "ab02"]
    assert frame.index.name == "year"
