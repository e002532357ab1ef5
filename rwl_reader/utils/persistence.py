"""
Persistence helpers for reader outputs.

Writes the year-by-core table and the anomaly log produced for each input file.
"""

import os
from typing import Tuple

import pandas as pd


def save_frame(
    df: pd.DataFrame, out_path: str, index: bool = False, float_format: str = None
) -> Tuple[str, int, int]:
    """
    Save DataFrame to disk as CSV.

    Args:
        df: DataFrame to persist (measurement table or anomaly log).
        out_path: Target path (extension adjusted to .csv).
        index: Whether to write the index (the year axis for tables).
        float_format: Optional format string for floats, e.g. '%.3f'.

    Returns:
        Tuple of (final_output_path, n_rows, n_cols).

    Example:
        >>> path, rows, cols = save_frame(result.to_frame(), "output/site_matrix.csv", index=True)
        >>> print(f"Saved {rows}x{cols} table to {path}")
    """
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    if not out_path.endswith(".csv"):
        out_path = os.path.splitext(out_path)[0] + ".csv"
    df.to_csv(out_path, index=index, float_format=float_format)

    return out_path, int(df.shape[0]), int(df.shape[1])
