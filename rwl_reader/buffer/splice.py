"""
Column splicing for 2-D character buffers.

Inserting filler along one axis produces a new buffer; views of the old one
are never shifted in place.
"""

from typing import Sequence, Union

import numpy as np


def insert_columns(
    buffer: np.ndarray,
    positions: Union[int, Sequence[int]],
    filler: Union[str, np.ndarray] = " ",
    axis: int = 1,
) -> np.ndarray:
    """
    Splice filler into a 2-D buffer in front of the given positions.

    One filler slice is inserted per position, so repeating a position inserts
    several slices at the same place. Positions refer to the original buffer.

    Args:
        buffer: 2-D array to extend.
        positions: 0-based index (or indices) before which filler is inserted;
            a position equal to the axis length appends at the end.
        filler: Scalar fill value, or an array broadcastable to the inserted
            slices.
        axis: Axis to insert along (1 inserts columns).

    Returns:
        New array with the filler spliced in.

    Example:
        >>> buf = np.array([list("abcd")])
        >>> "".join(insert_columns(buf, [1, 3], "_")[0])
        'a_bc_d'
    """
    positions = np.atleast_1d(np.asarray(positions, dtype=int))
    return np.insert(buffer, positions, filler, axis=axis)
