"""
Point-set normalisation shared by the transform solvers.

Point sets are accepted either as a sequence of ``(x, y)`` pairs or in the
flat layout ``[x1, y1, x2, y2, ...]`` and returned as an N x 2 float array.
"""

import numpy as np


def as_points(points, count: int = None) -> np.ndarray:
    """Convert *points* to an N x 2 float64 array.

    Parameters
    ----------
    points : array_like
        N x 2 pairs or a flat sequence of 2N coordinates.
    count : int, optional
        Exact number of points required.

    Raises
    ------
    ValueError
        If the coordinates cannot be read as 2-D points, or the number of
        points differs from *count*.
    """
    arr = np.asarray(points, dtype=float)

    if arr.ndim == 1:
        if arr.size % 2:
            raise ValueError(
                f"Flat point list needs an even number of coordinates, got {arr.size}")
        arr = arr.reshape(-1, 2)
    elif arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Points must have shape (N, 2), got {arr.shape}")

    if count is not None and arr.shape[0] != count:
        raise ValueError(f"Expected {count} points, got {arr.shape[0]}")

    return arr
