"""
Determinant and inverse of 3x3 matrices.

Matrices are flat, row-major sequences.  Besides the full 9-element form, a
6-element form is accepted whose implicit third row is ``[1, 1, 1]``; it is
used to pack three 2-D points column-wise in homogeneous coordinates.
"""

import numpy as np


class InvalidMatrixSize(ValueError):
    """Raised when a matrix does not have the number of entries required."""


def _as_flat(matrix) -> np.ndarray:
    return np.asarray(matrix, dtype=float).ravel()


def determinant(matrix) -> float:
    """Determinant of a 6- or 9-element row-major matrix.

    Cofactor expansion along the first row::

        | a b c |
        | d e f |  =>  det = a(ei - fh) - b(di - fg) + c(dh - eg)
        | g h i |

    For the 6-element form ``g = h = i = 1``.

    Raises
    ------
    InvalidMatrixSize
        If the matrix has neither 6 nor 9 entries.
    """
    m = _as_flat(matrix)

    if m.size == 6:
        return float(
            m[0] * (m[4] - m[5]) -
            m[1] * (m[3] - m[5]) +
            m[2] * (m[3] - m[4])
        )

    if m.size == 9:
        return float(
            m[0] * (m[4] * m[8] - m[5] * m[7]) -
            m[1] * (m[3] * m[8] - m[5] * m[6]) +
            m[2] * (m[3] * m[7] - m[4] * m[6])
        )

    raise InvalidMatrixSize(
        f"Cannot calculate determinant. Invalid matrix size: {m.size}")


def inverse(matrix) -> np.ndarray:
    """Inverse of a 6- or 9-element row-major matrix.

    Computed as adjugate / determinant::

        | a b c |^-1              | ei - fh  ch - bi  bf - ce |
        | d e f |    = 1 / det *  | fg - di  ai - cg  cd - af |
        | g h i |                 | dh - eg  bg - ah  ae - bd |

    A singular matrix is not rejected: the division yields ``inf`` / ``nan``
    entries.

    Parameters
    ----------
    matrix : sequence of float
        6 or 9 entries.  A 6-element matrix is completed with ``[1, 1, 1]``.

    Returns
    -------
    np.ndarray
        9-element float64 array, row-major, regardless of the input form.
    """
    m = _as_flat(matrix)
    det = determinant(m)
    adj = np.empty(9, dtype=float)

    if m.size == 6:
        # g = h = i = 1
        adj[0] = m[4] - m[5]
        adj[1] = m[2] - m[1]
        adj[2] = m[1] * m[5] - m[2] * m[4]
        adj[3] = m[5] - m[3]
        adj[4] = m[0] - m[2]
        adj[5] = m[2] * m[3] - m[0] * m[5]
        adj[6] = m[3] - m[4]
        adj[7] = m[1] - m[0]
        adj[8] = m[0] * m[4] - m[1] * m[3]
    else:
        adj[0] = m[4] * m[8] - m[5] * m[7]
        adj[1] = m[2] * m[7] - m[1] * m[8]
        adj[2] = m[1] * m[5] - m[2] * m[4]
        adj[3] = m[5] * m[6] - m[3] * m[8]
        adj[4] = m[0] * m[8] - m[2] * m[6]
        adj[5] = m[2] * m[3] - m[0] * m[5]
        adj[6] = m[3] * m[7] - m[4] * m[6]
        adj[7] = m[1] * m[6] - m[0] * m[7]
        adj[8] = m[0] * m[4] - m[1] * m[3]

    with np.errstate(divide="ignore", invalid="ignore"):
        return adj / det


def complete(matrix) -> np.ndarray:
    """Return the 9-element form of a 6- or 9-element matrix."""
    m = _as_flat(matrix)
    if m.size == 6:
        return np.concatenate([m, np.ones(3)])
    if m.size == 9:
        return m.copy()
    raise InvalidMatrixSize(f"Invalid matrix size: {m.size}")
