"""
Affine transform estimation from a pair of corresponding triangles.

An affine map ``T`` sends each source point to its destination counterpart.
Stacking the three correspondences as columns in homogeneous coordinates::

    t1 t2 t3     x1 x2 x3     x'1 x'2 x'3
    t4 t5 t6  .  y1 y2 y3  =  y'1 y'2 y'3
    0  0  1      1  1  1      1   1   1

gives ``T = dst . src^-1``.  Correspondence is positional: ``src[k]`` maps to
``dst[k]``.
"""

import numpy as np

from homowarp.geometry.matrix import InvalidMatrixSize, inverse
from homowarp.geometry.points import as_points


class DegenerateTriangleError(ValueError):
    """Raised when a source triangle is collinear and cannot be inverted."""


def _pack(triangle: np.ndarray) -> np.ndarray:
    # Row 0 holds the x coordinates, row 1 the y coordinates
    return np.concatenate([triangle[:, 0], triangle[:, 1]])


def is_degenerate(triangle, tol: float = 1e-12) -> bool:
    """Return True when the three points of *triangle* are collinear.

    The test uses twice the signed area of the triangle, which is also the
    determinant of its packed 6-element matrix.
    """
    p = as_points(triangle, count=3)
    area2 = ((p[1, 0] - p[0, 0]) * (p[2, 1] - p[0, 1]) -
             (p[2, 0] - p[0, 0]) * (p[1, 1] - p[0, 1]))
    return bool(abs(area2) <= tol)


def affine_matrix_from_triangles(source, destination,
                                 check: bool = False) -> np.ndarray:
    """Find the affine matrix that maps *source* onto *destination*.

    Parameters
    ----------
    source, destination : array_like
        Three (x, y) points each, or six flat coordinates.
    check : bool
        When True a collinear source triangle raises
        :class:`DegenerateTriangleError`.  Otherwise the singular inverse
        propagates ``inf`` / ``nan`` into the result.

    Returns
    -------
    np.ndarray
        9-element row-major matrix ``[a, b, c, d, e, f, 0, 0, 1]``.
    """
    src = as_points(source, count=3)
    dst = as_points(destination, count=3)

    if check and is_degenerate(src):
        raise DegenerateTriangleError(
            f"Source triangle is degenerate (collinear points): {src.tolist()}")

    inv_src = inverse(_pack(src)).reshape(3, 3)
    dst_full = np.vstack([_pack(dst).reshape(2, 3), np.ones((1, 3))])

    with np.errstate(invalid="ignore", over="ignore"):
        product = dst_full @ inv_src

    affine = np.zeros(9, dtype=float)
    affine[:6] = product[:2].ravel()
    affine[8] = 1.0
    return affine


def apply_affine_to_point(matrix, x: float, y: float) -> tuple:
    """Map a single point through the top two rows of *matrix*.

    Raises
    ------
    InvalidMatrixSize
        If *matrix* has fewer than 6 entries.
    """
    m = np.asarray(matrix, dtype=float).ravel()
    if m.size < 6:
        raise InvalidMatrixSize("Matrix must have 6 elements")
    x_ = m[0] * x + m[1] * y + m[2]
    y_ = m[3] * x + m[4] * y + m[5]
    return float(x_), float(y_)


def apply_affine(matrix, points: np.ndarray) -> np.ndarray:
    """Map a 2 x N array of (x, y) coordinates through *matrix*.

    Parameters
    ----------
    matrix : array_like
        At least 6 row-major entries; only the top two rows are used.
    points : np.ndarray
        2 x N array, row 0 = x, row 1 = y.

    Returns
    -------
    np.ndarray
        2 x N array of transformed coordinates.
    """
    m = np.asarray(matrix, dtype=float).ravel()
    if m.size < 6:
        raise InvalidMatrixSize("Matrix must have 6 elements")
    points = np.asarray(points, dtype=float)

    with np.errstate(invalid="ignore", over="ignore"):
        return m[:6].reshape(2, 3) @ np.vstack([points, np.ones((1, points.shape[1]))])
