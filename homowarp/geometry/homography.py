"""
Homography estimation from point correspondences.

A planar homography (projective transformation) maps four source points onto
four destination points.  The 3x3 matrix is estimated via Direct Linear
Transform (DLT) and solved with SVD.
"""

import numpy as np

from homowarp.geometry.matrix import InvalidMatrixSize
from homowarp.geometry.points import as_points


def compute_homography(source, destination) -> np.ndarray:
    """Estimate a 3x3 homography from four point correspondences.

    Each correspondence contributes two linear equations in the nine
    homography entries.  With four points the system is exactly determined
    (up to scale) and solved via SVD.

    Parameters
    ----------
    source, destination : array_like
        Four (x, y) points each, or eight flat coordinates.

    Returns
    -------
    np.ndarray
        9-element row-major homography normalised so that the last entry
        is 1.
    """
    src = as_points(source, count=4)
    dst = as_points(destination, count=4)

    A = []
    for (x1, y1), (x2, y2) in zip(src, dst):
        A.append([-x1, -y1, -1,  0,   0,  0, x2 * x1, x2 * y1, x2])
        A.append([ 0,   0,  0, -x1, -y1, -1, y2 * x1, y2 * y1, y2])

    A = np.array(A, dtype=float)
    _, _, Vt = np.linalg.svd(A)
    H = Vt[-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        return H / H[8]


def apply_homography(H, points: np.ndarray) -> np.ndarray:
    """Apply a homography to a 2 x N array of (x, y) coordinates.

    Returns
    -------
    np.ndarray
        2 x N array of transformed (x, y) coordinates.
    """
    H = np.asarray(H, dtype=float).ravel()
    if H.size != 9:
        raise InvalidMatrixSize("Homography must have 9 elements")
    points = np.asarray(points, dtype=float)

    homog = np.vstack([points, np.ones((1, points.shape[1]))])
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        transformed = H.reshape(3, 3) @ homog
        return transformed[:2] / transformed[2:3]
