"""
Piecewise-affine warping over a Delaunay triangulation of control points.

The source control points are triangulated; each triangle gets its own
affine matrix solved from the corresponding destination triangle, and every
source pixel is forward-mapped through the matrix of the triangle that
contains it.  Pixels outside the convex hull of the source points are
dropped.
"""

import numpy as np
from scipy.spatial import Delaunay, QhullError

from homowarp.geometry.affine import affine_matrix_from_triangles, apply_affine
from homowarp.geometry.points import as_points
from homowarp.warping.image_warp import forward_scatter, source_grid
from homowarp.warping.pixel_buffer import PixelBuffer


def piecewise_affine_warp(image: PixelBuffer, source_points,
                          destination_points) -> PixelBuffer:
    """Forward-map *image* through one affine transform per triangle.

    Parameters
    ----------
    image : PixelBuffer
        Source raster.
    source_points, destination_points : array_like
        N >= 3 corresponding (x, y) points.

    Raises
    ------
    ValueError
        If the point sets differ in size, have fewer than 3 points, or the
        source points cannot be triangulated (all collinear).
    """
    src = as_points(source_points)
    dst = as_points(destination_points)
    if src.shape != dst.shape:
        raise ValueError(
            f"Point sets differ in size: {src.shape[0]} vs {dst.shape[0]}")
    if src.shape[0] < 3:
        raise ValueError(f"Need at least 3 points, got {src.shape[0]}")

    try:
        tri = Delaunay(src)
    except QhullError as exc:
        raise ValueError(f"Cannot triangulate source points: {exc}") from exc

    i, j = source_grid(image.width, image.height)
    pixels = np.column_stack([i, j]).astype(float)
    simplex = tri.find_simplex(pixels)

    mapped = np.full((2, pixels.shape[0]), np.nan)
    for k, corners in enumerate(tri.simplices):
        sel = simplex == k
        if not np.any(sel):
            continue
        M = affine_matrix_from_triangles(src[corners], dst[corners])
        mapped[:, sel] = apply_affine(M, pixels[sel].T)

    return forward_scatter(image, i, j, mapped)
