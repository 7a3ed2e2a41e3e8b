"""
Image resampling through affine and projective matrices.

Two strategies are provided:

* Forward mapping (:func:`affine_warp`, :func:`projective_warp`): every
  source pixel is pushed into the destination cell its transformed
  coordinates fall into.  This is the reference behaviour.  Expansive
  transforms leave holes and contractive ones overwrite pixels; when several
  source pixels land in the same cell the last one in traversal order (x
  outer, y inner) wins.
* Backward mapping (:func:`inverse_warp`): every destination pixel pulls its
  colour from the source through the inverse matrix, with nearest or
  bilinear sampling.  No holes, but the output differs from forward mapping.

The destination always has the source dimensions and colour space; content
that falls outside the canvas is discarded.
"""

import numpy as np

from homowarp.geometry.affine import apply_affine
from homowarp.geometry.homography import apply_homography
from homowarp.geometry.matrix import InvalidMatrixSize, inverse
from homowarp.warping.pixel_buffer import PixelBuffer

INTERPOLATIONS = ("nearest", "bilinear")


def source_grid(width: int, height: int):
    """Pixel coordinates of the source image in traversal order."""
    i = np.repeat(np.arange(width), height)
    j = np.tile(np.arange(height), width)
    return i, j


def forward_scatter(image: PixelBuffer, i: np.ndarray, j: np.ndarray,
                    mapped: np.ndarray) -> PixelBuffer:
    """Write source pixels (i, j) into the cells at floor(*mapped*).

    *mapped* is a 2 x N array of destination (x, y) coordinates, one column
    per source pixel, in traversal order.
    """
    w, h = image.width, image.height
    src = image.data.reshape(-1, 4)
    out = np.zeros_like(src)

    x_f = np.floor(mapped[0])
    y_f = np.floor(mapped[1])
    with np.errstate(invalid="ignore"):
        valid = (np.isfinite(x_f) & np.isfinite(y_f) &
                 (x_f >= 0) & (x_f < w) & (y_f >= 0) & (y_f < h))

    dst_idx = y_f[valid].astype(np.int64) * w + x_f[valid].astype(np.int64)
    src_idx = j[valid] * w + i[valid]

    if dst_idx.size:
        # Last writer wins: keep the final occurrence of each destination cell
        _, first_in_reversed = np.unique(dst_idx[::-1], return_index=True)
        last = dst_idx.size - 1 - first_in_reversed
        out[dst_idx[last]] = src[src_idx[last]]

    return PixelBuffer(w, h, out.ravel(), image.color_space)


def affine_warp(image: PixelBuffer, matrix) -> PixelBuffer:
    """Forward-map *image* through an affine matrix.

    Parameters
    ----------
    image : PixelBuffer
        Source raster.
    matrix : array_like
        At least 6 row-major entries; only the top two rows are used.

    Returns
    -------
    PixelBuffer
        New buffer of the same size and colour space.  Cells no source pixel
        maps to are zero (transparent black).

    Raises
    ------
    InvalidMatrixSize
        If *matrix* has fewer than 6 entries.
    """
    i, j = source_grid(image.width, image.height)
    mapped = apply_affine(matrix, np.vstack([i, j]))
    return forward_scatter(image, i, j, mapped)


def projective_warp(image: PixelBuffer, H) -> PixelBuffer:
    """Forward-map *image* through a 9-element homography."""
    i, j = source_grid(image.width, image.height)
    mapped = apply_homography(H, np.vstack([i, j]))
    return forward_scatter(image, i, j, mapped)


def inverse_warp(image: PixelBuffer, matrix,
                 interpolation: str = "nearest") -> PixelBuffer:
    """Warp *image* by backward mapping through ``inverse(matrix)``.

    Every destination pixel computes its source location and samples the
    source image there.  Pixels that map outside the source are left as
    zero.

    Parameters
    ----------
    image : PixelBuffer
        Source raster.
    matrix : array_like
        9-element row-major matrix mapping source to destination coordinates.
    interpolation : {"nearest", "bilinear"}
        Sampling method.
    """
    if interpolation not in INTERPOLATIONS:
        raise ValueError(f"Unknown interpolation: {interpolation!r}")
    m = np.asarray(matrix, dtype=float).ravel()
    if m.size != 9:
        raise InvalidMatrixSize(
            f"Backward mapping needs a 9-element matrix, got {m.size}")

    w, h = image.width, image.height
    img = image.as_array()
    warped = np.zeros((h, w, 4), dtype=np.uint8)

    y_out, x_out = np.mgrid[0:h, 0:w]
    p_in = apply_homography(inverse(m), np.vstack([x_out.ravel(), y_out.ravel()]))
    x_in = p_in[0].reshape(h, w)
    y_in = p_in[1].reshape(h, w)

    if interpolation == "nearest":
        x_n = np.floor(x_in + 0.5)
        y_n = np.floor(y_in + 0.5)
        with np.errstate(invalid="ignore"):
            inside = ((x_n >= 0) & (x_n < w) & (y_n >= 0) & (y_n < h))
        warped[inside] = img[y_n[inside].astype(np.int64),
                             x_n[inside].astype(np.int64)]
    else:
        img = img.astype(float)
        with np.errstate(invalid="ignore"):
            inside = ((x_in >= 0) & (x_in <= w - 1) &
                      (y_in >= 0) & (y_in <= h - 1))
        xs, ys = x_in[inside], y_in[inside]
        x0 = np.floor(xs).astype(np.int64)
        y0 = np.floor(ys).astype(np.int64)
        x1 = np.minimum(x0 + 1, w - 1)
        y1 = np.minimum(y0 + 1, h - 1)
        dx = (xs - x0)[:, np.newaxis]
        dy = (ys - y0)[:, np.newaxis]

        sampled = (
            img[y0, x0] * (1 - dx) * (1 - dy) +
            img[y0, x1] *      dx  * (1 - dy) +
            img[y1, x0] * (1 - dx) *      dy  +
            img[y1, x1] *      dx  *      dy
        )
        warped[inside] = np.clip(np.rint(sampled), 0, 255).astype(np.uint8)

    return PixelBuffer.from_array(warped, image.color_space)
