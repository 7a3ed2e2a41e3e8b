"""
Transform variants and the single warp entry point.

Each variant carries the source image and its own strongly-sized point sets:

* ``affine``          - 3 source / 3 destination points
* ``projective``      - 4 source / 4 destination points
* ``piecewiseaffine`` - N >= 3 points per side, equal counts

``auto`` picks the variant from the number of points.
"""

from dataclasses import dataclass, field

import numpy as np

from homowarp.geometry.affine import affine_matrix_from_triangles
from homowarp.geometry.homography import compute_homography
from homowarp.geometry.points import as_points
from homowarp.warping.image_warp import (
    INTERPOLATIONS,
    affine_warp,
    inverse_warp,
    projective_warp,
)
from homowarp.warping.piecewise import piecewise_affine_warp
from homowarp.warping.pixel_buffer import PixelBuffer

TRANSFORMS = ("auto", "affine", "projective", "piecewiseaffine")
MODES = ("forward",) + INTERPOLATIONS


@dataclass(eq=False)
class AffineConfig:
    image: PixelBuffer
    source_points: np.ndarray
    destination_points: np.ndarray
    transform: str = field(default="affine", init=False)

    def __post_init__(self):
        self.source_points = as_points(self.source_points, count=3)
        self.destination_points = as_points(self.destination_points, count=3)


@dataclass(eq=False)
class ProjectiveConfig:
    image: PixelBuffer
    source_points: np.ndarray
    destination_points: np.ndarray
    transform: str = field(default="projective", init=False)

    def __post_init__(self):
        self.source_points = as_points(self.source_points, count=4)
        self.destination_points = as_points(self.destination_points, count=4)


@dataclass(eq=False)
class PiecewiseAffineConfig:
    image: PixelBuffer
    source_points: np.ndarray
    destination_points: np.ndarray
    transform: str = field(default="piecewiseaffine", init=False)

    def __post_init__(self):
        self.source_points = as_points(self.source_points)
        self.destination_points = as_points(
            self.destination_points, count=self.source_points.shape[0])
        if self.source_points.shape[0] < 3:
            raise ValueError(
                f"Need at least 3 points, got {self.source_points.shape[0]}")


_CONFIGS = {
    "affine": AffineConfig,
    "projective": ProjectiveConfig,
    "piecewiseaffine": PiecewiseAffineConfig,
}


def make_config(image: PixelBuffer, source_points, destination_points,
                transform: str = "auto"):
    """Build the config variant named by *transform*.

    With ``"auto"`` three points select the affine variant, four the
    projective one and any other count the piecewise-affine one.
    """
    if transform not in TRANSFORMS:
        raise ValueError(f"Unknown transform: {transform!r}")

    if transform == "auto":
        n = as_points(source_points).shape[0]
        transform = {3: "affine", 4: "projective"}.get(n, "piecewiseaffine")

    return _CONFIGS[transform](image, source_points, destination_points)


def transform_matrix(config, check: bool = False) -> np.ndarray:
    """Solve the 9-element matrix of an affine or projective config."""
    if isinstance(config, AffineConfig):
        return affine_matrix_from_triangles(
            config.source_points, config.destination_points, check=check)
    if isinstance(config, ProjectiveConfig):
        return compute_homography(config.source_points,
                                  config.destination_points)
    raise ValueError(f"No single matrix for transform {config.transform!r}")


def warp(config, mode: str = "forward", check: bool = False,
         matrix=None) -> PixelBuffer:
    """Warp ``config.image`` according to the config variant.

    Parameters
    ----------
    config : AffineConfig, ProjectiveConfig or PiecewiseAffineConfig
    mode : {"forward", "nearest", "bilinear"}
        ``forward`` pushes source pixels into the destination (reference
        behaviour); ``nearest`` and ``bilinear`` pull through the inverse
        matrix.  Piecewise-affine warps support ``forward`` only.
    check : bool
        Reject degenerate affine source triangles instead of propagating
        ``inf`` / ``nan``.
    matrix : array_like, optional
        Matrix already solved with :func:`transform_matrix`; solved here
        when omitted.  Ignored for piecewise-affine configs.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown warp mode: {mode!r}")

    if isinstance(config, PiecewiseAffineConfig):
        if mode != "forward":
            raise ValueError("Piecewise-affine warps only support forward mapping")
        return piecewise_affine_warp(config.image, config.source_points,
                                     config.destination_points)

    if matrix is None:
        matrix = transform_matrix(config, check=check)
    if mode != "forward":
        return inverse_warp(config.image, matrix, interpolation=mode)
    if isinstance(config, AffineConfig):
        return affine_warp(config.image, matrix)
    return projective_warp(config.image, matrix)
