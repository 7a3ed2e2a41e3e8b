"""
RGBA8 pixel buffer exchanged between image I/O and the warpers.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Flat RGBA8 raster, row-major with the origin at the top-left.

    Attributes
    ----------
    width, height : int
        Raster dimensions in pixels.
    data : np.ndarray
        uint8 array of length ``4 * width * height``.
    color_space : str, optional
        Opaque tag carried unchanged through every warp.
    """

    width: int
    height: int
    data: np.ndarray
    color_space: Optional[str] = None

    def __post_init__(self):
        data = np.array(self.data, dtype=np.uint8, copy=True).ravel()
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Invalid buffer dimensions: {self.width} x {self.height}")
        if data.size != 4 * self.width * self.height:
            raise ValueError(
                f"Pixel data has {data.size} bytes, expected "
                f"{4 * self.width * self.height} for a "
                f"{self.width} x {self.height} RGBA image")
        object.__setattr__(self, "data", data)

    @classmethod
    def zeros(cls, width: int, height: int,
              color_space: Optional[str] = None) -> "PixelBuffer":
        """Fully transparent black buffer."""
        return cls(width, height, np.zeros(4 * width * height, dtype=np.uint8),
                   color_space)

    @classmethod
    def from_array(cls, arr: np.ndarray,
                   color_space: Optional[str] = None) -> "PixelBuffer":
        """Build a buffer from an H x W x 4 uint8 array."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"Expected an H x W x 4 array, got {arr.shape}")
        return cls(arr.shape[1], arr.shape[0], arr.reshape(-1), color_space)

    def as_array(self) -> np.ndarray:
        """H x W x 4 view of the pixel data."""
        return self.data.reshape(self.height, self.width, 4)

    def pixel(self, x: int, y: int) -> tuple:
        offset = 4 * (y * self.width + x)
        return tuple(int(v) for v in self.data[offset:offset + 4])
