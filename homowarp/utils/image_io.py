"""
Image I/O helpers.

Thin wrappers around PIL and scikit-image that convert image files to and
from RGBA8 pixel buffers and manage output directories.
"""

import os

import numpy as np
from PIL import Image
from skimage.color import rgba2rgb
from skimage.util import img_as_ubyte

from homowarp.warping.pixel_buffer import PixelBuffer

# Formats PIL writes without an alpha channel
_OPAQUE_EXTENSIONS = (".jpg", ".jpeg", ".bmp")


def load_image(path: str, color_space: str = "srgb") -> PixelBuffer:
    """Load an image file as an RGBA8 pixel buffer.

    Parameters
    ----------
    path : str
        Any file PIL can decode.
    color_space : str
        Tag attached to the buffer.

    Returns
    -------
    PixelBuffer
    """
    with Image.open(path) as img:
        arr = np.array(img.convert("RGBA"))
    return PixelBuffer.from_array(arr, color_space)


def to_rgb(image: PixelBuffer) -> np.ndarray:
    """Flatten the alpha channel onto black and return H x W x 3 uint8."""
    if image.width == 0 or image.height == 0:
        return np.zeros((image.height, image.width, 3), dtype=np.uint8)
    return img_as_ubyte(rgba2rgb(image.as_array(), background=(0, 0, 0)))


def save_image(image: PixelBuffer, path: str) -> None:
    """Write *image* to *path*; the format follows the file extension.

    Formats without alpha support get the alpha channel composited onto a
    black background.
    """
    if os.path.splitext(path)[1].lower() in _OPAQUE_EXTENSIONS:
        Image.fromarray(to_rgb(image)).save(path)
    else:
        Image.fromarray(image.as_array()).save(path)


def ensure_output_dirs(names: list, base: str = "results") -> None:
    """Create output subdirectories for each job name.

    Parameters
    ----------
    names : list of str
        Job identifiers (one subdirectory is created per job).
    base : str
        Root output directory.
    """
    for name in names:
        os.makedirs(os.path.join(base, name), exist_ok=True)
