import numpy as np
import pytest

from homowarp.warping.pixel_buffer import PixelBuffer


@pytest.fixture
def make_buffer():
    """Factory for opaque buffers filled with reproducible random colours."""
    def factory(width, height, color_space="srgb", seed=0):
        rng = np.random.default_rng(seed)
        arr = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
        arr[:, :, 3] = 255
        return PixelBuffer.from_array(arr, color_space)
    return factory
