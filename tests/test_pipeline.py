from __future__ import annotations

import numpy as np
import pytest

from docscan.config import EngineConfig
from docscan.errors import PayloadError
from docscan.imaging import EnhanceMode, EnhancementPipeline, PixelBuffer, to_grayscale
from tests.conftest import solid_rgba


def test_gray_square_becomes_white_in_auto_mode():
    pixels = PixelBuffer.from_bytes(solid_rgba(4, 4, (100, 100, 100)), 4, 4)
    result = EnhancementPipeline().run(pixels, "auto", 100)
    assert result.pixels.tobytes() == bytes([255, 255, 255, 255]) * 16
    assert result.steps_applied == ["grayscale", "remove_shadows", "sauvola", "blend"]


@pytest.mark.parametrize("mode", [m.value for m in EnhanceMode])
def test_every_mode_preserves_size_and_alpha(random_pixels, mode):
    result = EnhancementPipeline().run(random_pixels, mode, 100)
    assert result.pixels.shape == random_pixels.shape
    assert np.array_equal(result.pixels.data[..., 3], random_pixels.data[..., 3])
    assert result.mode is EnhanceMode(mode)


def test_binary_modes_produce_black_and_white(random_pixels):
    result = EnhancementPipeline().run(random_pixels, EnhanceMode.SCAN, 100)
    assert set(np.unique(result.pixels.data[..., :3])) <= {0, 255}


def test_zero_intensity_leaves_image_untouched(random_pixels):
    result = EnhancementPipeline().run(random_pixels, "sharpen", 0)
    assert result.pixels.tobytes() == random_pixels.tobytes()


def test_unknown_mode_falls_back_to_grayscale():
    pixels = PixelBuffer.from_bytes(solid_rgba(3, 2, (200, 100, 50), alpha=77), 3, 2)
    result = EnhancementPipeline().run(pixels, "vintage", 100)
    assert result.mode is None
    assert result.warnings
    assert result.steps_applied == ["grayscale", "blend"]
    assert result.pixels.at(1, 1) == (124, 124, 124, 77)


def test_strict_config_rejects_unknown_mode(random_pixels):
    with pytest.raises(PayloadError):
        EnhancementPipeline(EngineConfig(strict_modes=True)).run(random_pixels, "vintage", 100)


def test_grayscale_weights():
    pixels = PixelBuffer.from_bytes(bytes([255, 0, 0, 255, 0, 255, 0, 255, 0, 0, 255, 255]), 3, 1)
    luma = to_grayscale(pixels)
    assert luma[0].tolist() == pytest.approx([0.299 * 255, 0.587 * 255, 0.114 * 255])


def test_pixel_buffer_validates_length():
    with pytest.raises(PayloadError):
        PixelBuffer.from_bytes(b"\x00" * 15, 2, 2)
    with pytest.raises(PayloadError):
        PixelBuffer.from_bytes(b"", 0, 5)


def test_pixel_buffer_accessor_is_bounds_checked():
    pixels = PixelBuffer.from_bytes(solid_rgba(2, 2, (1, 2, 3)), 2, 2)
    assert pixels.at(1, 1) == (1, 2, 3, 255)
    with pytest.raises(IndexError):
        pixels.at(2, 0)
    with pytest.raises(IndexError):
        pixels.at(-1, 0)
