from __future__ import annotations

import numpy as np

from docscan.imaging import PixelBuffer
from docscan.imaging.compositor import blend_with_original


def _processed(random_pixels: PixelBuffer, rng) -> np.ndarray:
    return rng.uniform(0, 255, size=random_pixels.shape)


def test_zero_intensity_returns_original_bytes(random_pixels, rng):
    result = blend_with_original(random_pixels, _processed(random_pixels, rng), 0)
    assert result.tobytes() == random_pixels.tobytes()


def test_full_intensity_returns_processed_channels(random_pixels, rng):
    processed = _processed(random_pixels, rng)
    result = blend_with_original(random_pixels, processed, 100)
    expected = np.rint(processed).astype(np.uint8)
    for channel in range(3):
        assert np.array_equal(result.data[..., channel], expected)
    assert np.array_equal(result.data[..., 3], random_pixels.data[..., 3])


def test_intermediate_intensities_move_monotonically(random_pixels, rng):
    processed = _processed(random_pixels, rng)
    original = random_pixels.data[..., :3].astype(np.int32)
    previous = np.zeros_like(original)
    for intensity in (10, 25, 50, 75, 90, 100):
        blended = blend_with_original(random_pixels, processed, intensity).data[..., :3].astype(np.int32)
        distance = np.abs(blended - original)
        assert np.all(distance >= previous)
        previous = distance


def test_alpha_always_passes_through(random_pixels, rng):
    result = blend_with_original(random_pixels, _processed(random_pixels, rng), 42)
    assert np.array_equal(result.data[..., 3], random_pixels.data[..., 3])


def test_intensity_is_clamped(random_pixels, rng):
    processed = _processed(random_pixels, rng)
    over = blend_with_original(random_pixels, processed, 250)
    full = blend_with_original(random_pixels, processed, 100)
    under = blend_with_original(random_pixels, processed, -5)
    assert over.tobytes() == full.tobytes()
    assert under.tobytes() == random_pixels.tobytes()
