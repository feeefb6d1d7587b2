"""Blend a processed luma result back over the original colour image."""
from __future__ import annotations

import logging

import numpy as np

from .buffers import PixelBuffer, clamp_to_byte

LOGGER = logging.getLogger(__name__)


def clamp_intensity(intensity: float) -> float:
    if intensity < 0 or intensity > 100:
        LOGGER.warning("Intensity %s outside 0..100; clamping", intensity)
    return float(min(100.0, max(0.0, intensity)))


def blend_with_original(original: PixelBuffer, processed: np.ndarray, intensity: float) -> PixelBuffer:
    """``orig + (processed - orig) * t`` per RGB channel, alpha copied.

    ``processed`` is a luma buffer with the original's height and width.
    Intensity 0 returns the original bytes; 100 returns the processed value in
    every colour channel.
    """
    if processed.shape != original.shape:
        raise ValueError(f"Processed buffer {processed.shape} does not match image {original.shape}")
    t = clamp_intensity(intensity) / 100.0
    result = original.data.copy()
    if t == 0.0:
        return PixelBuffer(result, original.width, original.height)

    value = np.rint(processed)[..., None]
    rgb = original.data[..., :3].astype(np.float64)
    blended = rgb + (value - rgb) * t
    result[..., :3] = clamp_to_byte(blended)
    return PixelBuffer(result, original.width, original.height)
