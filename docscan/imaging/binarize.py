"""Sauvola adaptive binarization backed by integral images."""
from __future__ import annotations

import logging

import numpy as np

from .integral import IntegralImage

LOGGER = logging.getLogger(__name__)

DEFAULT_R = 128.0


def sauvola_window(width: int, height: int) -> int:
    return max(15, (min(width, height) // 8) | 1)


def sauvola_binarize(luma: np.ndarray, k: float = 0.2, r: float = DEFAULT_R) -> np.ndarray:
    """Return a float buffer of 0/255 values.

    T(x, y) = mean * (1 + k * (stddev / R - 1)) over a window clamped to the
    image, so border pixels use fewer samples rather than padded ones.
    """
    height, width = luma.shape
    window = sauvola_window(width, height)
    half = window // 2
    LOGGER.debug("Sauvola window=%d k=%.3f R=%.1f", window, k, r)

    integral = IntegralImage.from_luma(luma)
    xs = np.arange(width)
    ys = np.arange(height)
    x1 = np.maximum(0, xs - half)[None, :]
    x2 = np.minimum(width - 1, xs + half)[None, :]
    y1 = np.maximum(0, ys - half)[:, None]
    y2 = np.minimum(height - 1, ys + half)[:, None]
    count = (x2 - x1 + 1) * (y2 - y1 + 1)

    total = integral.query_many(x1, y1, x2, y2)
    squares = integral.query_many(x1, y1, x2, y2, squared=True)
    mean = total / count
    variance = squares / count - mean * mean
    stddev = np.sqrt(np.maximum(variance, 0.0))

    threshold = mean * (1.0 + k * (stddev / r - 1.0))
    return np.where(luma > threshold, 255.0, 0.0)
