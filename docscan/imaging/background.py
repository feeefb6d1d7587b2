"""Illumination model and shadow removal."""
from __future__ import annotations

from dataclasses import dataclass

import logging

import numpy as np

from docscan.config import EngineConfig

from .filters import downsample_2x, gaussian_blur, max_filter, upsample_bilinear

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BackgroundParams:
    radius: int
    blur_radius: int
    reduced: bool


def background_params(width: int, height: int, config: EngineConfig | None = None) -> BackgroundParams:
    """Pick dilation/blur radii and whether to work at half resolution."""
    config = config or EngineConfig()
    reduced = width * height > config.large_image_pixels
    if reduced:
        short_side = min(max(1, width // 2), max(1, height // 2))
        radius = max(config.min_background_radius, short_side // config.reduced_background_divisor)
    else:
        radius = max(config.min_background_radius, min(width, height) // config.background_divisor)
    return BackgroundParams(radius=radius, blur_radius=max(1, radius // 2), reduced=reduced)


def estimate_background(luma: np.ndarray, config: EngineConfig | None = None) -> np.ndarray:
    """Smooth upper envelope of local maxima (paper shade + lighting).

    Large images are estimated on a 2x box-downsampled copy and brought back
    with bilinear interpolation; the result always has the input's shape.
    """
    height, width = luma.shape
    params = background_params(width, height, config)
    LOGGER.debug(
        "Background estimate %dx%d radius=%d blur=%d reduced=%s",
        width,
        height,
        params.radius,
        params.blur_radius,
        params.reduced,
    )
    method = (config or EngineConfig()).max_filter
    work = downsample_2x(luma) if params.reduced else np.asarray(luma, dtype=np.float64)
    background = gaussian_blur(max_filter(work, params.radius, method), params.blur_radius)
    if params.reduced:
        background = upsample_bilinear(background, width, height)
    return background


def remove_shadows(luma: np.ndarray, config: EngineConfig | None = None) -> np.ndarray:
    background = estimate_background(luma, config)
    return np.clip(luma / np.maximum(background, 1.0) * 255.0, 0.0, 255.0)
