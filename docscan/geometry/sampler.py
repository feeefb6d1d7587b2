"""Inverse-mapped bilinear resampling of RGBA buffers."""
from __future__ import annotations

from typing import Sequence

import logging

import numpy as np

from docscan.errors import SingularHomographyError
from docscan.imaging.buffers import PixelBuffer, clamp_to_byte

from .homography import PIVOT_EPSILON, Homography, Point, output_to_source

LOGGER = logging.getLogger(__name__)

# Coordinates this close to the source border are treated as on it.
EDGE_TOLERANCE = 1e-6
FILL_VALUE = 255


def sample_perspective(source: PixelBuffer, homography: Homography, output_width: int, output_height: int) -> PixelBuffer:
    """Fill an ``output_width x output_height`` buffer through ``homography``.

    ``homography`` maps output coordinates to source coordinates. Output
    pixels whose source position falls outside the image become opaque white.
    """
    if output_width <= 0 or output_height <= 0:
        raise ValueError(f"Output size must be positive, got {output_width}x{output_height}")
    xs = np.arange(output_width, dtype=np.float64)[None, :]
    ys = np.arange(output_height, dtype=np.float64)[:, None]

    denom = homography.denominator(xs, ys)
    if np.any(np.abs(denom) < PIVOT_EPSILON):
        raise SingularHomographyError("Transform failed: projection is undefined inside the output area")
    src_x, src_y = homography.apply(xs, ys)
    src_x = np.broadcast_to(src_x, (output_height, output_width))
    src_y = np.broadcast_to(src_y, (output_height, output_width))

    max_x = source.width - 1
    max_y = source.height - 1
    inside = (
        (src_x >= -EDGE_TOLERANCE)
        & (src_x <= max_x + EDGE_TOLERANCE)
        & (src_y >= -EDGE_TOLERANCE)
        & (src_y <= max_y + EDGE_TOLERANCE)
    )
    # Only in-bounds coordinates reach floor(), so no negative value is truncated.
    sx = np.clip(np.where(inside, src_x, 0.0), 0.0, max_x)
    sy = np.clip(np.where(inside, src_y, 0.0), 0.0, max_y)
    x0 = np.floor(sx).astype(np.intp)
    y0 = np.floor(sy).astype(np.intp)
    x1 = np.minimum(x0 + 1, max_x)
    y1 = np.minimum(y0 + 1, max_y)
    fx = (sx - x0)[..., None]
    fy = (sy - y0)[..., None]

    data = source.data.astype(np.float64)
    value = (
        data[y0, x0] * (1.0 - fx) * (1.0 - fy)
        + data[y0, x1] * fx * (1.0 - fy)
        + data[y1, x0] * (1.0 - fx) * fy
        + data[y1, x1] * fx * fy
    )
    result = clamp_to_byte(value)
    result[~inside] = FILL_VALUE
    LOGGER.debug(
        "Sampled %dx%d from %dx%d (%d pixels outside source)",
        output_width,
        output_height,
        source.width,
        source.height,
        int(np.count_nonzero(~inside)),
    )
    return PixelBuffer(result, output_width, output_height)


def warp_perspective(source: PixelBuffer, corners: Sequence[Point], output_width: int, output_height: int) -> PixelBuffer:
    """Rectify the quadrilateral ``corners`` (TL, TR, BR, BL) into a rectangle."""
    homography = output_to_source(corners, output_width, output_height)
    return sample_perspective(source, homography, output_width, output_height)
