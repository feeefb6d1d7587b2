"""Contrast-limited adaptive histogram equalization."""
from __future__ import annotations

import math

import numpy as np

BINS = 256


def _to_bins(luma: np.ndarray) -> np.ndarray:
    # Clamp before flooring so negative intermediates never truncate toward zero.
    return np.floor(np.clip(luma, 0.0, BINS - 1)).astype(np.intp)


def tile_luts(bins: np.ndarray, tile_w: int, tile_h: int, tiles_x: int, tiles_y: int, clip_limit: float) -> np.ndarray:
    """Clipped-CDF lookup tables, shape ``(tiles_y, tiles_x, 256)``."""
    height, width = bins.shape
    luts = np.empty((tiles_y, tiles_x, BINS), dtype=np.float64)
    for ty in range(tiles_y):
        y0 = ty * tile_h
        y1 = min(y0 + tile_h, height)
        for tx in range(tiles_x):
            x0 = tx * tile_w
            x1 = min(x0 + tile_w, width)
            area = (x1 - x0) * (y1 - y0)
            hist = np.bincount(bins[y0:y1, x0:x1].ravel(), minlength=BINS).astype(np.float64)

            limit = max(1.0, clip_limit * area / BINS)
            excess = np.sum(np.maximum(hist - limit, 0.0))
            hist = np.minimum(hist, limit) + excess / BINS

            luts[ty, tx] = np.cumsum(hist) / area * 255.0
    return luts


def _neighbours(positions: np.ndarray, tile_size: int, tiles: int):
    f = positions / tile_size - 0.5
    lower = np.maximum(0, np.floor(f)).astype(np.intp)
    upper = np.minimum(tiles - 1, lower + 1)
    alpha = np.clip(f - lower, 0.0, 1.0)
    return lower, upper, alpha


def clahe(luma: np.ndarray, tiles_x: int = 8, tiles_y: int = 8, clip_limit: float = 2.0) -> np.ndarray:
    """Equalize per tile, then blend the four nearest tile mappings per pixel.

    Tile centres anchor the interpolation, so a pixel lying on the boundary
    between two tiles takes half of each mapping.
    """
    height, width = luma.shape
    tile_w = math.ceil(width / tiles_x)
    tile_h = math.ceil(height / tiles_y)
    # Small images: drop trailing tiles that would start past the edge.
    tiles_x = min(tiles_x, math.ceil(width / tile_w))
    tiles_y = min(tiles_y, math.ceil(height / tile_h))

    bins = _to_bins(luma)
    luts = tile_luts(bins, tile_w, tile_h, tiles_x, tiles_y, clip_limit)

    tx0, tx1, ax = _neighbours(np.arange(width, dtype=np.float64), tile_w, tiles_x)
    ty0, ty1, ay = _neighbours(np.arange(height, dtype=np.float64), tile_h, tiles_y)
    tx0, tx1, ax = tx0[None, :], tx1[None, :], ax[None, :]
    ty0, ty1, ay = ty0[:, None], ty1[:, None], ay[:, None]

    tl = luts[ty0, tx0, bins]
    tr = luts[ty0, tx1, bins]
    bl = luts[ty1, tx0, bins]
    br = luts[ty1, tx1, bins]
    top = tl + (tr - tl) * ax
    bottom = bl + (br - bl) * ax
    return top + (bottom - top) * ay
