"""Linear-time building blocks: box blur, sliding max, resolution changes."""
from __future__ import annotations

from collections import deque
from typing import Sequence

import logging

import numpy as np

LOGGER = logging.getLogger(__name__)

GAUSSIAN_PASSES = 3


def _box_blur_axis(src: np.ndarray, radius: int, axis: int) -> np.ndarray:
    diameter = 2 * radius + 1
    pad = [(0, 0), (0, 0)]
    pad[axis] = (radius, radius)
    # Edge-replicate: out-of-range samples take the nearest border value.
    padded = np.pad(src, pad, mode="edge")
    running = np.cumsum(padded, axis=axis, dtype=np.float64)
    zeros_shape = list(running.shape)
    zeros_shape[axis] = 1
    running = np.concatenate([np.zeros(zeros_shape, dtype=np.float64), running], axis=axis)
    length = src.shape[axis]
    upper = np.take(running, np.arange(diameter, diameter + length), axis=axis)
    lower = np.take(running, np.arange(0, length), axis=axis)
    return (upper - lower) / diameter


def box_blur_h(src: np.ndarray, radius: int) -> np.ndarray:
    """Moving average over ``2r+1`` samples along each row."""
    if radius <= 0:
        return np.array(src, dtype=np.float64)
    return _box_blur_axis(np.asarray(src, dtype=np.float64), radius, axis=1)


def box_blur_v(src: np.ndarray, radius: int) -> np.ndarray:
    """Moving average over ``2r+1`` samples along each column."""
    if radius <= 0:
        return np.array(src, dtype=np.float64)
    return _box_blur_axis(np.asarray(src, dtype=np.float64), radius, axis=0)


def gaussian_blur(src: np.ndarray, radius: int, passes: int = GAUSSIAN_PASSES) -> np.ndarray:
    """Approximate a Gaussian with repeated separable box blurs.

    Cost is O(width * height * passes) whatever the radius. The input is
    never modified; a new float64 buffer is returned.
    """
    result = np.array(src, dtype=np.float64)
    LOGGER.debug("Gaussian blur radius=%d passes=%d", radius, passes)
    for _ in range(passes):
        result = box_blur_v(box_blur_h(result, radius), radius)
    return result


def sliding_max_1d(values: Sequence[float], radius: int) -> np.ndarray:
    """Maximum over ``[i - radius, i + radius]`` (clamped) for every ``i``.

    A deque holds indices whose values are strictly decreasing from front to
    back, so the front is always the current window maximum and every index
    is pushed and popped at most once.
    """
    samples = list(values)
    n = len(samples)
    out = np.empty(n, dtype=np.float64)
    window: deque = deque()
    for j in range(n + radius):
        if j < n:
            incoming = samples[j]
            while window and samples[window[-1]] <= incoming:
                window.pop()
            window.append(j)
        i = j - radius
        if i < 0:
            continue
        while window[0] < i - radius:
            window.popleft()
        out[i] = samples[window[0]]
    return out


def _block_max_rows(values: np.ndarray, radius: int) -> np.ndarray:
    """Clamped sliding max along every row at once (van Herk / Gil-Werman).

    Rows are cut into blocks of ``2r+1``; each window spans at most two
    blocks, so its maximum is the suffix max of the first joined with the
    prefix max of the second.
    """
    rows, n = values.shape
    size = 2 * radius + 1
    length = -(-(n + 2 * radius) // size) * size
    # -inf padding never wins, which clamps windows to the row.
    padded = np.full((rows, length), -np.inf)
    padded[:, radius : radius + n] = values
    blocks = padded.reshape(rows, -1, size)
    prefix = np.maximum.accumulate(blocks, axis=2).reshape(rows, length)
    suffix = np.maximum.accumulate(blocks[:, :, ::-1], axis=2)[:, :, ::-1].reshape(rows, length)
    return np.maximum(suffix[:, :n], prefix[:, size - 1 : size - 1 + n])


def _deque_max_rows(values: np.ndarray, radius: int) -> np.ndarray:
    return np.stack([sliding_max_1d(row, radius) for row in values.tolist()])


MAX_FILTER_METHODS = {"blocks": _block_max_rows, "deque": _deque_max_rows}


def max_filter(src: np.ndarray, radius: int, method: str = "blocks") -> np.ndarray:
    """Separable grey-level dilation with a square ``(2r+1)^2`` window.

    Both methods are O(width * height) whatever the radius. ``blocks`` runs
    vectorised over all rows; ``deque`` walks the monotonic queue per row.
    """
    try:
        rows_max = MAX_FILTER_METHODS[method]
    except KeyError:
        raise ValueError(f"Unknown max filter method '{method}'") from None
    values = np.asarray(src, dtype=np.float64)
    if radius <= 0:
        return values.copy()
    LOGGER.debug("Max filter %dx%d radius=%d method=%s", values.shape[1], values.shape[0], radius, method)
    rows = rows_max(values, radius)
    return np.ascontiguousarray(rows_max(rows.T, radius).T)


def downsample_2x(src: np.ndarray) -> np.ndarray:
    """Halve each dimension by averaging 2x2 blocks (odd trailing row/col dropped)."""
    values = np.asarray(src, dtype=np.float64)
    height, width = values.shape
    if height >= 2:
        half = height // 2
        values = (values[0 : 2 * half : 2] + values[1 : 2 * half : 2]) / 2.0
    if width >= 2:
        half = width // 2
        values = (values[:, 0 : 2 * half : 2] + values[:, 1 : 2 * half : 2]) / 2.0
    return values


def _sample_positions(target: int, source: int):
    coords = (np.arange(target, dtype=np.float64) + 0.5) * (source / target) - 0.5
    coords = np.clip(coords, 0.0, source - 1)
    lower = np.floor(coords).astype(np.intp)
    upper = np.minimum(lower + 1, source - 1)
    return lower, upper, coords - lower


def upsample_bilinear(src: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize ``src`` to exactly ``height x width`` with bilinear weights."""
    values = np.asarray(src, dtype=np.float64)
    src_h, src_w = values.shape
    y0, y1, wy = _sample_positions(height, src_h)
    x0, x1, wx = _sample_positions(width, src_w)
    wy = wy[:, None]
    top = values[y0][:, x0] * (1.0 - wx) + values[y0][:, x1] * wx
    bottom = values[y1][:, x0] * (1.0 - wx) + values[y1][:, x1] * wx
    return top * (1.0 - wy) + bottom * wy
