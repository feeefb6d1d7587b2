"""Pixel and luma buffers with bounds-checked access."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from docscan.errors import PayloadError

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


@dataclass(slots=True)
class PixelBuffer:
    """Interleaved RGBA bytes viewed as a ``(height, width, 4)`` uint8 array."""

    data: np.ndarray
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise PayloadError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.data.dtype != np.uint8 or self.data.shape != (self.height, self.width, 4):
            raise PayloadError(
                f"Pixel array of shape {self.data.shape} does not match {self.width}x{self.height} RGBA"
            )

    @classmethod
    def from_bytes(cls, pixels: BytesLike, width: int, height: int) -> "PixelBuffer":
        if width <= 0 or height <= 0:
            raise PayloadError(f"Image dimensions must be positive, got {width}x{height}")
        flat = np.frombuffer(pixels, dtype=np.uint8) if not isinstance(pixels, np.ndarray) else pixels
        flat = flat.reshape(-1).astype(np.uint8, copy=False)
        expected = 4 * width * height
        if flat.size != expected:
            raise PayloadError(f"Expected {expected} bytes for {width}x{height} RGBA, got {flat.size}")
        # The caller's buffer is read-only to the engine.
        return cls(flat.reshape(height, width, 4).copy(), width, height)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        r, g, b, a = self.data[y, x]
        return int(r), int(g), int(b), int(a)

    def tobytes(self) -> bytes:
        return self.data.tobytes()


def to_grayscale(pixels: PixelBuffer) -> np.ndarray:
    """RGBA -> luma using the fixed Rec. 601 weights; alpha is ignored."""
    rgb = pixels.data[..., :3].astype(np.float64)
    r, g, b = LUMA_WEIGHTS
    return r * rgb[..., 0] + g * rgb[..., 1] + b * rgb[..., 2]


def clamp_to_byte(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)
