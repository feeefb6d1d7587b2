"""Decode and encode page images with Pillow."""
from __future__ import annotations

from pathlib import Path
from typing import Tuple

import logging

from PIL import Image

from docscan.config import IOConfig
from docscan.errors import ImageTooLargeError

LOGGER = logging.getLogger(__name__)


def load_rgba(path: Path, config: IOConfig | None = None) -> Tuple[bytes, int, int]:
    """Return ``(pixels, width, height)`` with pixels as interleaved RGBA bytes."""
    config = config or IOConfig()
    size = path.stat().st_size
    if size > config.max_file_bytes:
        raise ImageTooLargeError(f"{path.name} exceeds {config.max_file_bytes // (1024 * 1024)}MB limit")
    with Image.open(path) as image:
        width, height = image.size
        if width * height > config.max_pixels:
            raise ImageTooLargeError(
                f"{path.name} is too large ({width}x{height}, max {config.max_pixels // 1_000_000} megapixels)"
            )
        rgba = image.convert("RGBA")
        LOGGER.debug("Loaded %s (%s, %dx%d)", path, image.mode, width, height)
        return rgba.tobytes(), width, height


def save_rgba(path: Path, pixels: bytes, width: int, height: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.frombytes("RGBA", (width, height), pixels).save(path, format="PNG")
    LOGGER.debug("Wrote %s (%dx%d)", path, width, height)
    return path
