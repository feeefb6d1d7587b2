"""Perspective transform job: solve the homography, then resample."""
from __future__ import annotations

from typing import Dict

import logging
import time

from docscan.config import EngineConfig
from docscan.geometry import warp_perspective
from docscan.imaging import PixelBuffer
from docscan.jobs.protocol import parse_transform_payload

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object], config: EngineConfig | None = None) -> Dict[str, object]:
    request = parse_transform_payload(payload)
    source = PixelBuffer.from_bytes(request.pixels, request.source_width, request.source_height)

    start = time.perf_counter()
    result = warp_perspective(source, request.corners, request.output_width, request.output_height)
    elapsed = time.perf_counter() - start

    LOGGER.info(
        "Warped %dx%d -> %dx%d in %.2fs corners=%s",
        source.width,
        source.height,
        result.width,
        result.height,
        elapsed,
        request.corners,
    )
    return {
        "pixels": result.tobytes(),
        "width": result.width,
        "height": result.height,
        "steps": ["homography", "sample"],
        "elapsed": elapsed,
    }
