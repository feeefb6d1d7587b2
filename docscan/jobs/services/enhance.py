"""Enhancement job: mode pipeline plus intensity blend."""
from __future__ import annotations

from typing import Dict

import logging

from docscan.config import EngineConfig
from docscan.imaging import EnhancementPipeline, PixelBuffer
from docscan.jobs.protocol import parse_enhance_payload

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object], config: EngineConfig | None = None) -> Dict[str, object]:
    request = parse_enhance_payload(payload)
    pixels = PixelBuffer.from_bytes(request.pixels, request.width, request.height)

    result = EnhancementPipeline(config).run(pixels, request.mode, request.intensity)

    LOGGER.debug(
        "enhance mode=%s steps=%s elapsed=%.2fs warnings=%s",
        request.mode,
        result.steps_applied,
        result.elapsed_seconds,
        result.warnings,
    )
    return {
        "pixels": result.pixels.tobytes(),
        "width": result.pixels.width,
        "height": result.pixels.height,
        "steps": result.steps_applied,
        "elapsed": result.elapsed_seconds,
    }
