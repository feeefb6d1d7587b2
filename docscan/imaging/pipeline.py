"""Mode-driven enhancement pipeline for document photos."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import logging
import time

import numpy as np

from docscan.config import EngineConfig
from docscan.errors import PayloadError

from .background import remove_shadows
from .binarize import sauvola_binarize
from .buffers import PixelBuffer, to_grayscale
from .clahe import clahe
from .compositor import blend_with_original
from .sharpen import unsharp_mask

LOGGER = logging.getLogger(__name__)


class EnhanceMode(str, Enum):
    AUTO = "auto"
    SCAN = "scan"
    LIGHTEN = "lighten"
    SHARPEN = "sharpen"

    @classmethod
    def parse(cls, value: object) -> Optional["EnhanceMode"]:
        try:
            return cls(value)
        except ValueError:
            return None


Stage = Tuple[str, Callable[[np.ndarray, EngineConfig], np.ndarray]]


def _shadows(luma: np.ndarray, config: EngineConfig) -> np.ndarray:
    return remove_shadows(luma, config)


def _sauvola(k: float) -> Callable[[np.ndarray, EngineConfig], np.ndarray]:
    def stage(luma: np.ndarray, config: EngineConfig) -> np.ndarray:
        return sauvola_binarize(luma, k=k, r=config.sauvola_r)

    return stage


def _clahe(clip_limit: float) -> Callable[[np.ndarray, EngineConfig], np.ndarray]:
    def stage(luma: np.ndarray, config: EngineConfig) -> np.ndarray:
        return clahe(luma, config.clahe_tiles, config.clahe_tiles, clip_limit)

    return stage


def _unsharp(luma: np.ndarray, config: EngineConfig) -> np.ndarray:
    return unsharp_mask(luma, amount=1.5, radius=4)


MODE_STAGES: Dict[EnhanceMode, Tuple[Stage, ...]] = {
    EnhanceMode.AUTO: (("remove_shadows", _shadows), ("sauvola", _sauvola(0.18))),
    EnhanceMode.SCAN: (("remove_shadows", _shadows), ("sauvola", _sauvola(0.12))),
    EnhanceMode.LIGHTEN: (("remove_shadows", _shadows), ("clahe", _clahe(2.0))),
    EnhanceMode.SHARPEN: (("clahe", _clahe(2.5)), ("unsharp_mask", _unsharp)),
}


@dataclass(slots=True)
class EnhancementResult:
    pixels: PixelBuffer
    mode: Optional[EnhanceMode]
    steps_applied: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


class EnhancementPipeline:
    """Grayscale, mode stages, then blend with the original by intensity."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def run(self, pixels: PixelBuffer, mode: object, intensity: float) -> EnhancementResult:
        start = time.perf_counter()
        steps_applied: List[str] = ["grayscale"]
        warnings: List[str] = []

        parsed = EnhanceMode.parse(mode)
        if parsed is None:
            if self.config.strict_modes:
                raise PayloadError(f"Unknown enhancement mode: {mode!r}")
            warning = f"Unknown enhancement mode {mode!r}; returning plain grayscale"
            warnings.append(warning)
            LOGGER.warning(warning)

        processed = to_grayscale(pixels)
        for name, stage in MODE_STAGES.get(parsed, ()):
            processed = stage(processed, self.config)
            steps_applied.append(name)

        blended = blend_with_original(pixels, processed, intensity)
        steps_applied.append("blend")
        elapsed = time.perf_counter() - start
        LOGGER.info(
            "Enhanced %dx%d mode=%s intensity=%s in %.2fs (steps=%s)",
            pixels.width,
            pixels.height,
            parsed.value if parsed else mode,
            intensity,
            elapsed,
            ", ".join(steps_applied),
        )
        return EnhancementResult(
            pixels=blended,
            mode=parsed,
            steps_applied=steps_applied,
            warnings=warnings,
            elapsed_seconds=elapsed,
        )
