"""Unsharp masking."""
from __future__ import annotations

import numpy as np

from .filters import gaussian_blur


def unsharp_mask(luma: np.ndarray, amount: float = 1.0, radius: int = 3) -> np.ndarray:
    blurred = gaussian_blur(luma, radius)
    return np.clip(luma + (luma - blurred) * amount, 0.0, 255.0)
