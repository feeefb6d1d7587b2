"""Pixel-buffer enhancement algorithms."""

from .buffers import PixelBuffer, to_grayscale
from .pipeline import EnhanceMode, EnhancementPipeline, EnhancementResult

__all__ = ["EnhanceMode", "EnhancementPipeline", "EnhancementResult", "PixelBuffer", "to_grayscale"]
