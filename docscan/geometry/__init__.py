"""Perspective correction: homography solving and resampling."""

from .homography import Homography, compute_homography, output_to_source, solve_linear_system
from .quad import is_valid_quad, output_size_for_quad, parse_corners
from .sampler import sample_perspective, warp_perspective

__all__ = [
    "Homography",
    "compute_homography",
    "is_valid_quad",
    "output_size_for_quad",
    "output_to_source",
    "parse_corners",
    "sample_perspective",
    "solve_linear_system",
    "warp_perspective",
]
