"""Planar homography from four point correspondences."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import logging

import numpy as np

from docscan.errors import SingularHomographyError

LOGGER = logging.getLogger(__name__)

PIVOT_EPSILON = 1e-10

Point = Tuple[float, float]


@dataclass(slots=True, frozen=True)
class Homography:
    """Coefficients H0..H7 of ``(x, y) -> ((H0x+H1y+H2)/d, (H3x+H4y+H5)/d)``
    with ``d = H6x + H7y + 1``."""

    coefficients: Tuple[float, ...]

    def denominator(self, x, y):
        h = self.coefficients
        return h[6] * x + h[7] * y + 1.0

    def apply(self, x, y):
        h = self.coefficients
        d = self.denominator(x, y)
        return (h[0] * x + h[1] * y + h[2]) / d, (h[3] * x + h[4] * y + h[5]) / d

    def as_matrix(self) -> np.ndarray:
        return np.array(list(self.coefficients) + [1.0], dtype=np.float64).reshape(3, 3)


def solve_linear_system(matrix: Sequence[Sequence[float]], rhs: Sequence[float]) -> List[float]:
    """Gaussian elimination with partial pivoting.

    Raises SingularHomographyError when the largest available pivot in a
    column falls below ``PIVOT_EPSILON``.
    """
    n = len(rhs)
    aug = np.hstack([np.array(matrix, dtype=np.float64), np.array(rhs, dtype=np.float64).reshape(n, 1)])
    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]
        pivot = aug[col, col]
        if abs(pivot) < PIVOT_EPSILON:
            raise SingularHomographyError(
                "Transform failed: corner points are degenerate (collinear or coincident)"
            )
        for row in range(col + 1, n):
            factor = aug[row, col] / pivot
            aug[row, col:] -= factor * aug[col, col:]

    solution = [0.0] * n
    for row in range(n - 1, -1, -1):
        acc = aug[row, n]
        for col in range(row + 1, n):
            acc -= aug[row, col] * solution[col]
        solution[row] = float(acc / aug[row, row])
    return solution


def compute_homography(src: Sequence[Point], dst: Sequence[Point]) -> Homography:
    """Homography taking each ``src[i]`` onto ``dst[i]``."""
    if len(src) != 4 or len(dst) != 4:
        raise ValueError("A homography needs exactly four point pairs")
    rows: List[List[float]] = []
    rhs: List[float] = []
    for (sx, sy), (dx, dy) in zip(src, dst):
        rows.append([sx, sy, 1.0, 0.0, 0.0, 0.0, -dx * sx, -dx * sy])
        rows.append([0.0, 0.0, 0.0, sx, sy, 1.0, -dy * sx, -dy * sy])
        rhs.extend([dx, dy])
    coefficients = solve_linear_system(rows, rhs)
    LOGGER.debug("Homography coefficients: %s", [round(c, 6) for c in coefficients])
    return Homography(tuple(coefficients))


def rectangle_corners(width: float, height: float) -> List[Point]:
    return [(0.0, 0.0), (float(width), 0.0), (float(width), float(height)), (0.0, float(height))]


def output_to_source(corners: Sequence[Point], output_width: int, output_height: int) -> Homography:
    """Inverse map used for resampling: output rectangle -> source quadrilateral."""
    return compute_homography(rectangle_corners(output_width, output_height), corners)
