"""Integral images (summed-area tables) for O(1) window statistics."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(slots=True)
class IntegralImage:
    """Prefix sums of a luma buffer and of its squares.

    ``sum[y, x]`` is the total of every luma value in the closed rectangle
    ``(0, 0)-(x, y)``. Both tables are float64 so that large scans cannot
    overflow the accumulated squares.
    """

    sum: np.ndarray
    sq_sum: np.ndarray

    @classmethod
    def from_luma(cls, luma: np.ndarray) -> "IntegralImage":
        values = np.asarray(luma, dtype=np.float64)
        total = values.cumsum(axis=0).cumsum(axis=1)
        squares = (values * values).cumsum(axis=0).cumsum(axis=1)
        return cls(sum=total, sq_sum=squares)

    @property
    def width(self) -> int:
        return int(self.sum.shape[1])

    @property
    def height(self) -> int:
        return int(self.sum.shape[0])

    def query(self, x1: int, y1: int, x2: int, y2: int, squared: bool = False) -> float:
        """Sum over the closed rectangle ``(x1, y1)-(x2, y2)``."""
        if x2 >= self.width or y2 >= self.height or x1 > x2 or y1 > y2:
            raise IndexError(f"Invalid rectangle ({x1}, {y1})-({x2}, {y2}) for {self.width}x{self.height}")
        table = self.sq_sum if squared else self.sum
        d = table[y2, x2]
        a = table[y1 - 1, x1 - 1] if x1 > 0 and y1 > 0 else 0.0
        b = table[y1 - 1, x2] if y1 > 0 else 0.0
        c = table[y2, x1 - 1] if x1 > 0 else 0.0
        return float(d - b - c + a)

    def query_many(
        self,
        x1: np.ndarray,
        y1: np.ndarray,
        x2: np.ndarray,
        y2: np.ndarray,
        squared: bool = False,
    ) -> np.ndarray:
        """Vectorised :meth:`query` over broadcastable index arrays."""
        table = self.sq_sum if squared else self.sum
        # One leading row/column of zeros stands in for the negative indices.
        padded = np.zeros((self.height + 1, self.width + 1), dtype=np.float64)
        padded[1:, 1:] = table
        return padded[y2 + 1, x2 + 1] - padded[y1, x2 + 1] - padded[y2 + 1, x1] + padded[y1, x1]
