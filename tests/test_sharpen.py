from __future__ import annotations

import numpy as np

from docscan.imaging.sharpen import unsharp_mask


def test_constant_buffer_is_unchanged():
    luma = np.full((12, 12), 90.0)
    assert np.allclose(unsharp_mask(luma, amount=1.5, radius=4), 90.0)


def test_edges_gain_contrast():
    luma = np.full((10, 20), 80.0)
    luma[:, 10:] = 160.0
    result = unsharp_mask(luma, amount=1.5, radius=2)
    assert result[5, 9] < 80.0
    assert result[5, 10] > 160.0
    assert result.min() >= 0.0 and result.max() <= 255.0
