from __future__ import annotations

import numpy as np

from docscan.imaging.binarize import sauvola_binarize, sauvola_window


def test_window_size_is_odd_and_at_least_fifteen():
    assert sauvola_window(100, 80) == 15
    assert sauvola_window(400, 400) == 51
    assert sauvola_window(800, 1000) == 101
    assert sauvola_window(4, 4) == 15


def test_uniform_image_is_all_white():
    luma = np.full((20, 30), 100.0)
    result = sauvola_binarize(luma, k=0.18, r=128)
    assert result.shape == (20, 30)
    assert np.all(result == 255.0)


def test_dark_mark_on_paper():
    luma = np.full((40, 40), 200.0)
    luma[18:21, 18:21] = 20.0
    result = sauvola_binarize(luma, k=0.18)
    assert np.all(result[18:21, 18:21] == 0.0)
    paper = np.ones_like(luma, dtype=bool)
    paper[18:21, 18:21] = False
    assert np.all(result[paper] == 255.0)


def test_lower_k_never_produces_fewer_dark_pixels(rng):
    luma = rng.uniform(0, 255, size=(40, 50))
    auto = sauvola_binarize(luma, k=0.18)
    scan = sauvola_binarize(luma, k=0.12)
    assert np.all(scan[auto == 0.0] == 0.0)
    assert np.count_nonzero(scan == 0.0) >= np.count_nonzero(auto == 0.0)


def test_output_is_binary(rng):
    result = sauvola_binarize(rng.uniform(0, 255, size=(17, 23)))
    assert set(np.unique(result)) <= {0.0, 255.0}
