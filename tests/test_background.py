from __future__ import annotations

import numpy as np

from docscan.config import EngineConfig
from docscan.imaging.background import background_params, estimate_background, remove_shadows


def test_params_for_regular_image():
    params = background_params(400, 300)
    assert params.radius == 12
    assert params.blur_radius == 6
    assert params.reduced is False


def test_params_use_minimum_radius_for_small_images():
    params = background_params(100, 100)
    assert (params.radius, params.blur_radius, params.reduced) == (10, 5, False)


def test_params_switch_to_reduced_resolution_above_threshold():
    assert background_params(1500, 1500).reduced is False
    params = background_params(1600, 1600)
    assert params.reduced is True
    assert params.radius == 40
    assert params.blur_radius == 20


def test_large_image_background_keeps_dimensions():
    height, width = 1502, 1504
    ramp = np.linspace(120.0, 220.0, width)
    luma = np.tile(ramp, (height, 1))
    background = estimate_background(luma)
    assert background.shape == (height, width)
    assert np.isfinite(background).all()


def test_reduced_path_respects_configured_threshold(rng):
    luma = rng.uniform(100, 200, size=(40, 50))
    config = EngineConfig(large_image_pixels=100)
    assert background_params(50, 40, config).reduced is True
    assert estimate_background(luma, config).shape == (40, 50)


def test_background_is_upper_envelope_of_flat_page():
    luma = np.full((60, 60), 180.0)
    luma[20:23, 20:40] = 30.0
    background = estimate_background(luma)
    assert np.allclose(background, 180.0)


def test_remove_shadows_whitens_uniform_paper():
    result = remove_shadows(np.full((32, 32), 100.0))
    assert np.allclose(result, 255.0)


def test_remove_shadows_flattens_lighting_and_keeps_text_dark():
    height, width = 120, 200
    lighting = np.tile(np.linspace(200.0, 100.0, width), (height, 1))
    luma = lighting.copy()
    luma[50:54, 60:140] *= 0.25
    result = remove_shadows(luma)

    paper = np.ones_like(luma, dtype=bool)
    paper[40:64, 50:150] = False
    assert np.ptp(result[paper]) < np.ptp(lighting) / 2
    assert result[50:54, 60:140].max() < 128
    assert result.min() >= 0.0 and result.max() <= 255.0


def test_remove_shadows_guards_black_background():
    result = remove_shadows(np.zeros((16, 16)))
    assert np.array_equal(result, np.zeros((16, 16)))


def test_deque_dilation_gives_same_background(rng):
    luma = rng.uniform(0, 255, size=(60, 80))
    blocks = estimate_background(luma, EngineConfig())
    deque = estimate_background(luma, EngineConfig(max_filter="deque"))
    assert np.array_equal(blocks, deque)
