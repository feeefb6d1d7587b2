from __future__ import annotations

import cv2
import numpy as np
import pytest

from docscan.errors import SingularHomographyError
from docscan.geometry import Homography, compute_homography, output_to_source, solve_linear_system
from docscan.geometry.homography import rectangle_corners


def test_solves_small_system_with_pivoting():
    # First pivot is zero without row exchange.
    solution = solve_linear_system([[0.0, 2.0], [3.0, 1.0]], [4.0, 5.0])
    assert solution == pytest.approx([1.0, 2.0])


def test_singular_system_is_reported():
    with pytest.raises(SingularHomographyError):
        solve_linear_system([[1.0, 2.0], [2.0, 4.0]], [1.0, 2.0])


def test_rectangle_to_itself_is_identity():
    corners = rectangle_corners(40, 30)
    homography = compute_homography(corners, corners)
    assert list(homography.coefficients) == pytest.approx([1, 0, 0, 0, 1, 0, 0, 0], abs=1e-12)


def test_maps_every_corner_onto_its_target():
    quad = [(12.0, 8.0), (95.0, 15.0), (88.0, 120.0), (5.0, 110.0)]
    homography = output_to_source(quad, 80, 100)
    for (x, y), (qx, qy) in zip(rectangle_corners(80, 100), quad):
        sx, sy = homography.apply(x, y)
        assert sx == pytest.approx(qx)
        assert sy == pytest.approx(qy)


def test_agrees_with_opencv():
    quad = [(30.0, 20.0), (210.0, 35.0), (190.0, 260.0), (15.0, 240.0)]
    rect = rectangle_corners(180, 220)
    homography = compute_homography(rect, quad)
    expected = cv2.getPerspectiveTransform(np.float32(rect), np.float32(quad))
    assert np.allclose(homography.as_matrix(), expected / expected[2, 2], rtol=1e-4, atol=1e-6)


def test_collinear_corners_are_rejected():
    with pytest.raises(SingularHomographyError):
        output_to_source([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)], 10, 10)


def test_coincident_corners_are_rejected():
    with pytest.raises(SingularHomographyError):
        output_to_source([(5.0, 5.0)] * 4, 20, 20)


def test_requires_four_points():
    with pytest.raises(ValueError):
        compute_homography(rectangle_corners(2, 2)[:3], rectangle_corners(2, 2)[:3])


def test_denominator_matches_definition():
    homography = Homography((1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.5, 0.25))
    assert homography.denominator(2.0, 4.0) == pytest.approx(3.0)
    assert homography.apply(2.0, 4.0) == pytest.approx((2.0 / 3.0, 4.0 / 3.0))
