import math

import numpy as np
import pytest

from driftsketch.interactive.gl.utils import (
    build_projection,
    default_resolution,
    ellipse_batch_triangles,
    polygon_triangles,
    rect_triangles,
)


def test_projection_maps_canvas_corners_to_ndc():
    proj = build_projection(800.0, 600.0)
    # ModernGL へは転置済みで渡すため、数学上の行列は proj.T。
    m = proj.T
    corner = m @ np.array([400.0, 300.0, 0.0, 1.0], dtype=np.float32)
    assert corner[:2] == pytest.approx((1.0, 1.0))
    origin = m @ np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float32)
    assert origin[:2] == pytest.approx((0.0, 0.0))
    bottom_left = m @ np.array([-400.0, -300.0, 0.0, 1.0], dtype=np.float32)
    assert bottom_left[:2] == pytest.approx((-1.0, -1.0))


@pytest.mark.parametrize(("radius", "expected"), [(0.5, 8), (2.0, 8), (10.0, 20), (500.0, 64)])
def test_default_resolution_is_clamped(radius, expected):
    assert default_resolution(radius) == expected


def test_polygon_triangles_shape_and_vertices():
    tris = polygon_triangles((10.0, -5.0), 2.0, 6)
    assert tris.shape == (18, 2)
    assert tris.dtype == np.float32

    # 各三角形の 1 頂点目は中心。
    np.testing.assert_allclose(tris[0::3], np.tile([10.0, -5.0], (6, 1)), atol=1e-5)
    ring = tris[1::3]
    dist = np.hypot(ring[:, 0] - 10.0, ring[:, 1] + 5.0)
    np.testing.assert_allclose(dist, 2.0, atol=1e-5)
    np.testing.assert_allclose(ring[0], (12.0, -5.0), atol=1e-5)


def test_polygon_rotation_is_counter_clockwise():
    tris = polygon_triangles((0.0, 0.0), 1.0, 4, rotation=math.pi / 2)
    np.testing.assert_allclose(tris[1], (0.0, 1.0), atol=1e-6)


def test_polygon_rejects_too_few_sides():
    with pytest.raises(ValueError):
        polygon_triangles((0.0, 0.0), 1.0, 2)


def test_rect_triangles_cover_canvas():
    quad = rect_triangles(4.0, 2.0)
    assert quad.shape == (6, 2)
    assert quad[:, 0].min() == -2.0 and quad[:, 0].max() == 2.0
    assert quad[:, 1].min() == -1.0 and quad[:, 1].max() == 1.0


def test_ellipse_batch_matches_single_polygons_in_order():
    centers = np.array([[0.0, 0.0], [5.0, -2.0], [-1.0, 3.0]])
    radii = np.array([1.0, 2.5, 0.5])
    batch = ellipse_batch_triangles(centers, radii, 8)
    assert batch.shape == (3 * 8 * 3, 2)
    assert batch.dtype == np.float32
    for i, (c, r) in enumerate(zip(centers, radii)):
        single = polygon_triangles((c[0], c[1]), r, 8)
        np.testing.assert_allclose(batch[i * 24 : (i + 1) * 24], single, atol=1e-5)


def test_ellipse_batch_empty_and_invalid_resolution():
    assert ellipse_batch_triangles(np.zeros((0, 2)), np.zeros(0), 8).shape == (0, 2)
    with pytest.raises(ValueError):
        ellipse_batch_triangles(np.zeros((1, 2)), np.ones(1), 2)
