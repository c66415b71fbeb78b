from __future__ import annotations

import math

import numpy as np
import pytest

from engine.core import projection
from engine.core.geometry import GeometryMatrix


def test_perspective_divide_scales_by_w() -> None:
    m = GeometryMatrix("edge", np.array([[2.0, 4.0, 6.0, 2.0], [1.0, 1.0, 1.0, 0.0]]))
    out = projection.perspective_divide(m)
    np.testing.assert_allclose(out.rows[0], [1.0, 2.0, 3.0, 1.0])
    # w == 0 の行はそのまま
    np.testing.assert_array_equal(out.rows[1], [1.0, 1.0, 1.0, 0.0])
    # 入力は変わらない
    assert m.rows[0, 3] == 2.0


def test_divide_x4_w2() -> None:
    m = GeometryMatrix("edge", np.array([[4.0, 0.0, 0.0, 2.0]]))
    m.perspective_divide()
    assert m.rows[0].tolist() == [2.0, 0.0, 0.0, 1.0]


def test_in_place_divide_and_device_mapping() -> None:
    m = GeometryMatrix("edge", np.array([[-2.0, 2.0, 0.0, 2.0], [2.0, -2.0, 0.0, 2.0]]))
    m.perspective_divide()
    m.ndc_to_device(100, 50)
    # (-1, 1) は左上、(1, -1) は右下
    np.testing.assert_allclose(m.rows[:, :2], [[0.0, 0.0], [100.0, 50.0]])


def test_ndc_center_maps_to_canvas_center() -> None:
    m = GeometryMatrix("edge", np.array([[0.0, 0.0, 0.3, 1.0]]))
    out = projection.ndc_to_device(m, 500, 300)
    np.testing.assert_allclose(out.rows[0], [250.0, 150.0, 0.3, 1.0])


def test_perspective_matrix_layout() -> None:
    p = projection.perspective(math.radians(90), 1.0, 1.0, 600.0)
    f = 1.0 / math.tan(math.radians(45))
    assert p[0, 0] == pytest.approx(f)
    assert p[1, 1] == pytest.approx(f)
    assert p[2, 3] == -1.0
    assert p[2, 2] == pytest.approx(601.0 / -599.0)
    assert p[3, 2] == pytest.approx(600.0 / -599.0 * 2.0)
    assert p[3, 3] == 0.0


def test_perspective_maps_near_and_far_planes() -> None:
    near, far = 1.0, 100.0
    p = projection.perspective(math.radians(60), 1.5, near, far)
    m = GeometryMatrix("edge", np.array([[0.0, 0.0, -near, 1.0], [0.0, 0.0, -far, 1.0]]))
    out = m.multiply(p)
    out.perspective_divide()
    np.testing.assert_allclose(out.rows[:, 2], [-1.0, 1.0], atol=1e-12)


def test_perspective_foreshortens_with_distance() -> None:
    p = projection.perspective(math.radians(90), 1.0, 1.0, 100.0)
    m = GeometryMatrix("edge", np.array([[10.0, 0.0, -10.0, 1.0], [10.0, 0.0, -20.0, 1.0]]))
    out = projection.perspective_divide(m.multiply(p))
    assert out.rows[0, 0] == pytest.approx(1.0)
    assert out.rows[1, 0] == pytest.approx(0.5)


def test_orthographic_maps_box_to_unit_cube() -> None:
    o = projection.orthographic(-10, 10, -5, 5, 1, 11)
    corners = np.array([[-10.0, -5.0, -1.0, 1.0], [10.0, 5.0, -11.0, 1.0]])
    out = GeometryMatrix("edge", corners).multiply(o)
    np.testing.assert_allclose(out.rows, [[-1, -1, -1, 1], [1, 1, 1, 1]], atol=1e-12)
