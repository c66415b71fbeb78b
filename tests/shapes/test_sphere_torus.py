from __future__ import annotations

import numpy as np
import pytest

from engine.core.geometry import GeometryMatrix
from shapes import add_sphere, add_torus

N = 34


def _tris(m: GeometryMatrix) -> np.ndarray:
    return m.rows[:, :3].reshape(-1, 3, 3)


def _outward_dot(tri: np.ndarray, reference: np.ndarray) -> np.ndarray:
    normal = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    return np.einsum("ij,ij->i", normal, tri.mean(axis=1) - reference)


def test_sphere_edge_variant_is_unit_edge_point_cloud() -> None:
    m = add_sphere(GeometryMatrix.new_edge_matrix(), (0, 0, 0), 10)
    assert m.n_rows == 2 * N * N
    rows = m.rows
    np.testing.assert_allclose(rows[1::2, 0] - rows[0::2, 0], 1.0)
    np.testing.assert_array_equal(rows[1::2, 1:], rows[0::2, 1:])
    np.testing.assert_allclose(np.linalg.norm(rows[0::2, :3], axis=1), 10.0)


def test_sphere_edge_variant_first_point_is_pole() -> None:
    m = add_sphere(GeometryMatrix.new_edge_matrix(), (1, 2, 3), 5)
    np.testing.assert_allclose(m.rows[0], [6, 2, 3, 1])


def test_sphere_mesh_is_closed_and_outward() -> None:
    center = np.array([5.0, -3.0, 2.0])
    m = add_sphere(GeometryMatrix.new_polygon_matrix(), tuple(center), 7)
    assert m.n_rows == 3 * 2 * N * (N - 1)
    assert np.all(m.rows[:, 3] == 1.0)
    tri = _tris(m)
    np.testing.assert_allclose(np.linalg.norm(tri - center, axis=2), 7.0)
    assert np.all(_outward_dot(tri, center) > 0)


def test_sphere_mesh_covers_both_poles() -> None:
    m = add_sphere(GeometryMatrix.new_polygon_matrix(), (0, 0, 0), 1)
    xs = m.rows[:, 0]
    assert xs.max() == pytest.approx(1.0)
    assert xs.min() == pytest.approx(-1.0)


def test_sphere_appends_after_existing_rows() -> None:
    m = GeometryMatrix.new_polygon_matrix()
    m.append_polygon((0, 0, 0), (1, 0, 0), (0, 1, 0))
    add_sphere(m, (0, 0, 0), 1)
    assert m.n_rows == 3 + 3 * 2 * N * (N - 1)
    np.testing.assert_array_equal(m.rows[1], [1, 0, 0, 1])


def test_torus_edge_variant_point_cloud() -> None:
    m = add_torus(GeometryMatrix.new_edge_matrix(), (0, 0, 0), 2, 10)
    assert m.n_rows == 2 * N * N
    # t = 0, p = 0: (r1 + r2, 0, 0)
    np.testing.assert_allclose(m.rows[0], [12, 0, 0, 1])
    pts = m.rows[0::2, :3]
    ring = np.hypot(pts[:, 0], pts[:, 2])
    np.testing.assert_allclose(np.hypot(ring - 10, pts[:, 1]), 2.0, atol=1e-9)


def test_torus_mesh_is_closed_and_outward() -> None:
    m = add_torus(GeometryMatrix.new_polygon_matrix(), (0, 0, 0), 2, 10)
    assert m.n_rows == 3 * 2 * N * N
    tri = _tris(m)
    centroid = tri.mean(axis=1)
    # 各三角形の最寄りの管中心
    ring_dir = centroid[:, [0, 2]] / np.linalg.norm(centroid[:, [0, 2]], axis=1)[:, None]
    tube_center = np.zeros_like(centroid)
    tube_center[:, 0] = ring_dir[:, 0] * 10
    tube_center[:, 2] = ring_dir[:, 1] * 10
    normal = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    assert np.all(np.einsum("ij,ij->i", normal, centroid - tube_center) > 0)


def test_torus_center_offset() -> None:
    a = add_torus(GeometryMatrix.new_polygon_matrix(), (0, 0, 0), 1, 4)
    b = add_torus(GeometryMatrix.new_polygon_matrix(), (3, -2, 1), 1, 4)
    np.testing.assert_allclose(b.rows[:, :3] - a.rows[:, :3], np.tile([3, -2, 1], (a.n_rows, 1)))
