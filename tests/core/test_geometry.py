from __future__ import annotations

import numpy as np
import pytest

from engine.core import transform_utils as tf
from engine.core.errors import DimensionMismatchError
from engine.core.geometry import GeometryMatrix


def test_new_matrices_are_empty() -> None:
    e = GeometryMatrix.new_edge_matrix()
    p = GeometryMatrix.new_polygon_matrix()
    assert e.kind == "edge" and p.kind == "polygon"
    assert e.n_rows == 0 and p.n_rows == 0
    assert e.is_empty and len(p) == 0
    assert e.rows.shape == (0, 4)


def test_append_edge_inserts_w_one(edge_line: GeometryMatrix) -> None:
    np.testing.assert_array_equal(
        edge_line.rows, [[0.0, 0.0, 0.0, 1.0], [10.0, 0.0, 0.0, 1.0]]
    )
    assert edge_line.n_cols == 4
    assert edge_line.data.shape == (8,)


def test_append_grows_past_initial_capacity() -> None:
    m = GeometryMatrix.new_edge_matrix()
    for i in range(100):
        m.append_edge((i, 0, 0), (i, 1, 0))
    assert m.n_rows == 200
    assert m.rows[199].tolist() == [99.0, 1.0, 0.0, 1.0]


def test_rows_view_is_read_only(edge_line: GeometryMatrix) -> None:
    with pytest.raises(ValueError):
        edge_line.rows[0, 0] = 5.0


def test_append_points_rejects_wrong_width() -> None:
    m = GeometryMatrix.new_edge_matrix()
    with pytest.raises(DimensionMismatchError):
        m.append_points(np.zeros((2, 4)))
    m.append_points(np.empty((0, 3)))
    assert m.n_rows == 0


def test_multiply_identity_is_noop(unit_triangle: GeometryMatrix) -> None:
    out = unit_triangle.multiply(tf.identity())
    assert out == unit_triangle
    assert out is not unit_triangle


def test_multiply_does_not_touch_source(edge_line: GeometryMatrix) -> None:
    before = edge_line.rows.copy()
    edge_line.multiply(tf.translate(5, 5, 5))
    np.testing.assert_array_equal(edge_line.rows, before)


def test_multiply_in_place_translates(edge_line: GeometryMatrix) -> None:
    edge_line.multiply_in_place(tf.translate(1, 2, 3))
    np.testing.assert_allclose(edge_line.rows, [[1, 2, 3, 1], [11, 2, 3, 1]])
    # 置換後も追記できる
    edge_line.append_edge((0, 0, 0), (0, 0, 0))
    assert edge_line.n_rows == 4


@pytest.mark.parametrize("shape", [(3, 3), (4, 3), (4,), (5, 5)])
def test_multiply_rejects_non_4x4(edge_line: GeometryMatrix, shape) -> None:
    with pytest.raises(DimensionMismatchError):
        edge_line.multiply(np.zeros(shape))
    with pytest.raises(ValueError):  # DimensionMismatchError は ValueError
        edge_line.multiply_in_place(np.zeros(shape))


def test_rows_constructor_rejects_three_columns() -> None:
    with pytest.raises(DimensionMismatchError):
        GeometryMatrix("edge", np.zeros((2, 3)))
    with pytest.raises(ValueError):
        GeometryMatrix("mesh")  # type: ignore[arg-type]


def test_clear_and_copy(edge_line: GeometryMatrix) -> None:
    c = edge_line.copy()
    edge_line.clear()
    assert edge_line.n_rows == 0
    assert c.n_rows == 2


def test_edges_and_triangles_iterate_groups(unit_triangle: GeometryMatrix) -> None:
    m = GeometryMatrix.new_edge_matrix()
    m.append_edge((0, 0, 0), (1, 0, 0))
    m.append_edge((2, 0, 0), (3, 0, 0))
    pairs = list(m.edges())
    assert len(pairs) == 2
    assert pairs[1][0][0] == 2.0 and pairs[1][1][0] == 3.0
    tris = list(unit_triangle.triangles())
    assert len(tris) == 1
    assert tris[0][2].tolist() == [0.0, 1.0, 0.0, 1.0]


def test_equality_depends_on_kind_and_rows() -> None:
    a = GeometryMatrix("edge", np.ones((2, 4)))
    b = GeometryMatrix("polygon", np.ones((2, 4)))
    assert a != b
    assert a == GeometryMatrix("edge", np.ones((2, 4)))
