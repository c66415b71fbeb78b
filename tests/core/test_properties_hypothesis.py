import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, strategies as st  # type: ignore

from engine.core import transform_utils as tf
from engine.core.geometry import GeometryMatrix

finite = st.floats(-1e3, 1e3, allow_nan=False, allow_infinity=False)


def _geom() -> GeometryMatrix:
    m = GeometryMatrix.new_edge_matrix()
    m.append_edge((0, 0, 0), (1, 2, -1))
    m.append_edge((3, -4, 5), (-2, 0.5, 7))
    return m


@given(theta=st.floats(-720, 720), axis=st.sampled_from(["x", "y", "z"]))
def test_rotate_then_unrotate_restores_points(theta, axis):
    g = _geom()
    out = g.multiply(tf.rotate(axis, theta)).multiply(tf.rotate(axis, -theta))
    np.testing.assert_allclose(out.rows, g.rows, atol=1e-9)


@given(a=st.tuples(finite, finite, finite), b=st.tuples(finite, finite, finite))
def test_translate_composition(a, b):
    g = _geom()
    left = g.multiply(tf.translate(*a)).multiply(tf.translate(*b))
    right = g.multiply(tf.translate(a[0] + b[0], a[1] + b[1], a[2] + b[2]))
    np.testing.assert_allclose(left.rows, right.rows, rtol=1e-9, atol=1e-9)


@given(w=st.floats(0.1, 100.0), xyz=st.tuples(finite, finite, finite))
def test_perspective_divide_makes_w_one(w, xyz):
    m = GeometryMatrix("edge", np.array([[xyz[0] * w, xyz[1] * w, xyz[2] * w, w]]))
    m.perspective_divide()
    assert m.rows[0, 3] == 1.0
    np.testing.assert_allclose(m.rows[0, :3], xyz, rtol=1e-9, atol=1e-9)
