from __future__ import annotations

import pytest

import shapes
from engine.core.geometry import GeometryMatrix
from shapes.registry import bind_numeric_args, get_shape, param_arity, shape, unregister


BUILTINS = {
    "line": (6, "edges"),
    "circle": (4, "edges"),
    "hermite": (8, "edges"),
    "bezier": (8, "edges"),
    "box": (6, "polygons"),
    "sphere": (4, "polygons"),
    "torus": (5, "polygons"),
}


def test_builtin_shapes_are_registered() -> None:
    assert set(BUILTINS) <= set(shapes.list_shapes())


@pytest.mark.parametrize("name", sorted(BUILTINS))
def test_param_meta_and_target(name: str) -> None:
    fn = get_shape(name)
    arity, target = BUILTINS[name]
    assert param_arity(fn) == arity
    assert fn.__target__ == target


def test_bind_numeric_args_groups_vectors() -> None:
    kwargs = bind_numeric_args(get_shape("torus"), [1, 2, 3, 4, 5])
    assert kwargs == {"center": (1.0, 2.0, 3.0), "inner_radius": 4.0, "outer_radius": 5.0}
    kwargs = bind_numeric_args(get_shape("hermite"), list(range(8)))
    assert kwargs["r1"] == (6.0, 7.0)


def test_bind_numeric_args_rejects_wrong_count() -> None:
    with pytest.raises(ValueError):
        bind_numeric_args(get_shape("line"), [1, 2, 3])


def test_shape_decorator_registers_and_rejects_non_functions() -> None:
    @shape("unit_edge_for_test")
    def _unit(m: GeometryMatrix) -> GeometryMatrix:
        m.append_edge((0, 0, 0), (1, 0, 0))
        return m

    try:
        assert shapes.is_shape_registered("unit_edge_for_test")
        assert get_shape("UnitEdgeForTest") is _unit  # キャメルケースも同じキー
    finally:
        unregister("unit_edge_for_test")

    with pytest.raises(TypeError):
        shape("not_a_function")(object())


def test_duplicate_name_is_rejected() -> None:
    with pytest.raises(ValueError):

        @shape("box")
        def _other_box(m):  # pragma: no cover - 登録時に失敗
            return m


def test_get_unknown_shape_raises_key_error() -> None:
    with pytest.raises(KeyError):
        get_shape("dodecahedron")
