"""
どこで: `shapes` のレジストリ層（関数専用）。
何を: `@shape` デコレータで形状生成関数を登録し、取得/一覧/検査と数値引数の束縛を提供。
なぜ: スクリプトの形状コマンドを一貫 API で解決し、新しい形状を登録だけで使えるようにするため。

概要:
- 登録対象は「関数」のみ（`(m: GeometryMatrix, ...) -> GeometryMatrix`）。
- 各関数は `__param_meta__`（引数名 → 型）と `__target__`（"edges" / "polygons"）を持つ。
- `bind_numeric_args` は平坦な数値列を `__param_meta__` の順に `vec3` / `vec2` / `number` へ束ねる。
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping, Sequence

from common.base_registry import BaseRegistry

ShapeFn = Callable[..., Any]

# 型 → 消費する数値の個数
PARAM_WIDTHS = {"vec3": 3, "vec2": 2, "number": 1}

_shape_registry = BaseRegistry()


def shape(arg: Any | None = None, /, name: str | None = None):
    """形状生成関数をレジストリに登録するデコレータ。

    使用例:
    - `@shape` / `@shape()`                      → 関数名から自動推論。
    - `@shape("box")` / `@shape(name="box")`     → 明示名で登録。

    例外:
    - TypeError: 関数以外を登録しようとした場合。
    """

    def _register_checked(obj: Any, resolved_name: str | None = None):
        if not inspect.isfunction(obj):
            raise TypeError(f"@shape は関数のみ登録可能です: got {obj!r}")
        return _shape_registry.register(resolved_name)(obj)

    # 直付け (@shape)
    if inspect.isfunction(arg) and name is None:
        return _register_checked(arg, None)

    # 位置引数で名前を渡した (@shape("name"))
    if isinstance(arg, str) and name is None:

        def _decorator_named(obj: Any):
            return _register_checked(obj, arg)

        return _decorator_named

    def _decorator_generic(obj: Any):
        return _register_checked(obj, name)

    return _decorator_generic


def get_shape(name: str) -> ShapeFn:
    """登録された形状関数を取得（未登録は KeyError）。"""
    return _shape_registry.get(name)


def list_shapes() -> list[str]:
    return sorted(_shape_registry.list_all())


def is_shape_registered(name: str) -> bool:
    return _shape_registry.is_registered(name)


def unregister(name: str) -> None:
    _shape_registry.unregister(name)


def param_arity(fn: ShapeFn) -> int:
    """`__param_meta__` から、関数が受け取る数値の総数を返す。"""
    meta: Mapping[str, Mapping[str, Any]] = getattr(fn, "__param_meta__", {})
    return sum(PARAM_WIDTHS[spec["type"]] for spec in meta.values())


def bind_numeric_args(fn: ShapeFn, values: Sequence[float]) -> dict[str, Any]:
    """平坦な数値列を `__param_meta__` の順に引数へ束ねる。

    Raises
    ------
    ValueError
        数値の個数が `param_arity(fn)` と一致しない場合。
    """
    expected = param_arity(fn)
    if len(values) != expected:
        raise ValueError(f"引数は {expected} 個必要です: got {len(values)}")
    meta: Mapping[str, Mapping[str, Any]] = getattr(fn, "__param_meta__", {})
    kwargs: dict[str, Any] = {}
    pos = 0
    for pname, spec in meta.items():
        width = PARAM_WIDTHS[spec["type"]]
        chunk = tuple(float(v) for v in values[pos : pos + width])
        kwargs[pname] = chunk if spec["type"] != "number" else chunk[0]
        pos += width
    return kwargs


__all__ = [
    "shape",
    "get_shape",
    "list_shapes",
    "is_shape_registered",
    "unregister",
    "param_arity",
    "bind_numeric_args",
    "PARAM_WIDTHS",
]
