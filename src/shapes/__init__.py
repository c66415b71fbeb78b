"""
どこで: `shapes` パッケージ（関数登録）。
何を: ビルトイン shape を import 副作用で登録し、名前から生成関数を解決できるようにする。
なぜ: 形状生成の拡張点を一箇所に集約し、スクリプト層から名前で呼び出すため。
"""

# 関数版 shape 定義を import して登録（副作用）
from .box import add_box
from .circle import add_circle
from .curves import add_bezier3, add_hermite3
from .line import add_edge
from .registry import (  # re-export
    bind_numeric_args,
    get_shape,
    is_shape_registered,
    list_shapes,
    param_arity,
    shape,
)
from .sphere import add_sphere
from .torus import add_torus

__all__ = [
    "shape",
    "get_shape",
    "list_shapes",
    "is_shape_registered",
    "param_arity",
    "bind_numeric_args",
    "add_edge",
    "add_circle",
    "add_hermite3",
    "add_bezier3",
    "add_box",
    "add_sphere",
    "add_torus",
]
