"""
3 次曲線（エルミート / ベジエ）

どちらも係数行列 `C (4, 2)` を作り、`[t^3, t^2, t, 1] @ C` で xy を評価する。
制御点は 2 次元で、z は 0。
"""

from __future__ import annotations

import numpy as np

from common.types import Vec2
from engine.core.geometry import GeometryMatrix

from .base import CURVE_STEP, closed_samples, polyline_edges
from .registry import shape

# 幾何ベクトル [p0, p1, r0, r1] → 係数
HERMITE_BASIS = np.array(
    [
        [2.0, -2.0, 1.0, 1.0],
        [-3.0, 3.0, -2.0, -1.0],
        [0.0, 0.0, 1.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
    ]
)

# 制御点 [p0, p1, p2, p3] → 係数
BEZIER_BASIS = np.array(
    [
        [-1.0, 3.0, -3.0, 1.0],
        [3.0, -6.0, 3.0, 0.0],
        [-3.0, 3.0, 0.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
    ]
)


def _cubic_points(basis: np.ndarray, geometry: np.ndarray) -> np.ndarray:
    """基底行列と幾何ベクトル `(4, 2)` から曲線上の点列 `(K, 3)`（z = 0）を返す。"""
    coeffs = basis @ geometry
    t = closed_samples(CURVE_STEP)
    powers = np.stack([t**3, t**2, t, np.ones_like(t)], axis=1)
    xy = powers @ coeffs
    pts = np.zeros((t.shape[0], 3), dtype=np.float64)
    pts[:, :2] = xy
    return pts


@shape("hermite")
def add_hermite3(
    m: GeometryMatrix, p0: Vec2, p1: Vec2, r0: Vec2, r1: Vec2
) -> GeometryMatrix:
    """端点 `p0, p1` と接ベクトル `r0, r1` の 3 次エルミート曲線を追加します。"""
    g = np.array([p0, p1, r0, r1], dtype=np.float64)
    m.append_points(polyline_edges(_cubic_points(HERMITE_BASIS, g)))
    return m


add_hermite3.__param_meta__ = {
    "p0": {"type": "vec2"},
    "p1": {"type": "vec2"},
    "r0": {"type": "vec2"},
    "r1": {"type": "vec2"},
}
add_hermite3.__target__ = "edges"


@shape("bezier")
def add_bezier3(
    m: GeometryMatrix, p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2
) -> GeometryMatrix:
    """制御点 `p0..p3` の 3 次ベジエ曲線を追加します。"""
    g = np.array([p0, p1, p2, p3], dtype=np.float64)
    m.append_points(polyline_edges(_cubic_points(BEZIER_BASIS, g)))
    return m


add_bezier3.__param_meta__ = {
    "p0": {"type": "vec2"},
    "p1": {"type": "vec2"},
    "p2": {"type": "vec2"},
    "p3": {"type": "vec2"},
}
add_bezier3.__target__ = "edges"
