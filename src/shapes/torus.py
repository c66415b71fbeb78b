from __future__ import annotations

import numpy as np

from common.types import Vec3
from engine.core.geometry import GeometryMatrix

from .base import SURFACE_STEP, point_edges, segment_count, unit_samples
from .registry import shape


def _surface(t: np.ndarray, p: np.ndarray, r_tube: float, r_ring: float) -> np.ndarray:
    """管の角度 `t` と周回角 `p`（いずれもラジアン）からトーラス面上の点を返す（中心は原点）。

    回転軸は y 軸。`r_tube` は管の半径、`r_ring` は中心から管の中心までの距離。
    """
    ring = r_tube * np.cos(t) + r_ring
    return np.stack([np.cos(p) * ring, r_tube * np.sin(t), -np.sin(p) * ring], axis=-1)


def _mesh(r_tube: float, r_ring: float, step: float) -> np.ndarray:
    """格子 `Q[i, j]`（i: 管の角度, j: 周回角, 両方向とも周期的）を三角形に割る。"""
    n = segment_count(step)
    a = np.arange(n, dtype=np.float64) * (2.0 * np.pi / n)
    tt, pp = np.meshgrid(a, a, indexing="ij")
    q = _surface(tt, pp, r_tube, r_ring)  # (n, n, 3)

    q_j = np.roll(q, -1, axis=1)  # Q[i, j + 1]
    q_i = np.roll(q, -1, axis=0)  # Q[i + 1, j]
    q_ij = np.roll(q_i, -1, axis=1)  # Q[i + 1, j + 1]

    # セルごとに [(Q, Qj, Qi), (Qj, Qij, Qi)] の 6 頂点
    cells = np.stack([q, q_j, q_i, q_j, q_ij, q_i], axis=2)  # (n, n, 6, 3)
    return cells.reshape(-1, 3)


@shape("torus")
def add_torus(
    m: GeometryMatrix, center: Vec3, inner_radius: float, outer_radius: float
) -> GeometryMatrix:
    """中心 `center` のトーラスを追加します。

    `inner_radius` は管の半径、`outer_radius` は中心から管の中心までの距離。

    - ポリゴン行列: 閉じた三角形メッシュ（外向き反時計回り）。
    - エッジ行列: 面上の標本点を +X 方向の長さ 1 の線分として並べた点群。
    """
    offset = np.asarray(center, dtype=np.float64)
    if m.kind == "polygon":
        m.append_points(_mesh(inner_radius, outer_radius, SURFACE_STEP) + offset)
        return m

    # 管の角度が外側ループ、周回角が内側ループ
    s = unit_samples(SURFACE_STEP) * (2.0 * np.pi)
    tt, pp = np.meshgrid(s, s, indexing="ij")
    pts = _surface(tt, pp, inner_radius, outer_radius).reshape(-1, 3) + offset
    m.append_points(point_edges(pts))
    return m


add_torus.__param_meta__ = {
    "center": {"type": "vec3"},
    "inner_radius": {"type": "number"},
    "outer_radius": {"type": "number"},
}
add_torus.__target__ = "polygons"
