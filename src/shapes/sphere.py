from __future__ import annotations

from functools import lru_cache

import numpy as np

from common.types import Vec3
from engine.core.geometry import GeometryMatrix

from .base import SURFACE_STEP, point_edges, segment_count, unit_samples
from .registry import shape


def _surface(c: np.ndarray, rot: np.ndarray) -> np.ndarray:
    """正規化角 `c`（極角/π）と `rot`（方位角/2π）から単位球面上の点を返す。

    x 軸が極軸。`c`, `rot` は同形状で、戻り値は末尾に xyz 軸を持つ。
    """
    polar = c * np.pi
    azim = rot * (2.0 * np.pi)
    return np.stack(
        [np.cos(polar), np.sin(polar) * np.cos(azim), np.sin(polar) * np.sin(azim)],
        axis=-1,
    )


@lru_cache(maxsize=4)
def _unit_point_cloud(step: float) -> np.ndarray:
    """単位球の標本点（方位角が外側ループ、極角が内側ループ）。"""
    s = unit_samples(step)
    rot, c = np.meshgrid(s, s, indexing="ij")
    return _surface(c, rot).reshape(-1, 3)


@lru_cache(maxsize=4)
def _unit_mesh(step: float) -> np.ndarray:
    """単位球の緯度経度三角形メッシュ `(3T, 3)`。

    緯度帯 `i`（極 → 極）と方位 `j`（周回）で格子 `P[i, j]` を作り、各セルを 2 枚に割る。
    極に接する帯では片方が面積 0 になるので出さない。三角形は外側から見て反時計回り。
    """
    n = segment_count(step)
    c = np.arange(n + 1, dtype=np.float64) / n
    rot = np.arange(n, dtype=np.float64) / n
    cc, rr = np.meshgrid(c, rot, indexing="ij")
    grid = _surface(cc, rr)  # (n + 1, n, 3)

    tris: list[np.ndarray] = []
    for i in range(n):
        for j in range(n):
            j1 = (j + 1) % n
            if i > 0:
                tris.append(np.stack([grid[i, j], grid[i + 1, j], grid[i, j1]]))
            if i < n - 1:
                tris.append(np.stack([grid[i + 1, j], grid[i + 1, j1], grid[i, j1]]))
    mesh = np.concatenate(tris, axis=0)
    mesh.setflags(write=False)
    return mesh


@shape("sphere")
def add_sphere(m: GeometryMatrix, center: Vec3, radius: float) -> GeometryMatrix:
    """中心 `center`、半径 `radius` の球を追加します。

    - ポリゴン行列: 閉じた三角形メッシュ。
    - エッジ行列: 球面上の標本点を +X 方向の長さ 1 の線分として並べた点群。
    """
    offset = np.asarray(center, dtype=np.float64)
    if m.kind == "polygon":
        m.append_points(_unit_mesh(SURFACE_STEP) * radius + offset)
    else:
        m.append_points(point_edges(_unit_point_cloud(SURFACE_STEP) * radius + offset))
    return m


add_sphere.__param_meta__ = {
    "center": {"type": "vec3"},
    "radius": {"type": "number"},
}
add_sphere.__target__ = "polygons"
