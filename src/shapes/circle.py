from __future__ import annotations

import numpy as np

from common.types import Vec3
from engine.core.geometry import GeometryMatrix

from .base import CURVE_STEP, closed_samples, polyline_edges
from .registry import shape


@shape("circle")
def add_circle(m: GeometryMatrix, center: Vec3, radius: float) -> GeometryMatrix:
    """中心 `center`、半径 `radius` の円（z = center の z 平面）を線分列で追加します。

    t を `[0, 1]` で標本化し `2πt` を角度とする。最後の標本は最初の点に重なり閉じる。
    """
    cx, cy, cz = center
    t = closed_samples(CURVE_STEP) * (2.0 * np.pi)
    pts = np.empty((t.shape[0], 3), dtype=np.float64)
    pts[:, 0] = radius * np.cos(t) + cx
    pts[:, 1] = radius * np.sin(t) + cy
    pts[:, 2] = cz
    m.append_points(polyline_edges(pts))
    return m


add_circle.__param_meta__ = {
    "center": {"type": "vec3"},
    "radius": {"type": "number"},
}
add_circle.__target__ = "edges"
