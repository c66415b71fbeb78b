from __future__ import annotations

from common.types import Vec3
from engine.core.geometry import GeometryMatrix

from .registry import shape


@shape("line")
def add_edge(m: GeometryMatrix, p0: Vec3, p1: Vec3) -> GeometryMatrix:
    """線分 `p0 → p1` を 1 本追加します。"""
    m.append_edge(p0, p1)
    return m


add_edge.__param_meta__ = {
    "p0": {"type": "vec3"},
    "p1": {"type": "vec3"},
}
add_edge.__target__ = "edges"
