from __future__ import annotations

from common.types import Vec3
from engine.core.geometry import GeometryMatrix

from .registry import shape


@shape("box")
def add_box(m: GeometryMatrix, origin: Vec3, dx: float, dy: float, dz: float) -> GeometryMatrix:
    """直方体を 12 枚の三角形（6 面 x 2）で追加します。

    `origin` を前面左上の角とし、`(+dx, -dy, -dz)` 方向へ伸ばす。各面の三角形は
    外側から見て反時計回り。面の順は 前 → 右 → 後 → 左 → 上 → 下。
    """
    x, y, z = origin
    # 前面の 4 点
    p1 = (x, y, z)
    p2 = (x, y - dy, z)
    p3 = (x + dx, y, z)
    p4 = (x + dx, y - dy, z)
    # 後面の 4 点（前面と揃える）
    p5 = (x, y, z - dz)
    p6 = (x, y - dy, z - dz)
    p7 = (x + dx, y, z - dz)
    p8 = (x + dx, y - dy, z - dz)

    faces = (
        # 前
        (p1, p2, p3),
        (p3, p2, p4),
        # 右
        (p3, p4, p8),
        (p3, p8, p7),
        # 後
        (p7, p8, p6),
        (p7, p6, p5),
        # 左
        (p5, p6, p2),
        (p5, p2, p1),
        # 上
        (p7, p1, p3),
        (p7, p5, p1),
        # 下
        (p6, p4, p2),
        (p6, p8, p4),
    )
    m.append_points([p for tri in faces for p in tri])
    return m


add_box.__param_meta__ = {
    "origin": {"type": "vec3"},
    "dx": {"type": "number"},
    "dy": {"type": "number"},
    "dz": {"type": "number"},
}
add_box.__target__ = "polygons"
