"""
どこで: `engine.core.projection`
何を: 透視/正射影の 4x4 行列（行ベクトル規約）と、クリップ空間 → NDC → 画素座標の変換。
なぜ: 投影も `GeometryMatrix.multiply` で適用できる形に揃え、除算と画面写像だけを別段にするため。

流れ:
    clip = model.multiply(perspective(fov, aspect, near, far))
    ndc = perspective_divide(clip)        # x, y, z /= w, w = 1
    px = ndc_to_device(ndc, width, height)  # [-1, 1] → [0, width] x [0, height]（縦反転）
"""

from __future__ import annotations

import math

import numpy as np

from .geometry import GeometryMatrix


def perspective(fov_radians: float, aspect: float, near: float, far: float) -> np.ndarray:
    """透視投影行列。

    Parameters
    ----------
    fov_radians : float
        Y 方向の視野角（ラジアン）。
    aspect : float
        アスペクト比（通常 width / height）。
    near, far : float
        クリップ面までの距離。

    Notes
    -----
    `f = 1 / tan(fov / 2)`。行ベクトル規約なので第 3 列の `-1` により `w' = -z` となり、
    後段の除算で遠近の縮みが生じる。
    """
    f = 1.0 / math.tan(fov_radians / 2.0)
    range_inv = 1.0 / (near - far)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (near + far) * range_inv, -1.0],
            [0.0, 0.0, near * far * range_inv * 2.0, 0.0],
        ],
        dtype=np.float64,
    )


def orthographic(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """箱 `[left, right] x [bottom, top] x [near, far]` を立方体 `[-1, 1]^3` へ写す正射影行列。w は 1 のまま。"""
    lr = 1.0 / (left - right)
    bt = 1.0 / (bottom - top)
    nf = 1.0 / (near - far)
    return np.array(
        [
            [-2.0 * lr, 0.0, 0.0, 0.0],
            [0.0, -2.0 * bt, 0.0, 0.0],
            [0.0, 0.0, 2.0 * nf, 0.0],
            [(left + right) * lr, (top + bottom) * bt, (far + near) * nf, 1.0],
        ],
        dtype=np.float64,
    )


def perspective_divide(m: GeometryMatrix) -> GeometryMatrix:
    """各行の x, y, z を w で割り、w を 1 にした新しい行列を返す。

    `w == 0`（無限遠）の行は除算せずそのまま残す。
    """
    rows = np.array(m.rows, dtype=np.float64)
    w = rows[:, 3]
    ok = w != 0.0
    rows[ok, :3] /= w[ok, None]
    rows[ok, 3] = 1.0
    return GeometryMatrix(m.kind, rows)


def ndc_to_device(m: GeometryMatrix, width: float, height: float) -> GeometryMatrix:
    """NDC の x, y（`[-1, 1]`）を画素座標 `[0, width] x [0, height]` へ写した新しい行列を返す。

    NDC の Y は上向き、画素の Y は下向きなので縦軸を反転する。z, w はそのまま。
    """
    rows = np.array(m.rows, dtype=np.float64)
    rows[:, 0] = (rows[:, 0] + 1.0) * 0.5 * float(width)
    rows[:, 1] = (1.0 - rows[:, 1]) * 0.5 * float(height)
    return GeometryMatrix(m.kind, rows)


__all__ = ["perspective", "orthographic", "perspective_divide", "ndc_to_device"]
