"""
どこで: `engine.core` の変換行列ファクトリ。
何を: 単位・拡大縮小・平行移動・X/Y/Z 軸回転の 4x4 行列と、その合成 `compose()`。
なぜ: 点行列の移動/変形は `GeometryMatrix.multiply` の一経路に集約し、行列の作り方だけをここに置くため。

規約:
- 行ベクトル規約（`point × M`）。平行移動成分は最終行に置く。
- 回転行列は列ベクトル規約の教科書形の転置。角度は度で受け取り内部でラジアンへ変換する。
- いずれも右手系で、正の角度は軸の正方向から見て反時計回り。
"""

from __future__ import annotations

import math
from functools import reduce

import numpy as np

from .errors import DimensionMismatchError


def as_transform(transform: np.ndarray) -> np.ndarray:
    """変換行列を float64 (4, 4) として検証する。切り詰め/パディングはしない。"""
    t = np.asarray(transform, dtype=np.float64)
    if t.shape != (4, 4):
        raise DimensionMismatchError(
            f"変換行列は (4, 4) である必要があります: got shape {t.shape}"
        )
    return t


def identity() -> np.ndarray:
    """4x4 単位行列。"""
    return np.eye(4, dtype=np.float64)


def scale(sx: float, sy: float, sz: float) -> np.ndarray:
    """軸ごとの拡大縮小。"""
    m = identity()
    m[0, 0] = sx
    m[1, 1] = sy
    m[2, 2] = sz
    return m


def translate(tx: float, ty: float, tz: float) -> np.ndarray:
    """平行移動（行ベクトル規約なので最終行）。"""
    m = identity()
    m[3, 0] = tx
    m[3, 1] = ty
    m[3, 2] = tz
    return m


# スクリプトの `move` コマンド名に合わせた別名
move = translate


def rotate_x(degrees: float) -> np.ndarray:
    """X 軸回り。`(x, y, z) → (x, y·c − z·s, y·s + z·c)`。"""
    r = math.radians(degrees)
    c, s = math.cos(r), math.sin(r)
    m = identity()
    m[1, 1] = c
    m[1, 2] = s
    m[2, 1] = -s
    m[2, 2] = c
    return m


def rotate_y(degrees: float) -> np.ndarray:
    """Y 軸回り。`(x, y, z) → (x·c + z·s, y, −x·s + z·c)`。"""
    r = math.radians(degrees)
    c, s = math.cos(r), math.sin(r)
    m = identity()
    m[0, 0] = c
    m[0, 2] = -s
    m[2, 0] = s
    m[2, 2] = c
    return m


def rotate_z(degrees: float) -> np.ndarray:
    """Z 軸回り。`(x, y, z) → (x·c − y·s, x·s + y·c, z)`。"""
    r = math.radians(degrees)
    c, s = math.cos(r), math.sin(r)
    m = identity()
    m[0, 0] = c
    m[0, 1] = s
    m[1, 0] = -s
    m[1, 1] = c
    return m


_ROTATIONS = {"x": rotate_x, "y": rotate_y, "z": rotate_z}


def rotate(axis: str, degrees: float) -> np.ndarray:
    """軸名（"x"/"y"/"z"）で回転行列を選ぶ。

    Raises
    ------
    ValueError
        未知の軸名。
    """
    fn = _ROTATIONS.get(axis.strip().lower())
    if fn is None:
        raise ValueError(f"未知の回転軸です: {axis!r}（x / y / z）")
    return fn(degrees)


def compose(*transforms: np.ndarray) -> np.ndarray:
    """左から順に掛けた合成行列を返す（先頭の変換が最初に効く）。

    例: `compose(translate(1, 0, 0), rotate_z(90))` は「移動してから回転」。
    引数なしは単位行列。各因子が (4, 4) でなければ `DimensionMismatchError`。
    """
    if not transforms:
        return identity()
    return reduce(np.matmul, [as_transform(t) for t in transforms])


__all__ = [
    "as_transform",
    "identity",
    "scale",
    "translate",
    "move",
    "rotate_x",
    "rotate_y",
    "rotate_z",
    "rotate",
    "compose",
]
