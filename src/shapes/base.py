"""
シェイプ共通ヘルパ

概要:
- 形状生成関数は `(m: GeometryMatrix, ...) -> GeometryMatrix` で、`m` に行を追記して同じ `m` を返す。
- 分割の細かさは固定で、呼び出し側からは変えられない（回転体は 0.03、曲線は 0.01 刻み）。
- 入力検証は行わない。NaN や 0 半径は縮退した形状としてそのまま追記される。

ここでは刻みから標本を作るヘルパと、点列を線分列へ並べ替えるヘルパを置く。
"""

from __future__ import annotations

import math

import numpy as np

# 回転体（球/トーラス）の正規化角度の刻み
SURFACE_STEP = 0.03
# 曲線（円/エルミート/ベジエ）のパラメータ刻み
CURVE_STEP = 0.01


def unit_samples(step: float) -> np.ndarray:
    """`0, step, 2*step, ...` のうち 1 以下のもの（1 は刻みで到達するときだけ含む）。"""
    n = int(math.floor(1.0 / step + 1e-9)) + 1
    return np.arange(n, dtype=np.float64) * step


def closed_samples(step: float) -> np.ndarray:
    """`[0, 1]` を `ceil(1 / step)` 等分した両端を含む標本。"""
    n = int(math.ceil(1.0 / step - 1e-9))
    return np.linspace(0.0, 1.0, n + 1)


def segment_count(step: float) -> int:
    """周回メッシュの 1 周あたりの分割数。"""
    return int(math.ceil(1.0 / step - 1e-9))


def polyline_edges(points: np.ndarray) -> np.ndarray:
    """点列 `(K, 3)` を隣接ペアの線分列 `(2(K-1), 3)` に並べる。"""
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[0] < 2:
        return np.empty((0, 3), dtype=np.float64)
    out = np.empty((2 * (pts.shape[0] - 1), 3), dtype=np.float64)
    out[0::2] = pts[:-1]
    out[1::2] = pts[1:]
    return out


def point_edges(points: np.ndarray) -> np.ndarray:
    """各点を +X 方向に長さ 1 の線分として並べる（点群をエッジ行列で見せるための表現）。"""
    pts = np.asarray(points, dtype=np.float64)
    out = np.empty((2 * pts.shape[0], 3), dtype=np.float64)
    out[0::2] = pts
    out[1::2] = pts
    out[1::2, 0] += 1.0
    return out


__all__ = [
    "SURFACE_STEP",
    "CURVE_STEP",
    "unit_samples",
    "closed_samples",
    "segment_count",
    "polyline_edges",
    "point_edges",
]
