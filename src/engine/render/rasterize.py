"""
どこで: `engine.render.rasterize`
何を: 線分と三角形の被覆画素を列挙する numba カーネル。
なぜ: 画素単位の内側ループだけをコンパイルし、色の書き込み（折り返し/範囲外の扱い）は
      `RasterCanvas` 側の配列演算にまとめるため。

出力はいずれも `(K, 2) int64` の `(x, y)` 列で、1 回の呼び出し内に同じ画素は現れない。
`PXM_USE_NUMBA=0` のときはコンパイルせず `py_func`（同一実装の Python 版）を使う。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from common import settings


@njit(cache=True)
def _line_pixels(x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    """整数端点間の Bresenham 線分（全 8 象限、端点を含む）。"""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    n = max(dx, -dy) + 1
    out = np.empty((n, 2), dtype=np.int64)
    err = dx + dy
    x = x0
    y = y0
    for k in range(n):
        out[k, 0] = x
        out[k, 1] = y
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return out


@njit(cache=True)
def _triangle_pixels(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    xmin: int,
    xmax: int,
    ymin: int,
    ymax: int,
) -> np.ndarray:
    """境界ボックス `[xmin, xmax] x [ymin, ymax]` 内で三角形に含まれる整数格子点。

    3 本の辺関数がすべて非負（巻き方向は面積の符号で吸収）なら内側とみなす。
    面積 0 の三角形は空を返す。
    """
    area = (x1 - x0) * (y2 - y0) - (y1 - y0) * (x2 - x0)
    if area == 0.0 or xmax < xmin or ymax < ymin:
        return np.empty((0, 2), dtype=np.int64)
    sign = 1.0 if area > 0.0 else -1.0
    out = np.empty(((xmax - xmin + 1) * (ymax - ymin + 1), 2), dtype=np.int64)
    count = 0
    for py in range(ymin, ymax + 1):
        fy = float(py)
        for px in range(xmin, xmax + 1):
            fx = float(px)
            w0 = ((x2 - x1) * (fy - y1) - (y2 - y1) * (fx - x1)) * sign
            if w0 < 0.0:
                continue
            w1 = ((x0 - x2) * (fy - y2) - (y0 - y2) * (fx - x2)) * sign
            if w1 < 0.0:
                continue
            w2 = ((x1 - x0) * (fy - y0) - (y1 - y0) * (fx - x0)) * sign
            if w2 < 0.0:
                continue
            out[count, 0] = px
            out[count, 1] = py
            count += 1
    return out[:count]


def round_coord(v: float) -> int:
    """画素座標への丸め（0.5 は正方向へ）。"""
    return int(math.floor(v + 0.5))


def line_pixels(x0: float, y0: float, x1: float, y1: float) -> np.ndarray:
    """実数端点を丸めて線分の画素列を返す。"""
    args = (round_coord(x0), round_coord(y0), round_coord(x1), round_coord(y1))
    if settings.get().USE_NUMBA:
        return _line_pixels(*args)
    return _line_pixels.py_func(*args)


def triangle_pixels(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    bounds: tuple[int, int, int, int],
) -> np.ndarray:
    """三角形の被覆画素。`bounds = (xmin, xmax, ymin, ymax)` は両端を含む。"""
    args = (
        float(p0[0]),
        float(p0[1]),
        float(p1[0]),
        float(p1[1]),
        float(p2[0]),
        float(p2[1]),
        int(bounds[0]),
        int(bounds[1]),
        int(bounds[2]),
        int(bounds[3]),
    )
    if settings.get().USE_NUMBA:
        return _triangle_pixels(*args)
    return _triangle_pixels.py_func(*args)


__all__ = ["line_pixels", "triangle_pixels", "round_coord"]
