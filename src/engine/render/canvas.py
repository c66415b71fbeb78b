"""
どこで: `engine.render.canvas`
何を: 折り返しアドレス指定付きの画素バッファ `RasterCanvas` と、線分/三角形の描画・4 近傍塗りつぶし。
なぜ: 変換済みの `GeometryMatrix` を最終的な画素列へ落とす唯一の出口を用意するため。

データモデル（不変条件）:
- `_data: int64 ndarray (width * height,)`: 行優先。各要素はパック済み RGB（`util.color.pack_rgb`）。
- 長さは常に `width * height`。添字計算はこの範囲外を読み書きしない。
- 画素は「最後の書き込みが勝つ」。描画順以外の状態は持たない。

アドレス指定:
- 折り返し無効の軸では `[0, extent)` の外は「画素なし」（黙って捨てる）。
- 折り返し有効の軸では extent を法として巻き戻す（負の剰余も正しく扱う）。
- `invert_y` は巻き戻し後の y を `height - y - 1` へ写す。
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterator, Literal, Sequence

import numpy as np

from engine.core.errors import FillOverflowError
from engine.core.geometry import GeometryMatrix
from util.color import MAX_DEPTH, RGB, pack_array, pack_rgb, to_rgb, unpack_array, unpack_rgb

from .rasterize import line_pixels, round_coord, triangle_pixels

logger = logging.getLogger(__name__)

PolygonMode = Literal["fill", "wire"]
FillFn = Callable[[float, float], tuple[int, int, int]]


# 折り返し軸で、これを超える周回数にまたがる線分/三角形は描かない
_MAX_WRAP_SPAN = 4


def _wrap_shift(values: tuple[float, ...], extent: int) -> tuple[float, ...] | None:
    """折り返し軸の座標を extent の整数倍だけずらし、最小値を `[0, extent)` に入れる。

    広がりが `_MAX_WRAP_SPAN * extent` を超えるなら None（退化として扱う）。
    """
    lo = min(values)
    if max(values) - lo > _MAX_WRAP_SPAN * extent:
        return None
    shift = math.floor(lo / extent) * extent
    return tuple(v - shift for v in values)


def _clip_segment(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    x_range: tuple[float, float] | None,
    y_range: tuple[float, float] | None,
) -> tuple[float, float, float, float] | None:
    """Liang–Barsky による線分クリップ。範囲 `None` の軸はクリップしない。完全に外なら None。"""
    dx = x1 - x0
    dy = y1 - y0
    checks: list[tuple[float, float]] = []
    if x_range is not None:
        checks.append((-dx, x0 - x_range[0]))
        checks.append((dx, x_range[1] - x0))
    if y_range is not None:
        checks.append((-dy, y0 - y_range[0]))
        checks.append((dy, y_range[1] - y0))
    t0, t1 = 0.0, 1.0
    for p, q in checks:
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return (x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


class RasterCanvas:
    """固定サイズの RGB 画素バッファ。

    Parameters
    ----------
    width, height : int
        画素数（1 以上）。
    depth : int, default 255
        チャネル最大値（1..65535）。PPM の maxval に対応。
    bg_color, fg_color : optional
        背景/前景色。既定は黒背景・`gray(depth)` の白前景。
    x_wrap, y_wrap : bool, default False
        各軸の折り返し（トーラス状アドレス指定）。
    invert_y : bool, default False
        y 軸を上下反転して格納する。
    """

    __slots__ = (
        "width",
        "height",
        "depth",
        "x_wrap",
        "y_wrap",
        "invert_y",
        "_fg",
        "_bg",
        "_data",
    )

    def __init__(
        self,
        width: int,
        height: int,
        depth: int = 255,
        *,
        bg_color: object | None = None,
        fg_color: object | None = None,
        x_wrap: bool = False,
        y_wrap: bool = False,
        invert_y: bool = False,
    ) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"キャンバスの大きさは正である必要があります: {width}x{height}")
        if not 1 <= int(depth) <= MAX_DEPTH:
            raise ValueError(f"depth は 1..{MAX_DEPTH} である必要があります: got {depth}")
        self.width = int(width)
        self.height = int(height)
        self.depth = int(depth)
        self.x_wrap = bool(x_wrap)
        self.y_wrap = bool(y_wrap)
        self.invert_y = bool(invert_y)
        self._bg = to_rgb(bg_color, self.depth) if bg_color is not None else RGB.gray(0)
        self._fg = to_rgb(fg_color, self.depth) if fg_color is not None else RGB.gray(self.depth)
        self._data = np.full(self.width * self.height, pack_rgb(self._bg), dtype=np.int64)

    # ── 色 ────────────────────────────
    @property
    def fg_color(self) -> RGB:
        return self._fg

    @property
    def bg_color(self) -> RGB:
        return self._bg

    def set_fg_color(self, color: object) -> None:
        self._fg = to_rgb(color, self.depth)

    def set_bg_color(self, color: object) -> None:
        """背景色を変更する（既存の画素は `clear()` まで変わらない）。"""
        self._bg = to_rgb(color, self.depth)

    def clear(self) -> None:
        """全画素を背景色で塗り直す。"""
        self._data.fill(pack_rgb(self._bg))

    # ── アドレス指定 ──────────────────
    def index(self, x: int, y: int) -> int | None:
        """画素 `(x, y)` のバッファ添字。該当画素がなければ None。"""
        w, h = self.width, self.height
        if (not self.x_wrap and (x < 0 or x >= w)) or (not self.y_wrap and (y < 0 or y >= h)):
            return None
        x %= w
        y %= h
        if self.invert_y:
            y = h - y - 1
        return y * w + x

    def _indices(self, pixels: np.ndarray) -> np.ndarray:
        """`(K, 2)` の画素列を有効な添字列へ解決する（`index` の配列版、該当なしは除外）。"""
        if pixels.shape[0] == 0:
            return np.empty(0, dtype=np.int64)
        xs = pixels[:, 0].astype(np.int64, copy=True)
        ys = pixels[:, 1].astype(np.int64, copy=True)
        keep = np.ones(xs.shape[0], dtype=bool)
        if self.x_wrap:
            xs %= self.width
        else:
            keep &= (xs >= 0) & (xs < self.width)
        if self.y_wrap:
            ys %= self.height
        else:
            keep &= (ys >= 0) & (ys < self.height)
        if self.invert_y:
            ys = self.height - ys - 1
        return (ys * self.width + xs)[keep]

    # ── 画素アクセス ──────────────────
    def plot(self, x: float, y: float) -> None:
        """前景色で 1 画素を書く（座標は線分と同じ規則で丸める）。該当画素がなければ何もしない。"""
        idx = self.index(round_coord(x), round_coord(y))
        if idx is not None:
            self._data[idx] = pack_rgb(self._fg)

    def get_pixel(self, x: float, y: float) -> RGB | None:
        idx = self.index(round_coord(x), round_coord(y))
        if idx is None:
            return None
        return unpack_rgb(self._data[idx])

    def plot_pixels(self, pixels: np.ndarray) -> int:
        """`(K, 2)` の画素列を前景色で一括描画し、書き込んだ画素数を返す。"""
        idx = self._indices(np.asarray(pixels))
        self._data[idx] = pack_rgb(self._fg)
        return int(idx.shape[0])

    # ── プリミティブ ──────────────────
    def draw_line(self, x0: float, y0: float, x1: float, y1: float) -> int:
        """線分を描く。非有限の座標を含む線分と、折り返し軸で広がりすぎた線分は描かない。"""
        if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
            return 0
        if self.x_wrap:
            xs = _wrap_shift((x0, x1), self.width)
            if xs is None:
                return 0
            x0, x1 = xs
        if self.y_wrap:
            ys = _wrap_shift((y0, y1), self.height)
            if ys is None:
                return 0
            y0, y1 = ys
        x_range = None if self.x_wrap else (-1.0, float(self.width))
        y_range = None if self.y_wrap else (-1.0, float(self.height))
        clipped = _clip_segment(x0, y0, x1, y1, x_range, y_range)
        if clipped is None:
            return 0
        return self.plot_pixels(line_pixels(*clipped))

    def fill_triangle(
        self,
        p0: Sequence[float],
        p1: Sequence[float],
        p2: Sequence[float],
    ) -> int:
        """三角形の内部（辺上を含む）を前景色で塗る。折り返し軸で広がりすぎた三角形は描かない。"""
        xs: tuple[float, ...] = (float(p0[0]), float(p1[0]), float(p2[0]))
        ys: tuple[float, ...] = (float(p0[1]), float(p1[1]), float(p2[1]))
        if not all(math.isfinite(v) for v in xs + ys):
            return 0
        if self.x_wrap:
            shifted = _wrap_shift(xs, self.width)
            if shifted is None:
                return 0
            xs = shifted
        if self.y_wrap:
            shifted = _wrap_shift(ys, self.height)
            if shifted is None:
                return 0
            ys = shifted
        xmin, xmax = math.ceil(min(xs)), math.floor(max(xs))
        ymin, ymax = math.ceil(min(ys)), math.floor(max(ys))
        if not self.x_wrap:
            xmin, xmax = max(xmin, 0), min(xmax, self.width - 1)
        if not self.y_wrap:
            ymin, ymax = max(ymin, 0), min(ymax, self.height - 1)
        if xmax < xmin or ymax < ymin:
            return 0
        pixels = triangle_pixels(
            (xs[0], ys[0]), (xs[1], ys[1]), (xs[2], ys[2]), (xmin, xmax, ymin, ymax)
        )
        return self.plot_pixels(pixels)

    def render_edge_matrix(self, m: GeometryMatrix) -> None:
        """エッジ行列を 2 行ずつ線分として描く（x, y のみ使用）。"""
        plotted = 0
        for a, b in m.edges():
            plotted += self.draw_line(a[0], a[1], b[0], b[1])
        logger.debug("render_edge_matrix: %d edges, %d pixels", m.n_rows // 2, plotted)

    def render_polygon_matrix(self, m: GeometryMatrix, mode: PolygonMode = "fill") -> None:
        """ポリゴン行列を 3 行ずつ三角形として描く。

        Parameters
        ----------
        mode : {"fill", "wire"}, default "fill"
            "fill" は内部を塗る。"wire" は 3 辺のみ描く。
        """
        if mode not in ("fill", "wire"):
            raise ValueError(f"mode は 'fill' か 'wire' です: got {mode!r}")
        plotted = 0
        for a, b, c in m.triangles():
            if mode == "fill":
                plotted += self.fill_triangle(a, b, c)
            else:
                plotted += self.draw_line(a[0], a[1], b[0], b[1])
                plotted += self.draw_line(b[0], b[1], c[0], c[1])
                plotted += self.draw_line(c[0], c[1], a[0], a[1])
        logger.debug(
            "render_polygon_matrix(%s): %d triangles, %d pixels", mode, m.n_rows // 3, plotted
        )

    # ── 塗りつぶし ────────────────────
    def bound4_fill_with_fn(
        self,
        seed_x: int,
        seed_y: int,
        fill_fn: FillFn,
        boundary_color: object,
    ) -> int:
        """種点から 4 近傍へ広がる境界色付き塗りつぶし。塗った画素数を返す。

        各候補画素は、範囲外・境界色・既に `fill_fn(x, y)` の色である場合に打ち切る。
        それ以外は `fill_fn(x, y)` の色を書いて 4 近傍を候補に積む。`fill_fn` は
        浮動小数の画素座標を受け取るので、グラデーションなど位置依存の塗りができる。

        候補は積む時点で判定・着色するため、1 画素は（色が収束する限り）高々 1 度しか
        積まれず、作業スタックは `width * height` 以下に収まる。

        Raises
        ------
        FillOverflowError
            作業スタックが `width * height` を超えた（`fill_fn` が収束しないなど）。
        """
        bound = pack_rgb(to_rgb(boundary_color, self.depth))
        data = self._data
        limit = self.width * self.height
        stack: list[tuple[int, int]] = []

        def claim(x: int, y: int) -> None:
            idx = self.index(x, y)
            if idx is None:
                return
            current = int(data[idx])
            if current == bound:
                return
            color = pack_rgb(fill_fn(float(x), float(y)))
            if current == color:
                return
            data[idx] = color
            stack.append((x, y))

        filled = 0
        claim(int(seed_x), int(seed_y))
        while stack:
            filled += 1
            x, y = stack.pop()
            claim(x + 1, y)
            claim(x, y + 1)
            claim(x - 1, y)
            claim(x, y - 1)
            if len(stack) > limit:
                raise FillOverflowError(
                    f"塗りつぶしの作業スタックが上限 {limit} を超えました（seed=({seed_x}, {seed_y})）"
                )
        logger.debug("bound4_fill_with_fn: seed=(%d, %d), %d pixels", seed_x, seed_y, filled)
        return filled

    # ── 読み出し ──────────────────────
    @property
    def data(self) -> np.ndarray:
        """パック済み画素列の読み取り専用ビュー（行優先、長さ `width * height`）。"""
        view = self._data.view()
        view.setflags(write=False)
        return view

    def iter_pixels(self) -> Iterator[RGB]:
        """行優先（上の行から）で画素色を返す。"""
        for v in self._data:
            yield unpack_rgb(v)

    def to_array(self) -> np.ndarray:
        """`(height, width, 3)` uint16 のチャネル配列。"""
        return unpack_array(self._data).reshape(self.height, self.width, 3)

    def load_array(self, rgb: np.ndarray) -> None:
        """`(height, width, 3)` または `(width * height, 3)` のチャネル配列で画素を置き換える。"""
        arr = np.asarray(rgb).reshape(-1, 3)
        if arr.shape[0] != self.width * self.height:
            raise ValueError(
                f"画素数が一致しません: got {arr.shape[0]}, expected {self.width * self.height}"
            )
        self._data[:] = pack_array(arr)

    def __eq__(self, other: object) -> bool:
        """大きさ・深度・画素が一致すれば等しい（前景/背景色や折り返し設定は比較しない）。"""
        if not isinstance(other, RasterCanvas):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.depth == other.depth
            and np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"RasterCanvas({self.width}x{self.height}, depth={self.depth})"


__all__ = ["RasterCanvas", "PolygonMode", "FillFn"]
