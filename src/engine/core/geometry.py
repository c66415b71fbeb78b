"""
同次座標の点行列 `GeometryMatrix`（プロジェクト中核モジュール）

本モジュールは、形状生成（shapes）・変換（transform_utils）・投影（projection）・
ラスタライズ（engine.render）の間を流れる唯一の幾何表現を提供する。

データモデル（不変条件）:
- `_buf: float64 ndarray (capacity, 4)`: 先頭 `n_rows` 行が有効。行は同次座標 `(x, y, z, w)`。
- 行優先の連続メモリ。`rows` は有効部分の読み取り専用ビュー。
- 列数は常に 4。形状生成は常に `w = 1` を挿入する。
- 容量は追記時に倍々で確保する（償却 O(1) の追記）。

2 種類の解釈（構造は同一、`kind` はラベルのみ）:
- エッジ行列 `kind="edge"`: 連続 2 行で 1 線分。`n_rows` は常に 2 の倍数。
- ポリゴン行列 `kind="polygon"`: 連続 3 行で 1 三角形（反時計回り）。`n_rows` は常に 3 の倍数。

行ベクトル規約:
- `geometry × transform`。各行を左から 4x4 行列へ掛ける。
- `T1 × T2` を適用すると `point × T1 × T2`。先に効かせたい変換を左に置く。

直感図（エッジ行列に 1 本追加）:

    m = GeometryMatrix.new_edge_matrix()
    m.append_edge((0, 0, 0), (10, 0, 0))
    # rows
    #   [[ 0, 0, 0, 1],
    #    [10, 0, 0, 1]]
"""

from __future__ import annotations

from typing import Iterator, Literal, Sequence

import numpy as np

from common.types import Vec3

from .errors import DimensionMismatchError
from .transform_utils import as_transform

MatrixKind = Literal["edge", "polygon"]

N_COLS = 4
_MIN_CAPACITY = 16


class GeometryMatrix:
    """同次座標点の可変長行列。

    フィールド:
    - `kind`: `"edge"` または `"polygon"`（名前付きコンストラクタで決まる）。
    - `n_rows`: 有効な行数。

    設計意図:
    - 追記（`append_edge` / `append_polygon` / shapes）だけが行を増やす。
    - 変換・投影は行列積で新しいバッファを作る（`multiply`）か、自身のバッファを
      積の結果で置き換える（`multiply_in_place`）。既存行を部分的に書き換える経路はない。
    """

    __slots__ = ("kind", "_buf", "_n")

    def __init__(self, kind: MatrixKind = "edge", rows: np.ndarray | None = None) -> None:
        if kind not in ("edge", "polygon"):
            raise ValueError(f"kind は 'edge' か 'polygon' です: got {kind!r}")
        self.kind: MatrixKind = kind
        if rows is None:
            self._buf = np.empty((_MIN_CAPACITY, N_COLS), dtype=np.float64)
            self._n = 0
        else:
            arr = np.asarray(rows, dtype=np.float64)
            if arr.ndim != 2 or arr.shape[1] != N_COLS:
                raise DimensionMismatchError(
                    f"点行列の形状は (N, 4) である必要があります: got {arr.shape}"
                )
            self._buf = np.ascontiguousarray(arr).copy()
            self._n = int(arr.shape[0])

    # ── ファクトリ ───────────────────
    @classmethod
    def new_edge_matrix(cls) -> "GeometryMatrix":
        """0 行のエッジ行列。"""
        return cls("edge")

    @classmethod
    def new_polygon_matrix(cls) -> "GeometryMatrix":
        """0 行のポリゴン行列。"""
        return cls("polygon")

    # ── 基本属性 ─────────────────────
    @property
    def n_rows(self) -> int:
        return self._n

    @property
    def n_cols(self) -> int:
        return N_COLS

    @property
    def rows(self) -> np.ndarray:
        """有効行 `(n_rows, 4)` の読み取り専用ビュー。"""
        view = self._buf[: self._n].view()
        view.setflags(write=False)
        return view

    @property
    def data(self) -> np.ndarray:
        """行優先のフラットな値列（長さ `n_rows * 4`、読み取り専用）。"""
        return self.rows.reshape(-1)

    @property
    def is_empty(self) -> bool:
        return self._n == 0

    def __len__(self) -> int:
        return self._n

    # ── 追記 ──────────────────────────
    def _reserve(self, extra: int) -> None:
        need = self._n + extra
        cap = self._buf.shape[0]
        if need <= cap:
            return
        new_cap = max(_MIN_CAPACITY, cap)
        while new_cap < need:
            new_cap *= 2
        grown = np.empty((new_cap, N_COLS), dtype=np.float64)
        grown[: self._n] = self._buf[: self._n]
        self._buf = grown

    def append_points(self, points: np.ndarray | Sequence[Sequence[float]]) -> None:
        """`(K, 3)` の点列を `w = 1` の行として末尾へ追加する（shapes 向けの一括経路）。"""
        pts = np.asarray(points, dtype=np.float64)
        if pts.size == 0:
            return
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise DimensionMismatchError(f"点列は (K, 3) である必要があります: got {pts.shape}")
        k = pts.shape[0]
        self._reserve(k)
        block = self._buf[self._n : self._n + k]
        block[:, :3] = pts
        block[:, 3] = 1.0
        self._n += k

    def append_edge(self, p0: Vec3, p1: Vec3) -> None:
        """線分 1 本（2 行）を追加する。"""
        self.append_points((p0, p1))

    def append_polygon(self, p0: Vec3, p1: Vec3, p2: Vec3) -> None:
        """三角形 1 枚（3 行）を追加する。頂点は反時計回りで渡すこと（呼び出し側の契約）。"""
        self.append_points((p0, p1, p2))

    def clear(self) -> None:
        """行数を 0 に戻す（容量は保持）。"""
        self._n = 0

    def copy(self) -> "GeometryMatrix":
        return GeometryMatrix(self.kind, self.rows)

    # ── 行列積 ────────────────────────
    def multiply(self, transform: np.ndarray) -> "GeometryMatrix":
        """行ベクトル積 `self × transform` を新しい行列として返す（純関数）。

        Raises
        ------
        DimensionMismatchError
            `transform` が (4, 4) でない場合。
        """
        t = as_transform(transform)
        return GeometryMatrix(self.kind, self.rows @ t)

    def multiply_in_place(self, transform: np.ndarray) -> None:
        """`self = self × transform`。バッファは積の結果で作り直す。"""
        t = as_transform(transform)
        product = self._buf[: self._n] @ t
        self._buf = np.empty((max(_MIN_CAPACITY, self._n), N_COLS), dtype=np.float64)
        self._buf[: self._n] = product

    def _replace_rows(self, rows: np.ndarray) -> None:
        self._buf = np.empty((max(_MIN_CAPACITY, rows.shape[0]), N_COLS), dtype=np.float64)
        self._buf[: rows.shape[0]] = rows
        self._n = int(rows.shape[0])

    # ── 投影（projection への薄い委譲、その場で置換） ──
    def perspective_divide(self) -> None:
        """各行の x, y, z を w で割り w を 1 にする（w == 0 の行はそのまま）。"""
        from engine.core import projection as _proj

        self._replace_rows(_proj.perspective_divide(self).rows)

    def ndc_to_device(self, width: float, height: float) -> None:
        """NDC `[-1, 1]` の x, y を画素座標へ写す（縦軸は反転）。"""
        from engine.core import projection as _proj

        self._replace_rows(_proj.ndc_to_device(self, width, height).rows)

    # ── 走査 ──────────────────────────
    def edges(self) -> Iterator[tuple[np.ndarray, np.ndarray]]:
        """連続 2 行ずつ `(p0, p1)` を返す。"""
        r = self.rows
        for i in range(0, self._n - 1, 2):
            yield r[i], r[i + 1]

    def triangles(self) -> Iterator[tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """連続 3 行ずつ `(p0, p1, p2)` を返す。"""
        r = self.rows
        for i in range(0, self._n - 2, 3):
            yield r[i], r[i + 1], r[i + 2]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeometryMatrix):
            return NotImplemented
        return self.kind == other.kind and np.array_equal(self.rows, other.rows)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"GeometryMatrix(kind={self.kind}, rows={self._n})"


__all__ = ["GeometryMatrix", "MatrixKind", "N_COLS"]
