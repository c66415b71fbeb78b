"""
どこで: `engine.core.errors`
何を: コア演算が送出する例外型。
なぜ: 呼び出し側が「契約違反」と「内部不変条件の破綻」を型で区別できるようにするため。
"""

from __future__ import annotations


class DimensionMismatchError(ValueError):
    """行列積の次元不一致（4x4 以外の変換行列、列数 4 以外の点行列）。"""


class FillOverflowError(RuntimeError):
    """塗りつぶしの作業スタックが `width * height` を超えた。

    通常経路では発生しない。塗り色関数が収束しない（同一画素に異なる色を返し続ける）
    などのロジック欠陥を示すため、その塗り操作は中断される。
    """


__all__ = ["DimensionMismatchError", "FillOverflowError"]
