"""
どこで: `engine.core` サブパッケージ。
何を: 点行列 `GeometryMatrix`・変換行列ファクトリ・投影段・例外型を提供。
なぜ: 形状生成（shapes）とラスタライズ（engine.render）が共有する計算基盤を一箇所に置くため。
"""

from .errors import DimensionMismatchError, FillOverflowError
from .geometry import GeometryMatrix

__all__ = ["GeometryMatrix", "DimensionMismatchError", "FillOverflowError"]
