"""
どこで: `engine.render` サブパッケージ。
何を: `GeometryMatrix` → 画素バッファの入口。`RasterCanvas` とラスタライズカーネルを提供。
なぜ: 計算（core）と画素化の責務を分離し、numba 依存をこの層に局所化するため。
"""

from .canvas import RasterCanvas

__all__ = ["RasterCanvas"]
