"""共通フィクスチャ。

- 乱数シード固定
- 小さな点行列とキャンバス
- numba を経由しない設定（コンパイル待ちを避ける）
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings
from engine.core.geometry import GeometryMatrix
from engine.render.canvas import RasterCanvas


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def pure_python_kernels(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """ラスタライズカーネルを Python 実装で動かす（numba 版は個別テストで確認）。"""
    monkeypatch.setenv("PXM_USE_NUMBA", "0")
    settings.reload_from_env()
    yield
    monkeypatch.delenv("PXM_USE_NUMBA", raising=False)
    settings.reload_from_env()


@pytest.fixture()
def edge_line() -> GeometryMatrix:
    m = GeometryMatrix.new_edge_matrix()
    m.append_edge((0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    return m


@pytest.fixture()
def unit_triangle() -> GeometryMatrix:
    m = GeometryMatrix.new_polygon_matrix()
    m.append_polygon((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    return m


@pytest.fixture()
def canvas() -> RasterCanvas:
    return RasterCanvas(20, 20, 255)


@pytest.fixture()
def no_user_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """ルートの config.yaml を拾わないように、存在しない上書き先を指す。"""
    monkeypatch.setenv("PXM_CONFIG", str(tmp_path / "absent.yaml"))
    settings.reload_from_env()
    yield
    monkeypatch.delenv("PXM_CONFIG", raising=False)
    settings.reload_from_env()
