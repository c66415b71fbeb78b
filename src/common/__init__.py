"""
どこで: `common` パッケージ。
何を: engine/shapes/api の各層で共有する軽量基盤（設定・ロギング・レジストリ・型エイリアス）。
なぜ: 依存の向きを一方向（common ← engine ← shapes ← api）に保つため。
"""

from .base_registry import BaseRegistry

__all__ = [
    "BaseRegistry",
]
