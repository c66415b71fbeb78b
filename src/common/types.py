"""
どこで: `common` の型定義。
何を: 点/ベクトルの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に置き、循環 import と分散定義を避けるため。
"""

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


__all__ = ["Vec2", "Vec3"]
