"""
どこで: `util.color`。
何を: 不変の色値 `RGB` / `HSL` と、キャンバス用の整数パック変換。
なぜ: キャンバス・PPM 入出力・スクリプト設定が同一の色表現と受理仕様を共有するため。

パック形式:
- 1 画素 = `(red << 32) | (green << 16) | blue`（各チャネル 16bit、深度は最大 65535）。
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

CHANNEL_BITS = 16
CHANNEL_MASK = (1 << CHANNEL_BITS) - 1
MAX_DEPTH = CHANNEL_MASK


class RGB(NamedTuple):
    """RGB 三つ組（各チャネルは 0..depth の整数）。"""

    red: int
    green: int
    blue: int

    @classmethod
    def gray(cls, value: int) -> "RGB":
        v = int(value)
        return cls(v, v, v)

    @classmethod
    def from_hex(cls, s: str, depth: int = 255) -> "RGB":
        """Hex 文字列から `depth` スケールの RGB を返す。

        受理形式: "#RRGGBB", "0xRRGGBB", "RRGGBB"（大文字/小文字は不問）。
        """
        r, g, b = parse_hex_color_str(s)
        d = int(depth)
        return cls(int(round(r * d)), int(round(g * d)), int(round(b * d)))


class HSL(NamedTuple):
    """HSL 三つ組（hue は度、saturation / lightness は 0..1）。"""

    hue: float
    saturation: float
    lightness: float

    def to_rgb(self, depth: int = 255) -> RGB:
        """`depth` スケールの RGB へ変換する。"""
        h = (float(self.hue) % 360.0) / 60.0
        s = _clamp01(self.saturation)
        lum = _clamp01(self.lightness)
        c = (1.0 - abs(2.0 * lum - 1.0)) * s
        x = c * (1.0 - abs(h % 2.0 - 1.0))
        m = lum - c / 2.0
        sector = int(h) % 6
        r1, g1, b1 = (
            (c, x, 0.0),
            (x, c, 0.0),
            (0.0, c, x),
            (0.0, x, c),
            (x, 0.0, c),
            (c, 0.0, x),
        )[sector]
        d = int(depth)
        return RGB(
            int(round((r1 + m) * d)),
            int(round((g1 + m) * d)),
            int(round((b1 + m) * d)),
        )


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> tuple[float, float, float]:
    """Hex 文字列から RGB(0–1) を返す。"""
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) != 6:
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0)


def to_rgb(value: object, depth: int = 255) -> RGB:
    """色指定（RGB / HSL / Hex 文字列 / 3 要素の list・tuple）を RGB へ正規化する。"""
    if isinstance(value, RGB):
        return value
    if isinstance(value, HSL):
        return value.to_rgb(depth)
    if isinstance(value, str):
        return RGB.from_hex(value, depth)
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return RGB(int(value[0]), int(value[1]), int(value[2]))
    raise ValueError(f"unsupported color value: {value!r}")


def pack_rgb(color: RGB | tuple[int, int, int]) -> int:
    """RGB を 1 つの整数へ詰める（各チャネルは 16bit に切り詰める）。"""
    r, g, b = color
    return ((int(r) & CHANNEL_MASK) << 32) | ((int(g) & CHANNEL_MASK) << 16) | (int(b) & CHANNEL_MASK)


def unpack_rgb(value: int) -> RGB:
    v = int(value)
    return RGB((v >> 32) & CHANNEL_MASK, (v >> 16) & CHANNEL_MASK, v & CHANNEL_MASK)


def unpack_array(values: np.ndarray) -> np.ndarray:
    """パック済み配列 `(N,)` を `(N, 3)` uint16 へ展開する。"""
    v = np.asarray(values, dtype=np.int64)
    out = np.empty((v.shape[0], 3), dtype=np.uint16)
    out[:, 0] = (v >> 32) & CHANNEL_MASK
    out[:, 1] = (v >> 16) & CHANNEL_MASK
    out[:, 2] = v & CHANNEL_MASK
    return out


def pack_array(rgb: np.ndarray) -> np.ndarray:
    """`(N, 3)` のチャネル配列をパック済み `(N,)` int64 へ詰める。"""
    a = np.asarray(rgb, dtype=np.int64) & CHANNEL_MASK
    return (a[:, 0] << 32) | (a[:, 1] << 16) | a[:, 2]


__all__ = [
    "RGB",
    "HSL",
    "MAX_DEPTH",
    "parse_hex_color_str",
    "to_rgb",
    "pack_rgb",
    "unpack_rgb",
    "pack_array",
    "unpack_array",
]
