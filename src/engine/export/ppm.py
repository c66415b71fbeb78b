"""
どこで: `engine.export.ppm`。
何を: `RasterCanvas` と PPM（P6 バイナリ / P3 ASCII）の相互変換。
なぜ: 画素ダンプの書き出しと、書き出した画像の読み戻し（検証/差分比較）を同じ規約で扱うため。

形式:
- ヘッダ `P6|P3 <width> <height> <maxval>`。`#` から行末まではコメント。
- P6 は maxval < 256 なら 1 チャネル 1 バイト、それ以上は 2 バイトのビッグエンディアン。
- 画素は行優先（上の行から）。
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from engine.render.canvas import RasterCanvas

logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n\x0b\x0c"


def _header(canvas: RasterCanvas, magic: str) -> bytes:
    return f"{magic}\n{canvas.width} {canvas.height} {canvas.depth}\n".encode("ascii")


def encode_binary(canvas: RasterCanvas) -> bytes:
    """P6 のバイト列を返す。"""
    rgb = canvas.to_array().reshape(-1, 3)
    dtype = np.uint8 if canvas.depth < 256 else np.dtype(">u2")
    return _header(canvas, "P6") + rgb.astype(dtype).tobytes()


def encode_ascii(canvas: RasterCanvas) -> bytes:
    """P3 のバイト列を返す（1 行 1 画素）。"""
    rgb = canvas.to_array().reshape(-1, 3)
    lines = [f"{r} {g} {b}" for r, g, b in rgb.tolist()]
    body = ("\n".join(lines) + "\n") if lines else ""
    return _header(canvas, "P3") + body.encode("ascii")


def write_binary(canvas: RasterCanvas, path: str | Path) -> Path:
    """P6 として保存し、保存先を返す。"""
    p = Path(path)
    p.write_bytes(encode_binary(canvas))
    logger.info("wrote %s (P6, %dx%d, depth=%d)", p, canvas.width, canvas.height, canvas.depth)
    return p


def write_ascii(canvas: RasterCanvas, path: str | Path) -> Path:
    """P3 として保存し、保存先を返す。"""
    p = Path(path)
    p.write_bytes(encode_ascii(canvas))
    logger.info("wrote %s (P3, %dx%d, depth=%d)", p, canvas.width, canvas.height, canvas.depth)
    return p


def _read_token(buf: bytes, pos: int) -> tuple[bytes, int]:
    """空白とコメントを読み飛ばして次のヘッダ語を返す。"""
    n = len(buf)
    while pos < n:
        c = buf[pos : pos + 1]
        if c == b"#":
            while pos < n and buf[pos : pos + 1] not in (b"\n", b"\r"):
                pos += 1
        elif c in _WHITESPACE:
            pos += 1
        else:
            break
    start = pos
    while pos < n and buf[pos : pos + 1] not in _WHITESPACE and buf[pos : pos + 1] != b"#":
        pos += 1
    if start == pos:
        raise ValueError("PPM ヘッダが途中で終わっています")
    return buf[start:pos], pos


def decode(buf: bytes) -> RasterCanvas:
    """PPM（P6 / P3）のバイト列から `RasterCanvas` を復元する。

    Raises
    ------
    ValueError
        未対応のマジック、ヘッダ不正、画素数の不足。
    """
    magic, pos = _read_token(buf, 0)
    if magic not in (b"P6", b"P3"):
        raise ValueError(f"未対応の PPM 形式です: {magic!r}")
    fields = []
    for _ in range(3):
        tok, pos = _read_token(buf, pos)
        try:
            fields.append(int(tok))
        except ValueError as e:
            raise ValueError(f"PPM ヘッダの数値が不正です: {tok!r}") from e
    width, height, depth = fields
    canvas = RasterCanvas(width, height, depth)
    count = width * height * 3

    if magic == b"P6":
        # ヘッダ直後の空白 1 文字を挟んで画素列
        raster = buf[pos + 1 :]
        dtype = np.uint8 if depth < 256 else np.dtype(">u2")
        itemsize = np.dtype(dtype).itemsize
        if len(raster) < count * itemsize:
            raise ValueError(
                f"画素データが不足しています: {len(raster)} bytes < {count * itemsize} bytes"
            )
        values = np.frombuffer(raster, dtype=dtype, count=count)
    else:
        tokens = buf[pos:].split()
        if len(tokens) < count:
            raise ValueError(f"画素データが不足しています: {len(tokens)} < {count}")
        values = np.array([int(t) for t in tokens[:count]], dtype=np.int64)

    canvas.load_array(values.astype(np.int64).reshape(-1, 3))
    return canvas


def read_ppm(path: str | Path) -> RasterCanvas:
    """PPM ファイルを読み込む。"""
    p = Path(path)
    canvas = decode(p.read_bytes())
    logger.debug("read %s (%dx%d, depth=%d)", p, canvas.width, canvas.height, canvas.depth)
    return canvas


__all__ = [
    "encode_binary",
    "encode_ascii",
    "write_binary",
    "write_ascii",
    "decode",
    "read_ppm",
]
