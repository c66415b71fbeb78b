"""
どこで: `engine.export.image`。
何を: `RasterCanvas` を画像ファイルとして保存する/既定ビューアで表示するラッパ（Pillow）。
なぜ: 拡張子だけで PPM 直書きと PNG などへの変換を切り替え、外部変換コマンドに依存しないため。
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import numpy as np
from PIL import Image

from engine.render.canvas import RasterCanvas
from util.paths import ensure_output_dir

from .ppm import write_binary

logger = logging.getLogger(__name__)


def to_rgb8(canvas: RasterCanvas) -> np.ndarray:
    """`(height, width, 3)` uint8。深度が 255 以外なら 8bit へ線形に縮尺する。"""
    rgb = canvas.to_array()
    if canvas.depth == 255:
        return rgb.astype(np.uint8)
    scaled = np.rint(rgb.astype(np.float64) * (255.0 / canvas.depth))
    return np.clip(scaled, 0, 255).astype(np.uint8)


def to_pil(canvas: RasterCanvas) -> Image.Image:
    return Image.fromarray(to_rgb8(canvas))


def save_image(canvas: RasterCanvas, path: str | Path | None = None) -> Path:
    """キャンバスを保存し、保存先を返す。

    Parameters
    ----------
    path : str | Path | None
        出力先。`.ppm` は P6 をそのまま書く（深度を保持）。それ以外の拡張子は Pillow が
        推定する形式へ 8bit で変換する。None の場合は既定の `data/output/` に
        タイムスタンプ名の PNG で保存。

    Raises
    ------
    RuntimeError
        Pillow での書き出しに失敗した場合（未知の拡張子など）。
    """
    if path is None:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        p = _unique_path(ensure_output_dir() / f"{ts}_{canvas.width}x{canvas.height}.png")
    else:
        p = Path(path)
    if p.suffix.lower() == ".ppm":
        return write_binary(canvas, p)
    try:
        to_pil(canvas).save(p)
    except (ValueError, OSError) as e:
        raise RuntimeError(f"画像の書き出しに失敗: {p}: {e}") from e
    logger.info("wrote %s (%dx%d)", p, canvas.width, canvas.height)
    return p


def show_image(canvas: RasterCanvas, title: str | None = None) -> None:
    """既定の画像ビューアで表示する（Pillow の `Image.show`）。"""
    to_pil(canvas).show(title=title)


def _unique_path(path: Path) -> Path:
    if not path.exists():
        return path
    stem = path.stem
    suffix = path.suffix
    parent = path.parent
    i = 1
    while True:
        cand = parent / f"{stem}-{i}{suffix}"
        if not cand.exists():
            return cand
        i += 1


__all__ = ["to_rgb8", "to_pil", "save_image", "show_image"]
