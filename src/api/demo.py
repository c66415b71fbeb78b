"""
どこで: `api.demo`（透視投影のコマ送りデモ）。
何を: 球 2 つ・直方体・トーラスを z 方向へ往復させつつ y 軸回りに回し、透視投影した各コマを PPM で書き出す。
なぜ: 形状生成 → 変換 → 投影 → 除算 → 画素座標 → 塗りの全段を 1 本の流れで確認するため。

コマ `i`（1 始まり）の変換は `translate(0, 0, -mv) → rotate_y(10 i - 5 N)`。
`mv` は 150 から始めて前半は 150 ずつ遠ざけ、後半は近づける。カメラは原点から -z を向く。
near 面にかかる三角形は除算の前に捨てる。
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from engine.core import projection
from engine.core import transform_utils as tf
from engine.core.geometry import GeometryMatrix
from engine.export.ppm import write_binary
from engine.render.canvas import RasterCanvas
from shapes import add_box, add_sphere, add_torus

logger = logging.getLogger(__name__)

FRAME_SIZE = 500
FRAME_DEPTH = 255
MOVE_START = 150.0
MOVE_STEP = 150.0
FOV_DEGREES = 90.0
NEAR, FAR = 1.0, 600.0
# このコマから近づき始める
TURN_FRAME = 6


def build_model() -> GeometryMatrix:
    """デモのシーン（ポリゴン行列）。"""
    m = GeometryMatrix.new_polygon_matrix()
    add_sphere(m, (130.0, 110.0, 90.0), 120.0)
    add_sphere(m, (-130.0, 100.0, 90.0), 120.0)
    add_box(m, (-60.0, -60.0, 50.0), 90.0, 90.0, 90.0)
    add_torus(m, (-30.0, -335.0, 90.0), 25.0, 200.0)
    return m


def frame_offsets(frames: int) -> list[float]:
    """各コマの奥行き `mv`。`TURN_FRAME` の手前までは遠ざかり、以降は戻る。"""
    mv = MOVE_START
    out: list[float] = []
    for i in range(1, frames + 1):
        mv = mv + MOVE_STEP if i < TURN_FRAME else mv - MOVE_STEP
        out.append(mv)
    return out


def _in_front(clip: GeometryMatrix) -> GeometryMatrix:
    """頂点のいずれかが near 面より手前（`w < NEAR`）にある三角形を除く。"""
    tris = clip.rows.reshape(-1, 3, 4)
    keep = (tris[:, :, 3] >= NEAR).all(axis=1)
    return GeometryMatrix(clip.kind, tris[keep].reshape(-1, 4))


def render_frame(
    model: GeometryMatrix, mv: float, angle: float, canvas: RasterCanvas
) -> RasterCanvas:
    """1 コマ分を `canvas` へ描く（キャンバスは先に消去する）。"""
    view = model.multiply(tf.compose(tf.translate(0.0, 0.0, -mv), tf.rotate_y(angle)))
    aspect = canvas.width / canvas.height
    clip = _in_front(
        view.multiply(projection.perspective(math.radians(FOV_DEGREES), aspect, NEAR, FAR))
    )
    clip.perspective_divide()
    clip.ndc_to_device(canvas.width, canvas.height)
    canvas.clear()
    canvas.render_polygon_matrix(clip)
    return canvas


def render_perspective_frames(out_dir: str | Path = ".", frames: int = 9) -> list[Path]:
    """`img1.ppm` ... `img{frames}.ppm` を `out_dir` に書き出し、パスの一覧を返す。"""
    if frames < 1:
        raise ValueError(f"frames は 1 以上です: got {frames}")
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    model = build_model()
    canvas = RasterCanvas(FRAME_SIZE, FRAME_SIZE, FRAME_DEPTH)
    written: list[Path] = []
    for i, mv in enumerate(frame_offsets(frames), start=1):
        angle = 10.0 * i - frames * 5.0
        render_frame(model, mv, angle, canvas)
        written.append(write_binary(canvas, out / f"img{i}.ppm"))
    logger.info("rendered %d frames into %s", len(written), out)
    return written


__all__ = ["build_model", "frame_offsets", "render_frame", "render_perspective_frames"]
