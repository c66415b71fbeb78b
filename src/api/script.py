"""
どこで: `api.script`（行指向スクリプトの解釈）。
何を: コマンド列を読み、形状追加・変換の累積・適用・描画・保存を `ScriptSession` の状態へ順に反映する。
なぜ: 幾何エンジン/ラスタライザを、ファイル 1 本で再現できる手順として駆動するため。

書式:
- 1 行 1 コマンド。引数を取るコマンドは、次の行に空白区切りで引数を置く。
- 空行と `#` / `\\` で始まる行は読み飛ばす（引数行は読み飛ばさない）。
- 形状コマンドは `shapes` のレジストリから解決する。引数の個数と振り分け先
  （エッジ行列 / ポリゴン行列）は各関数の `__param_meta__` / `__target__` で決まる。

コマンド:
- 形状: `line` `circle` `hermite` `bezier`（エッジ）、`box` `sphere` `torus`（ポリゴン）
- 変換: `ident`、`scale sx sy sz`、`move tx ty tz`、`rotate axis deg`（`T = T × 新しい行列`）
- `apply`: 両行列に累積変換をその場で掛ける
- `clear`: 両行列を空にする
- `display` / `save <file>`: キャンバスを消去 → エッジ → ポリゴンの順に描画 → 表示/保存
- `quit`: 以降を読まずに終了

例外:
- 入力の誤り（引数の個数/数値/回転軸/未知のコマンド/引数行の欠落）は `ScriptError`。
  コア層の例外（`DimensionMismatchError` など）は包まずにそのまま伝播する。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping

import numpy as np

import shapes
from engine.core import transform_utils as tf
from engine.core.geometry import GeometryMatrix
from engine.export.image import save_image, show_image
from engine.render.canvas import PolygonMode, RasterCanvas
from util.utils import load_config

logger = logging.getLogger(__name__)

Viewer = Callable[[RasterCanvas], None]

_COMMENT_PREFIXES = ("#", "\\")


class ScriptError(ValueError):
    """スクリプトの入力エラー。`lineno` は 1 始まりの行番号。"""

    def __init__(self, lineno: int, message: str) -> None:
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno
        self.message = message


def _parse_floats(lineno: int, text: str) -> list[float]:
    try:
        return [float(tok) for tok in text.split()]
    except ValueError as e:
        raise ScriptError(lineno, f"数値として解釈できません: {text!r}") from e


def _expect(lineno: int, values: list[float], count: int, command: str) -> None:
    if len(values) != count:
        raise ScriptError(lineno, f"{command} の引数は {count} 個です: got {len(values)}")


def _canvas_from_config(section: Mapping[str, Any]) -> RasterCanvas:
    return RasterCanvas(
        int(section.get("width", 500)),
        int(section.get("height", 500)),
        int(section.get("depth", 255)),
        bg_color=section.get("bg_color"),
        fg_color=section.get("fg_color"),
        x_wrap=bool(section.get("x_wrap", False)),
        y_wrap=bool(section.get("y_wrap", False)),
        invert_y=bool(section.get("invert_y", False)),
    )


@dataclass
class ScriptSession:
    """スクリプト 1 本分の状態（エッジ行列・ポリゴン行列・累積変換・キャンバス）。

    Attributes
    ----------
    viewer : Callable[[RasterCanvas], None]
        `display` で呼ぶ表示関数。既定は Pillow の既定ビューア。
    polygon_mode : {"fill", "wire"}
        ポリゴン行列の描画方法。
    """

    edges: GeometryMatrix = field(default_factory=GeometryMatrix.new_edge_matrix)
    polygons: GeometryMatrix = field(default_factory=GeometryMatrix.new_polygon_matrix)
    transform: np.ndarray = field(default_factory=tf.identity)
    canvas: RasterCanvas = field(default_factory=lambda: RasterCanvas(500, 500, 255))
    polygon_mode: PolygonMode = "fill"
    viewer: Viewer = show_image
    saved: list[Path] = field(default_factory=list)
    stopped: bool = False

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any] | None = None, **overrides: Any
    ) -> "ScriptSession":
        """設定（既定は `load_config()`）の `canvas` セクションから初期化する。"""
        cfg = load_config() if config is None else config
        section = cfg.get("canvas") or {}
        overrides.setdefault("canvas", _canvas_from_config(section))
        overrides.setdefault("polygon_mode", section.get("polygon_mode", "fill"))
        return cls(**overrides)

    # ── 実行 ──────────────────────────
    def execute(self, lines: Iterable[str]) -> "ScriptSession":
        """行の列を先頭から解釈する。`quit` に達するか行が尽きたら戻る。"""
        it: Iterator[tuple[int, str]] = enumerate(lines, start=1)
        for lineno, raw in it:
            command = raw.strip()
            if not command or command.startswith(_COMMENT_PREFIXES):
                continue
            self._dispatch(lineno, command, it)
            if self.stopped:
                logger.debug("quit at line %d", lineno)
                break
        return self

    def _dispatch(self, lineno: int, command: str, it: Iterator[tuple[int, str]]) -> None:
        if shapes.is_shape_registered(command):
            self._add_shape(command, self._argument_line(lineno, command, it))
            return
        handler = _NO_ARG_COMMANDS.get(command)
        if handler is not None:
            handler(self)
            return
        handler_with_arg = _ARG_COMMANDS.get(command)
        if handler_with_arg is not None:
            handler_with_arg(self, *self._argument_line(lineno, command, it))
            return
        raise ScriptError(lineno, f"未知のコマンドです: {command!r}")

    @staticmethod
    def _argument_line(
        lineno: int, command: str, it: Iterator[tuple[int, str]]
    ) -> tuple[int, str]:
        try:
            arg_lineno, raw = next(it)
        except StopIteration:
            raise ScriptError(lineno, f"{command} の引数行がありません") from None
        return arg_lineno, raw.strip()

    # ── 形状 ──────────────────────────
    def _add_shape(self, name: str, arg: tuple[int, str]) -> None:
        lineno, text = arg
        fn = shapes.get_shape(name)
        values = _parse_floats(lineno, text)
        try:
            kwargs = shapes.bind_numeric_args(fn, values)
        except ValueError as e:
            raise ScriptError(lineno, f"{name}: {e}") from e
        target = self.edges if fn.__target__ == "edges" else self.polygons
        fn(target, **kwargs)
        logger.debug("%s -> %s (%d rows)", name, fn.__target__, target.n_rows)

    # ── 変換 ──────────────────────────
    def ident(self) -> None:
        self.transform = tf.identity()

    def _accumulate(self, t: np.ndarray) -> None:
        self.transform = tf.compose(self.transform, t)

    def _scale(self, lineno: int, text: str) -> None:
        v = _parse_floats(lineno, text)
        _expect(lineno, v, 3, "scale")
        self._accumulate(tf.scale(*v))

    def _move(self, lineno: int, text: str) -> None:
        v = _parse_floats(lineno, text)
        _expect(lineno, v, 3, "move")
        self._accumulate(tf.translate(*v))

    def _rotate(self, lineno: int, text: str) -> None:
        parts = text.split()
        if len(parts) != 2:
            raise ScriptError(lineno, f"rotate の引数は 2 個です: got {len(parts)}")
        axis = parts[0]
        (deg,) = _parse_floats(lineno, parts[1])
        try:
            self._accumulate(tf.rotate(axis, deg))
        except ValueError as e:
            raise ScriptError(lineno, str(e)) from e

    def apply(self) -> None:
        self.edges.multiply_in_place(self.transform)
        self.polygons.multiply_in_place(self.transform)

    def clear(self) -> None:
        self.edges.clear()
        self.polygons.clear()

    # ── 出力 ──────────────────────────
    def render(self) -> RasterCanvas:
        """キャンバスを消去し、エッジ → ポリゴンの順に描く。"""
        self.canvas.clear()
        self.canvas.render_edge_matrix(self.edges)
        self.canvas.render_polygon_matrix(self.polygons, self.polygon_mode)
        return self.canvas

    def display(self) -> None:
        self.viewer(self.render())
        logger.info(
            "display (%d edges, %d triangles)",
            self.edges.n_rows // 2,
            self.polygons.n_rows // 3,
        )

    def _save(self, lineno: int, text: str) -> None:
        if not text:
            raise ScriptError(lineno, "save にはファイル名が必要です")
        self.saved.append(save_image(self.render(), text))

    def quit(self) -> None:
        self.stopped = True


_NO_ARG_COMMANDS: dict[str, Callable[[ScriptSession], None]] = {
    "ident": ScriptSession.ident,
    "apply": ScriptSession.apply,
    "clear": ScriptSession.clear,
    "display": ScriptSession.display,
    "quit": ScriptSession.quit,
}

_ARG_COMMANDS: dict[str, Callable[[ScriptSession, int, str], None]] = {
    "scale": ScriptSession._scale,
    "move": ScriptSession._move,
    "rotate": ScriptSession._rotate,
    "save": ScriptSession._save,
}


def run_script(
    source: str | Path | Iterable[str], session: ScriptSession | None = None
) -> ScriptSession:
    """スクリプトを実行して最終状態のセッションを返す。

    Parameters
    ----------
    source : str | Path | Iterable[str]
        ファイルパス、または行の列。
    session : ScriptSession | None
        既存のセッション。None なら `ScriptSession.from_config()`。
    """
    sess = session if session is not None else ScriptSession.from_config()
    if isinstance(source, (str, Path)):
        path = Path(source)
        logger.info("run script %s", path)
        with path.open("r", encoding="utf-8") as f:
            return sess.execute(f)
    return sess.execute(source)


__all__ = ["ScriptSession", "ScriptError", "run_script"]
