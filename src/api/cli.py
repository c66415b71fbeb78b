"""
どこで: `api.cli`（コンソールスクリプト `pixmatrix`）。
何を: スクリプト実行（`run`）と透視デモのコマ書き出し（`frames`）をサブコマンドとして提供。
なぜ: 形状/変換/描画の一連をシェルから再現できるようにするため。

使用例:
    pixmatrix run script.txt
    pixmatrix --log-level DEBUG frames --out-dir out --frames 9
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from common.logging import setup_default_logging
from common.settings import LOG_LEVELS

from .demo import render_perspective_frames
from .script import ScriptError, ScriptSession, run_script

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pixmatrix", description="software 3D rasterizer")
    p.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="ログレベル（既定は PXM_LOG_LEVEL または INFO）",
    )
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="スクリプトを実行する")
    run.add_argument("script", help="スクリプトファイル")

    frames = sub.add_parser("frames", help="透視デモのコマを PPM で書き出す")
    frames.add_argument("--out-dir", default=".", help="出力先ディレクトリ")
    frames.add_argument("--frames", type=int, default=9, help="コマ数")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_default_logging(args.log_level)

    if args.command == "run":
        try:
            run_script(args.script, ScriptSession.from_config())
        except ScriptError as e:
            logger.error("%s: %s", args.script, e)
            return 1
        except OSError as e:
            logger.error("スクリプトを開けません: %s", e)
            return 1
        return 0

    try:
        render_perspective_frames(args.out_dir, args.frames)
    except ValueError as e:
        logger.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
