"""
どこで: `api` 入口（高レベル公開 API）。
何を: スクリプトセッション・透視デモ・形状デコレータを再輸出。
なぜ: 利用者が単一名前空間からスクリプト実行やデモ描画まで完結できるようにするため。

Usage:
    from api import run_script

    session = run_script(["box", "0 0 0 100 100 100", "save", "box.png"])
"""

from shapes.registry import shape as shape  # 公開唯一経路（api.shape）

from .demo import render_perspective_frames
from .script import ScriptError, ScriptSession, run_script

__all__ = [
    "ScriptSession",
    "ScriptError",
    "run_script",
    "render_perspective_frames",
    "shape",  # ユーザー拡張用デコレータ
]
