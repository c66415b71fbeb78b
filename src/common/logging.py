"""
プロジェクト向けの軽量ロギングユーティリティ。

要点:
- 各モジュールは `logging.getLogger(__name__)` でロガーを取得する。
- CLI など上位の入口からのみ `setup_default_logging` を呼び、最小構成を 1 度だけ適用する。
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_default_logging(level: int | str | None = None) -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - `level` 省略時は `common.settings` の `LOG_LEVEL`（`PXM_LOG_LEVEL`）を使う
    - ルートロガーにハンドラが既にあればレベルだけ合わせる
    """
    if level is None:
        from common import settings

        level = settings.get().LOG_LEVEL
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(lvl)
        return
    logging.basicConfig(level=lvl, format=LOG_FORMAT)


__all__ = ["setup_default_logging", "LOG_FORMAT"]
