"""
どこで: `util.paths`。
何を: 画像の既定保存先ディレクトリの生成と解決。
なぜ: 保存先を省略した書き出しでも、プロジェクト配下の決まった場所へ集めるため。
"""

from __future__ import annotations

from pathlib import Path

from .utils import _find_project_root


def ensure_output_dir() -> Path:
    """画像出力先 `data/output/` を作成して返す。

    - プロジェクトルート直下の `data/output/` に作成する。
    - 既存の場合もそのまま Path を返す（`exist_ok=True`）。
    """
    root = _find_project_root(Path(__file__).parent)
    out = root / "data" / "output"
    out.mkdir(parents=True, exist_ok=True)
    return out
