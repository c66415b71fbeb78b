"""
どこで: `util.utils`。
何を: プロジェクトルートの推定と YAML 構成の読み込み（フェイルソフト）。
なぜ: スクリプトセッションの既定値（キャンバス寸法/色/折り返し）をコード外で差し替えられるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("config を読み込めませんでした: %s (%s)", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - 上位に `.git` / `pyproject.toml` / `configs/` があるもっとも近いディレクトリ。
    - 見つからない場合は `start.parent.parent`（典型: <repo>/src/util → <repo>）。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / ".git").exists()
            or (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
        ):
            return parent
    return cur.parent.parent


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """2 段目（セクション内）までの上書きマージ。"""
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            merged = dict(out[key])
            merged.update(value)
            out[key] = merged
        else:
            out[key] = value
    return out


def load_config() -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順:
    1) `configs/default.yaml`（ベース）
    2) `PXM_CONFIG` が指すファイル、なければルートの `config.yaml`（ベースに上書き）

    - いずれも存在しない/不正な場合は空辞書を返す。
    - セクション（`canvas` など）単位でキーを上書きする。
    """
    from common import settings

    project_root = _find_project_root(Path(__file__).parent)
    cfg: Dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        cfg = _merge(cfg, _safe_load_yaml(default_path))

    override = settings.get().CONFIG_FILE
    override_path = Path(override) if override else project_root / "config.yaml"
    if override_path.exists():
        cfg = _merge(cfg, _safe_load_yaml(override_path))

    return cfg
