"""
どこで: `common.settings`
何を: `PXM_*` 環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を避け、既定値/型の一貫性とテスト容易性を保つため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_choice, env_path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class _Settings:
    # ラスタライズカーネル（False で numba を経由せず Python 実装を直接呼ぶ）
    USE_NUMBA: bool = True

    # ロギング（CLI の既定レベル）
    LOG_LEVEL: str = "INFO"

    # 設定ファイル（未指定ならプロジェクトルートの config.yaml）
    CONFIG_FILE: str | None = None


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。"""
    _settings.USE_NUMBA = env_bool("PXM_USE_NUMBA", True)
    _settings.LOG_LEVEL = env_choice("PXM_LOG_LEVEL", "INFO", LOG_LEVELS)
    _settings.CONFIG_FILE = env_path("PXM_CONFIG")


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings", "LOG_LEVELS"]
