"""
どこで: `common.env`
何を: 環境変数の軽量パースヘルパを提供。
なぜ: `os.getenv` と不正値ガードを設定モジュールへ一元化するため。
"""

from __future__ import annotations

import os
from typing import Iterable, Optional

_TRUE_WORDS = {"true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"false", "f", "no", "n", "off"}


def env_bool(name: str, default: bool = False) -> bool:
    """真偽環境変数を取得（0/1, true/false, yes/no を許容）。"""
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = raw.strip().lower()
    try:
        return int(s) != 0
    except ValueError:
        pass
    if s in _TRUE_WORDS:
        return True
    if s in _FALSE_WORDS:
        return False
    return bool(default)


def env_choice(name: str, default: str, choices: Iterable[str]) -> str:
    """列挙値の環境変数を取得（大文字小文字は無視、候補外は既定値）。"""
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().upper()
    allowed = {c.upper() for c in choices}
    return s if s in allowed else default


def env_path(name: str) -> Optional[str]:
    """パス系の環境変数を取得（空文字は未設定扱い）。"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()
