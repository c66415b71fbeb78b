from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_choice, env_path
from common.logging import LOG_FORMAT, setup_default_logging


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("0", False), ("yes", True), ("off", False), ("maybe", True)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("PXM_TEST_FLAG", raw)
    assert env_bool("PXM_TEST_FLAG", True) is expected


def test_env_choice_and_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PXM_TEST_LEVEL", "debug")
    assert env_choice("PXM_TEST_LEVEL", "INFO", ["DEBUG", "INFO"]) == "DEBUG"
    monkeypatch.setenv("PXM_TEST_LEVEL", "loud")
    assert env_choice("PXM_TEST_LEVEL", "INFO", ["DEBUG", "INFO"]) == "INFO"
    monkeypatch.setenv("PXM_TEST_PATH", "   ")
    assert env_path("PXM_TEST_PATH") is None


def test_reload_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PXM_LOG_LEVEL", "warning")
    monkeypatch.setenv("PXM_CONFIG", "/tmp/custom.yaml")
    settings.reload_from_env()
    try:
        s = settings.get()
        assert s.LOG_LEVEL == "WARNING"
        assert s.CONFIG_FILE == "/tmp/custom.yaml"
        assert s.USE_NUMBA is False  # conftest で 0
    finally:
        monkeypatch.delenv("PXM_LOG_LEVEL")
        monkeypatch.delenv("PXM_CONFIG")
        settings.reload_from_env()


def test_setup_default_logging_sets_level() -> None:
    root = logging.getLogger()
    before = root.level
    try:
        setup_default_logging("DEBUG")
        assert root.level == logging.DEBUG
        setup_default_logging(logging.WARNING)
        assert root.level == logging.WARNING
    finally:
        root.setLevel(before)
    assert "%(name)s" in LOG_FORMAT
