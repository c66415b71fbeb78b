from __future__ import annotations

import pytest

from common import settings
from util.utils import load_config


@pytest.fixture()
def override(monkeypatch: pytest.MonkeyPatch, tmp_path):
    path = tmp_path / "override.yaml"
    monkeypatch.setenv("PXM_CONFIG", str(path))
    settings.reload_from_env()
    yield path
    monkeypatch.delenv("PXM_CONFIG", raising=False)
    settings.reload_from_env()


def test_default_config_has_canvas_section(no_user_config) -> None:
    cfg = load_config()
    canvas = cfg["canvas"]
    assert canvas["width"] == 500 and canvas["height"] == 500
    assert canvas["polygon_mode"] == "fill"


def test_override_merges_per_section(override) -> None:
    override.write_text("canvas:\n  width: 64\n  invert_y: true\n", encoding="utf-8")
    canvas = load_config()["canvas"]
    assert canvas["width"] == 64
    assert canvas["invert_y"] is True
    assert canvas["height"] == 500


def test_broken_override_is_ignored(override) -> None:
    override.write_text("canvas: [unclosed\n", encoding="utf-8")
    assert load_config()["canvas"]["width"] == 500
