from __future__ import annotations

import logging

import pytest

from api import cli


def test_run_executes_script(tmp_path, no_user_config) -> None:
    out = tmp_path / "cli.ppm"
    script = tmp_path / "script"
    script.write_text(f"box\n10 10 0 50 50 50\nsave\n{out}\n", encoding="utf-8")
    assert cli.main(["run", str(script)]) == 0
    assert out.exists()


def test_run_reports_script_errors(tmp_path, no_user_config, caplog) -> None:
    script = tmp_path / "bad"
    script.write_text("line\n1 2\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert cli.main(["run", str(script)]) == 1
    assert "line 2" in caplog.text


def test_run_missing_file(tmp_path, no_user_config) -> None:
    assert cli.main(["run", str(tmp_path / "nope")]) == 1


def test_frames_subcommand(tmp_path, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(
        cli, "render_perspective_frames", lambda out, n: calls.append((out, n)) or []
    )
    assert cli.main(["--log-level", "DEBUG", "frames", "--out-dir", str(tmp_path), "--frames", "3"]) == 0
    assert calls == [(str(tmp_path), 3)]


def test_frames_rejects_bad_count(tmp_path) -> None:
    assert cli.main(["frames", "--out-dir", str(tmp_path), "--frames", "0"]) == 2


def test_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
