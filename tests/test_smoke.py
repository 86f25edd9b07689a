from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import click
from typer.main import get_command
from typer.testing import CliRunner

from goconv import __version__
from goconv.main import app

runner = CliRunner()

CLEAN = {
    "lib/client/client.go": """\
        package client

        import "context"

        func NewClient(ctx context.Context) (*Client, error) {
            return &Client{}, nil
        }

        type Client struct{}
        """,
}

DIRTY = {
    "lib/client/client.go": """\
        package client

        import "example/internal/db"

        func Start() {
            go db.Open()
        }
        """,
    "internal/db/db.go": """\
        package db

        func Open() {}
        """,
}


def test_app_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_all_commands_have_help() -> None:
    click_app = get_command(app)
    assert isinstance(click_app, click.Group)
    for name in click_app.commands:
        result = runner.invoke(app, [name, "--help"])
        assert result.exit_code == 0, f"Command 'goconv {name} --help' failed!"
        assert "Usage:" in result.stdout


def test_rules_lists_every_rule() -> None:
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "RAW_GOROUTINE" in result.stdout
    assert "LAYER_VIOLATION" in result.stdout


def test_check_clean_module(go_module: Callable[..., Path]) -> None:
    root = go_module(CLEAN)
    result = runner.invoke(app, ["check", str(root)])
    assert result.exit_code == 0, result.stdout
    assert "No problems" in result.stdout


def test_check_reports_violations(go_module: Callable[..., Path]) -> None:
    root = go_module(DIRTY)
    result = runner.invoke(app, ["check", str(root)])
    assert result.exit_code == 1
    assert "must not import from internal package" in result.stdout
    assert "[RAW_GOROUTINE]" in result.stdout


def test_check_json_output(go_module: Callable[..., Path]) -> None:
    root = go_module(DIRTY)
    result = runner.invoke(app, ["check", str(root), "--format", "json"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    by_package = {entry["package"]: entry for entry in payload}
    assert set(by_package) == {"example/internal/db", "example/lib/client"}
    rules = [d["rule"] for d in by_package["example/lib/client"]["diagnostics"]]
    assert rules == ["LAYER_VIOLATION", "RAW_GOROUTINE"]
    assert by_package["example/internal/db"]["diagnostics"] == []


def test_check_disable_rules(go_module: Callable[..., Path]) -> None:
    root = go_module(DIRTY)
    result = runner.invoke(
        app, ["check", str(root), "-d", "raw_goroutine", "-d", "LAYER_VIOLATION"]
    )
    assert result.exit_code == 0, result.stdout


def test_check_unknown_rule(go_module: Callable[..., Path]) -> None:
    root = go_module(CLEAN)
    result = runner.invoke(app, ["check", str(root), "--disable", "NOPE"])
    assert result.exit_code == 2
    assert "Unknown rule" in result.stdout


def test_check_unknown_format(go_module: Callable[..., Path]) -> None:
    root = go_module(CLEAN)
    result = runner.invoke(app, ["check", str(root), "--format", "xml"])
    assert result.exit_code == 2


def test_check_missing_target(tmp_path: Path) -> None:
    result = runner.invoke(app, ["check", str(tmp_path / "nowhere")])
    assert result.exit_code == 2
    assert "Check failed" in result.stdout


def test_settings_error_uses_defaults(isolate_config: Path) -> None:
    isolate_config.write_text("jobs = = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "Settings Error" in result.stdout


def test_settings_disable_rules(go_module: Callable[..., Path], isolate_config: Path) -> None:
    isolate_config.write_text(
        'disabled_rules = ["RAW_GOROUTINE", "LAYER_VIOLATION"]\n', encoding="utf-8"
    )
    root = go_module(DIRTY)
    result = runner.invoke(app, ["check", str(root)])
    assert result.exit_code == 0, result.stdout


def test_check_text_lines_match_report_format(go_module: Callable[..., Path]) -> None:
    root = go_module(DIRTY)
    result = runner.invoke(app, ["check", str(root)])
    assert result.exit_code == 1
    client = root / "lib" / "client" / "client.go"
    lines = result.stdout.splitlines()
    assert f"{client}:3:8: must not import from internal package [LAYER_VIOLATION]" in lines
    assert (
        f"{client}:6:5: should not use raw goroutine, use goroutine pool instead [RAW_GOROUTINE]"
        in lines
    )
