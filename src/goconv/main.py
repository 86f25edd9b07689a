from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .checker import CheckOptions, PackageReport, check_paths
from .core.config import LintSettings, SettingsLoadResult, load_settings
from .core.console import console, setup_logging
from .core.errors import GoconvError
from .engine.types import RuleId
from .report import count_by_rule, format_json, format_text

app = typer.Typer(help="goconv: convention checker for Go packages.")
logger = logging.getLogger(__name__)

EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


@dataclass
class AppState:
    settings: LintSettings
    settings_meta: SettingsLoadResult
    logger: logging.Logger


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a goconv settings file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings, meta = load_settings(config_path=config)
    app_logger = setup_logging(level=settings.log_level, verbose=verbose)
    ctx.obj = AppState(settings=settings, settings_meta=meta, logger=app_logger)

    if meta.error:
        console.print(
            Panel(
                f"[bold red]Settings Error - Using Defaults[/bold red]\n\n"
                f"Failed to load {escape(str(meta.path))}:\n{escape(meta.error)}",
                border_style="red",
            )
        )
    else:
        app_logger.debug(
            "Loaded settings from %s (file: %s, env overrides: %s)",
            meta.path,
            meta.file_loaded,
            sorted(meta.env_overrides),
        )


def _parse_disabled(names: list[str]) -> frozenset[RuleId]:
    rules: set[RuleId] = set()
    for name in names:
        key = name.strip().upper()
        if key not in RuleId.__members__:
            console.print(f"[red]Unknown rule:[/red] {escape(name)}")
            raise typer.Exit(code=EXIT_ERROR)
        rules.add(RuleId[key])
    return frozenset(rules)


def _print_text(reports: list[PackageReport]) -> None:
    text = format_text(reports)
    if text:
        console.print(escape(text), highlight=False, soft_wrap=True)


def _print_summary(reports: list[PackageReport]) -> None:
    diagnostics = [d for report in reports for d in report.diagnostics]
    files = sum(report.file_count for report in reports)
    if not diagnostics:
        console.print(f"[green]No problems[/green] in {len(reports)} packages ({files} files).")
        return

    table = Table(title="Problems by rule", box=box.SIMPLE, expand=False)
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right")
    counts = count_by_rule(diagnostics)
    for rule, count in sorted(counts.items(), key=lambda item: (-item[1], str(item[0]))):
        table.add_row(rule.name if rule else "-", str(count))
    console.print(table)
    console.print(
        f"[red]{len(diagnostics)} problems[/red] in {len(reports)} packages ({files} files)."
    )


@app.command("check")
def check(
    ctx: typer.Context,
    paths: list[Path] | None = typer.Argument(
        None, help="Files or directories to check (default: current directory)."
    ),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    disable: list[str] | None = typer.Option(
        None, "--disable", "-d", help="Rule identifier to ignore (repeatable)."
    ),
    tests: bool | None = typer.Option(
        None, "--tests/--no-tests", help="Also check *_test.go files."
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Packages checked in parallel."),
    module: str | None = typer.Option(
        None, "--module", "-m", help="Module path to use instead of the one in go.mod."
    ),
) -> None:
    """Check Go packages against the layering, naming and API-shape conventions."""
    state: AppState = ctx.obj
    settings = state.settings

    if output_format not in ("text", "json"):
        console.print(f"[red]Unknown format:[/red] {escape(output_format)}")
        raise typer.Exit(code=EXIT_ERROR)

    options = CheckOptions(
        tables=settings.rule_tables(),
        disabled=settings.disabled_rule_ids() | _parse_disabled(disable or []),
        include_tests=settings.include_tests if tests is None else tests,
        module_path=module,
        exclude_dirs=tuple(settings.exclude_dirs),
        jobs=jobs or settings.jobs,
    )
    state.logger.debug("Checking %s with %s", paths or ["."], options)

    try:
        reports = check_paths(paths or [Path(".")], options)
    except GoconvError as exc:
        console.print(f"[red]Check failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_ERROR) from exc

    if output_format == "json":
        typer.echo(format_json(reports))
    else:
        _print_text(reports)
        _print_summary(reports)

    if any(report.diagnostics for report in reports):
        raise typer.Exit(code=EXIT_VIOLATIONS)


@app.command("rules")
def list_rules() -> None:
    """List the conventions goconv checks."""
    table = Table(title="goconv rules", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Detects", style="white")
    for rule in RuleId:
        table.add_row(rule.name, rule.description)
    console.print(table)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the active settings and where they came from."""
    state: AppState = ctx.obj
    meta = state.settings_meta

    table = Table(title="Settings", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in state.settings.model_dump().items():
        table.add_row(key, escape(str(value)))
    console.print(table)

    meta_lines = [
        f"Path: {escape(str(meta.path))}",
        "File loaded: yes" if meta.file_loaded else "File loaded: no (using defaults + env)",
    ]
    if meta.env_overrides:
        meta_lines.append("Env overrides: " + ", ".join(sorted(meta.env_overrides)))
    console.print(Panel("\n".join(meta_lines), title="Settings source", box=box.SIMPLE))


@app.command("version")
def show_version() -> None:
    """Print the goconv version."""
    console.print(__version__)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
