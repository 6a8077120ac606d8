"""RefactorIQ CLI – Typer multi-command application."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from refactoriq.config.settings import RefactorIQSettings, load_settings
from refactoriq.core.analyzer import AnalysisReport, RefactorIQEngine, load_parse_result
from refactoriq.core.comparison import build_comparison
from refactoriq.core.syntax_tree import Language
from refactoriq.refactors.base_provider import ConfidenceLevel, RefactoringSuggestion
from refactoriq.rules.defaults import build_default_registry
from refactoriq.utils.logger import (
    console, create_panel, create_table, get_logger, print_error, print_info, print_success, print_warning,
    setup_logging,
)

__all__ = ["app"]

app = typer.Typer(
    name="refactoriq",
    help="Anti-pattern detection and confidence-scored refactoring for GlideScript and TypeScript.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_SEVERITY_COLOR = {"critical": "bold red", "high": "red", "medium": "yellow", "low": "cyan"}
_CONFIDENCE_COLOR = {ConfidenceLevel.HIGH: "green", ConfidenceLevel.MEDIUM: "yellow", ConfidenceLevel.LOW: "red"}

_FILE_ARG = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Source file to analyse")
_AST_OPT = typer.Option(None, "--ast", "-a", help="ESTree JSON for FILE (defaults to FILE.ast.json)")
_CONFIG_OPT = typer.Option(None, "--config", "-c", help="Path to refactoriq.yaml")
_VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
_QUIET_OPT = typer.Option(False, "--quiet", "-q", help="Only log errors")

logger = get_logger("cli")


def _load_settings(config: Path | None, source: Path) -> RefactorIQSettings:
    try:
        return load_settings(config_path=config, search_dir=source.resolve().parent)
    except ValidationError as exc:
        logger.debug("Configuration rejected for %s", source, exc_info=True)
        print_error(f"Invalid configuration:\n{exc}")
        raise typer.Exit(code=2)
    except yaml.YAMLError as exc:
        print_error(f"Could not read configuration: {exc}")
        raise typer.Exit(code=2)


def _run(source: Path, ast: Path | None, config: Path | None) -> AnalysisReport:
    settings = _load_settings(config, source)
    logger.debug("Loading syntax tree for %s from %s", source, ast or "sidecar")
    parse_result = load_parse_result(source, ast)
    with RefactorIQEngine(settings) as engine:
        return engine.run_analyze(parse_result)


def _banner() -> None:
    console.print(Panel(
        Text("RefactorIQ", style="bold magenta", justify="center"),
        subtitle="Confidence-scored refactoring",
        border_style="magenta", expand=False, padding=(0, 4),
    ))
    console.print()


def _print_diagnostics(report: AnalysisReport) -> None:
    for err in report.parse_errors:
        print_warning(f"Parse: {err.message} (line {err.line})")
    for result in report.rule_errors:
        print_warning(f"Rule {result.rule_id} failed: {result.error}")
    for err in report.provider_errors:
        print_warning(f"Provider {err.provider} failed on line {err.line}: {err.error}")


def _print_suggestion(s: RefactoringSuggestion, auto_fixable: bool) -> None:
    color = _CONFIDENCE_COLOR[s.confidence]
    header = (
        f"[bold]{s.title}[/bold]  [{color}]{s.confidence.value.upper()} {s.confidence_score}[/{color}]"
        + ("  [success]auto-fixable[/success]" if auto_fixable else "")
    )
    body = [
        header,
        s.description,
        f"[dim]Rule:[/dim] {s.rule_id}   [dim]Impact:[/dim] {s.impact.lines_changed} line(s), "
        f"{s.impact.complexity}, ~{s.impact.estimated_time}",
        f"[dim]Reasoning:[/dim] {s.reasoning}",
    ]
    for t in s.transformations:
        body.append(f"[dim]{t.type.value} L{t.start_line}:{t.start_column}-L{t.end_line}:{t.end_column}[/dim] {t.description}")
    console.print(Panel("\n".join(body), title=s.id, border_style=color, expand=True))


@app.command()
def analyze(
    file: Path = _FILE_ARG,
    ast: Optional[Path] = _AST_OPT,
    config: Optional[Path] = _CONFIG_OPT,
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text|json"),
    verbose: bool = _VERBOSE_OPT,
    quiet: bool = _QUIET_OPT,
) -> None:
    """Detect anti-patterns in a source file."""
    setup_logging(verbose=verbose, quiet=quiet)
    if output_format not in ("text", "json"):
        print_error(f"Unknown format '{output_format}'. Use text or json.")
        raise typer.Exit(code=2)

    if output_format == "json":
        report = _run(file, ast, config)
        typer.echo(json.dumps(report.to_dict(), indent=2, default=str))
        raise typer.Exit(code=report.exit_code)

    _banner()
    with console.status(f"[bold cyan]Analysing {file.name}…"):
        report = _run(file, ast, config)
    _print_diagnostics(report)

    if not report.issues:
        print_success(f"{file.name} is clean – no anti-patterns detected.")
        raise typer.Exit(code=0)

    table = Table(title=f"⚠️  Issues in {file.name}", show_lines=True, expand=True)
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Rule", style="bold")
    table.add_column("Message")
    for issue in report.issues:
        style = _SEVERITY_COLOR.get(issue.severity.value, "white")
        table.add_row(f"{issue.line}:{issue.column}", f"[{style}]{issue.severity.value.upper()}[/{style}]", issue.type, issue.message)
    console.print(table)

    stats = report.stats
    console.print(Panel(
        f"[bold]Total: {len(report.issues)}[/bold]  [bold red]Critical: {stats['critical']}[/bold red]  "
        f"[red]High: {stats['high']}[/red]  [yellow]Medium: {stats['medium']}[/yellow]  [cyan]Low: {stats['low']}[/cyan]\n"
        f"Suggestions: {len(report.suggestions)}  Auto-fixable: {len(report.auto_fixable)}",
        title="📋 Analysis Summary", border_style="cyan",
    ))
    raise typer.Exit(code=report.exit_code)


@app.command()
def suggest(
    file: Path = _FILE_ARG,
    ast: Optional[Path] = _AST_OPT,
    config: Optional[Path] = _CONFIG_OPT,
    auto_fix_only: bool = typer.Option(False, "--auto-fix-only", help="Only show auto-fixable suggestions"),
    verbose: bool = _VERBOSE_OPT,
    quiet: bool = _QUIET_OPT,
) -> None:
    """Show scored refactoring suggestions for a source file."""
    setup_logging(verbose=verbose, quiet=quiet)
    _banner()
    with console.status(f"[bold cyan]Generating suggestions for {file.name}…"):
        report = _run(file, ast, config)
    _print_diagnostics(report)

    auto_ids = {s.id for s in report.auto_fixable}
    suggestions = report.auto_fixable if auto_fix_only else report.suggestions
    if not suggestions:
        if auto_fix_only and report.suggestions:
            print_info("No suggestion meets the auto-fix confidence threshold.")
        else:
            print_success("No refactoring suggestions.")
        raise typer.Exit(code=0)

    for s in suggestions:
        _print_suggestion(s, s.id in auto_ids)
    print_info(f"{len(suggestions)} suggestion(s), {len(report.auto_fixable)} auto-fixable.")
    raise typer.Exit(code=0)


@app.command()
def compare(
    file: Path = _FILE_ARG,
    ast: Optional[Path] = _AST_OPT,
    config: Optional[Path] = _CONFIG_OPT,
    rule: Optional[str] = typer.Option(None, "--rule", "-r", help="Only consider suggestions for this rule id"),
    index: int = typer.Option(1, "--index", "-n", min=1, help="Which matching suggestion to compare (1-based)"),
    verbose: bool = _VERBOSE_OPT,
    quiet: bool = _QUIET_OPT,
) -> None:
    """Render a before/after comparison for one suggestion."""
    setup_logging(verbose=verbose, quiet=quiet)
    _banner()
    with console.status(f"[bold cyan]Preparing comparison for {file.name}…"):
        report = _run(file, ast, config)

    candidates = report.suggestions_for(rule) if rule else report.suggestions
    if not candidates:
        print_info("No suggestions to compare.")
        raise typer.Exit(code=0)
    if index > len(candidates):
        print_error(f"Only {len(candidates)} suggestion(s) available; got --index {index}.")
        raise typer.Exit(code=2)

    suggestion = candidates[index - 1]
    try:
        comparison = build_comparison(report.parse_result.source_code, suggestion, file_name=file.name)
    except ValueError as exc:
        print_error(f"Cannot apply suggestion {suggestion.id}: {exc}")
        raise typer.Exit(code=2)

    _print_suggestion(suggestion, any(s.id == suggestion.id for s in report.auto_fixable))
    if comparison.changed:
        console.print(Panel(Syntax(comparison.diff, "diff", word_wrap=True), title="🔀 Diff", border_style="cyan"))
    else:
        print_warning("Suggestion leaves the source unchanged.")
    if comparison.preview:
        console.print(create_panel(comparison.preview, title="💡 Example", style="green"))
    raise typer.Exit(code=0)


@app.command("rules")
def list_rules(
    language: Optional[Language] = typer.Option(None, "--language", "-l", help="Only rules for this language"),
) -> None:
    """List the built-in rules."""
    registry = build_default_registry()
    rules = [r for r in registry.list() if language is None or r.metadata.applies_to(language)]
    rows = [
        [r.metadata.id, r.metadata.language.value, r.metadata.category.value, r.metadata.severity.value, r.metadata.description]
        for r in rules
    ]
    console.print(create_table(
        "📚 Rules",
        [("Id", "bold"), ("Language", "cyan"), ("Category", ""), ("Severity", "yellow"), ("Description", "")],
        rows,
    ))
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
