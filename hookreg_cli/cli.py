"""Typer-based CLI for HookReg: hook-path discovery and regex synthesis."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__, config
from .analyzer import HookAnalyzer
from .config_manager import clear_analysis_config, load_analysis_config, save_analysis_config
from .errors import ConfigError, HookRegError
from .explain import explain
from .matcher import test as run_pattern
from .models import Catalog, MatchResult
from .regex_builder import SynthesisOptions
from .samples import SAMPLES
from .selfcheck import generate_test_cases, run_test_cases

console = Console()

app = typer.Typer(
    help="🪝 HookReg — find JavaScript hook paths and turn them into regexes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — persisted analysis defaults.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"HookReg CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """HookReg CLI: extract member/call chains from JavaScript and build hook regexes."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _read_source(source_file: Path) -> str:
    return source_file.read_text(encoding="utf-8", errors="ignore")


def _load_config(**overrides: Any) -> config.AnalysisConfig:
    try:
        return load_analysis_config(**overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))


def _print_json(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _paths_table(catalog: Catalog) -> Table:
    table = Table(title=f"Hook paths ({len(catalog)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Path", style="bold")
    table.add_column("Context")
    table.add_column("Args", justify="right")
    table.add_column("Line", justify="right", style="dim")
    for i, path in enumerate(catalog, start=1):
        count = path.argument_count if path.argument_count is not None else path.parameter_count
        table.add_row(
            str(i),
            path.kind.value,
            escape(path.text),
            path.context.value,
            "" if count is None else str(count),
            "" if path.line is None else str(path.line),
        )
    return table


def _print_matches(result: MatchResult) -> None:
    if not result.matches:
        console.print("[yellow]No matches.[/yellow]")
        return
    table = Table(title=f"Matches ({len(result.matches)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Match", style="green")
    table.add_column("Start", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Groups")
    for match in result.matches:
        groups = ", ".join("" if g is None else g for g in match.groups)
        table.add_row(
            str(match.index),
            escape(match.text),
            str(match.start),
            str(match.length),
            escape(groups),
        )
    console.print(table)


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@app.command("check")
def check_syntax(
    source_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JavaScript file."),
):
    """Check that a JavaScript file parses."""
    try:
        HookAnalyzer().parse(_read_source(source_file))
    except HookRegError as exc:
        _fail(f"Parse failed: {exc}")
    console.print("[green]Syntax OK.[/green]")


@app.command("paths")
def list_paths(
    source_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JavaScript file."),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Keep paths whose name or text contains this."),
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="function, method, property or all."),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Tree levels to visit."),
    tolerant: bool = typer.Option(False, "--tolerant", help="Analyse sources with syntax errors."),
    as_json: bool = typer.Option(False, "--json", help="Print the catalog as JSON."),
):
    """List the hook paths found in a JavaScript file."""
    cfg = _load_config(target=target, kind=kind, depth=depth)
    try:
        result = HookAnalyzer(tolerant=tolerant).analyze(_read_source(source_file), cfg)
    except HookRegError as exc:
        _fail(f"Parse failed: {exc}")

    if as_json:
        _print_json({"config": cfg.to_dict(), "paths": result.catalog.to_list()})
        return
    if not len(result.catalog):
        console.print("[yellow]No paths matched the filters.[/yellow]")
        return
    console.print(_paths_table(result.catalog))
    summary = result.summary()
    console.print(f"[dim]Found {summary.raw} paths, kept {summary.kept}.[/dim]")


@app.command("generate")
def generate(
    source_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JavaScript file."),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Keep paths whose name or text contains this."),
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="function, method, property or all."),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Tree levels to visit."),
    flexible: Optional[bool] = typer.Option(None, "--flexible/--exact", help="Tolerate renamed identifiers."),
    keep_tail: int = typer.Option(0, "--keep-tail", min=0, help="Trailing segments kept literal in flexible mode."),
    call_suffix: bool = typer.Option(True, "--call-suffix/--no-call-suffix", help="Allow an optional (...) after callables."),
    show_explanation: bool = typer.Option(False, "--explain", help="Explain how the regex is built."),
    self_test: bool = typer.Option(False, "--self-test", help="Run generated sample inputs against the regex."),
    tolerant: bool = typer.Option(False, "--tolerant", help="Analyse sources with syntax errors."),
    as_json: bool = typer.Option(False, "--json", help="Print the pattern as JSON."),
):
    """Generate a hook regex for the paths found in a JavaScript file."""
    cfg = _load_config(target=target, kind=kind, depth=depth, flexible=flexible)
    options = SynthesisOptions(keep_tail=keep_tail, call_suffix=call_suffix)
    try:
        result = HookAnalyzer(tolerant=tolerant).analyze(_read_source(source_file), cfg, options)
    except HookRegError as exc:
        _fail(f"Parse failed: {exc}")

    pattern = result.pattern
    if as_json:
        _print_json(pattern.to_dict())
        if pattern.is_empty:
            raise typer.Exit(code=1)
        return
    if pattern.is_empty:
        _fail("No paths matched the filters; no regex generated.")

    typer.echo(pattern.source)
    console.print(f"[dim]{pattern.mode.value} pattern from {len(result.catalog)} paths.[/dim]")

    if show_explanation:
        console.print(Panel(escape("\n".join(explain(pattern))), title="Explanation"))

    if self_test:
        outcomes = run_test_cases(pattern, generate_test_cases(result.catalog, pattern.mode))
        table = Table(title="Self-test")
        table.add_column("Case")
        table.add_column("Input")
        table.add_column("Result")
        for outcome in outcomes:
            status = "[green]pass[/green]" if outcome.passed else "[red]FAIL[/red]"
            table.add_row(escape(outcome.name), escape(outcome.input), status)
        console.print(table)
        if not all(o.passed for o in outcomes):
            raise typer.Exit(code=1)


@app.command("hook")
def hook_patterns(
    source_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JavaScript file."),
    hook: str = typer.Argument(..., help='Hook string, e.g. "MyApp.user.profile.getName()".'),
    keep_tail: int = typer.Option(config.DEFAULT_KEEP_TAIL, "--keep-tail", min=1, help="Trailing segments kept literal."),
    tie_break: str = typer.Option("first", "--tie-break", help="first or last among equally short chains."),
    tolerant: bool = typer.Option(False, "--tolerant", help="Analyse sources with syntax errors."),
    as_json: bool = typer.Option(False, "--json", help="Print the patterns as JSON."),
):
    """Build tail-anchored regexes for a known hook string."""
    try:
        result = HookAnalyzer(tolerant=tolerant).analyze_hook(
            _read_source(source_file), hook, keep_tail=keep_tail, tie_break=tie_break,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
    except HookRegError as exc:
        _fail(f"Parse failed: {exc}")

    if as_json:
        _print_json({
            "hook": str(result.target),
            "tail": result.tail.source,
            "smart": result.smart.source,
            "chain": result.best_chain.render() if result.best_chain else None,
        })
        return

    typer.echo(f"Tail pattern:  {result.tail.source}")
    if result.best_chain is None:
        console.print(f"[yellow]No chain in the source ends with {escape(str(result.target))}.[/yellow]")
        return
    typer.echo(f"Smart pattern: {result.smart.source}")
    typer.echo(f"Example chain: {result.best_chain.render()}")


@app.command("test")
def test_pattern(
    pattern: str = typer.Argument(..., help="Regular expression to test."),
    text: Optional[str] = typer.Argument(None, help="Text to search."),
    text_file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read the text from a file."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
):
    """Test a regex against text and list every match."""
    if text_file is not None:
        text = _read_source(text_file)
    if text is None:
        raise typer.BadParameter("Provide TEXT or --file.")

    result = run_pattern(pattern, text)
    if as_json:
        _print_json(result.to_dict())
    elif result.ok:
        _print_matches(result)
    else:
        console.print(f"[red]Regex error ({result.error.kind}):[/red] {escape(result.error.message)}")
    if not result.ok:
        raise typer.Exit(code=1)


@app.command("sample")
def show_sample(
    name: str = typer.Argument("default", help=f"One of: {', '.join(SAMPLES)}."),
):
    """Print a bundled JavaScript sample."""
    if name not in SAMPLES:
        raise typer.BadParameter(f"Unknown sample '{name}'. Choose from: {', '.join(SAMPLES)}")
    typer.echo(SAMPLES[name])


# ------------------------------------------------------------------
# Config group
# ------------------------------------------------------------------

@config_app.command("show")
def config_show():
    """Show the effective analysis defaults."""
    cfg = _load_config()
    table = Table(title="Analysis defaults")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    for key, value in cfg.to_dict().items():
        table.add_row(key, escape(repr(value)))
    console.print(table)
    console.print(f"[dim]{escape(str(config.CONFIG_FILE))}[/dim]")


@config_app.command("set")
def config_set(
    target: Optional[str] = typer.Option(None, "--target", "-t"),
    kind: Optional[str] = typer.Option(None, "--kind", "-k"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0),
    flexible: Optional[bool] = typer.Option(None, "--flexible/--exact"),
):
    """Persist analysis defaults."""
    try:
        saved = save_analysis_config(target=target, kind=kind, depth=depth, flexible=flexible)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
    if not saved:
        _fail(f"Could not write {config.CONFIG_FILE}")
    console.print("[green]Saved analysis defaults.[/green]")


@config_app.command("reset")
def config_reset():
    """Forget persisted analysis defaults."""
    if not clear_analysis_config():
        _fail(f"Could not write {config.CONFIG_FILE}")
    console.print("[green]Analysis defaults reset.[/green]")


if __name__ == "__main__":
    app()
