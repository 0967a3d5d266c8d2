"""Command-line interface for argv-builder."""

from __future__ import annotations

import json
import sys
from pathlib import Path  # noqa: TC003

import typer
from rich.console import Console
from rich.markup import escape as escape_markup
from rich.panel import Panel
from rich.table import Table

from .core import build_runtime_context, dry_run, load_spec
from .types import MASKED_VALUE
from .windows import to_windows_command

app = typer.Typer(help="Build process argument lists with secret masking")
console = Console()


def _check_verbosity(verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        console.print("[red]Error: --verbose and --quiet cannot be used together[/red]")
        sys.exit(1)


def _print_plain(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


@app.command()
def render(
    spec_file: Path = typer.Argument(..., help="Path to YAML specification file"),
    windows: bool | None = typer.Option(None, "--windows/--no-windows", help="Override the windows setting"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
    working_dir: str | None = typer.Option(None, "--working-dir", help="Directory used to find dotenv files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Render the command line described by a specification, secrets masked."""
    try:
        _check_verbosity(verbose, quiet)

        spec = load_spec(spec_file)
        context = build_runtime_context(working_dir=working_dir)
        report = dry_run(spec, context, windows=windows)

        if report.build.errors:
            console.print("[red]Configuration errors:[/red]")
            for error in report.build.errors:
                console.print(f"  [red]• {escape_markup(error)}[/red]")
            sys.exit(1)

        if json_output:
            console.print_json(json.dumps(report.json_summary))
        elif quiet:
            _print_plain(report.build.display)
        else:
            if verbose:
                _print_warnings(report.build.warnings)
                console.print(Panel(escape_markup(report.text_summary), title="Command Plan"))
            else:
                _print_plain(report.build.display)

    except Exception as e:
        console.print(f"[red]Error: {escape_markup(str(e))}[/red]", highlight=False)
        sys.exit(1)


@app.command()
def validate(
    spec_file: Path = typer.Argument(..., help="Path to YAML specification file"),
    strict: bool = typer.Option(False, "--strict", help="Enable strict validation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Validate a command specification."""
    try:
        _check_verbosity(verbose, quiet)

        # Load specification (this will validate schema)
        spec = load_spec(spec_file)

        if verbose and not quiet:
            console.print(f"[blue]Loaded specification from {spec_file}[/blue]")
            console.print(f"Version: {spec.version}")
            console.print(f"Providers: {len(spec.variable_providers)}")
            console.print(f"Arguments: {len(spec.arguments)}")
            console.print("[blue]Performing semantic validation...[/blue]")

        from .validation import semantic_validate
        semantic_errors = semantic_validate(spec, strict=strict)

        if semantic_errors:
            console.print("[red]Semantic validation failed:[/red]")
            for error in semantic_errors:
                console.print(f"  [red]• {escape_markup(error)}[/red]")
            sys.exit(1)

        if verbose and not quiet:
            console.print("[blue]Performing dry run validation...[/blue]")

        report = dry_run(spec, build_runtime_context())

        if report.build.errors:
            console.print("[red]Validation failed:[/red]")
            for error in report.build.errors:
                console.print(f"  [red]• {escape_markup(error)}[/red]")
            sys.exit(1)

        if verbose and not quiet:
            _print_warnings(report.build.warnings)

        if not quiet:
            if strict:
                console.print("[green]✓ Specification is valid (strict mode)[/green]")
            else:
                console.print("[green]✓ Specification is valid[/green]")

    except Exception as e:
        console.print(f"[red]Validation error: {escape_markup(str(e))}[/red]", highlight=False)
        sys.exit(1)


@app.command()
def explain(
    spec_file: Path = typer.Argument(..., help="Path to YAML specification file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Explain how a specification turns into arguments."""
    try:
        _check_verbosity(verbose, quiet)

        spec = load_spec(spec_file)

        if verbose and not quiet:
            console.print(f"[blue]Loaded specification from {spec_file}[/blue]")

        report = dry_run(spec, build_runtime_context())
        _display_explanation(report)

        if verbose and not quiet:
            _print_warnings(report.build.warnings)

    except Exception as e:
        console.print(f"[red]Error: {escape_markup(str(e))}[/red]", highlight=False)
        sys.exit(1)


@app.command()
def escape(
    args: list[str] = typer.Argument(..., help="Arguments to wrap, pass them after --"),
) -> None:
    """Print the cmd.exe command that runs ARGS and returns their exit code."""
    wrapped = to_windows_command(args)
    for arg in wrapped.to_array():
        _print_plain(arg)


@app.command()
def print_schema() -> None:
    """Print the JSON schema for specifications."""
    from .models import CommandSpec

    schema = CommandSpec.model_json_schema()
    console.print_json(json.dumps(schema))


def _display_explanation(report) -> None:
    """Display detailed explanation of a dry run."""
    arguments_table = Table(title="Arguments")
    arguments_table.add_column("Name", style="cyan")
    arguments_table.add_column("Kind", style="magenta")
    arguments_table.add_column("Status", style="green")
    arguments_table.add_column("Values", style="yellow")

    for resolved_entry in report.build.resolved:
        if resolved_entry.errors:
            status = "✗ Error"
            values_display = escape_markup("; ".join(resolved_entry.errors))
        else:
            status = "✓ Resolved"
            values_display = escape_markup(" ".join(
                MASKED_VALUE if argument.secret else argument.value
                for argument in resolved_entry.arguments
            ))

        arguments_table.add_row(
            resolved_entry.name,
            resolved_entry.entry.kind,
            status,
            values_display,
        )

    console.print(arguments_table)

    argv_table = Table(title="Final Argument Vector")
    argv_table.add_column("#", style="cyan")
    argv_table.add_column("Argument", style="green")
    argv_table.add_column("Masked", style="yellow")

    for index, (arg, secret) in enumerate(zip(report.build.masked_argv, report.build.mask)):
        argv_table.add_row(str(index), escape_markup(arg), "yes" if secret else "")

    console.print(argv_table)

    console.print("\n[bold]Command Line:[/bold]")
    _print_plain(report.build.display)


if __name__ == "__main__":
    app()
