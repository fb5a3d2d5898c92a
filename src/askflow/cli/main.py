"""CLI entry point for askflow.

Invoked as::

    askflow [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m askflow.cli.main

Commands
--------
run         Ask the questions defined in a YAML or JSON file
types       List registered prompt types
version     Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a text file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _load_document(path: str) -> Any:
    """Load a YAML or JSON document, exiting on error.

    JSON is a subset of YAML, so one loader handles both.
    """
    source = _read_source(path)
    try:
        return yaml.safe_load(source)
    except yaml.YAMLError as exc:
        err_console.print(f"[red]Error:[/red] Cannot parse {path}: {exc}")
        sys.exit(1)


def _dump(answers: dict[str, Any], output_format: str) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(answers, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return json.dumps(answers, indent=2, default=str)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="askflow")
def cli() -> None:
    """Declarative, conditional question flows for the terminal."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from askflow import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]askflow[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# types command
# ---------------------------------------------------------------------------


@cli.command(name="types")
def types_command() -> None:
    """List all registered prompt types, including entry-point plugins."""
    from askflow.prompts import BUILTIN_PROMPTS, default_registry

    default_registry.load_entrypoints()

    table = Table(title="Prompt types")
    table.add_column("Type", style="bold")
    table.add_column("Factory")
    table.add_column("Source")
    for type_name in default_registry.list_types():
        factory = default_registry.get(type_name)
        source = "built-in" if BUILTIN_PROMPTS.get(type_name) is factory else "plugin"
        table.add_row(
            type_name,
            f"{getattr(factory, '__module__', '?')}.{getattr(factory, '__qualname__', repr(factory))}",
            source,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("file", type=click.Path(exists=False))
@click.option("--answers", "answers_file", default=None, help="YAML/JSON file with initial answers")
@click.option("--strict", is_flag=True, default=False, help="Fail when stdin is not a terminal")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Answers output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def run_command(
    file: str,
    answers_file: str | None,
    strict: bool,
    output_format: str,
    output: str | None,
) -> None:
    """Ask the questions defined in FILE and print the answers.

    FILE is a YAML or JSON document holding a list of questions or a
    mapping of question names to questions.

    Examples:

    \b
        askflow run questions.yaml
        askflow run questions.yaml --answers defaults.json --format yaml
        askflow run questions.json --strict -o answers.json
    """
    from askflow import AskflowError, NonInteractiveEnvironmentError, create_prompt_module
    from askflow.prompts import default_registry

    questions = _load_document(file)
    initial: Any = _load_document(answers_file) if answers_file else None
    if initial is not None and not isinstance(initial, dict):
        err_console.print(f"[red]Error:[/red] {answers_file} must contain a mapping")
        sys.exit(1)

    default_registry.load_entrypoints()
    prompt = create_prompt_module(strict_interactivity_check=strict)

    try:
        answers = prompt(questions or [], initial).run_sync()
    except NonInteractiveEnvironmentError as exc:
        err_console.print(f"[red]Not a terminal:[/red] {exc}")
        sys.exit(2)
    except AskflowError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    text = _dump(dict(answers), output_format.lower())
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Answers written to[/green] {output}")
    else:
        console.print(Syntax(text, output_format.lower()))


if __name__ == "__main__":
    cli()
