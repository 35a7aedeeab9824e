"""Blockmap CLI - turn UI component source into CMS block schemas.

Usage:
    blockmap analyze --input ./components
    blockmap analyze -i ./components --tenant acme --output ./generated-blocks
    blockmap categories
    blockmap registry --registry ./block-registry.json
"""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import DEFAULT_OUTPUT, DEFAULT_TENANT, REGISTRY_FILENAME, ConfigError, RunConfig
from .detectors import WEIGHTS
from .generator import block_label, describe_category
from .log import configure_logging
from .model import Category
from .pipeline import FileReport, NoInputFilesError, RunSummary, run_pipeline
from .registry import RegistryError, SchemaRegistry

console = Console()


@click.group()
@click.version_option(version=__version__)
def cli():
    """Blockmap - classify UI components into CMS content blocks.

    Reads React/TSX component files, detects which kind of content block each
    one is, and writes a block schema plus initial content for the CMS.
    """
    pass


@cli.command()
@click.option("--input", "-i", "input_path", type=click.Path(path_type=Path), default=None,
              help="Component file or directory to analyze")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=DEFAULT_OUTPUT,
              envvar="BLOCKMAP_OUTPUT", show_default=True, help="Output root directory")
@click.option("--tenant", "-t", default=DEFAULT_TENANT, envvar="BLOCKMAP_TENANT", show_default=True,
              help="Tenant name (output subdirectory)")
@click.option("--registry", "-r", "registry_path", type=click.Path(path_type=Path), default=None,
              envvar="BLOCKMAP_REGISTRY", help=f"Registry file (default: {REGISTRY_FILENAME} beside the output root)")
@click.option("--verbose", "-v", is_flag=True, help="Show warnings and debug logging")
@click.option("--json", "json_only", is_flag=True, help="Print the run summary as JSON (for piping)")
@click.pass_context
def analyze(ctx, input_path: Path | None, output: Path, tenant: str, registry_path: Path | None,
            verbose: bool, json_only: bool):
    """Analyze components and write block schemas + content templates.

    Examples:

        blockmap analyze --input ./src/components

        blockmap analyze -i ./components/Hero.tsx --tenant acme

        blockmap analyze -i ./components --json > summary.json
    """
    if input_path is None:
        console.print("[red]Error:[/] --input is required")
        click.echo(ctx.get_help())
        ctx.exit(1)

    configure_logging(verbose=verbose)
    try:
        config = RunConfig.create(input_path, output, tenant, registry_path, verbose=verbose)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if not json_only:
        console.print()
        console.print(Panel.fit(
            f"[bold cyan]Blockmap v{__version__}[/] - Component Block Analyzer",
            border_style="cyan",
        ))
        console.print(f"  Input: {escape(str(config.input_path))}", style="dim")
        console.print(f"  Output: {escape(str(config.tenant_dir))}", style="dim")
        console.print()

    on_result = None if json_only else partial(_print_file_report, verbose=verbose)
    try:
        summary = run_pipeline(config, on_result=on_result)
    except (NoInputFilesError, RegistryError) as e:
        raise click.ClickException(str(e))

    if json_only:
        click.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        _print_summary(summary)


@cli.command()
def categories():
    """List block categories in detection priority order."""
    console.print()
    console.print(Panel.fit("[bold cyan]Block Categories[/]", border_style="cyan"))

    table = Table(show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category", style="bold")
    table.add_column("Label")
    table.add_column("Fields")

    ordered = [*WEIGHTS, Category.GENERIC]
    for position, category in enumerate(ordered, start=1):
        fields = [f.name for f in describe_category(category) if f.name != "blockLabel"]
        table.add_row(
            str(position),
            category.value,
            block_label(category),
            ", ".join(fields) or "(from component parameters)",
            style="yellow" if category == Category.GENERIC else None,
        )

    console.print(table)
    console.print()
    console.print("The first category scoring above 50% wins; anything else becomes a generic block.")


@cli.command()
@click.option("--registry", "-r", "registry_path", type=click.Path(path_type=Path),
              default=Path(REGISTRY_FILENAME), envvar="BLOCKMAP_REGISTRY", show_default=True,
              help="Registry file to inspect")
def registry(registry_path: Path):
    """Show registered block schemas and their versions."""
    configure_logging()
    if not registry_path.exists():
        console.print(f"[yellow]No registry at {escape(str(registry_path))}[/]")
        return

    entries = SchemaRegistry(registry_path).entries()
    table = Table(title=f"Schema Registry ({len(entries)} entries)", show_header=True)
    table.add_column("Component", style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Version", justify="right")
    table.add_column("Last Modified")
    table.add_column("Schema")

    for entry in entries:
        table.add_row(
            escape(entry.component_name),
            entry.category.value,
            f"v{entry.version}",
            entry.last_modified_at.strftime("%Y-%m-%d %H:%M"),
            escape(entry.schema_artifact_path),
        )
    console.print(table)


@cli.command()
def version():
    """Show version information."""
    console.print(f"blockmap-cli v{__version__}")
    console.print("Component pattern detection & block schema synthesis")


def _print_file_report(report: FileReport, verbose: bool = False) -> None:
    """One line per analyzed file."""
    result = report.result
    mark = "[green]✓[/]" if report.ok else "[red]✗[/]"
    line = (
        f"  {mark} [bold]{escape(result.component_name)}[/]"
        f"  Type: [cyan]{result.category.value}[/]"
        f"  Confidence: {result.confidence:.0%}"
    )
    if report.outcome is not None:
        line += f"  v{report.version}"
        if report.outcome.status == "updated":
            line += " [magenta](schema updated)[/]"
    if report.errors:
        line += f"  [red]{len(report.errors)} error(s)[/]"
    console.print(line)

    for error in report.errors:
        console.print(f"      [red]{escape(error)}[/]")
    if verbose:
        for warning in result.warnings:
            console.print(f"      [yellow]{escape(warning)}[/]")
        if report.outcome is not None and report.outcome.archived_path:
            console.print(f"      archived {escape(str(report.outcome.archived_path))}", style="dim")


def _print_summary(summary: RunSummary) -> None:
    border = "green" if summary.error_count == 0 else "yellow"
    console.print()
    console.print(Panel.fit(
        f"[bold green]{summary.success_count} succeeded[/]  "
        f"[bold red]{summary.error_count} failed[/]  "
        f"{summary.registry_entries} registry entries\n"
        f"Output: {escape(str(summary.tenant_dir))}\n"
        f"Registry: {escape(str(summary.registry_path))}",
        border_style=border,
        title="Summary",
    ))


if __name__ == "__main__":
    cli()
