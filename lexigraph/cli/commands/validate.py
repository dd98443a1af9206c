"""Validate command: list values a Danish entry file uses that the adapter does not know."""

from pathlib import Path

import typer
from rich.table import Table

from lexigraph.cli.commands.ingest import load_entries
from lexigraph.cli.utils.console import console, error_console
from lexigraph.services.sources.validator import ValidationReport, validate_danish_entry


def validate(
    file_path: Path = typer.Argument(..., help="JSON file with Danish entries"),
) -> None:
    """Report unknown labels, parts of speech, genders and audio tags."""
    if not file_path.exists():
        error_console.print(f"[error]File not found: {file_path}[/]")
        raise typer.Exit(1)
    try:
        entries = load_entries(file_path)
    except (OSError, ValueError) as e:
        error_console.print(f"[error]Cannot read {file_path}: {e}[/]")
        raise typer.Exit(1) from None

    combined = ValidationReport()
    for entry in entries:
        report = validate_danish_entry(entry)
        for category, values in report.categories().items():
            getattr(combined, category).update(values)

    if combined.is_clean:
        console.print(f"[success]All {len(entries)} entries use known values[/]")
        return

    table = Table(title="Unknown values")
    table.add_column("Category", style="bold")
    table.add_column("Values")
    for category, values in combined.categories().items():
        table.add_row(category, ", ".join(values))
    console.print(table)
