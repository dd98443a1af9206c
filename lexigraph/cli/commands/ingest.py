"""Ingest command: load dictionary entries from a JSON file into the graph."""

import json
import logging
from pathlib import Path
from typing import Any

import typer

from lexigraph.cli.utils.async_runner import run_async
from lexigraph.cli.utils.console import console, error_console
from lexigraph.cli.utils.progress import create_progress
from lexigraph.database import async_session
from lexigraph.errors import IngestionError, SourceFormatError
from lexigraph.services.enrichment.context import default_context
from lexigraph.services.persistence.engine import PersistenceEngine
from lexigraph.services.sources import ADAPTERS

logger = logging.getLogger(__name__)


def load_entries(file_path: Path) -> list[Any]:
    """Read a JSON file holding one entry or a list of entries."""
    data = json.loads(file_path.read_text(encoding="utf-8"))
    return data if isinstance(data, list) else [data]


def _entry_label(entry: Any, index: int) -> str:
    if isinstance(entry, dict):
        word = entry.get("word")
        if isinstance(word, dict):
            word = word.get("word")
        if isinstance(word, str):
            return word
        headword = entry.get("hwi", {}).get("hw") if isinstance(entry.get("hwi"), dict) else None
        if isinstance(headword, str):
            return headword.replace("*", "")
    return f"entry {index + 1}"


def ingest(
    file_path: Path = typer.Argument(..., help="JSON file with one entry or a list of entries"),
    source: str = typer.Option("danish", "--source", "-s", help="Entry format: danish or merriam"),
    skip_audio: bool = typer.Option(False, "--skip-audio", help="Do not download audio files"),
) -> None:
    """Ingest dictionary entries into the lexical graph."""
    if not file_path.exists():
        error_console.print(f"[error]File not found: {file_path}[/]")
        raise typer.Exit(1)
    if source not in ADAPTERS:
        error_console.print(f"[error]Unknown source: {source}[/]")
        error_console.print(f"[dim]Available sources: {', '.join(sorted(ADAPTERS))}[/]")
        raise typer.Exit(1)

    try:
        entries = load_entries(file_path)
    except (OSError, ValueError) as e:
        error_console.print(f"[error]Cannot read {file_path}: {e}[/]")
        raise typer.Exit(1) from None

    failures = run_async(_ingest(entries, source, skip_audio))
    if failures:
        raise typer.Exit(1)


async def _ingest(entries: list[Any], source: str, skip_audio: bool) -> int:
    """Ingest entries one after another; returns the number of failures."""
    engine = PersistenceEngine(
        async_session,
        adapter=ADAPTERS[source](),
        context_factory=lambda: default_context(skip_audio=skip_audio),
    )
    console.print(f"\n[bold]Ingesting {len(entries)} {source} entries[/]\n")

    ingested = 0
    failed: list[tuple[str, str]] = []
    with create_progress() as progress:
        task = progress.add_task("Ingesting...", total=len(entries), failed=0)
        for index, entry in enumerate(entries):
            label = _entry_label(entry, index)
            progress.update(task, description=f"[headword]{label}[/]")
            try:
                await engine.ingest(entry)
                ingested += 1
            except (SourceFormatError, IngestionError) as e:
                logger.error(f"Failed to ingest {label}: {e}")
                failed.append((label, str(e)))
                progress.update(task, failed=len(failed))
            progress.advance(task)

    console.print(f"\n[success]Ingested {ingested} entries[/]")
    if failed:
        error_console.print(f"[error]{len(failed)} entries failed:[/]")
        for label, message in failed:
            error_console.print(f"  [headword]{label}[/]: [dim]{message}[/]")
    return len(failed)
