"""Show command: print the stored graph around one word."""

from typing import Any

import typer
from rich.tree import Tree

from lexigraph.cli.utils.async_runner import run_async
from lexigraph.cli.utils.console import console, error_console
from lexigraph.database import async_session
from lexigraph.services.queries import get_word_projection


def show(
    word: str = typer.Argument(..., help="Word to show"),
    language: str = typer.Option("da", "--language", "-l", help="Language code"),
) -> None:
    """Show a word with its senses, definitions and relationships."""
    projection = run_async(_load(word, language))
    if projection is None:
        error_console.print(f"[warning]'{word}' ({language}) is not in the database[/]")
        raise typer.Exit(1)
    console.print(render_projection(projection))


async def _load(word: str, language: str) -> dict[str, Any] | None:
    async with async_session() as session:
        return await get_word_projection(session, word, language)


def render_projection(projection: dict[str, Any]) -> Tree:
    """Build a rich tree for a word projection."""
    tree = Tree(f"[headword]{projection['word']}[/] [dim]({projection['language']})[/]")
    if projection["etymology"]:
        tree.add(f"[dim]Etymology:[/] {projection['etymology']}")

    for details in projection["details"]:
        variant = f" {details['variant']}" if details["variant"] else ""
        extras = [v for v in (details["gender"], details["phonetic"]) if v]
        suffix = f" [dim]{' '.join(extras)}[/]" if extras else ""
        branch = tree.add(f"[pos]{details['part_of_speech']}{variant}[/]{suffix}")
        for number, definition in enumerate(details["definitions"], start=1):
            node = branch.add(f"{number}. {definition['definition']}")
            for example in definition["examples"]:
                node.add(f"[dim]{example['example']}[/]")
        for audio in details["audio"]:
            marker = "*" if audio["is_primary"] else "-"
            branch.add(f"[dim]audio {marker} {audio['url']}[/]")
        for edge in details["relationships"]:
            branch.add(f"[edge]{edge['type']}[/] -> {edge['word']} [dim]({edge['part_of_speech']})[/]")

    if projection["relationships"]:
        related = tree.add("[bold]Related words[/]")
        for edge in projection["relationships"]:
            related.add(f"[edge]{edge['type']}[/] -> {edge['word']}")
    return tree
