"""Main CLI application entry point."""

import typer

from lexigraph.cli.commands import ingest, show, validate
from lexigraph.cli.utils.async_runner import run_async
from lexigraph.cli.utils.console import error_console
from lexigraph.config import settings
from lexigraph.database import init_db
from lexigraph.logging_config import setup_logging

app = typer.Typer(
    name="lexigraph",
    help="Ingest dictionary entries into a normalized lexical graph",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def startup() -> None:
    """Prepare directories, logging and the database."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.audio_dir.mkdir(parents=True, exist_ok=True)
    setup_logging()

    try:
        run_async(init_db())
    except Exception as e:
        error_console.print(f"[error]Failed to initialize database: {e}[/]")
        raise typer.Exit(1) from None


app.command(name="ingest", help="Ingest entries from a JSON file")(ingest.ingest)
app.command(name="show", help="Show a stored word and its relationships")(show.show)
app.command(name="validate", help="Check a Danish entry file for unknown values")(
    validate.validate
)


if __name__ == "__main__":
    app()
