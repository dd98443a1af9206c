"""Progress bar for batch ingestion."""

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from lexigraph.cli.utils.console import console


class FailureColumn(ProgressColumn):
    """Running count of entries whose transaction was rolled back."""

    def render(self, task: Task) -> Text:
        failed = task.fields.get("failed", 0)
        if not failed:
            return Text("")
        return Text(f"{failed} failed", style="red bold")


def create_progress() -> Progress:
    """Progress bar showing the current headword, entries done and failures so far.

    Tasks should be added with a ``failed`` field and updated as entries fail.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        FailureColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )
