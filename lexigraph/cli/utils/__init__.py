"""CLI utility modules."""

from lexigraph.cli.utils.async_runner import run_async
from lexigraph.cli.utils.console import console, error_console
from lexigraph.cli.utils.progress import create_progress

__all__ = ["run_async", "console", "error_console", "create_progress"]
