"""Bridge from synchronous typer commands to the async services."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from lexigraph.cli.utils.console import error_console

T = TypeVar("T")

INTERRUPTED_EXIT_CODE = 130


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion on a fresh event loop.

    Ctrl-C cancels the entry being ingested, whose transaction rolls back;
    entries committed before it stay stored.
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        error_console.print("[warning]Interrupted; the entry in progress was rolled back[/]")
        raise typer.Exit(INTERRUPTED_EXIT_CODE) from None
