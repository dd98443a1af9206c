"""Rich consoles shared by the CLI commands."""

from rich.console import Console
from rich.theme import Theme

lexigraph_theme = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "headword": "magenta bold",
        "pos": "blue",
        "edge": "cyan",
        "dim": "dim",
    }
)

console = Console(theme=lexigraph_theme)

# Failures and diagnostics go to stderr
error_console = Console(theme=lexigraph_theme, stderr=True)
