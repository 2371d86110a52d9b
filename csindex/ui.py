"""Central UI handler for cindex.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() elsewhere.

Usage:
    from csindex.ui import console, print_success

    print_success("indexed 42 files")
"""

import sys

from rich.console import Console
from rich.theme import Theme

CSINDEX_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "path": "bold cyan",
    "dim": "dim white",
})

# Summaries go to stderr so stdout stays clean for --list output
console = Console(
    theme=CSINDEX_THEME,
    stderr=True,
    force_terminal=sys.stderr.isatty(),
)


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")
