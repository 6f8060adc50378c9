"""
Shared Rich console helpers for the command-line interface.
"""

from __future__ import annotations

from functools import lru_cache

from rich.console import Console
from rich.text import Text


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Return a shared stdout console instance."""
    return Console()


@lru_cache(maxsize=1)
def get_err_console() -> Console:
    """Return a shared stderr console instance."""
    return Console(stderr=True)


def status_label(label: str, style: str) -> Text:
    """Create a styled status label wrapped in brackets."""
    text = Text(f"[{label}]")
    text.stylize(style)
    return text


def print_status(label: str, style: str, message: str, *, err: bool = False) -> None:
    console = get_err_console() if err else get_console()
    console.print(status_label(label, style), message, markup=False)
