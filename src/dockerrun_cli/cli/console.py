"""CLI console helpers built on Rich.

Two streams are kept strictly apart:

* **stdout** carries the command result only — plain text in human mode,
  one JSON document in structured mode.  It is written directly, not
  through Rich, so values such as ``[+]``, tabs and control characters
  reach the stream unchanged.
* **stderr** carries progress notices and human-mode diagnostics,
  rendered with Rich markup.

The stderr console is created per call so it always binds to the current
``sys.stderr`` (which pytest's ``capsys`` replaces).
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


def get_rich_console() -> Console:
    """Create a Rich console instance targeting stderr."""
    return Console(stderr=True, soft_wrap=True)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy over a fresh stderr console."""

    def print(self, *objects: object, **kwargs: Any) -> None:
        get_rich_console().print(*objects, **kwargs)


console = _ConsoleProxy()


def write_output(lines: list[str]) -> None:
    """Write result *lines* to stdout exactly as given."""
    out = sys.stdout
    for line in lines:
        out.write(f"{line}\n")
    out.flush()


def notice(message: str) -> None:
    """Print a dimmed progress notice on stderr."""
    console.print(f"[dim]{escape(message)}[/dim]")


def configure_logging(level: str) -> None:
    """Route log records to stderr through Rich at *level*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=get_rich_console(), show_path=False)],
        force=True,
    )


def write_diagnostics(lines: list[str]) -> None:
    """Write plain *lines* to stderr without markup interpretation."""
    err = get_rich_console()
    for line in lines:
        err.print(line, markup=False, highlight=False)
