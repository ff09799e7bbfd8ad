"""Error normalizer — the single point where failure becomes user-visible.

Every :class:`~dockerrun_cli.exceptions.DockerRunError` raised while
parsing, connecting or invoking the remote service ends up in
:func:`report_error`.  No handler reports errors on its own.

* Structured mode: one ``{"error": true, "action", "message"}``
  document on stdout and nothing else.
* Human mode: ``Error: ...`` diagnostics on stderr, followed by any hint
  and, for unknown commands and options, the usage text.
"""

from __future__ import annotations

from rich.markup import escape

from dockerrun_cli.cli import exit_codes
from dockerrun_cli.cli.console import console, write_diagnostics, write_output
from dockerrun_cli.cli.parser import USAGE
from dockerrun_cli.cli.renderer import to_json
from dockerrun_cli.cli.session import OutputFormat
from dockerrun_cli.exceptions import ArgumentError, DockerRunError


def error_document(error: DockerRunError) -> dict[str, object]:
    return {"error": True, "action": error.action, "message": error.message}


def human_error_lines(error: DockerRunError) -> list[str]:
    """Plain diagnostic lines for *error* (without the usage text)."""
    if isinstance(error, ArgumentError):
        lines = [f"Error: {error.message}"]
    else:
        lines = [f"Error: Failed to {error.action}", f"Reason: {error.message}"]
    if error.hint:
        lines.append(error.hint)
    return lines


def report_error(error: DockerRunError, output_format: OutputFormat) -> int:
    """Render *error* in the active format and return the exit code."""
    if output_format is OutputFormat.STRUCTURED:
        write_output([to_json(error_document(error))])
        return exit_codes.GENERAL_ERROR

    first, *rest = human_error_lines(error)
    console.print(f"[bold red]{escape(first)}[/bold red]")
    if rest:
        write_diagnostics(rest)
    if isinstance(error, ArgumentError) and error.show_usage:
        write_diagnostics(["", USAGE])
    return exit_codes.GENERAL_ERROR
