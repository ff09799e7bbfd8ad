"""CLI application entry point for dockerrun-cli.

This module is the **sole error boundary** for the entire application.
:func:`main` parses the arguments, opens the per-invocation
:class:`~dockerrun_cli.cli.session.Session`, runs one command and hands
the result to the renderer or any
:class:`~dockerrun_cli.exceptions.DockerRunError` to the normalizer.
:func:`cli` additionally catches ``KeyboardInterrupt`` and any
unexpected ``Exception``.

Data flow
---------
argv → parser → (command, output format) → session/connection →
executor → result or error → renderer/normalizer → exit code.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence

from pydantic import ValidationError

from dockerrun_cli.cli import exit_codes
from dockerrun_cli.cli.console import configure_logging, console
from dockerrun_cli.cli.errors import report_error
from dockerrun_cli.cli.executor import CommandExecutor
from dockerrun_cli.cli.parser import parse_command, split_global_flags
from dockerrun_cli.cli.renderer import render, write_rendered
from dockerrun_cli.cli.session import OutputFormat, Session
from dockerrun_cli.config import CliSettings
from dockerrun_cli.core.models import CommandResult, HealthReport
from dockerrun_cli.core.protocols import ServiceResolver
from dockerrun_cli.exceptions import ArgumentError, DockerRunError
from dockerrun_cli.infra.connection import ConnectionEstablisher


def load_settings() -> CliSettings:
    """Read settings from the environment.

    Raises
    ------
    ArgumentError
        If a ``DOCKERRUN_*`` variable holds an invalid value.
    """
    try:
        return CliSettings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ArgumentError(
            f"Invalid configuration: {problems}",
            hint="Check the DOCKERRUN_* environment variables.",
        ) from exc


def exit_code_for(result: CommandResult) -> int:
    if isinstance(result, HealthReport) and not result.healthy:
        return exit_codes.GENERAL_ERROR
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    resolver_factory: Callable[[Sequence[str]], ServiceResolver] | None = None,
) -> int:
    """Run the dockerrun-cli CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    resolver_factory:
        Optional replacement for resolver backend discovery, called with
        the advertised services for each resolution path.

    Returns
    -------
    int
        OS process exit code.
    """
    tokens, json_output = split_global_flags(sys.argv[1:] if argv is None else argv)
    output_format = OutputFormat.STRUCTURED if json_output else OutputFormat.HUMAN

    try:
        command = parse_command(tokens)
        settings = load_settings()
    except DockerRunError as exc:
        return report_error(exc, output_format)

    configure_logging(settings.log_level)
    establisher = ConnectionEstablisher(settings, resolver_factory=resolver_factory)

    with Session(settings, output_format, establisher) as session:
        try:
            result = CommandExecutor(session).execute(command)
        except DockerRunError as exc:
            return report_error(exc, output_format)
        write_rendered(render(result, output_format))

    return exit_code_for(result)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue."
        )
        console.print(f"  {type(exc).__name__}: {exc}", markup=False)
        sys.exit(exit_codes.UNEXPECTED_ERROR)
