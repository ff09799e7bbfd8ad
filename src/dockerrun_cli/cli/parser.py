"""Argument parser: raw argument vector → one typed command.

The first token selects the command.  The global ``--json`` flag may
appear anywhere after it and is stripped before command-specific
parsing.  Every failure raises
:class:`~dockerrun_cli.exceptions.ArgumentError` before any connection
is attempted.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from uuid import UUID

from dockerrun_cli.core.commands import (
    Command,
    HealthCommand,
    HelpCommand,
    ListCommand,
    PauseCommand,
    ShowCommand,
    StartCommand,
    TerminateCommand,
    UnpauseCommand,
    VersionCommand,
)
from dockerrun_cli.exceptions import ArgumentError

PROG = "dockerrun-cli"

JSON_FLAG = "--json"
ENV_FLAGS = ("--env", "-e")
TIMEOUT_FLAGS = ("--timeout", "-t")

UUID_FORMAT = "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"

_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_INTEGER = re.compile(r"[+-]?[0-9]+")
MAX_TIMEOUT_SECONDS = 2**63 - 1

USAGE = f"""\
{PROG} - CLI for the url://dockerrun/ service

Usage: {PROG} <command> [options]

Commands:
  health                                    Check if the docker run service is reachable
  start <image> [--env KEY=VAL]... [--timeout SECS]  Start a new container
  list                                      List all containers
  show <uuid>                               Show container details
  pause <uuid>                              Pause a running container
  unpause <uuid>                            Unpause a paused container
  terminate <uuid>                          Terminate a container

Options:
  --json                                    Output in JSON format (for scripting)
  --env, -e KEY=VALUE                       Set environment variable (repeatable)
  --timeout, -t SECONDS                     Auto-terminate after this many seconds (default: 0 = never)
  --help, -h                                Show this help message
  --version, -V                             Show the program version

Examples:
  # Check service health
  {PROG} health

  # Start an nginx container with auto-termination after 1 hour
  {PROG} start docker.io/library/nginx:latest --env PORT=8080 --timeout 3600

  # List all containers
  {PROG} list

  # Show container details
  {PROG} show 550e8400-e29b-41d4-a716-446655440000

  # Pause a container
  {PROG} pause 550e8400-e29b-41d4-a716-446655440000

  # Terminate a container
  {PROG} terminate 550e8400-e29b-41d4-a716-446655440000

  # JSON output for scripting
  {PROG} list --json"""

START_USAGE = f"Usage: {PROG} start <image> [--env KEY=VAL]... [--timeout SECS]"


# ---------------------------------------------------------------------------
# Global flags
# ---------------------------------------------------------------------------

def split_global_flags(argv: Sequence[str]) -> tuple[list[str], bool]:
    """Strip ``--json`` from everything after the command token.

    Returns the remaining tokens and whether structured output was
    requested.
    """
    if not argv:
        return [], False
    rest = list(argv[1:])
    json_output = JSON_FLAG in rest
    return [argv[0], *(token for token in rest if token != JSON_FLAG)], json_output


def parse_command(tokens: Sequence[str]) -> Command:
    """Select and parse one command from *tokens* (``--json`` already removed).

    Raises
    ------
    ArgumentError
        For unknown commands and malformed command arguments.
    """
    if not tokens:
        return HelpCommand()

    name, args = tokens[0], list(tokens[1:])
    if name in ("help", "--help", "-h"):
        return HelpCommand()
    if name in ("--version", "-V"):
        return VersionCommand()

    parser = _COMMAND_PARSERS.get(name)
    if parser is None:
        raise ArgumentError(f"Unrecognized command: {name}", show_usage=True)
    return parser(args)


# ---------------------------------------------------------------------------
# Command parsers
# ---------------------------------------------------------------------------

def _parse_health(args: list[str]) -> Command:
    _reject_extra("health", args)
    return HealthCommand()


def _parse_list(args: list[str]) -> Command:
    _reject_extra("list", args)
    return ListCommand()


def _parse_start(args: list[str]) -> Command:
    if not args or not args[0] or args[0].startswith("-"):
        raise ArgumentError("start requires a Docker image reference", hint=START_USAGE)

    image_reference = args[0]
    environment: dict[str, str] = {}
    auto_terminate_seconds = 0

    i = 1
    while i < len(args):
        token = args[i]
        if token in ENV_FLAGS:
            if i + 1 >= len(args):
                raise ArgumentError("--env requires a KEY=VALUE argument", hint=START_USAGE)
            key, value = parse_env_pair(args[i + 1])
            environment[key] = value
            i += 2
        elif token in TIMEOUT_FLAGS:
            if i + 1 >= len(args):
                raise ArgumentError(
                    "--timeout requires a numeric value in seconds", hint=START_USAGE,
                )
            auto_terminate_seconds = parse_timeout(args[i + 1])
            i += 2
        else:
            raise ArgumentError(f"Unrecognized option: {token}", show_usage=True)

    return StartCommand(
        image_reference=image_reference,
        environment=environment,
        auto_terminate_seconds=auto_terminate_seconds,
    )


def parse_env_pair(token: str) -> tuple[str, str]:
    """Split ``KEY=VALUE`` at the first ``=``; the key must be non-empty."""
    key, sep, value = token.partition("=")
    if not sep or not key:
        raise ArgumentError(
            f"--env value must be in KEY=VALUE format, but got: {token}",
            hint=START_USAGE,
        )
    return key, value


def parse_timeout(token: str) -> int:
    """Parse a non-negative whole number of seconds that fits in 64 bits."""
    not_numeric = ArgumentError(
        f"--timeout requires a numeric value in seconds, but got: {token}",
        hint=START_USAGE,
    )
    if _INTEGER.fullmatch(token) is None:
        raise not_numeric
    try:
        seconds = int(token)
    except ValueError as exc:
        # Beyond the interpreter's digit limit for int().
        raise not_numeric from exc
    if seconds > MAX_TIMEOUT_SECONDS:
        raise not_numeric
    if seconds < 0:
        raise ArgumentError(
            f"--timeout must not be negative, but got: {token}",
            hint=START_USAGE,
        )
    return seconds


def parse_uuid(token: str) -> UUID:
    """Accept only the canonical hyphenated textual form."""
    if _CANONICAL_UUID.fullmatch(token) is None:
        raise ArgumentError(
            f"Invalid UUID format: {token}",
            hint=f"Expected format: {UUID_FORMAT}",
        )
    return UUID(token)


def _identifier_command(name: str, variant: Callable[[UUID], Command]) -> Callable[[list[str]], Command]:
    usage = f"Usage: {PROG} {name} <uuid>"

    def parse(args: list[str]) -> Command:
        if not args:
            raise ArgumentError(f"{name} requires a container UUID", hint=usage)
        if len(args) > 1:
            raise ArgumentError(
                f"{name} takes exactly one container UUID, but got extra argument: {args[1]}",
                hint=usage,
            )
        return variant(parse_uuid(args[0]))

    return parse


def _reject_extra(name: str, args: list[str]) -> None:
    if args:
        raise ArgumentError(
            f"{name} takes no arguments, but got: {args[0]}",
            hint=f"Usage: {PROG} {name}",
        )


_COMMAND_PARSERS: dict[str, Callable[[list[str]], Command]] = {
    "health": _parse_health,
    "start": _parse_start,
    "list": _parse_list,
    "show": _identifier_command("show", ShowCommand),
    "pause": _identifier_command("pause", PauseCommand),
    "unpause": _identifier_command("unpause", UnpauseCommand),
    "terminate": _identifier_command("terminate", TerminateCommand),
}
