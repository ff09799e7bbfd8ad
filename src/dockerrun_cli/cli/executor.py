"""Command executor — one handler per command variant.

Each handler follows the same shape: (connect if needed) → invoke the
remote operation through :class:`~dockerrun_cli.core.ContainerService`
→ return a result value.  Inputs arrive already validated by the
parser.  Errors propagate as
:class:`~dockerrun_cli.exceptions.DockerRunError` to the entry point,
which hands them to the normalizer.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from dockerrun_cli.cli.parser import PROG, USAGE
from dockerrun_cli.cli.session import Session
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
from dockerrun_cli.core.container_service import ContainerService
from dockerrun_cli.core.models import CommandResult, HealthReport, TextBlock
from dockerrun_cli.version import __version__


class CommandExecutor:
    """Runs one command against the session's connection."""

    def __init__(self, session: Session) -> None:
        self._session: Session = session
        self._handlers: dict[type, Callable[[Any], CommandResult]] = {
            HelpCommand: self._help,
            VersionCommand: self._version,
            HealthCommand: self._health,
            StartCommand: self._start,
            ListCommand: self._list,
            ShowCommand: self._show,
            PauseCommand: self._pause,
            UnpauseCommand: self._unpause,
            TerminateCommand: self._terminate,
        }

    @property
    def handled_commands(self) -> frozenset[type]:
        return frozenset(self._handlers)

    def execute(self, command: Command) -> CommandResult:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"No handler for {type(command).__name__}")
        return handler(command)

    # ------------------------------------------------------------------
    # Local commands
    # ------------------------------------------------------------------

    def _help(self, _command: HelpCommand) -> CommandResult:
        return TextBlock(USAGE)

    def _version(self, _command: VersionCommand) -> CommandResult:
        return TextBlock(f"{PROG} {__version__}")

    # ------------------------------------------------------------------
    # Remote commands
    # ------------------------------------------------------------------

    def _health(self, _command: HealthCommand) -> CommandResult:
        """Probe the diagnostic address on its own, lighter connection."""
        self._session.notice("Checking docker run service health...")
        service = self._session.settings.service_address

        started = time.monotonic()
        outcome = self._session.establisher.probe()
        latency_ms = int((time.monotonic() - started) * 1000)

        if outcome.ok:
            return HealthReport(
                healthy=True, service=service, latency_ms=latency_ms,
                response=outcome.unwrap(),
            )
        return HealthReport(
            healthy=False, service=service, latency_ms=latency_ms,
            error=outcome.error.message,
        )

    def _start(self, command: StartCommand) -> CommandResult:
        return self._service().start(
            command.image_reference,
            command.environment,
            command.auto_terminate_seconds,
        )

    def _list(self, _command: ListCommand) -> CommandResult:
        result = self._service().list_containers()
        self._session.notice(f"Got {len(result)} containers")
        return result

    def _show(self, command: ShowCommand) -> CommandResult:
        return self._service().show(command.container_uuid)

    def _pause(self, command: PauseCommand) -> CommandResult:
        return self._service().pause(command.container_uuid)

    def _unpause(self, command: UnpauseCommand) -> CommandResult:
        return self._service().unpause(command.container_uuid)

    def _terminate(self, command: TerminateCommand) -> CommandResult:
        return self._service().terminate(command.container_uuid)

    def _service(self) -> ContainerService:
        return ContainerService(self._session.connect())
