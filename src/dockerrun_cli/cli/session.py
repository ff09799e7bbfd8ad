"""Per-invocation session: output format plus the scoped connection.

A :class:`Session` is constructed once in the entry point and passed
explicitly to the executor and renderer.  It owns an
:class:`~contextlib.ExitStack`; anything acquired through it is released
when the ``with`` block ends, on success and failure alike.
"""

from __future__ import annotations

import enum
from contextlib import ExitStack
from types import TracebackType

from dockerrun_cli.cli.console import notice
from dockerrun_cli.config import CliSettings
from dockerrun_cli.core.protocols import ContainerServiceProxy
from dockerrun_cli.infra.connection import ConnectionEstablisher


class OutputFormat(enum.Enum):
    HUMAN = "human"
    STRUCTURED = "structured"


class Session:
    """Explicit context threaded through one command invocation.

    Usage::

        with Session(settings, OutputFormat.HUMAN, establisher) as session:
            proxy = session.connect()
            ...
        # connection and resolver are released here
    """

    def __init__(
        self,
        settings: CliSettings,
        output_format: OutputFormat,
        establisher: ConnectionEstablisher,
    ) -> None:
        self.settings: CliSettings = settings
        self.output_format: OutputFormat = output_format
        self.establisher: ConnectionEstablisher = establisher
        self._stack: ExitStack = ExitStack()
        self._proxy: ContainerServiceProxy | None = None

    @property
    def structured(self) -> bool:
        return self.output_format is OutputFormat.STRUCTURED

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> Session:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the connection, if one was opened."""
        self._proxy = None
        self._stack.close()

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def connect(self) -> ContainerServiceProxy:
        """Return the session's proxy, opening the connection on first use.

        Raises
        ------
        ServiceConnectionError
            When resolution or connection fails.
        """
        if self._proxy is None:
            self.notice("Connecting to docker run service...")
            self._proxy = self._stack.enter_context(self.establisher.connect())
        return self._proxy

    def notice(self, message: str) -> None:
        """Emit a progress notice on stderr; silent in structured mode."""
        if not self.structured:
            notice(message)
