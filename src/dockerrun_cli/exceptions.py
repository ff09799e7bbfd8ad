"""Custom exception hierarchy for dockerrun-cli.

All exceptions that cross layer boundaries must inherit from
:class:`DockerRunError`.  Raw exceptions raised by the resolver backend
or the remote proxy must NEVER propagate beyond the infrastructure and
core layers — they are caught and re-raised as a typed subclass
defined here.

Hierarchy
---------
DockerRunError
├── ArgumentError
├── ServiceConnectionError
└── RemoteOperationError
"""

from __future__ import annotations

CONNECTION_HINT = "Make sure the DockerRunServerService is running and reachable."


class DockerRunError(Exception):
    """Base exception for all dockerrun-cli errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the error normalizer can render it in the
    session's output format without leaking a stack trace.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""

    @property
    def action(self) -> str:
        """Short description of what was being attempted."""
        return "run command"

    @property
    def message(self) -> str:
        return str(self)


# --- Local validation ------------------------------------------------------

class ArgumentError(DockerRunError):
    """Raised for missing or malformed arguments and unknown commands.

    Always raised before the remote service is contacted.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        show_usage: bool = False,
    ) -> None:
        super().__init__(message, hint=hint)
        self.show_usage: bool = show_usage
        """Whether the full usage text should follow the message."""

    @property
    def action(self) -> str:
        return "parse arguments"


# --- Connection establishment ----------------------------------------------

class ServiceConnectionError(DockerRunError):
    """Raised when the service address cannot be resolved or connected."""

    def __init__(
        self,
        message: str,
        *,
        address: str = "url://dockerrun/",
        hint: str | None = CONNECTION_HINT,
    ) -> None:
        super().__init__(message, hint=hint)
        self.address: str = address

    @property
    def action(self) -> str:
        return f"connect to docker run service at {self.address}"


# --- Remote invocation -----------------------------------------------------

class RemoteOperationError(DockerRunError):
    """Raised when the remote service rejects or fails a call."""

    def __init__(self, action: str, message: str) -> None:
        super().__init__(message)
        self._action: str = action

    @property
    def action(self) -> str:
        return self._action
