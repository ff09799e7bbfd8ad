"""Domain models for dockerrun-cli.

All models are **frozen** dataclasses — read-only snapshots of remote
state as observed at one point in time.  The CLI never constructs a
container locally; snapshots are parsed from what the remote service
returns and are discarded when the invocation ends.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID


# ---------------------------------------------------------------------------
# Container lifecycle
# ---------------------------------------------------------------------------

class ContainerStatus(enum.Enum):
    """Lifecycle state reported by the remote service."""

    STARTING = "STARTING"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    TERMINATED = "TERMINATED"
    FAILED = "FAILED"

    @property
    def icon(self) -> str:
        """Compact marker used in human-readable listings."""
        return _STATUS_ICONS[self]


_STATUS_ICONS: dict[ContainerStatus, str] = {
    ContainerStatus.STARTING: "[.]",
    ContainerStatus.RUNNING: "[+]",
    ContainerStatus.PAUSED: "[~]",
    ContainerStatus.TERMINATED: "[-]",
    ContainerStatus.FAILED: "[x]",
}


# ---------------------------------------------------------------------------
# Container snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Container:
    """A single container as last reported by the remote service."""

    uuid: UUID
    """Service-assigned identifier."""

    image_reference: str
    """Image the container runs (e.g. ``docker.io/library/nginx:latest``)."""

    status: ContainerStatus

    created_at: int = 0
    """Creation time in epoch milliseconds; ``0`` when unknown."""

    auto_terminate_seconds: int = 0
    """Server-side lifetime limit; ``0`` means never."""

    docker_container_id: str | None = None
    """Native runtime identity, once assigned."""

    error_message: str | None = None
    """Failure description, only when ``status`` is ``FAILED``."""

    environment_variables: Mapping[str, str] = field(default_factory=dict)
    """Environment passed to the container, in insertion order."""

    @property
    def short_id(self) -> str:
        """First eight characters of the canonical identifier."""
        return str(self.uuid)[:8]


# ---------------------------------------------------------------------------
# Command results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HealthReport:
    """Outcome of the diagnostic probe.  A failed probe is still a report."""

    healthy: bool
    service: str
    latency_ms: int
    response: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class StartResult:
    """A freshly started container together with what was requested."""

    container: Container
    environment: Mapping[str, str]
    auto_terminate_seconds: int


@dataclass(frozen=True, slots=True)
class ContainerList:
    """Containers in the order the service returned them."""

    containers: tuple[Container, ...]

    def __len__(self) -> int:
        return len(self.containers)

    def __bool__(self) -> bool:
        return len(self.containers) > 0


@dataclass(frozen=True, slots=True)
class ContainerDetails:
    container: Container


class LifecycleAction(enum.Enum):
    """State transition requested by an acknowledgment-style command."""

    PAUSE = "paused"
    UNPAUSE = "unpaused"
    TERMINATE = "terminated"


@dataclass(frozen=True, slots=True)
class Acknowledgment:
    """Confirmation that a pause/unpause/terminate call succeeded.

    ``image_reference`` is captured before the call, since a terminated
    container's remote handle can no longer be queried.
    """

    action: LifecycleAction
    uuid: UUID
    image_reference: str | None = None


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Preformatted text (usage, version) printed as-is in every mode."""

    text: str


CommandResult = (
    HealthReport
    | StartResult
    | ContainerList
    | ContainerDetails
    | Acknowledgment
    | TextBlock
)
