"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls and no process exit.
* No imports from ``cli`` or ``infra``.
* Collaborators are reached only through :mod:`~dockerrun_cli.core.protocols`.
"""

from dockerrun_cli.core.container_service import ContainerService, parse_container
from dockerrun_cli.core.models import (
    Acknowledgment,
    Container,
    ContainerDetails,
    ContainerList,
    ContainerStatus,
    HealthReport,
    LifecycleAction,
    StartResult,
)
from dockerrun_cli.core.protocols import (
    BootstrapPeer,
    ContainerServiceProxy,
    ResolverFactory,
    ServiceHandle,
    ServiceResolver,
)

__all__: list[str] = [
    "Acknowledgment",
    "BootstrapPeer",
    "Container",
    "ContainerDetails",
    "ContainerList",
    "ContainerService",
    "ContainerServiceProxy",
    "ContainerStatus",
    "HealthReport",
    "LifecycleAction",
    "ResolverFactory",
    "ServiceHandle",
    "ServiceResolver",
    "StartResult",
    "parse_container",
]
