"""Protocols (interfaces) for the external collaborators.

The name resolver, the sandbox it opens and the remote container
service are all provided by an installable resolver backend.  Core
code depends ONLY on these protocols — never on a concrete backend.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID


@dataclass(frozen=True, slots=True)
class BootstrapPeer:
    """A known peer the resolver contacts first."""

    peer_id: str
    multiaddrs: tuple[str, ...]
    advertised_services: tuple[str, ...]


class ContainerServiceProxy(Protocol):
    """Remote operations of the docker run service.

    Container records are backend-specific: either a mapping or an
    object exposing ``uuid``, ``imageReference``, ``status``,
    ``createdAt``, ``autoTerminateSeconds``, ``dockerContainerId``,
    ``errorMessage`` and ``environmentVariables``.  Mutating calls take
    a record previously returned by :meth:`get_container`.

    Any method may raise; the cause string is reported to the operator.
    """

    def start_container(
        self,
        image_reference: str,
        environment_variables: Mapping[str, str],
        auto_terminate_seconds: int,
    ) -> Any:
        ...  # pragma: no cover

    def get_all_containers(self) -> Iterable[Any]:
        ...  # pragma: no cover

    def get_container(self, container_uuid: UUID) -> Any:
        ...  # pragma: no cover

    def pause_container(self, container: Any) -> None:
        ...  # pragma: no cover

    def unpause_container(self, container: Any) -> None:
        ...  # pragma: no cover

    def terminate_container(self, container: Any) -> None:
        ...  # pragma: no cover


class ServiceHandle(Protocol):
    """A live sandboxed connection; releasing it invalidates :attr:`proxy`."""

    @property
    def proxy(self) -> ContainerServiceProxy:
        ...  # pragma: no cover

    def close(self) -> None:
        ...  # pragma: no cover


class ServiceResolver(Protocol):
    """Contract for name-resolution backends.

    Implementations resolve a logical ``url://`` address to a live peer.
    """

    def establish(self, address: str, service_type: str) -> ServiceHandle:
        """Open a sandboxed connection to *address* exposing *service_type*.

        Raises on timeout, unreachable peer or capability mismatch.
        """
        ...  # pragma: no cover

    def probe(self, address: str) -> str:
        """Request a plain string response from a diagnostic *address*."""
        ...  # pragma: no cover

    def close(self) -> None:
        ...  # pragma: no cover


class ResolverFactory(Protocol):
    """Callable registered under the ``dockerrun_cli.resolvers`` entry-point group."""

    def __call__(self, bootstrap_peers: Sequence[BootstrapPeer]) -> ServiceResolver:
        ...  # pragma: no cover
