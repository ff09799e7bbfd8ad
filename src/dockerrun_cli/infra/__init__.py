"""Infrastructure layer — external system integration.

This layer wraps all interaction with the resolver backend that opens
sandboxed connections to the docker run service.  Every raw backend
exception is caught here and re-raised as a
:class:`~dockerrun_cli.exceptions.DockerRunError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output.
"""

from dockerrun_cli.infra.connection import ConnectionEstablisher
from dockerrun_cli.infra.resolver_loader import (
    ENTRY_POINT_GROUP,
    bootstrap_peers,
    create_resolver,
    load_resolver_factory,
)

__all__: list[str] = [
    "ENTRY_POINT_GROUP",
    "ConnectionEstablisher",
    "bootstrap_peers",
    "create_resolver",
    "load_resolver_factory",
]
