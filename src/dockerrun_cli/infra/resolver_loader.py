"""Discovery of the installed name-resolution backend.

The resolver that turns ``url://`` addresses into sandboxed connections
is an external package.  It registers a factory under the
:data:`ENTRY_POINT_GROUP` entry-point group, or is named directly with a
``module:attribute`` import path in ``DOCKERRUN_RESOLVER``.

This module is the **only** place that imports backend code.  Every
import or construction failure is re-raised as
:class:`~dockerrun_cli.exceptions.ServiceConnectionError`.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Sequence
from importlib.metadata import entry_points

from dockerrun_cli.config import CliSettings
from dockerrun_cli.core.protocols import BootstrapPeer, ResolverFactory, ServiceResolver
from dockerrun_cli.exceptions import ServiceConnectionError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "dockerrun_cli.resolvers"

_INSTALL_HINT = (
    "Install a resolver backend that registers a factory under the "
    f"'{ENTRY_POINT_GROUP}' entry-point group, or set "
    "DOCKERRUN_RESOLVER=<module>:<factory>."
)


def load_resolver_factory(name: str, *, address: str) -> ResolverFactory:
    """Return the resolver factory selected by *name*.

    Raises
    ------
    ServiceConnectionError
        When no such backend is installed or it cannot be imported.
    """
    if ":" in name:
        return _load_import_path(name, address=address)

    matches = list(entry_points(group=ENTRY_POINT_GROUP, name=name))
    if not matches:
        raise ServiceConnectionError(
            f"No resolver backend named '{name}' is installed",
            address=address,
            hint=_INSTALL_HINT,
        )

    entry_point = matches[0]
    logger.debug("Using resolver backend %s (%s)", entry_point.name, entry_point.value)
    try:
        factory = entry_point.load()
    except Exception as exc:
        raise ServiceConnectionError(
            f"Resolver backend '{name}' failed to load: {exc}",
            address=address,
            hint=_INSTALL_HINT,
        ) from exc
    return factory


def _load_import_path(path: str, *, address: str) -> ResolverFactory:
    module_name, _, attribute = path.partition(":")
    logger.debug("Using resolver backend %s", path)
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attribute)
    except (ImportError, AttributeError) as exc:
        raise ServiceConnectionError(
            f"Resolver backend '{path}' could not be imported: {exc}",
            address=address,
            hint=_INSTALL_HINT,
        ) from exc


def bootstrap_peers(
    settings: CliSettings,
    advertised_services: Sequence[str],
) -> list[BootstrapPeer]:
    """Build the bootstrap peer list advertising *advertised_services*."""
    return [
        BootstrapPeer(
            peer_id=settings.bootstrap_peer_id,
            multiaddrs=tuple(settings.bootstrap_multiaddrs),
            advertised_services=tuple(advertised_services),
        ),
    ]


def create_resolver(
    settings: CliSettings,
    advertised_services: Sequence[str],
    *,
    address: str,
) -> ServiceResolver:
    """Instantiate the configured backend for one resolution path.

    Raises
    ------
    ServiceConnectionError
        When the backend is missing or its factory fails.
    """
    factory = load_resolver_factory(settings.resolver, address=address)
    peers = bootstrap_peers(settings, advertised_services)
    try:
        return factory(peers)
    except Exception as exc:
        raise ServiceConnectionError(str(exc) or type(exc).__name__, address=address) from exc
