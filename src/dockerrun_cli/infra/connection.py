"""Connection establisher adapter — the boundary to the resolver backend.

Two independent paths are exposed:

* :meth:`ConnectionEstablisher.connect` resolves the service address and
  opens a sandboxed connection yielding the typed container proxy.
* :meth:`ConnectionEstablisher.probe` resolves the diagnostic address and
  asks for a plain string, with its own resolver and a narrower set of
  advertised services.

No call is retried.  Failures come back as
:class:`~dockerrun_cli.core.result.Failure` carrying a
:class:`~dockerrun_cli.exceptions.ServiceConnectionError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Protocol, TypeVar

from dockerrun_cli.config import CliSettings
from dockerrun_cli.core.protocols import ContainerServiceProxy, ServiceHandle, ServiceResolver
from dockerrun_cli.core.result import Failure, Result, Success
from dockerrun_cli.exceptions import ServiceConnectionError
from dockerrun_cli.infra.resolver_loader import create_resolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Closeable(Protocol):
    def close(self) -> None: ...


class ConnectionEstablisher:
    """Opens connections to the docker run service for one invocation.

    Parameters
    ----------
    settings:
        Addresses, bootstrap peers and the resolver backend to use.
    resolver_factory:
        Override for backend discovery; receives the advertised services
        and returns a resolver.  Used by tests and embedding callers.
    """

    def __init__(
        self,
        settings: CliSettings,
        *,
        resolver_factory: Callable[[Sequence[str]], ServiceResolver] | None = None,
    ) -> None:
        self._settings: CliSettings = settings
        self._resolver_factory = resolver_factory

    # ------------------------------------------------------------------
    # Full connection
    # ------------------------------------------------------------------

    def establish(self, resolver: ServiceResolver) -> Result[ServiceHandle]:
        """Open the sandboxed connection through an already-created *resolver*."""
        address = self._settings.service_address
        logger.debug("Establishing %s as %s", address, self._settings.service_type)
        return self._attempt(
            address,
            lambda: resolver.establish(address, self._settings.service_type),
        )

    @contextmanager
    def connect(self) -> Iterator[ContainerServiceProxy]:
        """Yield a live proxy; the connection and resolver are always released.

        Raises
        ------
        ServiceConnectionError
            When resolution or connection fails.
        """
        address = self._settings.service_address
        resolver = self._create(self._settings.advertised_services, address).unwrap()
        try:
            handle = self.establish(resolver).unwrap()
            try:
                yield handle.proxy
            finally:
                logger.debug("Releasing connection to %s", address)
                _release(handle, address)
        finally:
            _release(resolver, address)

    # ------------------------------------------------------------------
    # Diagnostic probe
    # ------------------------------------------------------------------

    def probe(self) -> Result[str]:
        """Request the health string from the diagnostic address."""
        address = self._settings.health_address
        created = self._create(self._settings.health_advertised_services, address)
        if not created.ok:
            return created
        resolver = created.unwrap()
        try:
            logger.debug("Probing %s", address)
            return self._attempt(address, lambda: str(resolver.probe(address)))
        finally:
            _release(resolver, address)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _create(self, advertised_services: Sequence[str], address: str) -> Result[ServiceResolver]:
        if self._resolver_factory is not None:
            factory = self._resolver_factory
            return self._attempt(address, lambda: factory(advertised_services))
        return self._attempt(
            address,
            lambda: create_resolver(self._settings, advertised_services, address=address),
        )

    @staticmethod
    def _attempt(address: str, call: Callable[[], T]) -> Result[T]:
        """Run *call*, mapping any failure to :class:`ServiceConnectionError`."""
        try:
            return Success(call())
        except ServiceConnectionError as exc:
            return Failure(exc)
        except Exception as exc:
            error = ServiceConnectionError(str(exc) or type(exc).__name__, address=address)
            error.__cause__ = exc
            return Failure(error)


def _release(resource: _Closeable, address: str) -> None:
    """Close *resource*; a failure is logged and never replaces the outcome."""
    try:
        resource.close()
    except Exception as exc:
        logger.warning(
            "Failed to release %s for %s: %s",
            type(resource).__name__, address, str(exc) or type(exc).__name__,
        )
