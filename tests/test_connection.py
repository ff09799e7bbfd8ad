"""Tests for the connection establisher and resolver backend discovery.

All resolvers are in-memory fakes; entry-point discovery is patched at
the ``importlib.metadata`` seam.
"""

from __future__ import annotations

import logging
import sys
import types
from unittest.mock import MagicMock, patch

import pytest
from conftest import FakeBackend, FakeContainerProxy

from dockerrun_cli.config import CliSettings
from dockerrun_cli.core.protocols import BootstrapPeer
from dockerrun_cli.core.result import Failure
from dockerrun_cli.exceptions import ServiceConnectionError
from dockerrun_cli.infra.connection import ConnectionEstablisher
from dockerrun_cli.infra.resolver_loader import (
    ENTRY_POINT_GROUP,
    bootstrap_peers,
    create_resolver,
    load_resolver_factory,
)


# ---------------------------------------------------------------------------
# connect()
# ---------------------------------------------------------------------------

class TestConnect:
    def test_yields_proxy_and_releases(self, backend: FakeBackend, proxy: FakeContainerProxy) -> None:
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with establisher.connect() as live:
            assert live is proxy
            resolver = backend.resolvers[0]
            assert not resolver.closed
        assert resolver.established == [("url://dockerrun/", "DockerRunService")]
        assert backend.all_released

    def test_requests_full_service_set(self, backend: FakeBackend) -> None:
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with establisher.connect():
            pass
        assert backend.resolvers[0].advertised_services == [
            "dockerrun", "dockerimages", "tasks", "helloworld", "simpledemo",
        ]

    def test_released_when_body_raises(self, backend: FakeBackend) -> None:
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with pytest.raises(RuntimeError):
            with establisher.connect():
                raise RuntimeError("handler failed")
        assert backend.all_released

    def test_establish_failure_is_connection_error(self, backend: FakeBackend) -> None:
        backend.resolver_options["establish_error"] = TimeoutError("peer unreachable")
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with pytest.raises(ServiceConnectionError, match="peer unreachable") as exc_info:
            with establisher.connect():
                pytest.fail("body must not run")
        assert isinstance(exc_info.value.__cause__, TimeoutError)
        assert backend.resolvers[0].closed

    def test_resolver_creation_failure(self, backend: FakeBackend) -> None:
        backend.create_error = OSError("no route to bootstrap peer")
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with pytest.raises(ServiceConnectionError, match="no route"):
            with establisher.connect():
                pass

    @pytest.mark.parametrize("option", ["close_error", "handle_close_error"])
    def test_release_failure_is_logged(
        self, backend: FakeBackend, option: str, caplog: pytest.LogCaptureFixture,
    ) -> None:
        backend.resolver_options[option] = RuntimeError("close failed")
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with caplog.at_level(logging.WARNING):
            with establisher.connect() as live:
                assert live is backend.proxy
        resolver = backend.resolvers[0]
        assert resolver.closed
        assert resolver.handles[0].closed
        assert "close failed" in caplog.text

    def test_release_failure_keeps_connection_error(self, backend: FakeBackend) -> None:
        backend.resolver_options["establish_error"] = TimeoutError("peer unreachable")
        backend.resolver_options["close_error"] = RuntimeError("close failed")
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with pytest.raises(ServiceConnectionError, match="peer unreachable"):
            with establisher.connect():
                pass

    def test_no_retry(self, backend: FakeBackend) -> None:
        backend.resolver_options["establish_error"] = TimeoutError("slow")
        establisher = ConnectionEstablisher(CliSettings(), resolver_factory=backend)
        with pytest.raises(ServiceConnectionError):
            with establisher.connect():
                pass
        assert len(backend.resolvers) == 1
        assert len(backend.resolvers[0].established) == 1


# ---------------------------------------------------------------------------
# probe()
# ---------------------------------------------------------------------------

class TestProbe:
    def test_success(self, backend: FakeBackend) -> None:
        backend.resolver_options["probe_response"] = "healthy"
        outcome = ConnectionEstablisher(CliSettings(), resolver_factory=backend).probe()
        assert outcome.unwrap() == "healthy"
        resolver = backend.resolvers[0]
        assert resolver.probed == ["url://dockerrun/health"]
        assert resolver.established == []
        assert resolver.closed

    def test_uses_narrow_service_set(self, backend: FakeBackend) -> None:
        ConnectionEstablisher(CliSettings(), resolver_factory=backend).probe()
        assert backend.resolvers[0].advertised_services == ["dockerrun"]

    def test_failure_is_a_result(self, backend: FakeBackend) -> None:
        backend.resolver_options["probe_error"] = ConnectionRefusedError("refused")
        outcome = ConnectionEstablisher(CliSettings(), resolver_factory=backend).probe()
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, ServiceConnectionError)
        assert outcome.error.message == "refused"
        assert backend.resolvers[0].closed

    def test_release_failure_keeps_response(self, backend: FakeBackend) -> None:
        backend.resolver_options["close_error"] = RuntimeError("close failed")
        outcome = ConnectionEstablisher(CliSettings(), resolver_factory=backend).probe()
        assert outcome.unwrap() == "OK"

    def test_creation_failure_is_a_result(self, backend: FakeBackend) -> None:
        backend.create_error = RuntimeError("bad bootstrap")
        outcome = ConnectionEstablisher(CliSettings(), resolver_factory=backend).probe()
        assert isinstance(outcome, Failure)
        assert outcome.error.message == "bad bootstrap"


# ---------------------------------------------------------------------------
# Backend discovery
# ---------------------------------------------------------------------------

def _install_module(monkeypatch: pytest.MonkeyPatch, name: str, **attrs: object) -> None:
    module = types.ModuleType(name)
    for key, value in attrs.items():
        setattr(module, key, value)
    monkeypatch.setitem(sys.modules, name, module)


class TestLoadResolverFactory:
    def test_import_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = MagicMock()
        _install_module(monkeypatch, "fake_resolver_backend", create=factory)
        assert load_resolver_factory("fake_resolver_backend:create", address="url://x/") is factory

    def test_import_path_missing_module(self) -> None:
        with pytest.raises(ServiceConnectionError, match="could not be imported") as exc_info:
            load_resolver_factory("no_such_backend_module:create", address="url://x/")
        assert ENTRY_POINT_GROUP in (exc_info.value.hint or "")

    def test_import_path_missing_attribute(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _install_module(monkeypatch, "fake_resolver_backend")
        with pytest.raises(ServiceConnectionError, match="could not be imported"):
            load_resolver_factory("fake_resolver_backend:create", address="url://x/")

    def test_entry_point(self) -> None:
        factory = MagicMock()
        entry_point = MagicMock()
        entry_point.name = "default"
        entry_point.load.return_value = factory
        with patch(
            "dockerrun_cli.infra.resolver_loader.entry_points", return_value=[entry_point],
        ) as mock_eps:
            assert load_resolver_factory("default", address="url://x/") is factory
        mock_eps.assert_called_once_with(group=ENTRY_POINT_GROUP, name="default")

    def test_no_entry_point(self) -> None:
        with patch("dockerrun_cli.infra.resolver_loader.entry_points", return_value=[]):
            with pytest.raises(ServiceConnectionError, match="No resolver backend named 'default'"):
                load_resolver_factory("default", address="url://x/")

    def test_entry_point_load_failure(self) -> None:
        entry_point = MagicMock()
        entry_point.load.side_effect = ImportError("missing native library")
        with patch(
            "dockerrun_cli.infra.resolver_loader.entry_points", return_value=[entry_point],
        ):
            with pytest.raises(ServiceConnectionError, match="missing native library"):
                load_resolver_factory("default", address="url://x/")


class TestCreateResolver:
    def test_factory_receives_bootstrap_peer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = MagicMock()
        _install_module(monkeypatch, "fake_resolver_backend", create=factory)
        settings = CliSettings(resolver="fake_resolver_backend:create")

        resolver = create_resolver(settings, ["dockerrun"], address="url://dockerrun/")

        assert resolver is factory.return_value
        (peers,), _ = factory.call_args
        assert peers == [
            BootstrapPeer(
                peer_id=settings.bootstrap_peer_id,
                multiaddrs=tuple(settings.bootstrap_multiaddrs),
                advertised_services=("dockerrun",),
            ),
        ]

    def test_factory_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = MagicMock(side_effect=ValueError("bad multiaddr"))
        _install_module(monkeypatch, "fake_resolver_backend", create=factory)
        settings = CliSettings(resolver="fake_resolver_backend:create")
        with pytest.raises(ServiceConnectionError, match="bad multiaddr"):
            create_resolver(settings, ["dockerrun"], address="url://dockerrun/")

    def test_establisher_uses_configured_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        backend = FakeBackend(FakeContainerProxy())
        _install_module(
            monkeypatch, "fake_resolver_backend",
            create=lambda peers: backend(peers[0].advertised_services),
        )
        settings = CliSettings(resolver="fake_resolver_backend:create")
        with ConnectionEstablisher(settings).connect() as live:
            assert live is backend.proxy
        assert backend.all_released


def test_bootstrap_peers_default() -> None:
    peers = bootstrap_peers(CliSettings(), ["dockerrun"])
    assert len(peers) == 1
    assert peers[0].multiaddrs[0].endswith(f"/p2p/{peers[0].peer_id}")
