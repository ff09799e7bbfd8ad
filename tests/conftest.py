"""Shared pytest fixtures and configuration for the dockerrun-cli test suite.

Guidelines
----------
* No network access in any test.
* The resolver backend is replaced by in-memory fakes at the
  ``resolver_factory`` seam.
* ``DOCKERRUN_*`` variables and any ``.env`` file are isolated per test.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

import pytest

from dockerrun_cli.cli.app import main

NGINX = "docker.io/library/nginx:latest"
REDIS = "docker.io/library/redis:7"

RUNNING_ID = UUID("550e8400-e29b-41d4-a716-446655440000")
PAUSED_ID = UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")
STARTED_ID = UUID("123e4567-e89b-12d3-a456-426614174000")


def container_record(
    container_uuid: UUID = RUNNING_ID,
    *,
    image: str = NGINX,
    status: str = "RUNNING",
    created_at: int = 1_700_000_000_000,
    auto_terminate_seconds: int = 0,
    docker_container_id: str | None = None,
    error_message: str | None = None,
    environment: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Factory for a raw container record as a backend would return it."""
    record: dict[str, Any] = {
        "uuid": str(container_uuid),
        "imageReference": image,
        "status": status,
        "createdAt": created_at,
        "autoTerminateSeconds": auto_terminate_seconds,
        "environmentVariables": dict(environment or {}),
    }
    if docker_container_id is not None:
        record["dockerContainerId"] = docker_container_id
    if error_message is not None:
        record["errorMessage"] = error_message
    return record


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

class FakeContainerProxy:
    """In-memory stand-in for the remote docker run service."""

    def __init__(self, records: Sequence[dict[str, Any]] = ()) -> None:
        self.records: dict[str, dict[str, Any]] = {r["uuid"]: dict(r) for r in records}
        self.calls: list[tuple[Any, ...]] = []
        self.fail_with: dict[str, Exception] = {}

    def _check(self, name: str) -> None:
        if name in self.fail_with:
            raise self.fail_with[name]

    def start_container(
        self,
        image_reference: str,
        environment_variables: Mapping[str, str],
        auto_terminate_seconds: int,
    ) -> dict[str, Any]:
        self.calls.append(
            ("startContainer", image_reference, dict(environment_variables), auto_terminate_seconds),
        )
        self._check("startContainer")
        record = container_record(
            STARTED_ID,
            image=image_reference,
            status="STARTING",
            auto_terminate_seconds=auto_terminate_seconds,
            environment=environment_variables,
        )
        self.records[record["uuid"]] = record
        return dict(record)

    def get_all_containers(self) -> list[dict[str, Any]]:
        self.calls.append(("getAllContainers",))
        self._check("getAllContainers")
        return [dict(r) for r in self.records.values()]

    def get_container(self, container_uuid: UUID) -> dict[str, Any]:
        self.calls.append(("getContainer", container_uuid))
        self._check("getContainer")
        record = self.records.get(str(container_uuid))
        if record is None:
            raise LookupError(f"Container {container_uuid} not found")
        return record

    def pause_container(self, container: dict[str, Any]) -> None:
        self.calls.append(("pauseContainer", container["uuid"]))
        self._check("pauseContainer")
        container["status"] = "PAUSED"

    def unpause_container(self, container: dict[str, Any]) -> None:
        self.calls.append(("unpauseContainer", container["uuid"]))
        self._check("unpauseContainer")
        container["status"] = "RUNNING"

    def terminate_container(self, container: dict[str, Any]) -> None:
        self.calls.append(("terminateContainer", container["uuid"]))
        self._check("terminateContainer")
        # A terminated container's handle is no longer valid.
        del self.records[container["uuid"]]
        container.clear()


class FakeHandle:
    def __init__(self, proxy: FakeContainerProxy, close_error: Exception | None = None) -> None:
        self.proxy = proxy
        self.close_error = close_error
        self.closed = False

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeResolver:
    """In-memory resolver recording every request."""

    def __init__(
        self,
        proxy: FakeContainerProxy,
        advertised_services: Sequence[str],
        *,
        establish_error: Exception | None = None,
        probe_error: Exception | None = None,
        probe_response: str = "OK",
        close_error: Exception | None = None,
        handle_close_error: Exception | None = None,
    ) -> None:
        self.proxy = proxy
        self.advertised_services = list(advertised_services)
        self.establish_error = establish_error
        self.probe_error = probe_error
        self.probe_response = probe_response
        self.close_error = close_error
        self.handle_close_error = handle_close_error
        self.established: list[tuple[str, str]] = []
        self.probed: list[str] = []
        self.handles: list[FakeHandle] = []
        self.closed = False

    def establish(self, address: str, service_type: str) -> FakeHandle:
        self.established.append((address, service_type))
        if self.establish_error is not None:
            raise self.establish_error
        handle = FakeHandle(self.proxy, self.handle_close_error)
        self.handles.append(handle)
        return handle

    def probe(self, address: str) -> str:
        self.probed.append(address)
        if self.probe_error is not None:
            raise self.probe_error
        return self.probe_response

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeBackend:
    """Resolver factory that remembers every resolver it created."""

    def __init__(self, proxy: FakeContainerProxy) -> None:
        self.proxy = proxy
        self.resolvers: list[FakeResolver] = []
        self.resolver_options: dict[str, Any] = {}
        self.create_error: Exception | None = None

    def __call__(self, advertised_services: Sequence[str]) -> FakeResolver:
        if self.create_error is not None:
            raise self.create_error
        resolver = FakeResolver(self.proxy, advertised_services, **self.resolver_options)
        self.resolvers.append(resolver)
        return resolver

    @property
    def all_released(self) -> bool:
        return all(
            r.closed and all(h.closed for h in r.handles) for r in self.resolvers
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep host ``DOCKERRUN_*`` variables and ``.env`` files out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("DOCKERRUN_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def proxy() -> FakeContainerProxy:
    return FakeContainerProxy(
        [
            container_record(RUNNING_ID, auto_terminate_seconds=3600, docker_container_id="abc123def456"),
            container_record(PAUSED_ID, image=REDIS, status="PAUSED", environment={"MODE": "cache"}),
        ],
    )


@pytest.fixture
def backend(proxy: FakeContainerProxy) -> FakeBackend:
    return FakeBackend(proxy)


@pytest.fixture
def run(backend: FakeBackend) -> Any:
    """Invoke :func:`main` against the fake backend."""

    def _run(*argv: str) -> int:
        return main(list(argv), resolver_factory=backend)

    return _run
