"""Core container service — orchestrates calls against the remote proxy.

This is the central service consumed by the command executor.  It
depends on a :class:`~dockerrun_cli.core.protocols.ContainerServiceProxy`
injected at construction time, keeping the core free of any resolver
or transport imports.

Guarantees
----------
* Pure orchestration — no output, no process exit.
* Every remote call passes through :func:`~dockerrun_cli.core.result.invoke`;
  only :class:`~dockerrun_cli.exceptions.DockerRunError` subclasses escape.
* Snapshots are parsed once and never cached across calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from dockerrun_cli.core.models import (
    Acknowledgment,
    Container,
    ContainerDetails,
    ContainerList,
    ContainerStatus,
    LifecycleAction,
    StartResult,
)
from dockerrun_cli.core.protocols import ContainerServiceProxy
from dockerrun_cli.core.result import invoke
from dockerrun_cli.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)


class ContainerService:
    """Stateless service wrapping one remote proxy.

    Parameters
    ----------
    proxy:
        Any object satisfying the :class:`ContainerServiceProxy` protocol.
    """

    def __init__(self, proxy: ContainerServiceProxy) -> None:
        self._proxy: ContainerServiceProxy = proxy

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(
        self,
        image_reference: str,
        environment: Mapping[str, str],
        auto_terminate_seconds: int,
    ) -> StartResult:
        action = "start container"
        env = dict(environment)
        logger.debug(
            "startContainer image=%s env=%s timeout=%s",
            image_reference, list(env), auto_terminate_seconds,
        )
        raw = invoke(
            action,
            lambda: self._proxy.start_container(image_reference, env, auto_terminate_seconds),
        ).unwrap()
        return StartResult(
            container=parse_container(raw, action),
            environment=env,
            auto_terminate_seconds=auto_terminate_seconds,
        )

    def list_containers(self) -> ContainerList:
        action = "list containers"
        logger.debug("getAllContainers")
        raw = invoke(action, lambda: list(self._proxy.get_all_containers())).unwrap()
        return ContainerList(
            containers=tuple(parse_container(entry, action) for entry in raw),
        )

    def show(self, container_uuid: UUID) -> ContainerDetails:
        action = f"show container '{container_uuid}'"
        raw = self._fetch(container_uuid, action)
        return ContainerDetails(container=parse_container(raw, action))

    def pause(self, container_uuid: UUID) -> Acknowledgment:
        action = f"pause container '{container_uuid}'"
        raw = self._fetch(container_uuid, action)
        logger.debug("pauseContainer %s", container_uuid)
        invoke(action, lambda: self._proxy.pause_container(raw)).unwrap()
        return Acknowledgment(action=LifecycleAction.PAUSE, uuid=container_uuid)

    def unpause(self, container_uuid: UUID) -> Acknowledgment:
        action = f"unpause container '{container_uuid}'"
        raw = self._fetch(container_uuid, action)
        logger.debug("unpauseContainer %s", container_uuid)
        invoke(action, lambda: self._proxy.unpause_container(raw)).unwrap()
        return Acknowledgment(action=LifecycleAction.UNPAUSE, uuid=container_uuid)

    def terminate(self, container_uuid: UUID) -> Acknowledgment:
        action = f"terminate container '{container_uuid}'"
        raw = self._fetch(container_uuid, action)
        # The remote handle goes stale once terminated; read the image first.
        image_reference = parse_container(raw, action).image_reference
        logger.debug("terminateContainer %s", container_uuid)
        invoke(action, lambda: self._proxy.terminate_container(raw)).unwrap()
        return Acknowledgment(
            action=LifecycleAction.TERMINATE,
            uuid=container_uuid,
            image_reference=image_reference,
        )

    # ------------------------------------------------------------------
    # Provider delegation
    # ------------------------------------------------------------------

    def _fetch(self, container_uuid: UUID, action: str) -> Any:
        logger.debug("getContainer %s", container_uuid)
        return invoke(action, lambda: self._proxy.get_container(container_uuid)).unwrap()


# ---------------------------------------------------------------------------
# Raw record → domain model
# ---------------------------------------------------------------------------

def _field(raw: Any, name: str, default: Any = None) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name, default)
    return getattr(raw, name, default)


def parse_container(raw: Any, action: str) -> Container:
    """Convert a backend container record into a :class:`Container`.

    Reading a field of a remote record may itself fail; any such failure
    is reported against *action* like a failed remote call.

    Raises
    ------
    RemoteOperationError
        If the record is missing an identifier, image or known status,
        or cannot be read.
    """
    if raw is None:
        raise RemoteOperationError(action, "service returned no container")
    try:
        return _to_container(raw)
    except (TypeError, ValueError) as exc:
        raise RemoteOperationError(
            action, f"service returned a malformed container record: {exc}",
        ) from exc
    except Exception as exc:
        raise RemoteOperationError(
            action, f"could not read container record: {str(exc) or type(exc).__name__}",
        ) from exc


def _to_container(raw: Any) -> Container:
    image_reference = _field(raw, "imageReference")
    if image_reference is None:
        raise ValueError("container has no image")

    raw_uuid = _field(raw, "uuid")
    container_uuid = raw_uuid if isinstance(raw_uuid, UUID) else UUID(str(raw_uuid))

    raw_status = _field(raw, "status")
    # Enum members from a typed backend expose ``name``.
    status = ContainerStatus(str(getattr(raw_status, "name", raw_status)))

    env = _field(raw, "environmentVariables") or {}
    return Container(
        uuid=container_uuid,
        image_reference=str(image_reference),
        status=status,
        created_at=int(_field(raw, "createdAt") or 0),
        auto_terminate_seconds=int(_field(raw, "autoTerminateSeconds") or 0),
        docker_container_id=_optional_str(_field(raw, "dockerContainerId")),
        error_message=_optional_str(_field(raw, "errorMessage")),
        environment_variables={str(k): str(v) for k, v in dict(env).items()},
    )


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
