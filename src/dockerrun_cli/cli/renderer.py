"""Output renderer: command result → text for stdout (and stderr).

Rendering is pure — functions return a :class:`Rendered` value and
:func:`write_rendered` performs the I/O.  Structured mode always yields
exactly one JSON document on stdout.  Human mode yields labelled,
indented plain-text blocks; the only human output sent to stderr is a
failed health report.

Optional container fields (``dockerContainerId``, ``errorMessage``,
a non-empty environment) are omitted when absent, in both modes.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from dockerrun_cli.cli.console import write_diagnostics, write_output
from dockerrun_cli.cli.session import OutputFormat
from dockerrun_cli.core.models import (
    Acknowledgment,
    CommandResult,
    Container,
    ContainerDetails,
    ContainerList,
    HealthReport,
    LifecycleAction,
    StartResult,
    TextBlock,
)


@dataclass(frozen=True, slots=True)
class Rendered:
    """Final text for one invocation, split by stream."""

    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render(result: CommandResult, output_format: OutputFormat) -> Rendered:
    """Render *result* for the session's *output_format*."""
    if isinstance(result, TextBlock):
        return Rendered(stdout=[result.text])
    if output_format is OutputFormat.STRUCTURED:
        return Rendered(stdout=[to_json(structured_document(result))])
    return _HUMAN_RENDERERS[type(result)](result)


def write_rendered(rendered: Rendered) -> None:
    """Write stdout lines, then stderr lines."""
    if rendered.stdout:
        write_output(rendered.stdout)
    if rendered.stderr:
        write_diagnostics(rendered.stderr)


def to_json(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Structured documents
# ---------------------------------------------------------------------------

def container_document(container: Container) -> dict[str, Any]:
    """Key-ordered document for one container snapshot."""
    doc: dict[str, Any] = {
        "uuid": str(container.uuid),
        "imageReference": container.image_reference,
        "status": container.status.value,
        "createdAt": container.created_at,
        "autoTerminateSeconds": container.auto_terminate_seconds,
    }
    if container.docker_container_id is not None:
        doc["dockerContainerId"] = container.docker_container_id
    if container.error_message is not None:
        doc["errorMessage"] = container.error_message
    if container.environment_variables:
        doc["environmentVariables"] = dict(container.environment_variables)
    return doc


def structured_document(result: CommandResult) -> dict[str, Any] | list[dict[str, Any]]:
    if isinstance(result, HealthReport):
        doc: dict[str, Any] = {"healthy": result.healthy, "service": result.service}
        if result.healthy:
            doc["response"] = result.response
        else:
            doc["error"] = result.error
        doc["latencyMs"] = result.latency_ms
        return doc
    if isinstance(result, StartResult):
        return container_document(result.container)
    if isinstance(result, ContainerList):
        return [container_document(c) for c in result.containers]
    if isinstance(result, ContainerDetails):
        return container_document(result.container)
    if isinstance(result, Acknowledgment):
        ack: dict[str, Any] = {result.action.value: True, "uuid": str(result.uuid)}
        if result.action is LifecycleAction.TERMINATE:
            ack["imageReference"] = result.image_reference
        return ack
    raise TypeError(f"No structured form for {type(result).__name__}")


# ---------------------------------------------------------------------------
# Human-readable blocks
# ---------------------------------------------------------------------------

def format_created(epoch_millis: int) -> str:
    """Local ``YYYY-MM-DD HH:MM:SS``, or ``unknown`` for ``0``."""
    if epoch_millis == 0:
        return "unknown"
    return datetime.fromtimestamp(epoch_millis / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _labelled(label: str, value: object, width: int) -> str:
    return f"  {label + ':':<{width}}{value}"


def _environment_lines(environment: Mapping[str, str]) -> list[str]:
    if not environment:
        return []
    return ["  Environment:", *(f"    {k}={v}" for k, v in environment.items())]


def _human_health(report: HealthReport) -> Rendered:
    if report.healthy:
        return Rendered(stdout=[
            "Docker run service is healthy",
            f"  Service: {report.service}",
            f"  Response: {report.response}",
            f"  Latency: {report.latency_ms}ms",
        ])
    return Rendered(stderr=[
        "Docker run service health check failed",
        f"  Error: {report.error}",
        f"  Latency: {report.latency_ms}ms",
    ])


def _human_start(result: StartResult) -> Rendered:
    container = result.container
    lines = [
        "Started container:",
        _labelled("UUID", container.uuid, 16),
        _labelled("Image", container.image_reference, 16),
        _labelled("Status", container.status.value, 16),
    ]
    if result.auto_terminate_seconds > 0:
        lines.append(_labelled("Auto-terminate", f"{result.auto_terminate_seconds}s", 16))
    lines.extend(_environment_lines(result.environment))
    lines.append("")
    lines.append(f"Use 'show {container.uuid}' to check container status")
    return Rendered(stdout=lines)


def _human_list(result: ContainerList) -> Rendered:
    if not result:
        return Rendered(stdout=["No containers found."])
    lines = ["Containers:"]
    for c in result.containers:
        timeout = f" ({c.auto_terminate_seconds}s)" if c.auto_terminate_seconds > 0 else ""
        lines.append(f"  {c.status.icon} {c.short_id}  {c.image_reference}{timeout}")
    lines.append("")
    lines.append(f"{len(result)} container(s) total")
    return Rendered(stdout=lines)


def _human_details(result: ContainerDetails) -> Rendered:
    c = result.container
    lines = [
        "Container Details:",
        _labelled("UUID", c.uuid, 19),
        _labelled("Image", c.image_reference, 19),
        _labelled("Status", c.status.value, 19),
        _labelled("Created", format_created(c.created_at), 19),
    ]
    if c.auto_terminate_seconds > 0:
        lines.append(_labelled("Auto-terminate", f"{c.auto_terminate_seconds}s", 19))
    if c.docker_container_id is not None:
        lines.append(_labelled("Docker ID", c.docker_container_id, 19))
    if c.error_message is not None:
        lines.append(_labelled("Error", c.error_message, 19))
    lines.extend(_environment_lines(c.environment_variables))
    return Rendered(stdout=lines)


def _human_ack(ack: Acknowledgment) -> Rendered:
    if ack.action is LifecycleAction.TERMINATE:
        return Rendered(stdout=[
            "Terminated container:",
            f"  UUID:  {ack.uuid}",
            f"  Image: {ack.image_reference}",
        ])
    verb = "Paused" if ack.action is LifecycleAction.PAUSE else "Unpaused"
    return Rendered(stdout=[f"{verb} container {ack.uuid}"])


_HUMAN_RENDERERS: dict[type, Callable[[Any], Rendered]] = {
    HealthReport: _human_health,
    StartResult: _human_start,
    ContainerList: _human_list,
    ContainerDetails: _human_details,
    Acknowledgment: _human_ack,
}
