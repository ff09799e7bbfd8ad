"""Typed command variants produced by the argument parser.

The set is closed: :data:`Command` is the union of every variant, and
the executor keeps one handler per member.  Each variant carries only
parameters that have already been validated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class HelpCommand:
    """Print usage; also selected when no arguments are given."""


@dataclass(frozen=True, slots=True)
class VersionCommand:
    pass


@dataclass(frozen=True, slots=True)
class HealthCommand:
    pass


@dataclass(frozen=True, slots=True)
class StartCommand:
    image_reference: str
    environment: Mapping[str, str] = field(default_factory=dict)
    auto_terminate_seconds: int = 0


@dataclass(frozen=True, slots=True)
class ListCommand:
    pass


@dataclass(frozen=True, slots=True)
class ShowCommand:
    container_uuid: UUID


@dataclass(frozen=True, slots=True)
class PauseCommand:
    container_uuid: UUID


@dataclass(frozen=True, slots=True)
class UnpauseCommand:
    container_uuid: UUID


@dataclass(frozen=True, slots=True)
class TerminateCommand:
    container_uuid: UUID


Command = (
    HelpCommand
    | VersionCommand
    | HealthCommand
    | StartCommand
    | ListCommand
    | ShowCommand
    | PauseCommand
    | UnpauseCommand
    | TerminateCommand
)
