"""Result type returned from the remote-invocation boundary.

A call either produced a value (:class:`Success`) or a typed
:class:`~dockerrun_cli.exceptions.DockerRunError` (:class:`Failure`).
Keeping connection and remote failures as distinct error types lets the
normalizer attribute the failure correctly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from dockerrun_cli.exceptions import DockerRunError, RemoteOperationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    error: DockerRunError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the carried error."""
        raise self.error


Result = Success[T] | Failure


def invoke(action: str, call: Callable[[], T]) -> Result[T]:
    """Run one remote *call*, capturing any failure as :class:`Failure`.

    Errors already in our hierarchy are kept as-is; anything else the
    proxy raises becomes a :class:`RemoteOperationError` for *action*.
    """
    try:
        return Success(call())
    except DockerRunError as exc:
        return Failure(exc)
    except Exception as exc:
        error = RemoteOperationError(action, _describe(exc))
        error.__cause__ = exc
        return Failure(error)


def _describe(exc: BaseException) -> str:
    """Return the cause string reported to the operator."""
    message = str(exc)
    return message if message else type(exc).__name__
