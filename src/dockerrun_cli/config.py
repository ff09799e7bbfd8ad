"""CLI configuration loaded from environment variables.

Every value has a default pointing at the public docker run service, so
an unconfigured install works out of the box.  Overrides use the
``DOCKERRUN_`` prefix, e.g. ``DOCKERRUN_RESOLVER=mypkg.resolver:create``.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BeforeValidator, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PEER_ID = "12D3KooWLMyXNfwhcX1YsiNx3hnjk3GGSfsU1fydRa8bzrE6scMT"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _parse_comma_separated(value: object) -> list[str]:
    """Accept ``"a,b,c"`` from the environment or an already-parsed list."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value  # type: ignore[return-value]


CommaSeparated = Annotated[list[str], NoDecode, BeforeValidator(_parse_comma_separated)]


class CliSettings(BaseSettings):
    """Connection and logging settings for one CLI invocation."""

    # Logical address of the container service and its health endpoint.
    service_address: str = "url://dockerrun/"
    health_address: str = "url://dockerrun/health"

    # Capability token requested when opening the sandboxed connection.
    service_type: str = "DockerRunService"

    bootstrap_peer_id: str = DEFAULT_PEER_ID
    bootstrap_multiaddrs: CommaSeparated = [
        f"/ip4/198.199.106.165/tcp/35000/p2p/{DEFAULT_PEER_ID}",
    ]

    # Services the bootstrap peer is expected to advertise.  The health
    # probe only needs the docker run service itself.
    advertised_services: CommaSeparated = [
        "dockerrun",
        "dockerimages",
        "tasks",
        "helloworld",
        "simpledemo",
    ]
    health_advertised_services: CommaSeparated = ["dockerrun"]

    # Entry-point name in ``dockerrun_cli.resolvers`` or ``module:factory``.
    resolver: str = "default"

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    model_config = SettingsConfigDict(
        env_prefix="DOCKERRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
