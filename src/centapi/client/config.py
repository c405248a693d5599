"""Client configuration.

Environment variables read by `ClientConfig.from_env`:
    CENTRIFUGO_API_URL      API endpoint, e.g. http://127.0.0.1:8000/api
    CENTRIFUGO_API_KEY      API key sent as `Authorization: apikey <key>`
    CENTRIFUGO_API_TIMEOUT  Request timeout in seconds (optional)
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from centapi.shared.errors import ConfigurationError
from centapi.transport.http import DEFAULT_MAX_KEEPALIVE_CONNECTIONS, DEFAULT_TIMEOUT

if TYPE_CHECKING:
    from centapi.transport.base import Transport

ENV_API_URL = "CENTRIFUGO_API_URL"
ENV_API_KEY = "CENTRIFUGO_API_KEY"
ENV_API_TIMEOUT = "CENTRIFUGO_API_TIMEOUT"


@dataclass
class ClientConfig:
    addr: str | None = None
    """API endpoint URL."""

    key: str | None = None

    get_addr: Callable[[], str] | None = None
    """Called before every request to resolve the endpoint. Takes precedence
    over `addr`."""

    timeout: float = DEFAULT_TIMEOUT
    max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS

    transport: Transport | None = None
    """Transport to use instead of the default HTTP transport."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from environment variables.

        Raises:
            ConfigurationError: If the timeout is not a number
        """
        env = os.environ if environ is None else environ
        timeout = env.get(ENV_API_TIMEOUT)
        try:
            timeout_seconds = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"'{ENV_API_TIMEOUT}' must be a number of seconds, got '{timeout}'"
            ) from e

        return cls(
            addr=env.get(ENV_API_URL),
            key=env.get(ENV_API_KEY),
            timeout=timeout_seconds,
        )

    def validate(self) -> None:
        """Check that an endpoint can be resolved.

        Raises:
            ConfigurationError: If neither `addr` nor `get_addr` is set, or
                `addr` is not an HTTP URL
        """
        if self.get_addr is not None:
            return
        if not self.addr:
            raise ConfigurationError("Either 'addr' or 'get_addr' must be set")
        validate_endpoint(self.addr)


def validate_endpoint(endpoint: str) -> str:
    if not isinstance(endpoint, str) or not endpoint.startswith(("http://", "https://")):
        raise ConfigurationError(f"API endpoint must be a valid HTTP URL, got {endpoint!r}")
    return endpoint
