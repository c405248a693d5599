"""HTTP transport built on httpx."""

import logging
from typing import Any

import httpx

from centapi.shared.errors import MalformedResponseError, StatusCodeError, TransportError
from centapi.transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1.0
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 100


class HttpTransport(Transport):
    """Posts JSON bodies with a shared `httpx.AsyncClient`.

    Connections are pooled by httpx and reused across calls.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            timeout: Request timeout in seconds
            max_keepalive_connections: Idle connections kept in the pool
            http_client: Preconfigured client to use instead of a new one.
                The transport does not close a client it did not create.
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=timeout,
                limits=httpx.Limits(max_keepalive_connections=max_keepalive_connections),
            )
        self._http_client = http_client

    async def send(self, url: str, headers: dict[str, str], body: Any) -> Any:
        try:
            response = await self._http_client.post(url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.debug(f"Server at {url} answered with status {response.status_code}")
            raise StatusCodeError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(str(e)) from e

    async def close(self) -> None:
        """Close the underlying HTTP client if this transport created it.

        Safe to call multiple times.
        """
        if self._owns_client:
            await self._http_client.aclose()
