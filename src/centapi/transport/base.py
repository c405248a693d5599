from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Self


class Transport(ABC):
    """Abstract transport for API request delivery.

    Handles the mechanics of posting a JSON body and returning the decoded
    JSON answer, without knowledge of commands, envelopes or correlation.

    Retries, pooling and rate limiting, if any, belong here and not in the
    client.
    """

    @abstractmethod
    async def send(self, url: str, headers: dict[str, str], body: Any) -> Any:
        """POST a JSON body and return the decoded JSON response body.

        Args:
            url: Endpoint to post to
            headers: HTTP headers, including authorization
            body: JSON-serializable request body

        Returns:
            Decoded JSON response body

        Raises:
            TransportError: If the request failed, timed out or the server
                answered with a non-success status
            MalformedResponseError: If the response body is not JSON
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources held by the transport."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
        return None
