from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from centapi.client.client import Client
from centapi.client.config import ClientConfig
from centapi.transport.base import Transport

ADDR = "http://127.0.0.1:8000/api"
API_KEY = "default_api_key_hex"


@dataclass
class SentRequest:
    url: str
    headers: dict[str, str]
    body: Any


def ack_everything(body: Any) -> Any:
    """Answer every command with a bare acknowledgement."""
    if isinstance(body, list):
        return [{"result": {}} for _ in body]
    return {"result": {}}


class MockTransport(Transport):
    """In-memory transport that records requests and answers via a responder."""

    def __init__(self, responder: Callable[[Any], Any] = ack_everything):
        self.sent_requests: list[SentRequest] = []
        self.responder = responder
        self.error: Exception | None = None
        self.closed = False

    def respond_with(self, payload: Any) -> None:
        """Answer every request with a fixed payload."""
        self.responder = lambda body: payload

    def simulate_error(self, error: Exception) -> None:
        self.error = error

    async def send(self, url: str, headers: dict[str, str], body: Any) -> Any:
        self.sent_requests.append(SentRequest(url=url, headers=dict(headers), body=body))
        if self.error is not None:
            raise self.error
        return self.responder(body)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def client(transport: MockTransport) -> Client:
    return Client(ClientConfig(addr=ADDR, key=API_KEY, transport=transport))
