"""API client for a Centrifugo-style server.

Key components:
- Commands: validated per method before anything is sent
- Pipe: commands batched into one HTTP request, replies correlated by index
- Transport: the only component that touches the network
"""

import logging
from types import TracebackType
from typing import Any, Self, TypeVar

from pydantic import JsonValue

from centapi.client.config import ClientConfig, validate_endpoint
from centapi.protocol.base import Command, EmptyResult, Reply, Result
from centapi.protocol.history import (
    HistoryCommand,
    HistoryRemoveCommand,
    HistoryResult,
    StreamPosition,
)
from centapi.protocol.presence import (
    PresenceCommand,
    PresenceResult,
    PresenceStatsCommand,
    PresenceStatsResult,
)
from centapi.protocol.publication import (
    BroadcastCommand,
    BroadcastResult,
    PublishCommand,
    PublishResult,
)
from centapi.protocol.server import ChannelsCommand, ChannelsResult, InfoCommand, InfoResult
from centapi.protocol.subscriptions import (
    Disconnect,
    DisconnectCommand,
    SubscribeCommand,
    UnsubscribeCommand,
)
from centapi.shared.correlator import BatchResult, ReplyCorrelator
from centapi.shared.errors import ApiError, ConfigurationError, EmptyPipeError
from centapi.shared.message_parser import MessageParser
from centapi.shared.pipe import Pipe
from centapi.transport.base import Transport
from centapi.transport.http import HttpTransport

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=Result)


class Client:
    """API client for one server project.

    Single commands go out as one envelope per request. Commands collected in
    a `Pipe` go out together as one JSON array per request and come back as a
    `BatchResult` with one reply per command.
    """

    def __init__(self, config: ClientConfig):
        """Initialize the client.

        Args:
            config: Endpoint, API key and optional transport

        Raises:
            ConfigurationError: If no endpoint is configured
        """
        config.validate()
        self.config = config

        self._owns_transport = config.transport is None
        self.transport: Transport = config.transport or HttpTransport(
            timeout=config.timeout,
            max_keepalive_connections=config.max_keepalive_connections,
        )

        self._parser = MessageParser()
        self._correlator = ReplyCorrelator()

    # ================================
    # Lifecycle
    # ================================

    async def close(self) -> None:
        """Close the transport if the client created it."""
        if self._owns_transport:
            await self.transport.close()

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

    # ================================
    # Batching
    # ================================

    def pipe(self) -> Pipe:
        """Create an empty pipe to send several commands in one HTTP request."""
        return Pipe()

    async def send_pipe(self, pipe: Pipe) -> BatchResult:
        """Send all commands in the pipe as one request.

        The pipe is left untouched: sending it again issues a new request
        with the same commands.

        Returns:
            One reply per command, in the order the commands were added. Each
            reply may carry its own server error.

        Raises:
            EmptyPipeError: If the pipe has no commands
            TransportError: If the request failed as a whole
            DecodeError: If the response is not an array of replies
            LengthMismatchError: If the server answered a different number of
                commands than were sent
        """
        commands = pipe.commands
        if not commands:
            raise EmptyPipeError()

        body = self._parser.serialize_commands(commands)
        logger.debug(f"Sending pipe with {len(commands)} commands")
        payload = await self._post(body)

        replies = self._parser.parse_replies(payload)
        return self._correlator.correlate(commands, replies)

    async def send_command(self, command: Command) -> Reply:
        """Send a single command and return its reply.

        A server error for the command is returned on the reply, not raised.

        Raises:
            TransportError: If the request failed
            DecodeError: If the response is not a reply object
        """
        body = self._parser.serialize_command(command)
        logger.debug(f"Sending '{command.method}' command")
        payload = await self._post(body)
        return self._parser.parse_reply(payload)

    # ================================
    # Commands
    # ================================

    async def publish(
        self,
        channel: str,
        data: JsonValue,
        *,
        skip_history: bool | None = None,
        tags: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> PublishResult:
        """Publish data into a channel."""
        command = PublishCommand.create(
            channel=channel,
            data=data,
            skip_history=skip_history,
            tags=tags,
            idempotency_key=idempotency_key,
        )
        return await self._call(command, PublishResult)

    async def broadcast(
        self,
        channels: list[str],
        data: JsonValue,
        *,
        skip_history: bool | None = None,
        tags: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> BroadcastResult:
        """Publish the same data into many channels with one server-side call."""
        command = BroadcastCommand.create(
            channels=channels,
            data=data,
            skip_history=skip_history,
            tags=tags,
            idempotency_key=idempotency_key,
        )
        return await self._call(command, BroadcastResult)

    async def subscribe(self, channel: str, user: str, **options: Any) -> None:
        """Subscribe a user to a channel using server-side subscriptions."""
        command = SubscribeCommand.create(channel=channel, user=user, **options)
        await self._call(command, EmptyResult)

    async def unsubscribe(self, channel: str, user: str, *, client: str | None = None) -> None:
        """Unsubscribe a user from a channel."""
        command = UnsubscribeCommand.create(channel=channel, user=user, client=client)
        await self._call(command, EmptyResult)

    async def disconnect(
        self,
        user: str,
        *,
        client: str | None = None,
        whitelist: list[str] | None = None,
        disconnect: Disconnect | dict[str, Any] | None = None,
    ) -> None:
        """Close all connections of a user."""
        command = DisconnectCommand.create(
            user=user, client=client, whitelist=whitelist, disconnect=disconnect
        )
        await self._call(command, EmptyResult)

    async def presence(self, channel: str) -> PresenceResult:
        return await self._call(PresenceCommand.create(channel=channel), PresenceResult)

    async def presence_stats(self, channel: str) -> PresenceStatsResult:
        """Short presence information: counters only."""
        command = PresenceStatsCommand.create(channel=channel)
        return await self._call(command, PresenceStatsResult)

    async def history(
        self,
        channel: str,
        *,
        limit: int | None = None,
        since: StreamPosition | dict[str, Any] | None = None,
        reverse: bool | None = None,
    ) -> HistoryResult:
        command = HistoryCommand.create(
            channel=channel, limit=limit, since=since, reverse=reverse
        )
        return await self._call(command, HistoryResult)

    async def history_remove(self, channel: str) -> None:
        await self._call(HistoryRemoveCommand.create(channel=channel), EmptyResult)

    async def channels(self, *, pattern: str | None = None) -> ChannelsResult:
        """Active channels, i.e. channels with at least one subscriber."""
        return await self._call(ChannelsCommand.create(pattern=pattern), ChannelsResult)

    async def info(self) -> InfoResult:
        """Information about running server nodes."""
        return await self._call(InfoCommand.create(), InfoResult)

    # ================================
    # Helpers
    # ================================

    async def _call(self, command: Command, result_type: type[ResultT]) -> ResultT:
        reply = await self.send_command(command)
        if reply.error is not None:
            raise ApiError(reply.error.code, reply.error.message)

        return self._parser.validate_result(result_type, reply.result)

    async def _post(self, body: Any) -> Any:
        return await self.transport.send(self._endpoint(), self._headers(), body)

    def _endpoint(self) -> str:
        """Resolve the endpoint, asking `get_addr` first when configured."""
        if self.config.get_addr is None:
            return self.config.addr

        try:
            endpoint = self.config.get_addr()
        except Exception as e:
            raise ConfigurationError(f"Failed to resolve API endpoint: {e}") from e
        return validate_endpoint(endpoint)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.key:
            headers["Authorization"] = f"apikey {self.config.key}"
        return headers
