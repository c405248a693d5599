"""Pipe: an ordered batch of commands sent in one HTTP request.

A pipe is a plain accumulator. It never talks to the network, so it can be
built across loops and conditionals before a single `Client.send_pipe`.
The order commands are added in is the order replies come back in.

A pipe has a single owner. It holds no lock; producers on several tasks
must serialize their `add` calls themselves.
"""

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import JsonValue

from centapi.protocol.base import Command
from centapi.protocol.history import HistoryCommand, HistoryRemoveCommand, StreamPosition
from centapi.protocol.presence import PresenceCommand, PresenceStatsCommand
from centapi.protocol.publication import BroadcastCommand, PublishCommand
from centapi.protocol.server import ChannelsCommand, InfoCommand
from centapi.protocol.subscriptions import (
    Disconnect,
    DisconnectCommand,
    SubscribeCommand,
    UnsubscribeCommand,
)

logger = logging.getLogger(__name__)


class Pipe:
    """Ordered, growable collection of commands.

    The `add_<method>` helpers build the command first and append it only if
    it is valid: a validation error leaves the pipe exactly as it was.
    """

    def __init__(self) -> None:
        self._commands: list[Command] = []

    # ================================
    # Accessors
    # ================================

    @property
    def commands(self) -> tuple[Command, ...]:
        """Snapshot of the commands in submission order."""
        return tuple(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def is_empty(self) -> bool:
        return not self._commands

    def reset(self) -> None:
        """Clear all commands from the pipe."""
        logger.debug(f"Resetting pipe with {len(self._commands)} commands")
        self._commands.clear()

    def __repr__(self) -> str:
        methods = ", ".join(str(command.method) for command in self._commands)
        return f"Pipe([{methods}])"

    # ================================
    # Building
    # ================================

    def add(self, command: Command) -> None:
        """Append an already validated command."""
        if not isinstance(command, Command):
            raise TypeError(f"Expected a Command, got {type(command).__name__}")
        self._commands.append(command)

    def add_publish(
        self,
        channel: str,
        data: JsonValue,
        *,
        skip_history: bool | None = None,
        tags: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        """Add a publish command. Nothing is sent until the pipe is sent."""
        self.add(
            PublishCommand.create(
                channel=channel,
                data=data,
                skip_history=skip_history,
                tags=tags,
                idempotency_key=idempotency_key,
            )
        )

    def add_broadcast(
        self,
        channels: list[str],
        data: JsonValue,
        *,
        skip_history: bool | None = None,
        tags: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        """Add one broadcast command fanning `data` out to `channels`."""
        self.add(
            BroadcastCommand.create(
                channels=channels,
                data=data,
                skip_history=skip_history,
                tags=tags,
                idempotency_key=idempotency_key,
            )
        )

    def add_subscribe(self, channel: str, user: str, **options: Any) -> None:
        """Add a subscribe command.

        Args:
            channel: Channel to subscribe the user to
            user: User ID
            **options: Subscribe options (info, presence, join_leave, position,
                recover, data, recover_since, client)
        """
        self.add(SubscribeCommand.create(channel=channel, user=user, **options))

    def add_unsubscribe(self, channel: str, user: str, *, client: str | None = None) -> None:
        self.add(UnsubscribeCommand.create(channel=channel, user=user, client=client))

    def add_disconnect(
        self,
        user: str,
        *,
        client: str | None = None,
        whitelist: list[str] | None = None,
        disconnect: Disconnect | dict[str, Any] | None = None,
    ) -> None:
        self.add(
            DisconnectCommand.create(
                user=user, client=client, whitelist=whitelist, disconnect=disconnect
            )
        )

    def add_presence(self, channel: str) -> None:
        self.add(PresenceCommand.create(channel=channel))

    def add_presence_stats(self, channel: str) -> None:
        self.add(PresenceStatsCommand.create(channel=channel))

    def add_history(
        self,
        channel: str,
        *,
        limit: int | None = None,
        since: StreamPosition | dict[str, Any] | None = None,
        reverse: bool | None = None,
    ) -> None:
        self.add(
            HistoryCommand.create(channel=channel, limit=limit, since=since, reverse=reverse)
        )

    def add_history_remove(self, channel: str) -> None:
        self.add(HistoryRemoveCommand.create(channel=channel))

    def add_channels(self, *, pattern: str | None = None) -> None:
        self.add(ChannelsCommand.create(pattern=pattern))

    def add_info(self) -> None:
        self.add(InfoCommand.create())
