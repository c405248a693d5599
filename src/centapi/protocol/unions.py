from typing import Any

from centapi.protocol.base import Command, Method
from centapi.protocol.history import HistoryCommand, HistoryRemoveCommand
from centapi.protocol.presence import PresenceCommand, PresenceStatsCommand
from centapi.protocol.publication import BroadcastCommand, PublishCommand
from centapi.protocol.server import ChannelsCommand, InfoCommand
from centapi.protocol.subscriptions import (
    DisconnectCommand,
    SubscribeCommand,
    UnsubscribeCommand,
)
from centapi.shared.errors import UnknownMethodError

COMMAND_TYPES: dict[Method, type[Command]] = {
    Method.PUBLISH: PublishCommand,
    Method.BROADCAST: BroadcastCommand,
    Method.SUBSCRIBE: SubscribeCommand,
    Method.UNSUBSCRIBE: UnsubscribeCommand,
    Method.DISCONNECT: DisconnectCommand,
    Method.PRESENCE: PresenceCommand,
    Method.PRESENCE_STATS: PresenceStatsCommand,
    Method.HISTORY: HistoryCommand,
    Method.HISTORY_REMOVE: HistoryRemoveCommand,
    Method.CHANNELS: ChannelsCommand,
    Method.INFO: InfoCommand,
}


def build_command(method: Method | str, params: dict[str, Any] | None = None) -> Command:
    """Build a validated command from a method name and its params.

    Args:
        method: API method name, e.g. "publish"
        params: Method-specific params

    Returns:
        Immutable command ready to be sent or added to a pipe

    Raises:
        UnknownMethodError: If the method is not a known API method
        MissingFieldError: If a required param is absent
        WrongTypeError: If a param has the wrong JSON kind
    """
    try:
        command_type = COMMAND_TYPES[Method(method)]
    except ValueError as e:
        raise UnknownMethodError(str(method)) from e

    return command_type.create(**(params or {}))
