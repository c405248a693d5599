"""
Server-side subscription management.

These commands act on connected users rather than on channel data: they
subscribe a user's connections to a channel, unsubscribe them, or drop
them entirely. All of them answer with a bare acknowledgement.
"""

from typing import Literal

from pydantic import JsonValue, StrictBool, StrictInt, StrictStr

from centapi.protocol.base import Command, Method, ProtocolModel
from centapi.protocol.history import StreamPosition


class SubscribeCommand(Command):
    """
    Subscribe a user's connections to a channel.
    """

    method: Literal[Method.SUBSCRIBE] = Method.SUBSCRIBE
    user: StrictStr
    channel: StrictStr

    info: JsonValue = None
    """
    Custom channel information attached to the subscription.
    """

    presence: StrictBool | None = None
    join_leave: StrictBool | None = None
    position: StrictBool | None = None

    recover: StrictBool | None = None
    """
    Try to recover missed publications on resubscribe. Only meaningful in
    channels that keep history.
    """

    data: JsonValue = None
    """
    Data sent to the client together with the subscribe push.
    """

    recover_since: StreamPosition | None = None
    client: StrictStr | None = None
    """
    Restrict the subscription to one client connection.
    """


class UnsubscribeCommand(Command):
    method: Literal[Method.UNSUBSCRIBE] = Method.UNSUBSCRIBE
    user: StrictStr
    channel: StrictStr
    client: StrictStr | None = None


class Disconnect(ProtocolModel):
    """
    Disconnect details sent to the client.
    """

    code: StrictInt | None = None
    reason: StrictStr | None = None
    reconnect: StrictBool | None = None


class DisconnectCommand(Command):
    """
    Close connections of a user.
    """

    method: Literal[Method.DISCONNECT] = Method.DISCONNECT
    user: StrictStr
    client: StrictStr | None = None

    whitelist: list[StrictStr] | None = None
    """
    Client IDs to keep connected.
    """

    disconnect: Disconnect | None = None
