"""
Server-wide introspection: active channels and running nodes.
"""

from typing import Literal

from pydantic import Field, StrictStr

from centapi.protocol.base import Command, Method, ProtocolModel, Result


class ChannelInfo(ProtocolModel):
    num_clients: int = 0


class ChannelsResult(Result):
    channels: dict[str, ChannelInfo] = Field(default_factory=dict)


class NodeInfo(ProtocolModel):
    """
    Information and statistics about one server node.
    """

    uid: str
    """
    Unique ID of the running node.
    """

    name: str = ""
    version: str = ""
    num_clients: int = 0
    num_users: int = 0
    num_channels: int = 0
    uptime: int = 0
    """
    Node uptime in seconds.
    """


class InfoResult(Result):
    nodes: list[NodeInfo] = Field(default_factory=list)


class ChannelsCommand(Command):
    """
    List active channels, i.e. channels with one or more subscribers.
    """

    method: Literal[Method.CHANNELS] = Method.CHANNELS

    pattern: StrictStr | None = None
    """
    Only return channels matching this pattern.
    """

    @classmethod
    def expected_result_type(cls) -> type[ChannelsResult]:
        return ChannelsResult


class InfoCommand(Command):
    method: Literal[Method.INFO] = Method.INFO

    @classmethod
    def expected_result_type(cls) -> type[InfoResult]:
        return InfoResult
