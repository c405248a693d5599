"""
Channel presence: who is subscribed to a channel right now.
"""

from typing import Literal

from pydantic import Field, StrictStr

from centapi.protocol.base import Command, Method, Result
from centapi.protocol.history import ClientInfo


class PresenceResult(Result):
    presence: dict[str, ClientInfo] = Field(default_factory=dict)
    """
    Connected clients keyed by client ID.
    """


class PresenceStatsResult(Result):
    num_clients: int = 0
    num_users: int = 0


class PresenceCommand(Command):
    method: Literal[Method.PRESENCE] = Method.PRESENCE
    channel: StrictStr

    @classmethod
    def expected_result_type(cls) -> type[PresenceResult]:
        return PresenceResult


class PresenceStatsCommand(Command):
    """
    Presence counters only, cheaper than full presence.
    """

    method: Literal[Method.PRESENCE_STATS] = Method.PRESENCE_STATS
    channel: StrictStr

    @classmethod
    def expected_result_type(cls) -> type[PresenceStatsResult]:
        return PresenceStatsResult
