"""
Channel history stream.

Channels with history enabled keep recent publications in a stream
identified by an `epoch`; each publication has an `offset` inside it.
Together they form a stream position that clients use to resume.
"""

from typing import Any, Literal

from pydantic import Field, JsonValue, StrictBool, StrictInt, StrictStr

from centapi.protocol.base import Command, Method, ProtocolModel, Result

NO_LIMIT = -1
"""History `limit` value asking for the whole stream."""


class StreamPosition(ProtocolModel):
    offset: StrictInt | None = None
    epoch: StrictStr | None = None


class ClientInfo(ProtocolModel):
    """
    A client connection, as seen in publications and presence data.
    """

    user: str = ""
    client: str = ""
    conn_info: JsonValue = None
    chan_info: JsonValue = None


class Publication(ProtocolModel):
    offset: int | None = None
    data: Any = None
    info: ClientInfo | None = None


class HistoryResult(Result):
    publications: list[Publication] = Field(default_factory=list)
    offset: int | None = None
    epoch: str | None = None


class HistoryCommand(Command):
    """
    Read publications from a channel history stream.
    """

    method: Literal[Method.HISTORY] = Method.HISTORY
    channel: StrictStr

    limit: StrictInt | None = None
    """
    Maximum number of publications to return. `NO_LIMIT` for all, 0 for
    only the current stream position.
    """

    since: StreamPosition | None = None
    """
    Return publications after this position.
    """

    reverse: StrictBool | None = None

    @classmethod
    def expected_result_type(cls) -> type[HistoryResult]:
        return HistoryResult


class HistoryRemoveCommand(Command):
    """
    Drop all publications from a channel history stream.
    """

    method: Literal[Method.HISTORY_REMOVE] = Method.HISTORY_REMOVE
    channel: StrictStr
