"""
Publishing data into channels.

`publish` sends one payload to one channel. `broadcast` sends one payload
to many channels in a single server-side call: it is one command with a
`channels` array, not a batch of publishes, and the server answers with
one publish response per channel inside a single reply.
"""

from typing import Annotated, Literal

from pydantic import Field, JsonValue, StrictBool, StrictStr, field_validator

from centapi.protocol.base import Command, Method, ProtocolModel, ReplyError, Result


class PublishResult(Result):
    """
    Position of the new publication in the channel history stream.
    """

    offset: int | None = None
    epoch: str | None = None


class PublishResponse(ProtocolModel):
    """
    Per-channel outcome inside a broadcast reply.
    """

    error: ReplyError | None = None
    result: PublishResult | None = None


class BroadcastResult(Result):
    responses: list[PublishResponse] = Field(default_factory=list)


class _PublishParams(Command):
    data: JsonValue
    """
    Payload delivered to subscribers. Any JSON value except null.
    """

    skip_history: StrictBool | None = None
    """
    Do not save the publication into channel history.
    """

    tags: dict[StrictStr, StrictStr] | None = None
    idempotency_key: StrictStr | None = None

    @field_validator("data")
    @classmethod
    def validate_data(cls, v: JsonValue) -> JsonValue:
        if v is None:
            raise ValueError("data must not be null")
        return v


class PublishCommand(_PublishParams):
    """
    Publish data into a channel.
    """

    method: Literal[Method.PUBLISH] = Method.PUBLISH
    channel: StrictStr

    @classmethod
    def expected_result_type(cls) -> type[PublishResult]:
        return PublishResult


class BroadcastCommand(_PublishParams):
    """
    Publish the same data into many channels with one command.
    """

    method: Literal[Method.BROADCAST] = Method.BROADCAST
    channels: Annotated[list[StrictStr], Field(min_length=1)]

    @classmethod
    def expected_result_type(cls) -> type[BroadcastResult]:
        return BroadcastResult
