"""Envelope encoding and reply parsing for the server HTTP API.

Turns commands into request bodies and response bodies into typed `Reply`
objects. Pure functions over JSON values: no I/O, no state between calls.
"""

import json
from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from centapi.protocol.base import Command, Reply, Result
from centapi.shared.errors import DecodeError

ResultT = TypeVar("ResultT", bound=Result)


class MessageParser:
    """Serializes commands into envelopes and parses replies.

    A single command is sent as its envelope object. A pipe is sent as a JSON
    array of envelopes, and this is the only place where the pipe's order is
    written onto the wire.
    """

    # ================================
    # Requests
    # ================================

    def serialize_command(self, command: Command) -> dict[str, Any]:
        """Render one command as its wire envelope."""
        return command.to_envelope()

    def serialize_commands(self, commands: Sequence[Command]) -> list[dict[str, Any]]:
        """Render commands as a JSON array of envelopes, keeping their order."""
        return [self.serialize_command(command) for command in commands]

    # ================================
    # Replies
    # ================================

    def is_valid_reply(self, payload: Any) -> bool:
        """Check if payload is an object carrying `result` and/or `error`."""
        if not isinstance(payload, dict):
            return False
        return "result" in payload or "error" in payload

    def parse_reply(self, payload: Any) -> Reply:
        """Parse a single-command response body into a Reply.

        Args:
            payload: Decoded JSON response body

        Returns:
            Reply carrying either a result or a server error

        Raises:
            DecodeError: If the payload is not a reply object
        """
        if isinstance(payload, list):
            raise DecodeError("Expected a reply object, got an array")
        if not self.is_valid_reply(payload):
            raise DecodeError(
                f"Expected an object with 'result' or 'error', got: {payload!r}"
            )

        try:
            return Reply.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"Failed to parse reply: {e}") from e

    def parse_replies(self, payload: Any) -> list[Reply]:
        """Parse a batch response body into replies, in response order.

        Raises:
            DecodeError: If the payload is not an array, or any element is not
                a reply object
        """
        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected an array of replies, got {type(payload).__name__}"
            )

        replies: list[Reply] = []
        for index, item in enumerate(payload):
            try:
                replies.append(self.parse_reply(item))
            except DecodeError as e:
                raise DecodeError(f"Reply at index {index}: {e}") from e
        return replies

    # ================================
    # Results
    # ================================

    def parse_result(self, command: Command, reply: Reply) -> Result:
        """Validate a successful reply's payload into the command's result type.

        Args:
            command: Command that produced the reply
            reply: Reply without an error

        Returns:
            Typed result, e.g. PublishResult for a publish command

        Raises:
            DecodeError: If the payload does not match the expected result type
        """
        return self.validate_result(command.expected_result_type(), reply.result)

    def validate_result(self, result_type: type[ResultT], payload: Any) -> ResultT:
        """Validate an already decoded result payload. `None` counts as `{}`.

        Raises:
            DecodeError: If the payload does not match `result_type`
        """
        if payload is None:
            payload = {}
        try:
            return result_type.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Failed to parse {result_type.__name__} response: {e}"
            ) from e

    def decode_result(self, result_type: type[ResultT], raw: bytes | str) -> ResultT:
        """Decode a raw JSON result document into a typed result.

        Public helper for results that did not arrive through `Client`, e.g.
        a history result cached as JSON or relayed by another service.

        Raises:
            DecodeError: If `raw` is empty, not JSON, or of the wrong shape
        """
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Failed to decode {result_type.__name__}: {e}") from e

        if payload is None:
            raise DecodeError(f"Failed to decode {result_type.__name__}: null document")
        return self.validate_result(result_type, payload)
