"""
Core protocol models for the server HTTP API.

Every API call is a **command**: a method name plus method-specific params.
On the wire a command travels inside an envelope:

    {"method": "publish", "params": {"channel": "news", "data": {...}}}

and the server answers each command with a **reply**:

    {"result": {...}}                                  success
    {"error": {"code": 102, "message": "unknown channel"}}   failure

Commands are validated when they are built, so rendering an envelope can
never fail. Replies keep server errors as plain data; callers decide what
an error means for them.
"""

from enum import StrEnum
from collections.abc import Iterator
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, JsonValue, TypeAdapter, ValidationError

from centapi.shared.errors import MissingFieldError, WrongTypeError

_JSON_VALUE: TypeAdapter[JsonValue] = TypeAdapter(JsonValue)


class Method(StrEnum):
    """Closed set of API methods the client knows how to build."""

    PUBLISH = "publish"
    BROADCAST = "broadcast"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    DISCONNECT = "disconnect"
    PRESENCE = "presence"
    PRESENCE_STATS = "presence_stats"
    HISTORY = "history"
    HISTORY_REMOVE = "history_remove"
    CHANNELS = "channels"
    INFO = "info"


class ProtocolModel(BaseModel):
    """Base for every wire model. Unknown fields are tolerated."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Result(ProtocolModel):
    """
    Base for typed success payloads.
    """


class EmptyResult(Result):
    """
    Acknowledgement with no payload.
    """


class Command(ProtocolModel):
    """
    One API operation, ready to be rendered into an envelope.

    Subclasses pin `method` to a literal and declare their params as fields
    with strict types: a value of the wrong JSON kind is rejected, never
    converted. Params the client does not model are kept and forwarded as-is.
    """

    model_config = ConfigDict(frozen=True)

    method: Method

    @classmethod
    def expected_result_type(cls) -> type[Result]:
        return EmptyResult

    @classmethod
    def create(cls, **params: Any) -> Self:
        """Build the command, raising client validation errors on bad params.

        Params the command does not model must still be JSON values, so that
        rendering the envelope cannot fail later.

        Raises:
            MissingFieldError: A required param is absent.
            WrongTypeError: A param has the wrong JSON kind.
        """
        method = cls.model_fields["method"].default
        try:
            command = cls.model_validate(params)
        except ValidationError as e:
            raise translate_validation_error(method, e) from e

        for name, value in _extra_params(command):
            try:
                _JSON_VALUE.validate_python(value)
            except ValidationError as e:
                raise WrongTypeError(
                    str(method), name, f"not a JSON value: {type(value).__name__}"
                ) from e
        return command

    def to_envelope(self) -> dict[str, Any]:
        """Render `{"method": ..., "params": {...}}` with unset params omitted."""
        return {
            "method": self.method.value,
            "params": self.model_dump(mode="json", exclude={"method"}, exclude_none=True),
        }


class ReplyError(ProtocolModel):
    """
    Error the server reported for a single command.
    """

    code: int
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.code}"


class Reply(ProtocolModel):
    """
    Outcome of one command: a success payload or a server error.

    The server is expected to fill exactly one of the two; the client does
    not assume which.
    """

    model_config = ConfigDict(frozen=True)

    result: JsonValue = None
    """
    Method-specific success payload. `None` or `{}` for a bare acknowledgement.
    """

    error: ReplyError | None = None
    """
    Server-side failure for this command only.
    """

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_ack(self) -> bool:
        """True for a success that carries no payload."""
        return self.ok and self.result in (None, {})


def translate_validation_error(
    method: str, error: ValidationError
) -> MissingFieldError | WrongTypeError:
    """Map a pydantic validation failure to the client's error types.

    A missing field wins over type problems, since it is usually the root
    cause of the others.
    """
    details = error.errors()
    for detail in details:
        if detail["type"] == "missing":
            return MissingFieldError(str(method), _field_path(detail["loc"]))

    first = details[0]
    return WrongTypeError(str(method), _field_path(first["loc"]), first["msg"])


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "params"


def _extra_params(model: BaseModel, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield (path, value) for every unmodeled param, nested models included."""
    for name, value in (model.model_extra or {}).items():
        yield f"{prefix}{name}", value
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            yield from _extra_params(value, f"{prefix}{name}.")
