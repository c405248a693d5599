"""Exception hierarchy for the server API client.

Errors fall into two families. Local errors (configuration, command
validation, empty pipes) are raised before any I/O happens. Call-level
errors (transport, decode, correlation) abort a whole request and never
come with a partial result.

Per-command server errors are data: inside a batch they stay on the
`Reply`, and only the single-command convenience calls raise them as
`ApiError`.
"""

from __future__ import annotations


class CentError(Exception):
    """Base exception for all client errors."""

    pass


class ConfigurationError(CentError):
    """Raised when the client cannot resolve its endpoint or settings."""

    pass


class CommandValidationError(CentError):
    """Raised when a command cannot be built from the given params.

    Never reaches the network: the command is rejected before it can be
    added to a pipe or serialized.
    """

    def __init__(self, message: str, method: str | None = None, field: str | None = None):
        self.method = method
        self.field = field
        super().__init__(message)


class UnknownMethodError(CommandValidationError):
    """Raised when the method name is not one the client knows."""

    def __init__(self, method: str):
        super().__init__(f"Unknown method '{method}'", method=method)


class MissingFieldError(CommandValidationError):
    """Raised when a required parameter is absent."""

    def __init__(self, method: str, field: str):
        super().__init__(
            f"Missing required parameter '{field}' for '{method}'",
            method=method,
            field=field,
        )


class WrongTypeError(CommandValidationError):
    """Raised when a parameter is present but has the wrong JSON kind."""

    def __init__(self, method: str, field: str, detail: str):
        self.detail = detail
        super().__init__(
            f"Invalid parameter '{field}' for '{method}': {detail}",
            method=method,
            field=field,
        )


class EmptyPipeError(CentError):
    """Raised when sending a pipe that holds no commands."""

    def __init__(self) -> None:
        super().__init__("no commands in pipe")


class TransportError(CentError):
    """Raised when the request could not be completed.

    Covers connection failures, timeouts and non-success HTTP statuses.
    """

    pass


class StatusCodeError(TransportError):
    """Raised when the server answers with a non-success HTTP status."""

    def __init__(self, code: int, body: str):
        self.code = code
        self.body = body
        super().__init__(f"wrong status code: {code}, body {body}")


class DecodeError(CentError):
    """Raised when a response body does not have the expected shape."""

    pass


class MalformedResponseError(TransportError, DecodeError):
    """Raised when the response body is not JSON at all."""

    def __init__(self, detail: str):
        super().__init__(f"malformed response returned from server: {detail}")


class CorrelationError(CentError):
    """Raised when replies cannot be matched to the submitted commands."""

    pass


class LengthMismatchError(CorrelationError):
    """Raised when a batch answer has a different length than the batch."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"malformed response returned from server: "
            f"sent {expected} commands, received {received} replies"
        )


class ApiError(CentError):
    """Per-command error reported by the server.

    Only raised by single-command calls; batch replies carry the error as
    data instead.
    """

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{message}: {code}")
