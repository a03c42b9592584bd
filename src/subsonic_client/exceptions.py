"""Exception classes for Subsonic API client."""

from typing import Optional


class SubsonicError(Exception):
    """Base exception for all errors raised by the client."""

    pass


class TransportError(SubsonicError):
    """The server could not be reached or answered with an HTTP error.

    Attributes:
        url: Request URL (password redacted)
        reason: Description of the failure
        status_code: HTTP status code, if a response was received
    """

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"HTTP request failed: {reason} - {url}")


class ParseError(SubsonicError):
    """Response body is not valid JSON."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to parse response JSON: {reason} - {url}")


class ShapeError(SubsonicError):
    """A JSON field had a shape that matches none of the expected variants."""

    def __init__(self, field: str, operation: str, observed: str):
        self.field = field
        self.operation = operation
        self.observed = observed
        super().__init__(f"Failed to parse {operation} response: field {field!r} is {observed}")


class CoercionError(SubsonicError):
    """A scalar field had a type that cannot be converted."""

    def __init__(self, field: str, observed_type: str):
        self.field = field
        self.observed_type = observed_type
        super().__init__(f"Cannot convert field {field!r} of type {observed_type}")


class BuildError(SubsonicError):
    """A required field was missing while building an entity."""

    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(f"{entity} is missing required field {field!r}")


class RemoteError(SubsonicError):
    """Server reported a failed request inside the response envelope.

    Attributes:
        code: Subsonic error code
        message: Error message from server
    """

    def __init__(self, code: int, message: str):
        """Initialize remote error.

        Args:
            code: Subsonic error code (0, 10, 20, 30, 40, 50, 60, 70)
            message: Human-readable error message
        """
        self.code = code
        self.message = message
        super().__init__(f"Subsonic Error {code}: {message}")


class SubsonicAuthenticationError(RemoteError):
    """Authentication failed (error codes 40, 41)."""

    pass


class TokenAuthenticationNotSupportedError(RemoteError):
    """Token authentication not supported (code 42)."""

    pass


class ClientVersionTooOldError(RemoteError):
    """Client must upgrade (code 43)."""

    pass


class ServerVersionTooOldError(RemoteError):
    """Server must upgrade (code 44)."""

    pass


class SubsonicAuthorizationError(RemoteError):
    """User not authorized for requested action (error code 50)."""

    pass


class SubsonicNotFoundError(RemoteError):
    """Requested resource not found (error code 70)."""

    pass


class SubsonicVersionError(RemoteError):
    """Incompatible REST protocol version (error codes 20, 30)."""

    pass


class SubsonicParameterError(RemoteError):
    """Required parameter missing (error code 10)."""

    pass


class SubsonicTrialError(RemoteError):
    """Trial period expired (error code 60)."""

    pass


_ERRORS_BY_CODE = {
    10: SubsonicParameterError,
    20: SubsonicVersionError,
    30: SubsonicVersionError,
    40: SubsonicAuthenticationError,
    41: SubsonicAuthenticationError,
    42: TokenAuthenticationNotSupportedError,
    43: ClientVersionTooOldError,
    44: ServerVersionTooOldError,
    50: SubsonicAuthorizationError,
    60: SubsonicTrialError,
    70: SubsonicNotFoundError,
}


def remote_error_for(code: int, message: str) -> RemoteError:
    """Return the RemoteError subclass instance matching a Subsonic error code."""
    return _ERRORS_BY_CODE.get(code, RemoteError)(code, message)
