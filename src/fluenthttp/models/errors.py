from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .._response import Response


class FluentHttpError(Exception):
    """Base class for every error raised by fluenthttp."""


class TransportError(FluentHttpError):
    """Raised by a request executor when no HTTP exchange could be completed.

    Covers DNS resolution, connection, TLS and timeout failures. The retry
    controller converts it into a zero-status ``Response``, so it never
    escapes ``Client.send``.
    """

    def __init__(self, message: str, *, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(self.message)


class AttachmentError(FluentHttpError):
    """Raised when the contents of a multipart attachment cannot be read."""

    def __init__(self, name: str, source: Any, reason: str = "unreadable source"):
        self.name = name
        self.source = source
        self.message = f"Attachment '{name}' could not be read: {reason}"
        super().__init__(self.message)


class RequestError(FluentHttpError):
    """Raised on demand by the ``Response.throw*`` helpers.

    Attributes:
        status_code: The HTTP status that triggered the error.
        response: The ``Response`` the error was raised from.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response: Optional["Response"] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class ImmutableAccessError(FluentHttpError, TypeError):
    def __init__(self, message="Response is read-only"):
        self.message = message
        super().__init__(self.message)
