"""Exceptions raised by the Scheduler0 client.

Every failure surfaces as a subclass of :class:`Scheduler0Error`, raised on
the first failing step. Nothing is retried.
"""


class Scheduler0Error(Exception):
    """Base class for all client errors."""


class ConfigError(Scheduler0Error, ValueError):
    """Raised when the client is constructed with invalid settings."""


class EncodeError(Scheduler0Error, TypeError):
    """Raised when a request body cannot be serialized to JSON.

    Raised before any network I/O takes place.
    """


class TransportError(Scheduler0Error):
    """Raised when the HTTP exchange itself fails (DNS, connect, TLS, timeout).

    The underlying ``httpx`` exception is available as ``__cause__``.
    """


class APIError(Scheduler0Error):
    """Raised when the server answers with a status code of 400 or above.

    The message is the raw response body; it is not parsed.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error: {body}")


class DecodeError(Scheduler0Error, ValueError):
    """Raised when a successful response body does not match the expected shape."""

    def __init__(self, message: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
