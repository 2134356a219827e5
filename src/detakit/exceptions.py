"""Custom exceptions for detakit.

Every error raised by the client derives from `DetaError`. HTTP failures map
onto `HTTPError` subclasses by status code, connection-level failures become
`TransportError`, and client-side precondition checks raise `PayloadError`
before any request is sent.
"""

from typing import Any, Dict, Optional


# Base exception
class DetaError(Exception):
    """Base exception for all detakit errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# HTTP status exceptions
class HTTPError(DetaError):
    """Raised for any non-2xx response without a more specific subclass.

    Example:
        >>> raise HTTPError(503, "Service Unavailable", url="https://database.deta.sh/v1/...")
    """

    status_code: Optional[int] = None

    def __init__(self, status: Optional[int] = None, message: str = "", **kwargs: Any) -> None:
        self.status = status if status is not None else self.status_code
        super().__init__(message, status=self.status, **kwargs)


class BadRequest(HTTPError):
    """400: the service rejected the payload (invalid query, bad key, ...)."""

    status_code = 400


class Unauthorized(HTTPError):
    """401: missing or invalid project key."""

    status_code = 401


class NotFound(HTTPError):
    """404: the record, file or upload session does not exist."""

    status_code = 404


class Conflict(HTTPError):
    """409: `insert` on a key that already exists."""

    status_code = 409


class PayloadTooLarge(HTTPError):
    """413: request body exceeds the service limit."""

    status_code = 413


# Transport and payload exceptions
class TransportError(DetaError):
    """Raised when the request never produced an HTTP response.

    Example:
        >>> raise TransportError("Connection refused", method="GET", url="https://drive.deta.sh/v1/...")
    """


class PayloadError(DetaError):
    """Raised when a client-side precondition fails before sending.

    Example:
        >>> raise PayloadError("Too many items for a single put", count=30, max_items=25)
    """


class SerializationError(DetaError):
    """Raised when a response body cannot be decoded into the expected shape.

    Example:
        >>> raise SerializationError("Response is not valid JSON", url="https://database.deta.sh/v1/...")
    """


# Configuration exceptions
class ConfigurationError(DetaError):
    """Raised when client configuration is invalid or missing."""


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration value is not set.

    Example:
        >>> raise MissingConfigError("Project key not configured", config_key="DETA_PROJECT_KEY")
    """


class InvalidProjectKeyError(ConfigurationError):
    """Raised when a project key does not have the `<project_id>_<secret>` shape."""


class UnboundBuilderError(ConfigurationError):
    """Raised when `run()` or `commit()` is called on a builder not attached to a Base.

    Example:
        >>> raise UnboundBuilderError("Query is not bound to a Base", hint="use base.query() or base.fetch(query)")
    """


# Upload exceptions
class UploadAbortedError(DetaError):
    """Raised after a chunked upload was aborted because parts failed.

    Attributes:
        response: JSON body returned by the abort call
    """

    def __init__(self, message: str = "", response: Any = None, **kwargs: Any) -> None:
        self.response = response
        super().__init__(message, **kwargs)


_STATUS_ERRORS = {
    cls.status_code: cls for cls in (BadRequest, Unauthorized, NotFound, Conflict, PayloadTooLarge)
}


def error_for_status(status: int, message: str = "", **kwargs: Any) -> HTTPError:
    """Build the HTTPError subclass matching `status`."""
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is None:
        return HTTPError(status, message, **kwargs)
    return error_cls(status, message, **kwargs)
