"""IPFS API error types.

Every failure surfaced by the library is an IpfsApiError. Subclasses mirror
the failure categories a caller needs to tell apart:

- TransportError: the request never produced an HTTP response
- InvalidDataError: a response (or a round-tripped reference) failed to decode
- InvalidInputError / NotFoundError: local path traversal rejected the path
- RemoteError: the node answered with a non-success status
- CommitError: a draft failed to commit; carries the draft for retry
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ipfs_api.object import Object


class IpfsApiError(Exception):
    """Base exception for IPFS API operations.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(IpfsApiError):
    """Raised when the endpoint or an environment setting is invalid."""


class TransportError(IpfsApiError):
    """Raised when the HTTP exchange fails below the protocol level.

    Connection refused, TLS failures, socket timeouts and the like.

    Attributes:
        cause: The underlying transport exception.
    """

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidDataError(IpfsApiError):
    """Raised when data received from the node cannot be trusted or decoded.

    Covers malformed JSON or protobuf bodies, invalid UTF-8, and a reference
    whose size disagrees with the object it points at.
    """


class InvalidInputError(IpfsApiError):
    """Raised when a caller passes a path local traversal cannot accept."""


class NotFoundError(IpfsApiError):
    """Raised when local traversal finds no link with the requested name."""


class RemoteError(IpfsApiError):
    """Raised when the node responds with a non-success HTTP status.

    Attributes:
        message: The node's error message, verbatim.
        code: The node's numeric error code.
        status_code: HTTP status of the response.
    """

    def __init__(self, message: str, *, code: int = 0, status_code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class CommitError(IpfsApiError):
    """Raised when a draft object fails to commit.

    The draft travels back unchanged so the caller can retry or salvage it
    without rebuilding it.

    Attributes:
        error: The underlying error.
        object: The draft that failed to commit.
    """

    def __init__(self, error: IpfsApiError, obj: Object) -> None:
        super().__init__(error.message)
        self.error = error
        self.object = obj
