"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.envelope import ShardFailureInfo


class FetchError(Exception):
    """Base exception for all library errors."""

    pass


class TransportError(FetchError):
    """Request to the document store failed.

    Raised for network-level failures and for non-2xx responses. The raw
    response body is kept (when one was received) so callers can look for
    structured failure payloads the store sends alongside error statuses.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NetworkError(TransportError):
    """Connection refused, timeout, TLS failure or similar."""

    pass


class HTTPStatusError(TransportError):
    """Store answered with a non-success status code."""

    pass


class MalformedQueryError(FetchError):
    """Query is not a JSON object but slicing needs to augment it."""

    pass


class MalformedResponseError(FetchError):
    """Response envelope could not be parsed."""

    pass


class ShardFailureError(FetchError):
    """One or more shards failed while serving a page.

    Partial results are never treated as complete, so this is raised even
    when some shards succeeded.
    """

    def __init__(self, message: str, failures: list[ShardFailureInfo] | None = None) -> None:
        super().__init__(message)
        self.failures = failures or []


class SinkWriteError(FetchError):
    """Writing a document to the output destination failed."""

    pass


class QueryInputError(FetchError):
    """Query could not be read from the command-line inputs."""

    pass
