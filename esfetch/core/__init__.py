"""Core error types."""

from .exceptions import (
    FetchError,
    HTTPStatusError,
    MalformedQueryError,
    MalformedResponseError,
    NetworkError,
    QueryInputError,
    ShardFailureError,
    SinkWriteError,
    TransportError,
)

__all__ = [
    "FetchError",
    "TransportError",
    "NetworkError",
    "HTTPStatusError",
    "MalformedQueryError",
    "MalformedResponseError",
    "ShardFailureError",
    "SinkWriteError",
    "QueryInputError",
]
