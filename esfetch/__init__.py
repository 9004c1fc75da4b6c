"""esfetch - Stream Elasticsearch search results as JSON lines."""

from .client import Client, fetch
from .config import ClientSettings
from .core import (
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
from .models import SearchResult, ShardFailureInfo, SliceDescriptor
from .runtime import (
    PageFetcher,
    ProgressCounters,
    ScrollCursor,
    ScrollDriver,
    SliceOrchestrator,
    augment_query,
)
from .sinks import JSONLinesSink
from .utils import HTTPClient

__version__ = "0.1.0"

__all__ = [
    # Client
    "Client",
    "ClientSettings",
    "fetch",
    # Runtime
    "HTTPClient",
    "PageFetcher",
    "ProgressCounters",
    "ScrollCursor",
    "ScrollDriver",
    "SliceOrchestrator",
    "augment_query",
    "JSONLinesSink",
    # Models
    "SearchResult",
    "ShardFailureInfo",
    "SliceDescriptor",
    # Exceptions
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
