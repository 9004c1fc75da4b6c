"""Data models for store responses and slicing.

Envelope metadata is validated with Pydantic; hit documents stay raw bytes.

See Also:
    - Pydantic documentation: https://docs.pydantic.dev/
"""

from .envelope import (
    FailureReason,
    Hits,
    HitsTotal,
    SearchResult,
    ShardFailureInfo,
    ShardsMeta,
)
from .slice import NO_SLICE, SliceDescriptor

__all__ = [
    "FailureReason",
    "Hits",
    "HitsTotal",
    "SearchResult",
    "ShardFailureInfo",
    "ShardsMeta",
    "SliceDescriptor",
    "NO_SLICE",
]
