"""Query augmentation for sliced scrolls."""

from __future__ import annotations

import json

from ..core.exceptions import MalformedQueryError
from ..models.slice import SliceDescriptor


def augment_query(query: str, slice_: SliceDescriptor) -> str:
    """Annotate a query with its slice partition parameters.

    An unsliced descriptor returns the query untouched, whatever it contains.
    An empty query is treated as ``{}`` (match all).

    Args:
        query: Query document as JSON text
        slice_: Slice this query is sent for

    Returns:
        Query text carrying ``"slice": {"id": ..., "max": ...}``

    Raises:
        MalformedQueryError: If slicing is requested and the query is not a JSON object
    """
    if not slice_.is_sliced:
        return query

    try:
        query_obj = json.loads(query) if query.strip() else {}
    except ValueError as e:
        raise MalformedQueryError(f"failed to parse query: {e}") from e
    if not isinstance(query_obj, dict):
        raise MalformedQueryError(
            f"failed to parse query: expected a JSON object, got {type(query_obj).__name__}"
        )

    query_obj["slice"] = {"id": slice_.id, "max": slice_.max}
    return json.dumps(query_obj, separators=(",", ":"))
