"""Search result envelope returned by search and scroll requests.

The envelope metadata (shard outcomes, scroll id, hit totals) is validated
with Pydantic. Hit documents are not: each one is cut out of the response
text with its original bytes so it can be written out verbatim.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.exceptions import MalformedResponseError

_decoder = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")


class FailureReason(BaseModel):
    """Reason attached to a shard failure."""

    type: str = ""
    reason: str = ""


class ShardFailureInfo(BaseModel):
    """One failed shard as reported under ``_shards.failures``."""

    shard: int | None = None
    index: str | None = None
    node: str | None = None
    reason: FailureReason = Field(default_factory=FailureReason)

    def __str__(self) -> str:
        return (
            f"shard {self.shard} of index {self.index} on node {self.node}: "
            f"{self.reason.type}: {self.reason.reason}"
        )


class ShardsMeta(BaseModel):
    """Shard outcome summary."""

    total: int = 0
    successful: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[ShardFailureInfo] = Field(default_factory=list)


class HitsTotal(BaseModel):
    """Total hit count and whether it is exact ("eq") or a lower bound ("gte")."""

    value: int = 0
    relation: str = "eq"


class Hits(BaseModel):
    """Hit count plus the current batch of raw hit documents."""

    total: HitsTotal = Field(default_factory=HitsTotal)
    hits: list[bytes] = Field(default_factory=list)

    @field_validator("total", mode="before")
    @classmethod
    def validate_total(cls, v: Any) -> Any:
        """Accept the bare integer total older stores return."""
        if isinstance(v, int):
            return {"value": v, "relation": "eq"}
        return v


class SearchResult(BaseModel):
    """Parsed response to a search or scroll request."""

    shards: ShardsMeta = Field(default_factory=ShardsMeta, alias="_shards")
    scroll_id: str | None = Field(None, alias="_scroll_id")
    hits: Hits = Field(default_factory=Hits)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_bytes(cls, raw: bytes) -> SearchResult:
        """Parse a raw response body.

        Args:
            raw: Response body as returned by the transport

        Returns:
            SearchResult with hit documents kept as their original bytes

        Raises:
            MalformedResponseError: If the body is not a valid envelope
        """
        try:
            text = raw.decode("utf-8")
            fields: dict[str, Any] = {}

            def member(key: str, start: int) -> int:
                if key == "hits":
                    fields["hits"], end = _parse_hits(text, start)
                    return end
                value, end = _decoder.raw_decode(text, start)
                if key in ("_shards", "_scroll_id"):
                    fields[key] = value
                return end

            end = _skip(text, _walk_object(text, 0, member))
            if end != len(text):
                raise ValueError(f"unexpected data after envelope at offset {end}")
            return cls.model_validate(fields)
        except (UnicodeDecodeError, ValueError, ValidationError) as e:
            raise MalformedResponseError(f"failed to parse response: {e}") from e


def _parse_hits(text: str, pos: int) -> tuple[dict[str, Any], int]:
    hits: dict[str, Any] = {}

    def member(key: str, start: int) -> int:
        if key == "hits":
            spans, end = _array_spans(text, start)
            hits["hits"] = [text[a:b].encode("utf-8") for a, b in spans]
            return end
        value, end = _decoder.raw_decode(text, start)
        if key == "total":
            hits["total"] = value
        return end

    return hits, _walk_object(text, pos, member)


def _skip(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def _walk_object(text: str, pos: int, member: Callable[[str, int], int]) -> int:
    """Walk the object at ``pos`` and return the offset just past its closing brace.

    ``member(key, value_start)`` is called once per member and returns the
    offset just past that member's value.
    """
    pos = _skip(text, pos)
    if text[pos : pos + 1] != "{":
        raise ValueError(f"expected object at offset {pos}")
    pos = _skip(text, pos + 1)
    if text[pos : pos + 1] == "}":
        return pos + 1
    while True:
        if text[pos : pos + 1] != '"':
            raise ValueError(f"expected member name at offset {pos}")
        key, pos = _decoder.raw_decode(text, pos)
        pos = _skip(text, pos)
        if text[pos : pos + 1] != ":":
            raise ValueError(f"expected ':' at offset {pos}")
        pos = _skip(text, member(key, _skip(text, pos + 1)))
        if text[pos : pos + 1] == "}":
            return pos + 1
        if text[pos : pos + 1] != ",":
            raise ValueError(f"expected ',' or '}}' at offset {pos}")
        pos = _skip(text, pos + 1)


def _array_spans(text: str, pos: int) -> tuple[list[tuple[int, int]], int]:
    """Return ``(start, end)`` offsets of each element of the array at ``pos``
    and the offset just past its closing bracket."""
    pos = _skip(text, pos)
    if text[pos : pos + 1] != "[":
        raise ValueError(f"expected array at offset {pos}")
    spans: list[tuple[int, int]] = []
    pos = _skip(text, pos + 1)
    if text[pos : pos + 1] == "]":
        return spans, pos + 1
    while True:
        _, end = _decoder.raw_decode(text, pos)
        spans.append((pos, end))
        pos = _skip(text, end)
        if text[pos : pos + 1] == "]":
            return spans, pos + 1
        if text[pos : pos + 1] != ",":
            raise ValueError(f"expected ',' or ']' at offset {pos}")
        pos = _skip(text, pos + 1)
