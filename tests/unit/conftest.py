"""Shared fixtures: a scripted in-process document store."""

from __future__ import annotations

import asyncio
import io
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from esfetch.utils.http import HTTPClient

# Script item that blocks until the request is cancelled
HANG = object()


def make_hits(count: int, prefix: str = "doc") -> list[dict[str, Any]]:
    """Build ``count`` hit documents with unique ids."""
    return [
        {"_index": "logs", "_id": f"{prefix}-{i}", "_score": None, "_source": {"n": i}}
        for i in range(count)
    ]


def make_envelope(
    hits: list[dict[str, Any]] | None = None,
    *,
    scroll_id: str | None = "scroll-main",
    total: int | None = None,
    failed: int = 0,
    failures: list[dict[str, Any]] | None = None,
) -> bytes:
    """Serialize a search/scroll response envelope."""
    hits = hits or []
    body: dict[str, Any] = {
        "took": 3,
        "timed_out": False,
        "_shards": {
            "total": 5,
            "successful": 5 - failed,
            "skipped": 0,
            "failed": failed,
        },
        "hits": {
            "total": {"value": len(hits) if total is None else total, "relation": "eq"},
            "max_score": None,
            "hits": hits,
        },
    }
    if failures is not None:
        body["_shards"]["failures"] = failures
    if scroll_id is not None:
        body["_scroll_id"] = scroll_id
    return json.dumps(body).encode()


class FakeStore:
    """Scripted document store.

    ``pages`` maps a slice id (``None`` when unsliced) to the responses for
    that slice in order: the search response first, then one per scroll
    advance. An item is a page size (hits are generated), raw response bytes,
    an exception to raise, or ``HANG``.
    """

    def __init__(self, pages: dict[int | None, list[Any]], total: int | None = None) -> None:
        self.pages = {key: list(items) for key, items in pages.items()}
        self.total = total
        self.calls: list[tuple[str, str, str]] = []
        self.searches: list[dict[str, Any]] = []
        self.advanced: list[str] = []
        self.released: list[str] = []
        self.release_error: Exception | None = None
        self._served: dict[int | None, int] = {}

    @staticmethod
    def scroll_id_for(slice_id: int | None) -> str:
        return "scroll-main" if slice_id is None else f"scroll-{slice_id}"

    def _slice_for(self, scroll_id: str) -> int | None:
        suffix = scroll_id.removeprefix("scroll-")
        return None if suffix == "main" else int(suffix)

    async def send(self, method: str, path: str, body: str | bytes = "") -> bytes:
        if isinstance(body, bytes):
            body = body.decode()
        self.calls.append((method, path, body))
        if method == "GET":
            query = json.loads(body) if body else {}
            self.searches.append(query)
            return await self._next(query.get("slice", {}).get("id"))
        if method == "POST":
            scroll_id = json.loads(body)["scroll_id"]
            self.advanced.append(scroll_id)
            return await self._next(self._slice_for(scroll_id))
        if method == "DELETE":
            self.released.append(json.loads(body)["scroll_id"])
            if self.release_error is not None:
                raise self.release_error
            return b'{"succeeded":true,"num_freed":1}'
        raise AssertionError(f"unexpected method {method}")

    async def _next(self, slice_id: int | None) -> bytes:
        item = self.pages[slice_id].pop(0)
        page = self._served.get(slice_id, 0)
        self._served[slice_id] = page + 1
        if item is HANG:
            await asyncio.Event().wait()
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, bytes):
            return item
        prefix = f"{'main' if slice_id is None else slice_id}-{page}"
        return make_envelope(
            make_hits(item, prefix=prefix),
            scroll_id=self.scroll_id_for(slice_id),
            total=self.total,
        )

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)


@pytest.fixture
def make_store():
    """Factory for a FakeStore plus an HTTPClient mock routed to it."""

    def factory(pages: dict[int | None, list[Any]], total: int | None = None):
        store = FakeStore(pages, total=total)
        http = MagicMock(spec=HTTPClient)
        http.send = AsyncMock(side_effect=store.send)
        return store, http

    return factory


@pytest.fixture
def envelope():
    """Envelope serializer (see ``make_envelope``)."""
    return make_envelope


@pytest.fixture
def hits():
    """Hit document factory (see ``make_hits``)."""
    return make_hits


@pytest.fixture
def hang():
    return HANG


@pytest.fixture
def output() -> io.BytesIO:
    return io.BytesIO()


def output_lines(output: io.BytesIO) -> list[dict[str, Any]]:
    """Decode every JSON line written to an output buffer."""
    return [json.loads(line) for line in output.getvalue().splitlines()]


@pytest.fixture
def read_lines():
    return output_lines
