"""Scroll cursor state machine.

A ``ScrollDriver`` runs one pagination pipeline:

    Start -> Paginating -> Done
    Start | Paginating -> Failed

The first page comes from a regular search. When every result is wanted the
search also opens a scroll cursor, which is then advanced until the store
returns an empty batch. The cursor is held by a ``ScrollCursor`` scope so it
is cleared exactly once on every exit path: success, error or cancellation.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from time import perf_counter

from ..config import DEFAULT_RELEASE_TIMEOUT
from ..core.exceptions import MalformedResponseError
from ..models.envelope import SearchResult
from ..models.slice import NO_SLICE, SliceDescriptor
from ..sinks.jsonl import JSONLinesSink
from .pages import PageFetcher
from .telemetry import (
    log_page_fetched,
    log_progress,
    log_scroll_release_failed,
    log_scroll_released,
)


@dataclass
class ProgressCounters:
    """Cumulative counters shared by every pipeline of one fetch.

    Only ever incremented, and only from the event loop thread, so updates
    from concurrent slices never interleave mid-operation.

    Attributes:
        fetched: Documents fetched so far
        total: Total hits reported by every search opened so far
    """

    fetched: int = 0
    total: int = 0

    def add_fetched(self, count: int) -> None:
        self.fetched += count

    def add_total(self, count: int) -> None:
        self.total += count

    def snapshot(self) -> tuple[int, int]:
        return self.fetched, self.total


class ScrollCursor:
    """Scope owning one scroll token.

    The token is replaced as the cursor advances; on exit the latest token is
    released once. A ``None`` token means no cursor was opened and nothing is
    released.
    """

    def __init__(
        self,
        pages: PageFetcher,
        scroll_id: str | None,
        *,
        slice_: SliceDescriptor = NO_SLICE,
        release_timeout: float = DEFAULT_RELEASE_TIMEOUT,
    ) -> None:
        self._pages = pages
        self._scroll_id = scroll_id
        self._slice = slice_
        self._release_timeout = release_timeout
        self._released = False
        self.pages = 0

    @property
    def scroll_id(self) -> str | None:
        return self._scroll_id

    @property
    def released(self) -> bool:
        return self._released

    def advance(self, scroll_id: str | None) -> None:
        """Record the token returned by the latest advance.

        The previous token is spent by the advance, so a missing token leaves
        nothing to release.
        """
        self.pages += 1
        self._scroll_id = scroll_id or None

    async def release(self) -> None:
        """Clear the cursor; idempotent and never raises a fetch error."""
        if self._released or self._scroll_id is None:
            return
        self._released = True
        try:
            released = await asyncio.wait_for(
                self._pages.release_cursor(self._scroll_id), timeout=self._release_timeout
            )
        except asyncio.TimeoutError:
            log_scroll_release_failed(
                error_type="TimeoutError",
                error_message=f"no response within {self._release_timeout}s",
            )
            return
        if released:
            log_scroll_released(slice_=self._slice, pages=self.pages)

    async def __aenter__(self) -> "ScrollCursor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.release()


class ScrollDriver:
    """Runs one search and, optionally, the scroll that pages through it."""

    def __init__(
        self,
        pages: PageFetcher,
        sink: JSONLinesSink,
        progress: ProgressCounters | None = None,
        *,
        slice_: SliceDescriptor = NO_SLICE,
        release_timeout: float = DEFAULT_RELEASE_TIMEOUT,
    ) -> None:
        self._pages = pages
        self._sink = sink
        self._progress = progress or ProgressCounters()
        self._slice = slice_
        self._release_timeout = release_timeout

    @property
    def progress(self) -> ProgressCounters:
        return self._progress

    async def run(self, index: str, query: str, fetch_all: bool) -> None:
        """Fetch the first page and, with ``fetch_all``, every page after it.

        Args:
            index: Index to search
            query: Query document (already augmented for this slice)
            fetch_all: Page through every result with a scroll cursor

        Raises:
            FetchError: On the first failed request, parse or write
        """
        chunk_start = perf_counter()
        page = await self._pages.fetch_first_page(index, query, fetch_all)
        latency_ms = (perf_counter() - chunk_start) * 1000.0

        cursor = ScrollCursor(
            self._pages,
            page.scroll_id if fetch_all else None,
            slice_=self._slice,
            release_timeout=self._release_timeout,
        )
        async with cursor:
            self._progress.add_total(page.hits.total.value)
            await self._emit(page, 0, latency_ms)
            if cursor.scroll_id is None:
                return

            # An empty batch means the scroll is exhausted
            while page.hits.hits:
                chunk_start = perf_counter()
                page = await self._pages.fetch_next_page(cursor.scroll_id)
                latency_ms = (perf_counter() - chunk_start) * 1000.0
                cursor.advance(page.scroll_id)
                if page.hits.hits and cursor.scroll_id is None:
                    raise MalformedResponseError(
                        f"scroll response carried {len(page.hits.hits)} hits but no scroll id"
                    )
                await self._emit(page, cursor.pages, latency_ms)

    async def _emit(self, page: SearchResult, page_index: int, latency_ms: float) -> None:
        hits = page.hits.hits
        self._progress.add_fetched(len(hits))
        log_page_fetched(
            slice_=self._slice, page_index=page_index, hits=len(hits), latency_ms=latency_ms
        )
        fetched, total = self._progress.snapshot()
        log_progress(fetched=fetched, total=total)
        await self._sink.write_batch(hits)
