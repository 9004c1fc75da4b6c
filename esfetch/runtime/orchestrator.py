"""Fan-out of sliced scrolls.

Architecture:
    A query split into N slices runs as N independent pipelines (augment the
    query, then drive its scroll), one asyncio task each. All pipelines share
    one set of progress counters and one locked sink. The first pipeline to
    fail cancels its siblings; the orchestrator waits until every sibling has
    unwound (cursor releases included) and raises that first error.
"""

from __future__ import annotations

import asyncio
from typing import BinaryIO

from ..config import DEFAULT_RELEASE_TIMEOUT
from ..models.slice import NO_SLICE, SliceDescriptor
from ..sinks.jsonl import JSONLinesSink
from .pages import PageFetcher
from .query import augment_query
from .scroll import ProgressCounters, ScrollDriver
from .telemetry import log_slice_failed


class SliceOrchestrator:
    """Runs one fetch as a single pipeline or as concurrent slices."""

    def __init__(
        self,
        pages: PageFetcher,
        writer: BinaryIO,
        *,
        release_timeout: float = DEFAULT_RELEASE_TIMEOUT,
    ) -> None:
        self._pages = pages
        self._writer = writer
        self._release_timeout = release_timeout

    async def run(
        self, index: str, query: str, fetch_all: bool, slices: int = 1
    ) -> ProgressCounters:
        """Fetch every requested page and write the hits out.

        Args:
            index: Index to search
            query: Query document as JSON text (empty means match all)
            fetch_all: Page through every result with a scroll cursor
            slices: Number of slices to split the scroll into. Should not
                exceed the index shard count; this is not validated.

        Returns:
            Final progress counters

        Raises:
            FetchError: First error raised by any pipeline
        """
        progress = ProgressCounters()
        if slices <= 1:
            sink = JSONLinesSink(self._writer)
            await self._driver(sink, progress, NO_SLICE).run(index, query, fetch_all)
            return progress

        sink = JSONLinesSink.shared(self._writer)
        errors: list[tuple[SliceDescriptor, Exception]] = []

        async def run_slice(slice_: SliceDescriptor) -> None:
            try:
                sliced_query = augment_query(query, slice_)
                await self._driver(sink, progress, slice_).run(index, sliced_query, fetch_all)
            except Exception as e:
                errors.append((slice_, e))
                raise

        tasks = [
            asyncio.create_task(run_slice(slice_), name=f"slice-{slice_.id}")
            for slice_ in SliceDescriptor.partition(slices)
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if errors:
            for position, (slice_, error) in enumerate(errors):
                log_slice_failed(
                    slice_=slice_,
                    error_type=type(error).__name__,
                    error_message=str(error),
                    reported=position == 0,
                )
            raise errors[0][1]
        return progress

    def _driver(
        self, sink: JSONLinesSink, progress: ProgressCounters, slice_: SliceDescriptor
    ) -> ScrollDriver:
        return ScrollDriver(
            self._pages,
            sink,
            progress,
            slice_=slice_,
            release_timeout=self._release_timeout,
        )
