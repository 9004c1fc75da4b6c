"""Client facade tying the transport, fetcher and orchestrator together."""

from __future__ import annotations

import logging
from typing import BinaryIO

from .config import ClientSettings
from .runtime.orchestrator import SliceOrchestrator
from .runtime.pages import PageFetcher
from .runtime.scroll import ProgressCounters
from .utils.http import HTTPClient

logger = logging.getLogger(__name__)


class Client:
    """Fetches search results from one document store.

    Use as an async context manager so the HTTP session is closed:

        async with Client(ClientSettings(base_url="http://localhost:9200")) as client:
            await client.query("logs", "", fetch_all=True, slices=4, writer=out)
    """

    def __init__(self, settings: ClientSettings, http: HTTPClient | None = None) -> None:
        self.settings = settings
        self._http = http or HTTPClient(
            settings.base_url,
            user=settings.user,
            password=settings.password,
            timeout=settings.timeout,
        )
        self._pages = PageFetcher(self._http, scroll_lifetime=settings.scroll_lifetime)

    async def query(
        self,
        index: str,
        query: str,
        fetch_all: bool,
        slices: int,
        writer: BinaryIO,
    ) -> ProgressCounters:
        """Write every hit of ``query`` against ``index`` to ``writer`` as JSON lines.

        Raises:
            FetchError: If any request, parse or write fails
        """
        orchestrator = SliceOrchestrator(
            self._pages, writer, release_timeout=self.settings.release_timeout
        )
        progress = await orchestrator.run(index, query, fetch_all, slices)
        logger.debug(
            "fetch_complete",
            extra={"index": index, "fetched": progress.fetched, "total": progress.total},
        )
        return progress

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def fetch(
    url: str,
    user: str | None,
    password: str | None,
    index: str,
    query: str,
    fetch_all: bool,
    slices: int,
    writer: BinaryIO,
) -> ProgressCounters:
    """Run one fetch end to end with a short-lived client."""
    settings = ClientSettings(base_url=url, user=user, password=password)
    async with Client(settings) as client:
        return await client.query(index, query, fetch_all, slices, writer)
