"""Single-page search, scroll and clear-scroll requests."""

from __future__ import annotations

import json

from ..config import DEFAULT_SCROLL_LIFETIME, SCROLL_PATH, SEARCH_PATH
from ..core.exceptions import (
    FetchError,
    HTTPStatusError,
    MalformedResponseError,
    ShardFailureError,
)
from ..models.envelope import SearchResult
from ..utils.http import HTTPClient
from .telemetry import log_scroll_release_failed


class PageFetcher:
    """Issues one search or scroll request at a time and parses the envelope."""

    def __init__(self, http: HTTPClient, scroll_lifetime: str = DEFAULT_SCROLL_LIFETIME) -> None:
        self._http = http
        self._scroll_lifetime = scroll_lifetime

    def search_path(self, index: str, fetch_all: bool) -> str:
        path = SEARCH_PATH.format(index=index) + "?_source=true"
        if fetch_all:
            path += f"&scroll={self._scroll_lifetime}"
        return path

    async def fetch_first_page(self, index: str, query: str, fetch_all: bool) -> SearchResult:
        """Run the search; with ``fetch_all`` the store also opens a scroll cursor.

        Raises:
            TransportError: If the request failed
            MalformedResponseError: If the response could not be parsed
            ShardFailureError: If any shard failed
        """
        return await self._request("GET", self.search_path(index, fetch_all), query)

    async def fetch_next_page(self, scroll_id: str) -> SearchResult:
        """Advance a scroll cursor by one batch."""
        body = json.dumps({"scroll": self._scroll_lifetime, "scroll_id": scroll_id})
        return await self._request("POST", SCROLL_PATH, body)

    async def release_cursor(self, scroll_id: str) -> bool:
        """Clear a scroll cursor, best effort.

        Failures are logged and swallowed since the cursor expires once its
        lifetime elapses.

        Returns:
            True if the store acknowledged the release
        """
        body = json.dumps({"scroll_id": scroll_id})
        try:
            await self._http.send("DELETE", SCROLL_PATH, body)
        except FetchError as e:
            log_scroll_release_failed(error_type=type(e).__name__, error_message=str(e))
            return False
        return True

    async def _request(self, method: str, path: str, body: str) -> SearchResult:
        try:
            data = await self._http.send(method, path, body)
        except HTTPStatusError as e:
            # Degraded stores send shard failures along with an error status
            if e.body:
                try:
                    result = SearchResult.from_bytes(e.body)
                except MalformedResponseError:
                    raise e from None
                _raise_for_shard_failures(result, cause=e)
            raise

        result = SearchResult.from_bytes(data)
        _raise_for_shard_failures(result)
        return result


def _raise_for_shard_failures(result: SearchResult, cause: Exception | None = None) -> None:
    shards = result.shards
    if shards.failed > 0:
        failures = "; ".join(str(f) for f in shards.failures) or "no failure details"
        raise ShardFailureError(
            f"failed to query: {shards.failed} of {shards.total} shards failed: {failures}",
            failures=list(shards.failures),
        ) from cause
