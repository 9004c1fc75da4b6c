"""HTTP client helper."""

from __future__ import annotations

import asyncio

import aiohttp

from ..core.exceptions import HTTPStatusError, NetworkError

JSON_HEADERS = {"Content-Type": "application/json"}


class HTTPClient:
    """Async HTTP client bound to one document store.

    Every request is attempted exactly once; failures are raised, never retried.
    """

    def __init__(
        self,
        base_url: str,
        user: str | None = None,
        password: str | None = None,
        timeout: float = 300.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._auth = aiohttp.BasicAuth(user, password or "") if user else None
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def url_for(self, path: str) -> str:
        """Join a store-relative path onto the base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(self, method: str, path: str, body: str | bytes = "") -> bytes:
        """Send one request and return the raw response body.

        Args:
            method: HTTP method
            path: Path relative to the base URL, may carry a query string
            body: JSON request body; empty sends no payload

        Returns:
            Raw response bytes

        Raises:
            NetworkError: If the request could not be completed
            HTTPStatusError: If the store answered with a non-2xx status
        """
        url = self.url_for(path)
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            async with self.session.request(
                method,
                url,
                data=body or None,
                headers=JSON_HEADERS,
                auth=self._auth,
            ) as response:
                data = await response.read()
                status = response.status
                reason = response.reason or ""
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"failed to query {method} {url}: {e!r}") from e

        if not 200 <= status < 300:
            raise HTTPStatusError(
                f"failed to query {method} {url}: {status} {reason}".rstrip(),
                status_code=status,
                body=data,
            )
        return data

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
