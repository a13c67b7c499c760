"""Bounded-timeout HTML fetches for posting pages."""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}


class PageFetcher:
    """GET a posting page and return its HTML, or None on any failure."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = 5.0,
        slow_timeout_s: float = 10.0,
    ) -> None:
        self._client = client or httpx.AsyncClient(headers=DEFAULT_HEADERS, follow_redirects=True)
        self._owns_client = client is None
        self.timeout_s = timeout_s
        self.slow_timeout_s = slow_timeout_s

    async def fetch(self, url: str, slow: bool = False) -> str | None:
        """Fetch url; slow selects the longer timeout for script-heavy platforms."""
        timeout = self.slow_timeout_s if slow else self.timeout_s
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException:
            logger.debug("Timeout after %.1fs for %s", timeout, url)
            return None
        except httpx.HTTPError as e:
            logger.debug("Fetch failed for %s: %s", url, e)
            return None
        if not response.is_success:
            logger.debug("HTTP %d for %s", response.status_code, url)
            return None
        return response.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
