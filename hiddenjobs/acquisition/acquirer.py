"""Paged result acquisition with a shared page cache and failure diagnostics."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from hiddenjobs.acquisition.provider import SearchProvider
from hiddenjobs.core.cache import TTLCache
from hiddenjobs.core.config import ProviderConfig
from hiddenjobs.core.errors import MissingCredentialsError, ProviderError
from hiddenjobs.core.schemas import SearchItem
from hiddenjobs.platforms.query import is_compound

logger = logging.getLogger(__name__)

DIAGNOSTIC_RESULTS = 3

Sleep = Callable[[float], Awaitable[None]]


class AcquisitionMode(str, Enum):
    """How platform fan-out is scheduled.

    interactive: concurrent tasks with staggered starts.
    batch: strictly sequential with a fixed delay between platforms.
    """

    INTERACTIVE = "interactive"
    BATCH = "batch"


class ResultAcquirer:
    """Fetch provider pages through the process-wide page cache."""

    def __init__(
        self,
        provider: SearchProvider,
        page_cache: TTLCache,
        config: ProviderConfig | None = None,
        page_delay_s: float = 0.2,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.page_cache = page_cache
        self.config = config or ProviderConfig()
        self.page_delay_s = page_delay_s
        self._sleep = sleep

    async def fetch_page(
        self, expression: str, page: int = 1, time_filter: str = "all"
    ) -> list[SearchItem]:
        """Return one page of items; provider failures yield an empty page."""
        start = (page - 1) * self.config.page_size + 1
        key = (expression, start, time_filter)
        cached = self.page_cache.get(key)
        if cached is not None:
            logger.debug("Page cache hit: start=%d %s", start, expression)
            return list(cached)

        try:
            items = await self.provider.search(expression, start, time_filter, self.config.page_size)
        except MissingCredentialsError as e:
            logger.error("Search unavailable: %s", e)
            return []
        except ProviderError as e:
            logger.warning("Provider error (status=%s) for %s: %s", e.status_code, expression, e)
            if is_compound(expression):
                await self._diagnose()
            return []

        self.page_cache.set(key, tuple(items))
        return items

    async def fetch_pages(
        self, expression: str, time_filter: str = "all", max_pages: int | None = None
    ) -> list[SearchItem]:
        """Fetch pages sequentially until an empty or short page, or max_pages."""
        limit = min(max_pages or self.config.max_pages, self.config.max_pages)
        results: list[SearchItem] = []
        for page in range(1, limit + 1):
            items = await self.fetch_page(expression, page, time_filter)
            results.extend(items)
            if len(items) < self.config.page_size:
                break
            if page < limit:
                await self._sleep(self.page_delay_s)
        return results

    async def _diagnose(self) -> None:
        """Probe with a trivial query to tell an outage from a rejected expression."""
        try:
            probe = await self.provider.search(
                self.config.diagnostic_query, 1, "all", DIAGNOSTIC_RESULTS
            )
        except ProviderError as e:
            logger.warning("Diagnostic query also failed, provider unavailable: %s", e)
            return
        logger.warning(
            "Diagnostic query succeeded (%d results); the compound expression was rejected",
            len(probe),
        )
