"""Per-platform discovery and cross-platform aggregation.

Data flow for one platform:
  1. Compile the provider expression
  2. Acquire result pages (cached, rate limited)
  3. Cheap path: records straight from search items with direct posting URLs
  4. Deep path: fetch and extract posting pages when the cheap path is thin
  5. Deduplicate by canonical URL and truncate
"""

import asyncio
import logging
import math
from collections.abc import Iterable

from hiddenjobs.acquisition.acquirer import AcquisitionMode, ResultAcquirer, Sleep
from hiddenjobs.acquisition.fetcher import PageFetcher
from hiddenjobs.core.config import AcquisitionConfig
from hiddenjobs.core.schemas import JobRecord, SearchRequest
from hiddenjobs.extraction.page import Page
from hiddenjobs.extraction.search_result import deep_path_url, extract_from_search_item
from hiddenjobs.extraction.text import canonicalize_url
from hiddenjobs.platforms.catalog import ALL_SCOPE
from hiddenjobs.platforms.query import compile_query
from hiddenjobs.platforms.registry import AdapterRegistry, default_registry

logger = logging.getLogger(__name__)


def dedupe_by_url(records: Iterable[JobRecord]) -> list[JobRecord]:
    """Keep the first record per canonical URL, preserving order."""
    seen: set[str] = set()
    result: list[JobRecord] = []
    for record in records:
        key = canonicalize_url(record.url)
        if key not in seen:
            seen.add(key)
            result.append(record)
    return result


class Aggregator:
    """Runs platform discovery tasks and merges their records."""

    def __init__(
        self,
        acquirer: ResultAcquirer,
        fetcher: PageFetcher,
        registry: AdapterRegistry | None = None,
        config: AcquisitionConfig | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.acquirer = acquirer
        self.fetcher = fetcher
        self.registry = registry or default_registry()
        self.config = config or AcquisitionConfig()
        self._sleep = sleep

    def platforms_for(self, request: SearchRequest) -> list[str]:
        """Platform ids a request fans out over: one scope, or the configured list for 'all'."""
        if request.platform == ALL_SCOPE:
            return list(self.config.fanout_platforms)
        return [request.platform]

    async def discover_platform(
        self, request: SearchRequest, platform: str, max_results: int | None = None
    ) -> list[JobRecord]:
        """Records for one platform scope, at most max_results."""
        max_results = max_results or self.config.max_results_per_platform
        expression = compile_query(request.query, platform, request.location)
        max_pages = math.ceil(max_results / self.acquirer.config.page_size)
        items = await self.acquirer.fetch_pages(expression, request.time_filter.value, max_pages)

        records: list[JobRecord] = []
        pending: list[str] = []
        for item in items:
            record = extract_from_search_item(item)
            if record is not None:
                records.append(record)
                continue
            url = deep_path_url(item)
            if url is not None:
                pending.append(url)

        if len(records) < self.config.min_direct_results and pending:
            known = {r.url for r in records}
            urls = [u for u in dict.fromkeys(pending) if canonicalize_url(u) not in known]
            records.extend(await self._extract_pages(urls[: self.config.max_fetch_urls], request.query))

        result = dedupe_by_url(records)[:max_results]
        logger.info(
            "%s: %d items -> %d records (%d queued for fetch)",
            platform, len(items), len(result), len(pending),
        )
        return result

    async def aggregate(
        self,
        request: SearchRequest,
        mode: AcquisitionMode = AcquisitionMode.INTERACTIVE,
        max_results_per_platform: int | None = None,
    ) -> list[JobRecord]:
        """Run every platform task for the request and merge the results.

        A platform task that raises is logged and contributes no records.
        """
        platforms = self.platforms_for(request)
        if len(platforms) == 1:
            batches = [await self._safe_discover(request, platforms[0], max_results_per_platform)]
        elif mode == AcquisitionMode.BATCH:
            batches = []
            for i, platform in enumerate(platforms):
                if i:
                    await self._sleep(self.config.batch_delay_s)
                batches.append(await self._safe_discover(request, platform, max_results_per_platform))
        else:
            batches = await asyncio.gather(
                *(
                    self._staggered(i, request, platform, max_results_per_platform)
                    for i, platform in enumerate(platforms)
                )
            )

        merged = dedupe_by_url(record for batch in batches for record in batch)
        logger.info("Aggregated %d unique records from %d platforms", len(merged), len(platforms))
        return merged

    async def stagger(self, index: int) -> None:
        """Delay the index-th concurrent task so platform starts are spread out."""
        if index:
            await self._sleep(index * self.config.stagger_s)

    async def _staggered(
        self, index: int, request: SearchRequest, platform: str, max_results: int | None
    ) -> list[JobRecord]:
        await self.stagger(index)
        return await self._safe_discover(request, platform, max_results)

    async def _safe_discover(
        self, request: SearchRequest, platform: str, max_results: int | None
    ) -> list[JobRecord]:
        try:
            return await self.discover_platform(request, platform, max_results)
        except Exception:
            logger.warning("Platform %s failed", platform, exc_info=True)
            return []

    async def _extract_pages(self, urls: list[str], search_query: str) -> list[JobRecord]:
        """Fetch and extract posting pages in small concurrent batches."""
        records: list[JobRecord] = []
        size = self.config.fetch_batch_size
        for start in range(0, len(urls), size):
            if start:
                await self._sleep(self.config.page_delay_s)
            batch = urls[start : start + size]
            results = await asyncio.gather(*(self._extract_page(u, search_query) for u in batch))
            records.extend(r for r in results if r is not None)
        return records

    async def _extract_page(self, url: str, search_query: str) -> JobRecord | None:
        adapter = self.registry.adapter_for(url)
        html = await self.fetcher.fetch(url, slow=adapter.js_heavy)
        if html is None:
            return None
        try:
            return adapter.extract(Page(url=url, html=html, search_query=search_query))
        except Exception:
            logger.debug("Adapter %s failed on %s", adapter.platform_id, url, exc_info=True)
            return None
