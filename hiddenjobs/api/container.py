"""Builds the shared services once per process and hands them to the HTTP layer and CLI."""

import logging
from dataclasses import dataclass

import httpx

from hiddenjobs.acquisition.acquirer import ResultAcquirer
from hiddenjobs.acquisition.fetcher import PageFetcher
from hiddenjobs.acquisition.provider import GoogleSearchProvider, SearchProvider
from hiddenjobs.core.cache import CacheService
from hiddenjobs.core.config import Settings
from hiddenjobs.core.db import SqliteProfileStore
from hiddenjobs.pipeline.aggregator import Aggregator
from hiddenjobs.pipeline.orchestrator import SearchService
from hiddenjobs.pipeline.ranking import RankingEngine
from hiddenjobs.pipeline.streaming import SearchStreamer
from hiddenjobs.platforms.registry import default_registry
from hiddenjobs.profile.analyzer import build_analyzer

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    caches: CacheService
    provider: SearchProvider
    fetcher: PageFetcher
    store: SqliteProfileStore
    aggregator: Aggregator
    search: SearchService
    streamer: SearchStreamer
    ranking: RankingEngine

    @property
    def provider_configured(self) -> bool:
        return bool(getattr(self.provider, "configured", True))

    async def aclose(self) -> None:
        for closeable in (self.provider, self.fetcher):
            aclose = getattr(closeable, "aclose", None)
            if aclose is not None:
                await aclose()
        self.store.close()


def build_container(
    settings: Settings,
    provider: SearchProvider | None = None,
    page_client: httpx.AsyncClient | None = None,
    store: SqliteProfileStore | None = None,
) -> Container:
    """Wire every service from settings; collaborators can be injected for tests."""
    caches = CacheService(settings.cache)
    provider = provider or GoogleSearchProvider(settings.provider)
    acq = settings.acquisition
    fetcher = PageFetcher(
        page_client,
        timeout_s=acq.fetch_timeout_s,
        slow_timeout_s=acq.slow_fetch_timeout_s,
    )
    store = store or SqliteProfileStore.open(settings.database.path)

    acquirer = ResultAcquirer(provider, caches.pages, settings.provider, page_delay_s=acq.page_delay_s)
    aggregator = Aggregator(acquirer, fetcher, default_registry(), acq)
    ranking = RankingEngine(
        aggregator,
        store,
        caches.recommendations,
        scoring=settings.scoring,
        ranking=settings.ranking,
        analyzer=build_analyzer(settings.analyzer),
    )
    logger.info("Services ready (database: %s)", settings.database.path)
    return Container(
        settings=settings,
        caches=caches,
        provider=provider,
        fetcher=fetcher,
        store=store,
        aggregator=aggregator,
        search=SearchService(aggregator, caches.searches, store),
        streamer=SearchStreamer(aggregator),
        ranking=ranking,
    )
