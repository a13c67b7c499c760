"""Search service: wires validation, the search cache, aggregation and history.

Data flow:
  1. Validate the request (raises before any network call)
  2. Search cache lookup by request signature
  3. Aggregate across platforms (interactive mode)
  4. Cache the merged result set
  5. Slice the requested page and build the pagination envelope
  6. Record the search for an identified user (best effort)
"""

import logging
from typing import Any

from hiddenjobs.acquisition.acquirer import AcquisitionMode
from hiddenjobs.core.cache import TTLCache
from hiddenjobs.core.db import ProfileStore
from hiddenjobs.core.schemas import JobRecord, Pagination, SearchRequest, SearchResponse
from hiddenjobs.pipeline.aggregator import Aggregator

logger = logging.getLogger(__name__)


class SearchService:
    """Paginated job search over the aggregated, cached result set."""

    def __init__(
        self,
        aggregator: Aggregator,
        search_cache: TTLCache,
        store: ProfileStore | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.search_cache = search_cache
        self.store = store

    async def search(
        self, request: SearchRequest | dict[str, Any], user_id: str | None = None
    ) -> SearchResponse:
        """Run a search and return one page of results.

        Raises:
            ValidationError: the request was malformed.
        """
        if not isinstance(request, SearchRequest):
            request = SearchRequest.create(**request)

        jobs = await self.collect(request)
        start = (request.page - 1) * request.limit
        page = tuple(jobs[start : start + request.limit])
        response = SearchResponse(
            jobs=page,
            pagination=Pagination.build(len(jobs), request.page, request.limit),
        )

        if user_id and self.store is not None:
            self._record(self.store, user_id, request, len(jobs))
        return response

    async def collect(
        self, request: SearchRequest, mode: AcquisitionMode = AcquisitionMode.INTERACTIVE
    ) -> list[JobRecord]:
        """Every record for the request's signature, served from the search cache when fresh."""
        key = request.signature()
        cached = self.search_cache.get(key)
        if cached is not None:
            logger.info("Search cache hit for %r (%d records)", request.query, len(cached))
            return list(cached)

        jobs = await self.aggregator.aggregate(request, mode)
        if jobs:
            self.search_cache.set(key, tuple(jobs))
        else:
            logger.info("No records for %r; result not cached", request.query)
        return jobs

    def _record(self, store: ProfileStore, user_id: str, request: SearchRequest, result_count: int) -> None:
        try:
            store.record_search(
                user_id,
                request.query,
                request.platform,
                request.location.value,
                request.time_filter.value,
                result_count,
            )
        except Exception as e:
            logger.warning("Failed to record search history for %s: %s", user_id, e)
