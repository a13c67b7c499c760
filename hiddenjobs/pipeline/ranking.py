"""Personalized recommendations: profile -> search terms -> candidate pool -> scored, filtered list.

Results are cached per user for the recommendation TTL. Only non-empty
lists are cached, so a user with nothing found is retried on the next call.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from hiddenjobs.acquisition.acquirer import AcquisitionMode, Sleep
from hiddenjobs.core.cache import TTLCache
from hiddenjobs.core.config import RankingConfig, ScoringConfig
from hiddenjobs.core.db import ProfileStore
from hiddenjobs.core.schemas import JobRecord, LocationFilter, Recommendation, SearchRequest
from hiddenjobs.pipeline.aggregator import Aggregator
from hiddenjobs.pipeline.matcher import (
    AppliedTitleFilter,
    ExactDuplicateFilter,
    Filter,
    SavedTitlePenalty,
    run_filter_chain,
)
from hiddenjobs.pipeline.scorer import score_job
from hiddenjobs.profile.analyzer import DocumentAnalyzer
from hiddenjobs.profile.builder import build_profile
from hiddenjobs.profile.schema import UserProfile

logger = logging.getLogger(__name__)

PRIMARY_TERMS = 3
PRIMARY_QUOTA = 8
DEFAULT_QUOTA = 5
TAIL_QUOTA = 3
TAIL_START = 6

_WORK_MODE_LOCATIONS = {
    "remote": LocationFilter.REMOTE,
    "hybrid": LocationFilter.HYBRID,
    "onsite": LocationFilter.ONSITE,
}


@dataclass(frozen=True)
class PoolEntry:
    job: JobRecord
    term: str
    term_index: int


def select_search_terms(profile: UserProfile, config: RankingConfig | None = None) -> list[str]:
    """Ranking terms in priority order.

    Resume-suggested titles come first, then new applied titles, then
    declared job types, then recent searches. A job type or recent search
    already contained in an earlier term is skipped. Falls back to the
    configured default terms when the profile has no signal.
    """
    config = config or RankingConfig()
    terms: list[str] = []
    seen: set[str] = set()

    def add(term: str, skip_contained: bool = False) -> bool:
        key = " ".join(term.lower().split())
        if not key or key in seen:
            return False
        if skip_contained and any(key in existing for existing in seen):
            return False
        seen.add(key)
        terms.append(term.strip())
        return True

    for title in profile.resume_suggested_titles[:3]:
        add(title)

    added = 0
    for title in profile.applied_job_titles:
        if added == 2:
            break
        added += add(title)

    for job_type in profile.job_types[:3]:
        if len(terms) >= 6:
            break
        add(job_type, skip_contained=True)

    for query in profile.recent_searches[:2]:
        if len(terms) >= 7:
            break
        add(query, skip_contained=True)

    if not terms:
        terms = list(config.default_terms)
    return terms[: config.max_terms]


def term_quota(index: int) -> int:
    """Results per platform for the index-th term."""
    if index < PRIMARY_TERMS:
        return PRIMARY_QUOTA
    if index >= TAIL_START:
        return TAIL_QUOTA
    return DEFAULT_QUOTA


def location_filter_for(profile: UserProfile) -> LocationFilter:
    return _WORK_MODE_LOCATIONS.get(profile.work_preference, LocationFilter.ALL)


class RankingEngine:
    """Builds and caches per-user recommendation lists."""

    def __init__(
        self,
        aggregator: Aggregator,
        store: ProfileStore,
        cache: TTLCache,
        scoring: ScoringConfig | None = None,
        ranking: RankingConfig | None = None,
        analyzer: DocumentAnalyzer | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.aggregator = aggregator
        self.store = store
        self.cache = cache
        self.scoring = scoring or ScoringConfig()
        self.ranking = ranking or RankingConfig()
        self.analyzer = analyzer
        self._sleep = sleep

    async def recommend(self, user_id: str, limit: int = 10) -> list[Recommendation]:
        """Top recommendations for a user, from cache when fresh."""
        cached = self.cache.get(user_id)
        if cached:
            logger.info("Recommendation cache hit for %s", user_id)
            return list(cached[:limit])

        profile = await build_profile(user_id, self.store, self.analyzer)
        if profile.is_empty:
            logger.info("No profile signal for %s; using default terms", user_id)
        terms = select_search_terms(profile, self.ranking)
        logger.info("Ranking %s with %d terms: %s", user_id, len(terms), terms)

        pool = await self._retrieve(profile, terms)
        now = datetime.now()
        scored: list[Recommendation] = []
        for entry in pool:
            score, reasons = score_job(
                entry.job,
                profile,
                self.scoring,
                search_term=entry.term,
                primary_source=entry.term_index < PRIMARY_TERMS,
                now=now,
            )
            scored.append(Recommendation(job=entry.job, score=score, reasons=reasons))

        filters: list[Filter] = [
            ExactDuplicateFilter(),
            AppliedTitleFilter(profile.applied_job_titles),
            SavedTitlePenalty(profile.saved_job_titles, self.scoring.saved_penalty, self.scoring.saved_floor),
        ]
        ranked = run_filter_chain(scored, filters)
        ranked.sort(key=lambda r: r.score, reverse=True)
        top = ranked[: self.ranking.cache_size]

        if top:
            self.cache.set(user_id, tuple(top))
        logger.info("Ranked %d of %d pooled jobs for %s", len(ranked), len(pool), user_id)
        self._record_run(user_id, terms, len(pool), top)
        return top[:limit]

    def clear_cache(self, user_id: str | None = None) -> None:
        """Forget cached recommendations for one user, or for everyone."""
        self.cache.invalidate(user_id)
        logger.info("Cleared recommendation cache for %s", user_id or "all users")

    async def refresh_all(self, user_ids: list[str]) -> dict[str, int]:
        """Recompute recommendations for each user in turn. Returns counts per user."""
        counts: dict[str, int] = {}
        for i, user_id in enumerate(user_ids):
            if i:
                await self._sleep(self.ranking.user_delay_s)
            self.clear_cache(user_id)
            try:
                counts[user_id] = len(await self.recommend(user_id, limit=self.ranking.cache_size))
            except Exception:
                logger.error("Refresh failed for %s", user_id, exc_info=True)
                counts[user_id] = 0
        logger.info("Refreshed recommendations for %d users", len(counts))
        return counts

    async def _retrieve(self, profile: UserProfile, terms: list[str]) -> list[PoolEntry]:
        location = location_filter_for(profile)
        pool: dict[str, PoolEntry] = {}
        for i, term in enumerate(terms):
            if len(pool) >= self.ranking.pool_cap:
                break
            if i:
                delay = self.ranking.primary_term_delay_s if i <= PRIMARY_TERMS else self.ranking.term_delay_s
                await self._sleep(delay)
            try:
                request = SearchRequest(query=term, location=location)
                jobs = await self.aggregator.aggregate(request, AcquisitionMode.BATCH, term_quota(i))
            except Exception as e:
                logger.warning("Ranking term %r failed: %s", term, e)
                continue
            for job in jobs:
                if len(pool) >= self.ranking.pool_cap:
                    break
                pool.setdefault(job.url, PoolEntry(job=job, term=term, term_index=i))
        return list(pool.values())

    def _record_run(self, user_id: str, terms: list[str], pool_size: int, top: list[Recommendation]) -> None:
        try:
            self.store.record_recommendation_run(
                user_id, terms, pool_size, len(top), top[0].score if top else 0
            )
        except Exception as e:
            logger.warning("Failed to record recommendation run for %s: %s", user_id, e)
