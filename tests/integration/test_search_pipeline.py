"""Integration test: the wired services end to end, with a scripted provider and no network."""

import httpx
import pytest

from hiddenjobs.api.container import Container, build_container
from hiddenjobs.core.config import AcquisitionConfig, RankingConfig, Settings
from hiddenjobs.core.db import SqliteProfileStore
from hiddenjobs.core.schemas import SearchItem, SearchRequest

# ---------------------------------------------------------------------------
# Scripted provider
# ---------------------------------------------------------------------------


class ScriptedProvider:
    """Serves fixed items for expressions scoped to greenhouse.io; everything else is empty."""

    configured = True

    def __init__(self, items: list[SearchItem] | None = None) -> None:
        self.items = items or []
        self.expressions: list[str] = []

    async def search(
        self, expression: str, start: int = 1, time_filter: str = "all", num: int = 10
    ) -> list[SearchItem]:
        self.expressions.append(expression)
        if start == 1 and "site:greenhouse.io" in expression:
            return list(self.items)
        return []


def _container(db_path, provider: ScriptedProvider) -> Container:  # type: ignore[no-untyped-def]
    settings = Settings(
        acquisition=AcquisitionConfig(
            stagger_s=0.0,
            batch_delay_s=0.0,
            page_delay_s=0.0,
            fanout_platforms=["greenhouse.io", "lever.co"],
        ),
        ranking=RankingConfig(primary_term_delay_s=0.0, term_delay_s=0.0, user_delay_s=0.0),
    )
    page_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    store = SqliteProfileStore.open(db_path)
    return build_container(settings, provider=provider, page_client=page_client, store=store)


@pytest.fixture()
async def services(tmp_path):  # type: ignore[no-untyped-def]
    containers: list[Container] = []

    def make(items: list[SearchItem] | None = None) -> tuple[Container, ScriptedProvider]:
        provider = ScriptedProvider(items)
        container = _container(tmp_path / f"pipeline{len(containers)}.db", provider)
        containers.append(container)
        return container, provider

    yield make
    for container in containers:
        await container.aclose()


POSTINGS = [
    SearchItem(title="Senior Data Engineer - Acme", link="https://boards.greenhouse.io/acme/jobs/1"),
    SearchItem(title="Staff Platform Architect - Globex", link="https://boards.greenhouse.io/globex/jobs/2"),
    SearchItem(title="Frontend Developer - Initech", link="https://boards.greenhouse.io/initech/jobs/3"),
]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearchFlows:
    async def test_empty_provider_response_for_single_vendor(self, services) -> None:  # type: ignore[no-untyped-def]
        container, provider = services()
        response = await container.search.search(
            {"query": "Software Engineer", "platform": "lever.co", "location": "all"}
        )

        assert provider.expressions
        expression = provider.expressions[0]
        assert '"Software Engineer"' in expression
        assert "site:lever.co" in expression
        assert response.jobs == ()
        assert response.pagination.total_jobs == 0
        assert response.to_api()["pagination"]["totalJobs"] == 0

    async def test_relative_and_absolute_links_collapse(self, services) -> None:  # type: ignore[no-untyped-def]
        items = [
            SearchItem(title="Backend Engineer - Acme", link="https://boards.greenhouse.io/acme/jobs/7"),
            SearchItem(
                title="Backend Engineer - Acme", link="/acme/jobs/7", display_link="boards.greenhouse.io"
            ),
        ]
        container, _ = services(items)
        records = await container.aggregator.aggregate(SearchRequest.create(query="backend engineer"))

        assert [r.url for r in records] == ["https://boards.greenhouse.io/acme/jobs/7"]

    async def test_stream_matches_search(self, services) -> None:  # type: ignore[no-untyped-def]
        container, _ = services(POSTINGS)
        events = [e async for e in container.streamer.stream({"query": "engineer"})]
        streamed = {job.url for e in events for job in e.jobs}

        response = await container.search.search({"query": "engineer"})
        assert streamed == {job.url for job in response.jobs}
        assert events[-1].total == len(POSTINGS)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


class TestRecommendationFlows:
    async def test_user_without_signals_gets_ranked_list(self, services) -> None:  # type: ignore[no-untyped-def]
        container, provider = services(POSTINGS)
        recs = await container.ranking.recommend("newcomer")

        assert any('"software engineer"' in e for e in provider.expressions)
        assert any('"developer"' in e for e in provider.expressions)
        assert len(recs) == len(POSTINGS)
        assert [r.score for r in recs] == sorted((r.score for r in recs), reverse=True)

    async def test_applied_excluded_and_saved_penalized(self, services) -> None:  # type: ignore[no-untyped-def]
        container, _ = services(POSTINGS)
        for user, saved in (("saver", ["Platform Architect"]), ("plain", [])):
            container.store.import_profile(
                user,
                applications=[("Data Engineer", "Hooli")],
                saved_titles=saved,
            )

        with_saved = {r.job.title: r.score for r in await container.ranking.recommend("saver")}
        without_saved = {r.job.title: r.score for r in await container.ranking.recommend("plain")}

        assert "Senior Data Engineer" not in with_saved
        assert "Senior Data Engineer" not in without_saved
        assert with_saved["Staff Platform Architect"] == without_saved["Staff Platform Architect"] - 20
        assert with_saved["Frontend Developer"] == without_saved["Frontend Developer"]
