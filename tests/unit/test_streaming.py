"""Tests for the progressive search stream and the event pump."""

import asyncio

import httpx

from hiddenjobs.acquisition.acquirer import ResultAcquirer
from hiddenjobs.acquisition.fetcher import PageFetcher
from hiddenjobs.core.cache import TTLCache
from hiddenjobs.core.config import AcquisitionConfig
from hiddenjobs.core.schemas import EventType, SearchEvent, SearchItem
from hiddenjobs.pipeline.aggregator import Aggregator
from hiddenjobs.pipeline.streaming import SearchStreamer, pump_events

SHARED = SearchItem(title="Backend Engineer - Acme", link="https://boards.greenhouse.io/acme/jobs/1")


class ScriptedProvider:
    """Items per site operator; scopes listed in blocking wait until cancelled."""

    def __init__(
        self,
        routes: dict[str, list[SearchItem]],
        failing: tuple[str, ...] = (),
        blocking: tuple[str, ...] = (),
    ) -> None:
        self.routes = routes
        self.failing = failing
        self.blocking = blocking
        self.cancelled: list[str] = []

    async def search(
        self, expression: str, start: int = 1, time_filter: str = "all", num: int = 10
    ) -> list[SearchItem]:
        for scope in self.blocking:
            if scope in expression:
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    self.cancelled.append(scope)
                    raise
        for scope in self.failing:
            if scope in expression:
                msg = f"boom on {scope}"
                raise RuntimeError(msg)
        for scope, items in self.routes.items():
            if scope in expression and start == 1:
                return list(items)
        return []


async def _no_sleep(_: float) -> None:
    return None


def _streamer(provider: ScriptedProvider, platforms: list[str]) -> SearchStreamer:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    aggregator = Aggregator(
        ResultAcquirer(provider, TTLCache(3600), sleep=_no_sleep),
        PageFetcher(client),
        config=AcquisitionConfig(fanout_platforms=platforms),
        sleep=_no_sleep,
    )
    return SearchStreamer(aggregator)


async def _collect(streamer: SearchStreamer, request: dict) -> list[SearchEvent]:
    return [event async for event in streamer.stream(request)]


class TestSearchStreamer:
    async def test_event_order(self) -> None:
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED]})
        events = await _collect(_streamer(provider, ["greenhouse.io", "lever.co"]), {"query": "engineer"})

        assert events[0].type is EventType.START
        assert events[0].platforms == ("greenhouse.io", "lever.co")
        assert events[0].total == 2
        assert events[-1].type is EventType.COMPLETE
        assert events[-1].total == 1

        for platform in ("greenhouse.io", "lever.co"):
            kinds = [e.type for e in events if e.platform == platform]
            assert kinds[0] is EventType.PROGRESS
            assert kinds[-1] is EventType.PLATFORM_COMPLETE
        gh = [e.type for e in events if e.platform == "greenhouse.io"]
        assert gh == [EventType.PROGRESS, EventType.JOBS, EventType.PLATFORM_COMPLETE]

    async def test_no_job_streamed_twice(self) -> None:
        shared_on_lever = SearchItem(title="Backend Engineer - Acme", link="//boards.greenhouse.io/acme/jobs/1")
        provider = ScriptedProvider(
            {
                "site:greenhouse.io": [SHARED],
                "site:lever.co": [shared_on_lever],
            }
        )
        events = await _collect(_streamer(provider, ["greenhouse.io", "lever.co"]), {"query": "engineer"})
        urls = [job.url for e in events if e.type is EventType.JOBS for job in e.jobs]
        assert urls == ["https://boards.greenhouse.io/acme/jobs/1"]
        completes = [e for e in events if e.type is EventType.PLATFORM_COMPLETE]
        assert sorted(e.total or 0 for e in completes) == [0, 1]

    async def test_progress_and_running_totals(self) -> None:
        other = SearchItem(title="Platform Engineer - Globex", link="https://boards.greenhouse.io/globex/jobs/2")
        third = SearchItem(title="Data Engineer - Initech", link="https://boards.greenhouse.io/initech/jobs/3")
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED, other], "site:lever.co": [third]})
        events = await _collect(_streamer(provider, ["greenhouse.io", "lever.co"]), {"query": "engineer"})

        progress = [e for e in events if e.type is EventType.PROGRESS]
        assert len(progress) == 2
        assert all(e.progress in (0, 50) for e in progress)
        assert all(e.platform and e.message for e in progress)

        completes = [e for e in events if e.type is EventType.PLATFORM_COMPLETE]
        assert [e.progress for e in completes] == [50, 100]
        assert completes[0].total_jobs == completes[0].total
        assert completes[1].total_jobs == 3
        assert {e.platform: e.total for e in completes} == {"greenhouse.io": 2, "lever.co": 1}
        assert events[-1].progress == 100

        payload = completes[-1].to_api()
        assert payload["totalJobs"] == 3
        assert payload["progress"] == 100

    async def test_platform_error_does_not_stop_stream(self) -> None:
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED]}, failing=("site:lever.co",))
        events = await _collect(_streamer(provider, ["greenhouse.io", "lever.co"]), {"query": "engineer"})
        errors = [e for e in events if e.type is EventType.PLATFORM_ERROR]
        assert len(errors) == 1
        assert errors[0].platform == "lever.co"
        assert "boom" in (errors[0].message or "")
        assert errors[0].progress in (50, 100)
        assert events[-1].type is EventType.COMPLETE

    async def test_invalid_request_yields_single_error(self) -> None:
        events = await _collect(_streamer(ScriptedProvider({}), ["lever.co"]), {"query": "  "})
        assert len(events) == 1
        assert events[0].type is EventType.ERROR

    async def test_close_cancels_running_platforms(self) -> None:
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED]}, blocking=("site:lever.co",))
        stream = _streamer(provider, ["greenhouse.io", "lever.co"]).stream({"query": "engineer"})
        async for event in stream:
            if event.type is EventType.PLATFORM_COMPLETE:
                break
        await stream.aclose()
        assert provider.cancelled == ["site:lever.co"]


class TestPumpEvents:
    async def test_forwards_everything(self) -> None:
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED]})
        sent: list[SearchEvent] = []

        async def send(event: SearchEvent) -> None:
            sent.append(event)

        ok = await pump_events(_streamer(provider, ["greenhouse.io"]).stream({"query": "engineer"}), send)
        assert ok
        assert sent[-1].type is EventType.COMPLETE

    async def test_send_failure_stops_and_cancels(self) -> None:
        provider = ScriptedProvider({"site:greenhouse.io": [SHARED]}, blocking=("site:lever.co",))

        async def send(event: SearchEvent) -> None:
            if event.type is EventType.JOBS:
                msg = "client went away"
                raise ConnectionResetError(msg)

        stream = _streamer(provider, ["greenhouse.io", "lever.co"]).stream({"query": "engineer"})
        assert await pump_events(stream, send) is False
        assert provider.cancelled == ["site:lever.co"]
