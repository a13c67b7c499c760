"""Progressive search: platform tasks push tagged events onto a queue the caller drains.

Per platform the order is progress -> jobs -> platform-complete (or
platform-error). Platforms interleave freely. Closing the iterator cancels
the platform tasks that are still running.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

from hiddenjobs.core.errors import StreamingTransportError, ValidationError
from hiddenjobs.core.schemas import EventType, SearchEvent, SearchRequest
from hiddenjobs.pipeline.aggregator import Aggregator
from hiddenjobs.platforms.catalog import scope_label

logger = logging.getLogger(__name__)

Send = Callable[[SearchEvent], Awaitable[None]]

# Sentinel a platform task puts on the queue when it finishes, however it finishes.
_DONE = None


class SearchStreamer:
    """Streams one search as it runs, platform by platform."""

    def __init__(self, aggregator: Aggregator) -> None:
        self.aggregator = aggregator

    async def stream(
        self, request: SearchRequest | dict[str, Any]
    ) -> AsyncGenerator[SearchEvent, None]:
        if not isinstance(request, SearchRequest):
            try:
                request = SearchRequest.create(**request)
            except ValidationError as e:
                yield SearchEvent(type=EventType.ERROR, message=str(e))
                return

        platforms = self.aggregator.platforms_for(request)
        queue: asyncio.Queue[SearchEvent | None] = asyncio.Queue()
        streamed: set[str] = set()
        finished = 0

        def percent() -> int:
            return round(finished * 100 / len(platforms))

        async def run(index: int, platform: str) -> None:
            nonlocal finished
            label = scope_label(platform)
            try:
                await self.aggregator.stagger(index)
                queue.put_nowait(
                    SearchEvent(
                        type=EventType.PROGRESS,
                        platform=platform,
                        message=f"Searching {label}...",
                        progress=percent(),
                    )
                )
                records = await self.aggregator.discover_platform(request, platform)
                fresh = [r for r in records if r.url not in streamed]
                streamed.update(r.url for r in fresh)
                if fresh:
                    queue.put_nowait(
                        SearchEvent(
                            type=EventType.JOBS, platform=platform, jobs=tuple(fresh), total=len(streamed)
                        )
                    )
                finished += 1
                queue.put_nowait(
                    SearchEvent(
                        type=EventType.PLATFORM_COMPLETE,
                        platform=platform,
                        message=f"Found {len(fresh)} new jobs on {label}",
                        total=len(fresh),
                        total_jobs=len(streamed),
                        progress=percent(),
                    )
                )
            except Exception as e:
                logger.warning("Streaming search failed on %s: %s", platform, e)
                finished += 1
                queue.put_nowait(
                    SearchEvent(
                        type=EventType.PLATFORM_ERROR, platform=platform, message=str(e), progress=percent()
                    )
                )
            finally:
                queue.put_nowait(_DONE)

        yield SearchEvent(
            type=EventType.START,
            message=f"Searching {len(platforms)} platforms for {request.query!r}",
            total=len(platforms),
            platforms=tuple(platforms),
        )

        tasks = [asyncio.create_task(run(i, p)) for i, p in enumerate(platforms)]
        remaining = len(tasks)
        try:
            while remaining:
                event = await queue.get()
                if event is _DONE:
                    remaining -= 1
                    continue
                yield event
            yield SearchEvent(
                type=EventType.COMPLETE,
                message=f"Found {len(streamed)} jobs",
                total=len(streamed),
                progress=100,
            )
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                logger.info("Stream closed; cancelled %d platform tasks", len(pending))
                await asyncio.gather(*pending, return_exceptions=True)


async def pump_events(events: AsyncGenerator[SearchEvent, None], send: Send) -> bool:
    """Forward every event to send. Returns False when the transport failed."""
    try:
        async for event in events:
            try:
                await send(event)
            except Exception as e:
                msg = f"send failed on {event.type.value}: {e}"
                raise StreamingTransportError(msg) from e
    except StreamingTransportError as e:
        logger.warning("Streaming transport error: %s", e)
        return False
    finally:
        await events.aclose()
    return True
