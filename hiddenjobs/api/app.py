"""HTTP surface: search, streamed search, recommendations and health."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse

from hiddenjobs.api.container import Container
from hiddenjobs.core.errors import ValidationError
from hiddenjobs.core.schemas import Pagination, SearchEvent
from hiddenjobs.platforms.catalog import PLATFORMS

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 50


def _container(request: Request) -> Container:
    return request.app.state.container


def _unauthorized() -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"error": "Unauthorized", "message": "x-user-id header is required"},
    )


def _sse(event: SearchEvent) -> str:
    return f"data: {json.dumps(event.to_api())}\n\n"


def create_app(container: Container) -> FastAPI:
    """Build the FastAPI app around an already wired container."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await container.aclose()

    app = FastAPI(title="Hidden Jobs", version="0.1.0", lifespan=lifespan)
    app.state.container = container

    @app.get("/api/search")
    async def search(
        request: Request,
        query: str = "",
        platform: str = "all",
        location: str = "all",
        time_filter: str = Query(default="all", alias="timeFilter"),
        page: int = 1,
        limit: int = 25,
        x_user_id: str | None = Header(default=None),
    ):
        service = _container(request).search
        try:
            response = await service.search(
                {
                    "query": query,
                    "platform": platform,
                    "location": location,
                    "time_filter": time_filter,
                    "page": page,
                    "limit": limit,
                },
                user_id=x_user_id,
            )
        except ValidationError as e:
            logger.info("Rejected search request: %s", e)
            return JSONResponse(
                status_code=400,
                content={
                    "error": "Invalid request",
                    "message": str(e),
                    "jobs": [],
                    "pagination": Pagination().to_api(),
                },
            )
        return response.to_api()

    @app.get("/api/search-stream")
    async def search_stream(
        request: Request,
        query: str = "",
        platform: str = "all",
        location: str = "all",
        time_filter: str = Query(default="all", alias="timeFilter"),
    ):
        streamer = _container(request).streamer
        events = streamer.stream(
            {"query": query, "platform": platform, "location": location, "time_filter": time_filter}
        )

        async def body() -> AsyncIterator[str]:
            # Starlette closes this generator when the client disconnects.
            try:
                async for event in events:
                    yield _sse(event)
            finally:
                await events.aclose()

        return StreamingResponse(
            body(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.get("/api/user/recommendations")
    async def recommendations(
        request: Request,
        limit: int = Query(default=10, ge=1, le=MAX_RECOMMENDATIONS),
        x_user_id: str | None = Header(default=None),
    ):
        if not x_user_id:
            return _unauthorized()
        results = await _container(request).ranking.recommend(x_user_id, limit)
        message = (
            f"Found {len(results)} recommendations"
            if results
            else "No recommendations yet. Add preferences or search for jobs to get started."
        )
        return {"recommendations": [r.to_api() for r in results], "message": message}

    @app.delete("/api/user/recommendations/cache")
    async def clear_recommendations(request: Request, x_user_id: str | None = Header(default=None)):
        if not x_user_id:
            return _unauthorized()
        _container(request).ranking.clear_cache(x_user_id)
        return {"message": "Recommendation cache cleared"}

    @app.get("/api/health")
    async def health(request: Request):
        return {
            "status": "ok",
            "providerConfigured": _container(request).provider_configured,
            "platforms": len(PLATFORMS),
        }

    return app
