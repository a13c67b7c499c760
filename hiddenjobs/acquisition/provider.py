"""Web-search provider contract and the Google Custom Search implementation."""

import logging
import os
from typing import Protocol

import httpx

from hiddenjobs.core.config import ProviderConfig
from hiddenjobs.core.errors import MissingCredentialsError, ProviderError
from hiddenjobs.core.schemas import SearchItem

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    async def search(
        self, expression: str, start: int = 1, time_filter: str = "all", num: int = 10
    ) -> list[SearchItem]:
        """Return one page of organic results. Raises ProviderError on failure."""
        ...


class GoogleSearchProvider:
    """Google Custom Search JSON API over a shared httpx.AsyncClient.

    Credentials are read from the environment variables named in ProviderConfig
    unless passed explicitly.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        client: httpx.AsyncClient | None = None,
        api_key: str | None = None,
        engine_id: str | None = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout_s)
        self._owns_client = client is None
        self._api_key = api_key or os.environ.get(self.config.api_key_env, "")
        self._engine_id = engine_id or os.environ.get(self.config.engine_id_env, "")

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._engine_id)

    async def search(
        self, expression: str, start: int = 1, time_filter: str = "all", num: int = 10
    ) -> list[SearchItem]:
        if not self.configured:
            msg = (
                f"missing search credentials ({self.config.api_key_env}, "
                f"{self.config.engine_id_env})"
            )
            raise MissingCredentialsError(msg)

        params: dict[str, str | int] = {
            "key": self._api_key,
            "cx": self._engine_id,
            "q": expression,
            "num": num,
            "start": start,
        }
        if time_filter and time_filter != "all":
            params["tbs"] = f"qdr:{time_filter}"

        try:
            response = await self._client.get(self.config.endpoint, params=params)
        except httpx.HTTPError as e:
            msg = f"search provider network error: {e}"
            raise ProviderError(msg) from e

        if not response.is_success:
            msg = f"search provider returned {response.status_code}: {response.text[:200]}"
            raise ProviderError(msg, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            msg = "search provider returned invalid JSON"
            raise ProviderError(msg, status_code=response.status_code) from e

        items = [
            SearchItem(
                title=raw.get("title") or "",
                link=raw["link"],
                snippet=raw.get("snippet") or "",
                display_link=raw.get("displayLink") or "",
            )
            for raw in data.get("items") or []
            if raw.get("link")
        ]
        logger.debug("Provider returned %d items for start=%d", len(items), start)
        return items

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
