"""Tests for the Google search provider over a mocked transport."""

import httpx
import pytest

from hiddenjobs.acquisition.provider import GoogleSearchProvider
from hiddenjobs.core.config import ProviderConfig
from hiddenjobs.core.errors import MissingCredentialsError, ProviderError


def _provider(handler, **kwargs) -> GoogleSearchProvider:  # type: ignore[no-untyped-def]
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleSearchProvider(
        ProviderConfig(), client=client, api_key="key", engine_id="cx", **kwargs
    )


class TestGoogleSearchProvider:
    async def test_request_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        await _provider(handler).search("site:lever.co x", start=11, time_filter="w")
        params = seen[0].url.params
        assert params["key"] == "key"
        assert params["cx"] == "cx"
        assert params["q"] == "site:lever.co x"
        assert params["start"] == "11"
        assert params["num"] == "10"
        assert params["tbs"] == "qdr:w"

    async def test_no_time_restriction_for_all(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        items = await _provider(handler).search("x")
        assert items == []
        assert "tbs" not in seen[0].url.params

    async def test_items_parsed(self) -> None:
        payload = {
            "items": [
                {
                    "title": "Backend Engineer - Acme",
                    "link": "https://jobs.lever.co/acme/1",
                    "snippet": "Join us",
                    "displayLink": "jobs.lever.co",
                },
                {"title": "no link"},
            ]
        }
        provider = _provider(lambda request: httpx.Response(200, json=payload))
        items = await provider.search("x")
        assert len(items) == 1
        assert items[0].display_link == "jobs.lever.co"
        assert items[0].snippet == "Join us"

    async def test_http_error_status(self) -> None:
        provider = _provider(lambda request: httpx.Response(429, text="quota exceeded"))
        with pytest.raises(ProviderError) as exc_info:
            await provider.search("x")
        assert exc_info.value.status_code == 429
        assert "quota" in str(exc_info.value)

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(ProviderError, match="network"):
            await _provider(handler).search("x")

    async def test_invalid_json(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderError, match="invalid JSON"):
            await provider.search("x")

    async def test_missing_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GOOGLE_SEARCH_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_SEARCH_ENGINE_ID", raising=False)
        calls: list[httpx.Request] = []
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: calls.append(r) or httpx.Response(200))
        )
        provider = GoogleSearchProvider(client=client)
        assert not provider.configured
        with pytest.raises(MissingCredentialsError):
            await provider.search("x")
        assert calls == []

    def test_credentials_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_SEARCH_API_KEY", "k")
        monkeypatch.setenv("GOOGLE_SEARCH_ENGINE_ID", "e")
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        assert GoogleSearchProvider(client=client).configured
