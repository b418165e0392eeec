import httpx
import pytest

from backend.providers.base import ProviderError
from backend.providers.http_json import HttpJsonProvider


def _provider(handler) -> HttpJsonProvider:
    return HttpJsonProvider(
        name="games.example",
        endpoint="https://games.example/api/search",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_search_returns_list_payload() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[{"title": "Zelda", "type": "game"}])

    hits = await _provider(handler).search("zelda")

    assert hits == [{"title": "Zelda", "type": "game"}]
    assert calls[0].url.host == "games.example"
    assert calls[0].url.params["q"] == "zelda"


@pytest.mark.asyncio
async def test_search_unwraps_results_object() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [{"title": "Zelda", "type": "game"}], "total": 1})

    assert await _provider(handler).search("zelda") == [{"title": "Zelda", "type": "game"}]


@pytest.mark.asyncio
async def test_search_http_error_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    with pytest.raises(ProviderError, match="HTTP 503"):
        await _provider(handler).search("zelda")


@pytest.mark.asyncio
async def test_search_connection_error_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProviderError, match="request failed"):
        await _provider(handler).search("zelda")


@pytest.mark.asyncio
async def test_search_invalid_json_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>blocked</html>")

    with pytest.raises(ProviderError, match="not valid JSON"):
        await _provider(handler).search("zelda")


@pytest.mark.asyncio
async def test_search_object_without_results_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "rate limited"})

    with pytest.raises(ProviderError, match="no result list"):
        await _provider(handler).search("zelda")


def test_from_endpoint_names_provider_after_host_and_path() -> None:
    provider = HttpJsonProvider.from_endpoint("https://Fit.Example:8443/search", timeout=5.0)

    assert provider.name == "fit.example/search"
    assert provider.timeout == 5.0


def test_endpoints_on_same_host_get_distinct_names() -> None:
    fitgirl = HttpJsonProvider.from_endpoint("https://api.example/fitgirl")
    dodi = HttpJsonProvider.from_endpoint("https://api.example/dodi/")

    assert fitgirl.name == "api.example/fitgirl"
    assert dodi.name == "api.example/dodi"


def test_endpoint_without_path_is_named_after_host() -> None:
    assert HttpJsonProvider.from_endpoint("https://api.example").name == "api.example"
