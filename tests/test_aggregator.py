import asyncio

import pytest

from backend.models.schema import ProviderHit
from backend.providers.base import ProviderError
from backend.providers.registry import ProviderRegistry
from backend.services.aggregator import AggregationError, Aggregator
from conftest import StubProvider


def _hit(title: str) -> dict:
    return {"title": title, "page": f"https://{title.lower()}.example/p", "type": "game"}


def _registry(*providers) -> ProviderRegistry:
    registry = ProviderRegistry()
    for provider in providers:
        registry.register("games", provider)
    return registry


@pytest.mark.asyncio
async def test_search_concatenates_in_registration_order() -> None:
    first = StubProvider("first", hits=[_hit("A1"), _hit("A2")], delay=0.02)
    second = StubProvider("second", hits=[_hit("B1")])
    aggregator = Aggregator(_registry(first, second))

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["A1", "A2", "B1"]
    assert first.calls == ["zelda"]
    assert second.calls == ["zelda"]


@pytest.mark.asyncio
async def test_search_isolates_failing_provider() -> None:
    good = StubProvider("good", hits=[_hit("Zelda")])
    broken = StubProvider("broken", error=ProviderError("broken", "HTTP 503"))
    crashing = StubProvider("crashing", error=RuntimeError("boom"))
    aggregator = Aggregator(_registry(broken, good, crashing))

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["Zelda"]


@pytest.mark.asyncio
async def test_search_all_providers_failing_yields_empty_list() -> None:
    aggregator = Aggregator(
        _registry(
            StubProvider("one", error=ProviderError("one", "down")),
            StubProvider("two", error=ValueError("bad")),
        )
    )

    assert await aggregator.search("games", "zelda") == []


@pytest.mark.asyncio
async def test_search_runs_providers_concurrently() -> None:
    second_started = asyncio.Event()

    class WaitsForSecond:
        name = "waits"

        async def search(self, query):
            await second_started.wait()
            return [_hit("First")]

    class SignalsStart:
        name = "signals"

        async def search(self, query):
            second_started.set()
            return [_hit("Second")]

    aggregator = Aggregator(_registry(WaitsForSecond(), SignalsStart()), provider_timeout=1.0)

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["First", "Second"]


@pytest.mark.asyncio
async def test_search_drops_provider_that_times_out() -> None:
    slow = StubProvider("slow", hits=[_hit("Slow")], delay=1.0)
    fast = StubProvider("fast", hits=[_hit("Fast")])
    aggregator = Aggregator(_registry(slow, fast), provider_timeout=0.05)

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["Fast"]


@pytest.mark.asyncio
async def test_search_unknown_category_returns_empty() -> None:
    provider = StubProvider("games", hits=[_hit("Zelda")])
    aggregator = Aggregator(_registry(provider))

    assert await aggregator.search("books", "zelda") == []
    assert provider.calls == []


@pytest.mark.asyncio
async def test_search_skips_invalid_hits_but_keeps_valid_ones() -> None:
    provider = StubProvider(
        "mixed",
        hits=[
            _hit("Good"),
            {"title": "No type"},
            "not a dict",
            {"title": "Bad links", "type": "game", "links": "magnet:?xt=1"},
            ProviderHit(title="Model", type="game"),
        ],
    )
    aggregator = Aggregator(_registry(provider))

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["Good", "Model"]


@pytest.mark.asyncio
async def test_search_ignores_provider_returning_non_list() -> None:
    class DictProvider:
        name = "dict"

        async def search(self, query):
            return {"results": [_hit("Hidden")]}

    good = StubProvider("good", hits=[_hit("Shown")])
    aggregator = Aggregator(_registry(DictProvider(), good))

    hits = await aggregator.search("games", "zelda")

    assert [hit.title for hit in hits] == ["Shown"]


@pytest.mark.asyncio
async def test_search_raises_aggregation_error_for_broken_registry() -> None:
    class BrokenRegistry:
        def providers_for(self, category):
            raise KeyError(category)

    aggregator = Aggregator(BrokenRegistry())

    with pytest.raises(AggregationError):
        await aggregator.search("games", "zelda")
