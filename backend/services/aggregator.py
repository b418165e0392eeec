"""
Aggregator Service - Concurrent Provider Fan-out

Runs every provider registered for a category in parallel and joins their
hits into one list. Each provider is isolated: a provider that raises, times
out, or returns garbage contributes nothing and is logged, while the others
still count.

Key Features:
- Parallel provider calls with asyncio.gather
- Per-provider timeout
- Per-provider and per-hit failure isolation
- Deterministic ordering: registration order, then provider order
"""

import asyncio
from typing import Any, List, Optional

import logfire
from pydantic import ValidationError

from backend import config
from backend.models.schema import ProviderHit
from backend.providers.base import ProviderAdapter, ProviderError
from backend.providers.registry import ProviderRegistry


class AggregationError(Exception):
    """Unexpected failure in the aggregation step itself."""


class Aggregator:
    """Service that fans a query out to every provider of a category."""

    def __init__(self, registry: ProviderRegistry, provider_timeout: Optional[float] = None):
        self.registry = registry
        self.provider_timeout = (
            config.PROVIDER_TIMEOUT_SECONDS if provider_timeout is None else provider_timeout
        )

    async def search(self, category: str, query: str) -> List[ProviderHit]:
        """
        Search every provider of a category concurrently.

        Args:
            category: Category name from the request
            query: Search text, passed unchanged to each provider

        Returns:
            Hits from all providers that succeeded, in registration order

        Raises:
            AggregationError: If the provider list itself cannot be resolved
        """
        try:
            providers = self.registry.providers_for(category)
        except Exception as e:
            raise AggregationError(f"Could not resolve providers for '{category}'") from e

        if not providers:
            logfire.info("No providers registered for {category}", category=category)
            return []

        outcomes = await asyncio.gather(
            *(self._search_provider(provider, query) for provider in providers)
        )

        hits: List[ProviderHit] = []
        for provider_hits in outcomes:
            hits.extend(provider_hits)

        logfire.info(
            "Aggregated {hit_count} hits from {provider_count} providers",
            hit_count=len(hits),
            provider_count=len(providers),
            category=category,
        )
        return hits

    async def _search_provider(self, provider: ProviderAdapter, query: str) -> List[ProviderHit]:
        """Run one provider; any failure becomes an empty list."""
        name = getattr(provider, "name", type(provider).__name__)
        try:
            raw_hits = await asyncio.wait_for(provider.search(query), timeout=self.provider_timeout)
        except asyncio.TimeoutError:
            logfire.warn(
                "Provider {provider} timed out after {timeout}s",
                provider=name,
                timeout=self.provider_timeout,
            )
            return []
        except ProviderError as e:
            logfire.warn("Provider {provider} failed: {error}", provider=name, error=str(e))
            return []
        except Exception as e:
            logfire.warn(
                "Provider {provider} raised {error_type}: {error}",
                provider=name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return []

        if not isinstance(raw_hits, list):
            logfire.warn(
                "Provider {provider} returned {result_type} instead of a list",
                provider=name,
                result_type=type(raw_hits).__name__,
            )
            return []

        return self._parse_hits(name, raw_hits)

    def _parse_hits(self, provider_name: str, raw_hits: List[Any]) -> List[ProviderHit]:
        """Validate raw hits, skipping the ones that do not fit ProviderHit."""
        hits = []
        for raw in raw_hits:
            if isinstance(raw, ProviderHit):
                hits.append(raw)
                continue
            try:
                hits.append(ProviderHit.model_validate(raw))
            except ValidationError as e:
                logfire.warn(
                    "Skipping invalid hit from {provider}: {error_count} validation errors",
                    provider=provider_name,
                    error_count=e.error_count(),
                )
        return hits
