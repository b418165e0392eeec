"""
Provider Registry - Explicit Category Registration

Maps each search category to the ordered list of provider adapters that can
search it. Providers are added by registration, never discovered implicitly.

Usage:
    from backend.providers.registry import ProviderRegistry

    registry = ProviderRegistry()
    registry.register("games", my_games_provider)
    registry.providers_for("games")   # [my_games_provider]
    registry.providers_for("books")   # [] - unknown category is not an error
"""

import inspect
from typing import Dict, List

import logfire

from backend import config
from backend.models.schema import Category
from backend.providers.base import ProviderAdapter
from backend.providers.http_json import HttpJsonProvider


class ProviderRegistry:
    """Registry of provider adapters keyed by category."""

    def __init__(self):
        self._providers: Dict[str, List[ProviderAdapter]] = {}

    def register(self, category: str, provider: ProviderAdapter) -> ProviderAdapter:
        """
        Register a provider for a category.

        Args:
            category: Category name (e.g. "games")
            provider: Adapter exposing `name` and an async `search(query)`

        Returns:
            The registered provider, so the call can be chained
        """
        name = getattr(provider, "name", None)
        if not isinstance(name, str) or not name:
            raise ValueError("Provider must have a non-empty name")

        search = getattr(provider, "search", None)
        if search is None or not inspect.iscoroutinefunction(search):
            raise ValueError(f"Provider '{name}' must define an async search(query) method")

        key = category.value if isinstance(category, Category) else category
        providers = self._providers.setdefault(key, [])
        if any(existing.name == name for existing in providers):
            raise ValueError(f"Provider '{name}' is already registered for '{key}'")

        providers.append(provider)
        return provider

    def providers_for(self, category: str) -> List[ProviderAdapter]:
        """Providers for a category in registration order; empty when unknown."""
        return list(self._providers.get(category, []))

    def categories(self) -> List[str]:
        """List all categories with at least one provider."""
        return list(self._providers.keys())


def build_default_registry() -> ProviderRegistry:
    """Build the registry from the provider endpoints in the environment."""
    registry = ProviderRegistry()

    configured = {
        Category.GAMES: config.GAMES_PROVIDER_URLS,
        Category.MOVIES: config.MOVIES_PROVIDER_URLS,
    }
    for category, endpoints in configured.items():
        for endpoint in endpoints:
            provider = HttpJsonProvider.from_endpoint(endpoint, timeout=config.PROVIDER_TIMEOUT_SECONDS)
            try:
                registry.register(category.value, provider)
            except ValueError as e:
                logfire.warn("Skipping provider endpoint {endpoint}: {error}", endpoint=endpoint, error=str(e))

    return registry
