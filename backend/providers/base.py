"""
Provider Contract - Interface every search adapter implements

An adapter takes a query string and returns a list of raw hits (dicts or
ProviderHit objects), or raises ProviderError.
"""

from typing import Any, List, Protocol, runtime_checkable


class ProviderError(Exception):
    """Raised by an adapter when its upstream source cannot be searched."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


@runtime_checkable
class ProviderAdapter(Protocol):
    """Capability interface for one search source."""

    name: str

    async def search(self, query: str) -> List[Any]:
        ...
