"""
HTTP JSON Provider - Generic adapter for search sources that speak JSON

Queries an endpoint with `?q=<query>` and expects either a JSON list of hits
or an object with a "results" list. Any transport or shape problem is raised
as ProviderError so the aggregator can isolate it.
"""

from typing import Any, List, Optional
from urllib.parse import urlparse

import httpx

from backend.providers.base import ProviderError


def endpoint_name(endpoint: str) -> str:
    """Provider name for an endpoint, e.g. 'api.example/fitgirl'.

    Endpoints sharing a host stay distinct through their path.
    """
    parsed = urlparse(endpoint)
    if not parsed.hostname:
        return endpoint
    return f"{parsed.hostname}{parsed.path.rstrip('/')}"


class HttpJsonProvider:
    """Provider adapter backed by a JSON search endpoint."""

    def __init__(
        self,
        name: str,
        endpoint: str,
        query_param: str = "q",
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.endpoint = endpoint
        self.query_param = query_param
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_endpoint(cls, endpoint: str, **kwargs) -> "HttpJsonProvider":
        """Create a provider named after the endpoint's host and path."""
        return cls(name=endpoint_name(endpoint), endpoint=endpoint, **kwargs)

    async def search(self, query: str) -> List[Any]:
        """Execute search against the configured endpoint."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.endpoint, params={self.query_param: query})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(self.name, "response is not valid JSON") from e

        if isinstance(payload, dict):
            payload = payload.get("results")
        if not isinstance(payload, list):
            raise ProviderError(self.name, "response has no result list")

        return payload
