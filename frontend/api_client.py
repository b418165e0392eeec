"""
Search API Client - HTTP access to the TorDemand backend

Thin async wrapper around GET /api/results. Every failure (connection,
timeout, non-2xx status, body that is not a JSON list) is raised as
TransportError so the controller has a single error path.
"""

import os
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv

from frontend.models import SearchQuery

load_dotenv()

API_URL = os.getenv("API_URL", f"http://localhost:{os.getenv('PORT', '8000')}")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "30"))


class TransportError(Exception):
    """The search request did not produce a usable response."""


class SearchApiClient:
    """Async client for the search endpoint."""

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch_results(self, query: SearchQuery) -> List[Dict[str, Any]]:
        """Call backend API and return the raw result list."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/api/results",
                    params={"type": query.category, "q": query.text},
                )
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as e:
                raise TransportError(f"API returned {e.response.status_code}") from e
            except httpx.TimeoutException as e:
                raise TransportError("Request timed out") from e
            except httpx.HTTPError as e:
                raise TransportError(f"Connection error: {e}") from e
            except ValueError as e:
                raise TransportError("Response is not valid JSON") from e

        if not isinstance(payload, list):
            raise TransportError("Response is not a result list")
        return payload

    async def is_online(self) -> bool:
        """Health check against the backend root endpoint."""
        async with httpx.AsyncClient(timeout=2.0, transport=self._transport) as client:
            try:
                response = await client.get(f"{self.base_url}/")
            except httpx.HTTPError:
                return False
        return response.status_code == 200
