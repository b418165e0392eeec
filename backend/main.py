"""
Main Application - TorDemand Search API

Single entry point for the FastAPI application. Fans a query out to every
provider registered for the requested category and returns one list of
results in a canonical shape.

Architecture:
1. User submits query via GET /api/results?q=...&type=...
2. Aggregator queries every provider of the category in parallel
3. Failing providers are logged and skipped
4. Normalizer maps each raw hit into a CanonicalResult
5. Response returned to user

Errors are always returned as {"error": "<message>"}.
"""

from typing import List, Optional

import logfire
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend import config
from backend.models.schema import CanonicalResult, Category, ErrorResponse
from backend.providers.registry import ProviderRegistry, build_default_registry
from backend.services.aggregator import Aggregator
from backend.services.normalizer import normalize

MISSING_QUERY_MESSAGE = "Missing search query"
SEARCH_ERROR_MESSAGE = "Search error"

# Configure Logfire for tracing; nothing is sent without a token
logfire.configure(send_to_logfire="if-token-present", service_name="tordemand-api")


def create_app(
    registry: Optional[ProviderRegistry] = None,
    provider_timeout: Optional[float] = None,
) -> FastAPI:
    """Build the FastAPI application around a provider registry."""
    registry = registry if registry is not None else build_default_registry()
    aggregator = Aggregator(registry, provider_timeout=provider_timeout)

    app = FastAPI(
        title="TorDemand Search API",
        description="Aggregated download-link search across independent providers",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_ORIGIN],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request, exc: StarletteHTTPException):
        """Render every HTTP error with the shared error payload."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.get("/")
    async def root():
        """Health check and API information."""
        return {
            "status": "active",
            "service": "TorDemand Search API",
            "categories": [category.value for category in Category],
            "endpoints": {
                "results": "/api/results?q=<text>&type=<category>",
            },
        }

    @app.get(
        "/api/results",
        response_model=List[CanonicalResult],
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def results(
        q: Optional[str] = None,
        category: Optional[str] = Query(None, alias="type"),
    ):
        """Search every provider of a category and return canonical results.

        Flow:
        1. Reject a missing or blank query with 400
        2. Fan out to the category's providers (unknown category -> no providers)
        3. Normalize each hit, keeping provider order

        Returns:
            List of CanonicalResult, possibly empty
        """
        if not q or not q.strip():
            raise HTTPException(status_code=400, detail=MISSING_QUERY_MESSAGE)

        try:
            hits = await aggregator.search(category or "", q)
            return [normalize(hit) for hit in hits]
        except HTTPException:
            raise
        except Exception as e:
            logfire.exception("Error searching {category} for {query}", category=category, query=q)
            raise HTTPException(status_code=500, detail=SEARCH_ERROR_MESSAGE) from e

    return app


app = create_app()

# Instrument FastAPI with Logfire
logfire.instrument_fastapi(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
