"""
Pydantic Schemas - All Data Models

Consolidated schema definitions for the search API.

Schema Categories:
- Categories: Known search categories
- Provider: Raw, provider-shaped hits
- Response: Canonical results and error payloads sent over the wire
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# CATEGORIES
# ============================================================================

class Category(str, Enum):
    """Search categories the frontend can ask for."""

    GAMES = "games"
    MOVIES = "movies"


# ============================================================================
# PROVIDER SCHEMAS
# ============================================================================

class ProviderHit(BaseModel):
    """Raw hit returned by a provider adapter.

    Providers may attach any extra fields they like; only the fields below
    are read when building the canonical result.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(None, description="Release title as shown by the provider")
    page: Optional[str] = Field(None, description="URL of the provider's detail page")
    type: str = Field(..., description="Category/subtype tag set by the provider")
    links: Optional[List[str]] = Field(None, description="Download link URLs")


# ============================================================================
# API RESPONSE SCHEMAS
# ============================================================================

class CanonicalResult(BaseModel):
    """Unified result shape returned by GET /api/results.

    Field names are part of the wire contract and must not change.
    """

    title: str = Field(..., description="Release title, 'No title' when the provider gave none")
    provider: str = Field(..., description="Hostname of the source page, or 'unknown'")
    page: str = Field(..., description="Full URL of the source page, may be empty")
    type: str = Field(..., description="Category/subtype tag passed through from the provider")
    links: List[str] = Field(default_factory=list, description="Download link URLs")


class ErrorResponse(BaseModel):
    """Error payload shared by every non-success response."""

    error: str = Field(..., description="Flat, user-facing error message")
