"""
Normalizer - Provider hit to canonical result

Maps every raw provider hit into the single result shape the frontend
renders. Pure and total: missing or unparseable fields fall back to fixed
defaults instead of raising.
"""

from typing import Optional
from urllib.parse import urlsplit

from backend.models.schema import CanonicalResult, ProviderHit

NO_TITLE = "No title"
UNKNOWN_PROVIDER = "unknown"


def provider_from_page(page: Optional[str]) -> str:
    """Return the hostname of a page URL, or 'unknown' if it has none."""
    if not page:
        return UNKNOWN_PROVIDER
    try:
        parts = urlsplit(page)
        hostname = parts.hostname
    except ValueError:
        return UNKNOWN_PROVIDER
    if not parts.scheme or not hostname:
        return UNKNOWN_PROVIDER
    return hostname


def normalize(hit: ProviderHit) -> CanonicalResult:
    """Build the canonical result for one provider hit."""
    return CanonicalResult(
        title=hit.title or NO_TITLE,
        provider=provider_from_page(hit.page),
        page=hit.page or "",
        type=hit.type,
        links=list(hit.links or []),
    )
