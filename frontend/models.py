"""
Client Models - Search session and link types used by the frontend

- SearchQuery: One user-initiated search, frozen once dispatched
- SearchStatus / SearchSession: Lifecycle state of the current search
- LinkKind / Link: Download link classified by URL shape
- DisplayResult: Canonical result ready to render, with a unique key
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field


class SearchStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    TRANSITIONING_OUT = "transitioning_out"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class LinkKind(str, Enum):
    MAGNET = "magnet"
    TORRENT_FILE = "torrent_file"
    REDIRECT = "redirect"


class Link(BaseModel):
    """Download link with its activation behavior fixed at creation."""

    model_config = ConfigDict(frozen=True)

    url: str
    kind: LinkKind


def classify_link(url: str) -> Link:
    """Classify a raw link URL: magnet, .torrent file, or plain redirect."""
    if url.lower().startswith("magnet:"):
        return Link(url=url, kind=LinkKind.MAGNET)

    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    if path.lower().endswith(".torrent"):
        return Link(url=url, kind=LinkKind.TORRENT_FILE)

    return Link(url=url, kind=LinkKind.REDIRECT)


class SearchQuery(BaseModel):
    """Query text and category for one search."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    category: str


class WireResult(BaseModel):
    """One item of the GET /api/results response."""

    title: str
    provider: str
    page: str
    type: str
    links: List[str] = Field(default_factory=list)


class DisplayResult(BaseModel):
    """Canonical result plus a display key and classified links."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    provider: str
    page: str
    type: str
    links: Tuple[Link, ...] = ()

    @classmethod
    def from_wire(cls, query: SearchQuery, index: int, item: Dict[str, Any]) -> "DisplayResult":
        """Build a display result from one item of the API response.

        Raises:
            pydantic.ValidationError: If the item does not have the wire shape
        """
        wire = WireResult.model_validate(item)
        return cls(
            key=f"{query.text}-{index}",
            title=wire.title,
            provider=wire.provider,
            page=wire.page,
            type=wire.type,
            links=tuple(classify_link(url) for url in wire.links),
        )


class SearchSession(BaseModel):
    """State of the one search a controller owns.

    Never edited in place; the controller swaps in a new copy on every
    transition.
    """

    model_config = ConfigDict(frozen=True)

    token: int = 0
    query: Optional[SearchQuery] = None
    status: SearchStatus = SearchStatus.IDLE
    results: Tuple[DisplayResult, ...] = ()
    error: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.status in (SearchStatus.SEARCHING, SearchStatus.LOADING)
