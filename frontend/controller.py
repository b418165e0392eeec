"""
Search Controller - Lifecycle of the client's one search session

State machine:

    idle -> searching -> [transitioning_out -> (exit delay) -> clear results
         -> loading -> (enter delay)] -> loading -> request -> ready | error

The transition block only runs when the previous session still shows
results. Both delays are plain scheduled sleeps.

Each session carries a token. After every suspension point the controller
checks that its token is still current; a session that was superseded by a
newer search stops there and its response is dropped unprocessed.
"""

import asyncio
import itertools
from typing import Awaitable, Callable, Optional, Protocol

import logfire
from pydantic import ValidationError

from frontend.api_client import TransportError
from frontend.models import DisplayResult, SearchQuery, SearchSession, SearchStatus

EXIT_DELAY_SECONDS = 0.3
ENTER_DELAY_SECONDS = 0.3
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."


class ResultsClient(Protocol):
    """Anything that fetches the raw result list for a SearchQuery (e.g. SearchApiClient)."""

    async def fetch_results(self, query: SearchQuery) -> list:
        ...


class SearchController:
    """Owns one SearchSession and drives it through its transitions."""

    def __init__(
        self,
        client: ResultsClient,
        exit_delay: float = EXIT_DELAY_SECONDS,
        enter_delay: float = ENTER_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_change: Optional[Callable[[SearchSession], None]] = None,
    ):
        self._client = client
        self.exit_delay = exit_delay
        self.enter_delay = enter_delay
        self._sleep = sleep
        self.on_change = on_change
        self._tokens = itertools.count(1)
        self._session = SearchSession()

    @property
    def session(self) -> SearchSession:
        return self._session

    async def search(self, text: str, category: str, supersede: bool = False) -> SearchSession:
        """
        Run one search to completion (or until superseded).

        Args:
            text: Query text; blank text is ignored
            category: Category to search
            supersede: Replace a search that is still in flight instead of
                ignoring the trigger

        Returns:
            The controller's session after this call finished its work
        """
        text = text.strip()
        if not text:
            return self._session
        if self._session.is_busy and not supersede:
            logfire.debug("Search already running, ignoring trigger for {query}", query=text)
            return self._session

        query = SearchQuery(text=text, category=category)
        token = self._begin(query)

        if self._session.results:
            self._fade_out(token)
            await self._sleep(self.exit_delay)
            if not self._is_current(token):
                return self._session
            self._clear_results(token)
            await self._sleep(self.enter_delay)
            if not self._is_current(token):
                return self._session
        else:
            self._start_loading(token)

        try:
            payload = await self._client.fetch_results(query)
        except TransportError as e:
            if self._is_current(token):
                logfire.warn("Search request failed: {error}", error=str(e), query=query.text)
                self._fail(token)
            return self._session

        if not self._is_current(token):
            logfire.debug("Discarding response for superseded search {query}", query=query.text)
            return self._session

        try:
            results = tuple(
                DisplayResult.from_wire(query, index, item) for index, item in enumerate(payload)
            )
        except ValidationError as e:
            logfire.warn(
                "Malformed search response: {error_count} validation errors",
                error_count=e.error_count(),
                query=query.text,
            )
            self._fail(token)
            return self._session

        self._succeed(token, results)
        return self._session

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin(self, query: SearchQuery) -> int:
        token = next(self._tokens)
        self._replace(token=token, query=query, status=SearchStatus.SEARCHING, error=None)
        return token

    def _fade_out(self, token: int) -> None:
        self._advance(token, status=SearchStatus.TRANSITIONING_OUT)

    def _clear_results(self, token: int) -> None:
        self._advance(token, status=SearchStatus.LOADING, results=())

    def _start_loading(self, token: int) -> None:
        self._advance(token, status=SearchStatus.LOADING)

    def _succeed(self, token: int, results) -> None:
        self._advance(token, status=SearchStatus.READY, results=results)

    def _fail(self, token: int) -> None:
        self._advance(token, status=SearchStatus.ERROR, results=(), error=SEARCH_FAILED_MESSAGE)

    # ------------------------------------------------------------------

    def _is_current(self, token: int) -> bool:
        return self._session.token == token

    def _advance(self, token: int, **changes) -> None:
        if not self._is_current(token):
            return
        self._replace(token=token, **changes)

    def _replace(self, **fields) -> None:
        self._session = self._session.model_copy(update=fields)
        if self.on_change is None:
            return
        try:
            self.on_change(self._session)
        except Exception:
            logfire.exception("Session listener failed")
