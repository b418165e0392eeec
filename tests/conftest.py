import asyncio
from typing import Any, List, Optional

import logfire
import pytest

logfire.configure(send_to_logfire=False, console=False)


class StubProvider:
    """Provider adapter with canned hits or a canned failure."""

    def __init__(
        self,
        name: str,
        hits: Optional[List[Any]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.hits = hits or []
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    async def search(self, query: str) -> List[Any]:
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.hits)


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def zelda_hit() -> dict:
    return {
        "title": "Zelda",
        "page": "https://a.example/p",
        "type": "game",
        "links": ["magnet:?xt=1"],
    }
