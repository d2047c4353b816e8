"""
Catalog search session.

Wraps catalog searches for one deck edit session:

- Typed text is debounced. Each keystroke restarts a quiescence timer;
  only when the text has been stable for the delay is a page-1 request
  issued. Keystrokes cancel the *scheduled* request, never one in flight.
- Page navigation bypasses the timer and uses the last stable text.
- Every issued request gets a sequence number. A response is applied only
  if its number is still the latest issued, so a slow reply to an old
  query can never overwrite the results of a newer one.
- Results replace the session's current page; pages are not accumulated.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from edhforge.config import settings
from edhforge.models.card import CardRecord
from edhforge.models.failure import CatalogError
from edhforge.services.catalog_client import CatalogPage

logger = logging.getLogger(__name__)


class CardSearcher(Protocol):
    """Anything that can run a paged catalog search."""

    async def search_cards(self, query: str, page: int = 1) -> CatalogPage: ...


@dataclass(frozen=True)
class SearchResult:
    """The session's current page of results."""

    query: str = ""
    page: int = 1
    items: tuple[CardRecord, ...] = ()
    has_more: bool = False


@dataclass
class _SessionState:
    result: SearchResult = field(default_factory=SearchResult)
    loading: bool = False
    error: str | None = None


def dedupe_printings(cards: Iterable[CardRecord]) -> list[CardRecord]:
    """
    Drop repeated (name, set) pairs, keeping the first occurrence.

    Distinct printings of the same card stay distinct.
    """
    seen: set[tuple[str, str | None]] = set()
    unique: list[CardRecord] = []
    for card in cards:
        key = (card.name, card.set_code)
        if key in seen:
            continue
        seen.add(key)
        unique.append(card)
    return unique


class CatalogSearchSession:
    """
    Debounced, stale-safe catalog search state.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        catalog: CardSearcher,
        debounce_seconds: float | None = None,
    ) -> None:
        self._catalog = catalog
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._state = _SessionState()
        self._query = ""
        self._stable_query = ""
        self._latest_sequence = 0
        self._pending: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    # --- Queries ---

    @property
    def query(self) -> str:
        """Text as last typed (may not have been searched yet)."""
        return self._query

    @property
    def stable_query(self) -> str:
        """Text of the last search actually triggered."""
        return self._stable_query

    @property
    def result(self) -> SearchResult:
        return self._state.result

    @property
    def items(self) -> tuple[CardRecord, ...]:
        return self._state.result.items

    @property
    def has_more(self) -> bool:
        return self._state.result.has_more

    @property
    def current_page(self) -> int:
        return self._state.result.page

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def latest_sequence(self) -> int:
        return self._latest_sequence

    # --- Commands ---

    async def search(self, query: str, page: int = 1) -> SearchResult | None:
        """
        Search the catalog and replace the current results.

        Args:
            query: Search text; blank text clears results without a request
            page: 1-based page number

        Returns:
            The applied result, or None if a newer request superseded this one

        Raises:
            ValueError: If page is less than 1
            CatalogError: If this (still current) request failed
        """
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")

        # Any older request still in flight is now stale
        self._latest_sequence += 1
        sequence = self._latest_sequence

        if not query.strip():
            self._state = _SessionState(result=SearchResult(query=query, page=1))
            return self._state.result

        self._state.loading = True
        self._state.error = None
        logger.info("Catalog search issued: %r page %d", query, page, extra={"seq": sequence})

        try:
            response = await self._catalog.search_cards(query, page)
        except CatalogError as e:
            if sequence != self._latest_sequence:
                logger.debug("Discarded stale search failure (seq %d)", sequence)
                return None
            # Keep the query so the user can retry
            self._state = _SessionState(
                result=SearchResult(query=query, page=page),
                error=e.message,
            )
            raise
        finally:
            # Also reached on cancellation
            if sequence == self._latest_sequence:
                self._state.loading = False

        if sequence != self._latest_sequence:
            logger.debug(
                "Discarded stale search response (seq %d, latest %d)",
                sequence,
                self._latest_sequence,
            )
            return None

        result = SearchResult(
            query=query,
            page=page,
            items=tuple(dedupe_printings(response.items)),
            has_more=response.has_more,
        )
        self._state = _SessionState(result=result)
        return result

    def set_query(self, text: str) -> None:
        """
        Record typed text and restart the debounce timer.

        When the text stays unchanged for the debounce delay, page 1 is
        searched for it.
        """
        self._query = text
        if self._pending is not None:
            self._pending.cancel()
        task = asyncio.get_running_loop().create_task(self._search_when_stable(text))
        self._pending = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def go_to_page(self, page: int) -> SearchResult | None:
        """Fetch another page of the last stable query, without debouncing."""
        return await self.search(self._stable_query, page)

    async def wait_idle(self) -> None:
        """Wait for any scheduled or in-flight debounced search to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def close(self) -> None:
        """Cancel everything still scheduled or running."""
        for task in list(self._tasks):
            task.cancel()
        await self.wait_idle()
        self._pending = None

    async def _search_when_stable(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # From here on the request is in flight and must not be cancelled by typing
        self._pending = None
        self._stable_query = text
        try:
            await self.search(text, 1)
        except CatalogError as e:
            logger.warning("Debounced search failed for %r: %s", text, e.message)
