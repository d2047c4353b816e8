"""
Card catalog client.

Async access to the card catalog (a backend proxy in front of Scryfall,
which handles rate limiting and caching). Every failure is mapped onto
CatalogError so callers deal with a single exception type.
"""

import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from edhforge.config import settings
from edhforge.models.card import CardRecord
from edhforge.models.failure import CatalogError, FailureKind
from edhforge.parsers.scryfall import parse_card, parse_search_page
from edhforge.services.http import build_client, response_message

logger = logging.getLogger(__name__)


@dataclass
class CatalogPage:
    """One page of search results."""

    items: list[CardRecord] = field(default_factory=list)
    has_more: bool = False


class CatalogClient:
    """
    Async client for catalog search and card lookup.

    Usage:
        async with CatalogClient() as catalog:
            page = await catalog.search_cards("t:legendary elf", page=1)
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url or settings.catalog_url
        self._client = client or build_client(self.base_url)
        self._owns_client = client is None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        action: str = "search cards",
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = response_message(e.response)
            logger.warning(
                "Catalog request failed: %s %s",
                path,
                message,
                extra={"status_code": e.response.status_code},
            )
            raise CatalogError(
                f"Failed to {action}: {message}",
                kind=FailureKind.CATALOG_QUERY_FAILED,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning("Catalog unreachable: %s %s", path, e)
            raise CatalogError(
                f"Failed to {action}: {e}",
                kind=FailureKind.CATALOG_UNAVAILABLE,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise CatalogError(
                "Catalog returned a malformed response.",
                kind=FailureKind.INVALID_PAYLOAD,
            ) from e

    async def search_cards(self, query: str, page: int = 1) -> CatalogPage:
        """
        Run a catalog search.

        Args:
            query: Search text (Scryfall syntax is passed through)
            page: 1-based page number

        Returns:
            CatalogPage in catalog order (not deduplicated)

        Raises:
            CatalogError: On HTTP, transport or payload failure
        """
        data = await self._get_json("/cards/searchCards", params={"q": query, "page": page})
        try:
            items, has_more = parse_search_page(data)
        except ValidationError as e:
            logger.warning("Invalid search payload for %r: %s", query, e.error_count())
            raise CatalogError(
                "Catalog returned cards in an unexpected shape.",
                kind=FailureKind.INVALID_PAYLOAD,
            ) from e
        return CatalogPage(items=items, has_more=has_more)

    async def get_card(self, card_id: str) -> CardRecord:
        """Look up a card by catalog id."""
        data = await self._get_json(f"/cards/{card_id}", action="load card")
        return self._parse_card(data)

    async def get_card_by_name(self, name: str) -> CardRecord:
        """Look up a card by exact name."""
        data = await self._get_json(f"/cards/name/{quote(name, safe='')}", action="load card")
        return self._parse_card(data)

    def _parse_card(self, data: Any) -> CardRecord:
        try:
            return parse_card(data)
        except ValidationError as e:
            raise CatalogError(
                "Catalog returned a card in an unexpected shape.",
                kind=FailureKind.INVALID_PAYLOAD,
            ) from e
