"""
Deck persistence client.

Creates, reads, updates and deletes decks on the backend. The backend
recomputes stats on every create/update and returns them with the deck.

Error convention: a deck-shape validation failure arrives as a single
message with a fixed prefix ("Deck validation failed: a, b, c"). It is
split into individual messages; anything else is one opaque message.
"""

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from edhforge.config import DECK_VALIDATION_PREFIX, settings
from edhforge.models.deck import Deck
from edhforge.models.failure import FailureKind, PersistenceError
from edhforge.parsers.deck_payload import deck_from_payload, deck_to_payload
from edhforge.services.auth_session import AuthSession
from edhforge.services.http import build_client, response_message

logger = logging.getLogger(__name__)


def split_validation_messages(message: str) -> list[str]:
    """
    Split a backend error message into individual messages.

    Examples:
        >>> split_validation_messages("Deck validation failed: Too few cards, No lands")
        ['Too few cards', 'No lands']
        >>> split_validation_messages("Server exploded")
        ['Server exploded']
    """
    if DECK_VALIDATION_PREFIX not in message:
        return [message]
    remainder = message.split(DECK_VALIDATION_PREFIX, 1)[1]
    return [part for part in remainder.split(", ") if part]


def _persistence_error(message: str, status_code: int | None = None) -> PersistenceError:
    messages = split_validation_messages(message)
    kind = (
        FailureKind.DECK_VALIDATION_FAILED
        if DECK_VALIDATION_PREFIX in message
        else FailureKind.PERSISTENCE_FAILED
    )
    return PersistenceError(message, messages=messages, kind=kind, status_code=status_code)


class DeckPersistenceClient:
    """
    Async client for the deck backend.

    Sends the current user's bearer token (if any) with every request.
    """

    def __init__(
        self,
        auth: AuthSession | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.auth = auth
        self.base_url = base_url or settings.backend_url
        self._client = client or build_client(self.base_url)
        self._owns_client = client is None

    async def __aenter__(self) -> "DeckPersistenceClient":
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

    async def _request(self, method: str, path: str, json: Any | None = None) -> Any:
        headers = self.auth.auth_headers() if self.auth is not None else {}
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = response_message(e.response)
            logger.warning(
                "Deck request failed: %s %s: %s",
                method,
                path,
                message,
                extra={"status_code": e.response.status_code},
            )
            raise _persistence_error(message, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.warning("Deck backend unreachable: %s %s: %s", method, path, e)
            raise _persistence_error(str(e) or type(e).__name__) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise _persistence_error("Deck backend returned a malformed response.") from e

    def _parse_deck(self, data: Any) -> Deck:
        try:
            return deck_from_payload(data)
        except ValidationError as e:
            raise _persistence_error("Deck backend returned a deck in an unexpected shape.") from e

    async def create_deck(self, deck: Deck) -> Deck:
        """Create a deck; the result carries the assigned id and server stats."""
        data = await self._request("POST", "/decks", json=deck_to_payload(deck))
        created = self._parse_deck(data)
        logger.info("Created deck %s (%s)", created.name, created.id)
        return created

    async def update_deck(self, deck_id: str, deck: Deck) -> Deck:
        """Replace a stored deck; the result carries fresh server stats."""
        data = await self._request("PUT", f"/decks/{deck_id}", json=deck_to_payload(deck))
        updated = self._parse_deck(data)
        logger.info("Updated deck %s (%s)", updated.name, deck_id)
        return updated

    async def get_deck(self, deck_id: str) -> Deck:
        return self._parse_deck(await self._request("GET", f"/decks/{deck_id}"))

    async def list_decks(self) -> list[Deck]:
        """All decks belonging to the current user."""
        data = await self._request("GET", "/decks")
        if not isinstance(data, list):
            raise _persistence_error("Deck backend returned a deck list in an unexpected shape.")
        return [self._parse_deck(item) for item in data]

    async def delete_deck(self, deck_id: str) -> None:
        await self._request("DELETE", f"/decks/{deck_id}")
        logger.info("Deleted deck %s", deck_id)
