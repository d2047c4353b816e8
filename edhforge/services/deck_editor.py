"""
Deck edit session.

One DeckEditSession per deck being edited. It owns the composer, the deck
name and sideboard, and the stats currently on display, and drives load
and save round-trips through the persistence client.

Stats policy:
- recomputed locally after every mutation and after a load;
- after a successful save, the server's stats are shown verbatim, unless
  the deck was edited while the save was in flight.

Saves are serialized per session: while one is outstanding, `saving` is
True and a second `save()` raises SaveInProgressError at once. Callers
render that as a disabled action rather than queueing.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Protocol

from edhforge.models.card import CardRecord
from edhforge.models.deck import Commander, Deck, DeckEntry
from edhforge.models.failure import (
    DeckRuleError,
    FailureKind,
    PersistenceError,
    SaveInProgressError,
)
from edhforge.models.stats import DeckStats
from edhforge.services.deck_composer import DeckComposer, Sideboard

logger = logging.getLogger(__name__)


class DeckStore(Protocol):
    async def create_deck(self, deck: Deck) -> Deck: ...

    async def update_deck(self, deck_id: str, deck: Deck) -> Deck: ...

    async def get_deck(self, deck_id: str) -> Deck: ...


class CardLookup(Protocol):
    async def get_card_by_name(self, name: str) -> CardRecord: ...


async def _refresh_entry(catalog: CardLookup, entry: DeckEntry) -> DeckEntry:
    card = await catalog.get_card_by_name(entry.name)
    return replace(DeckEntry.from_card(card, count=entry.count), card_id=entry.card_id)


class DeckEditSession:
    """Editing state for a single deck."""

    def __init__(self, store: DeckStore, catalog: CardLookup | None = None) -> None:
        self._store = store
        self._catalog = catalog
        self.name = ""
        self.deck_id: str | None = None
        self.composer = DeckComposer()
        self.sideboard = Sideboard()
        self.stats: DeckStats = self.composer.stats()
        self.validation_errors: list[str] = []
        self._saving = False
        self._revision = 0

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def commander(self) -> Commander | None:
        return self.composer.commander

    def _refresh_stats(self) -> None:
        self._revision += 1
        self.stats = self.composer.stats()

    # --- Editing commands ---

    def select_commander(self, card: CardRecord) -> Commander:
        commander = self.composer.select_commander(card)
        self._refresh_stats()
        return commander

    def clear_commander(self) -> None:
        self.composer.set_commander(None)
        self._refresh_stats()

    def add_card(self, card: CardRecord) -> DeckEntry:
        entry = self.composer.add_card(card)
        self._refresh_stats()
        return entry

    def remove_card(self, card_id: str, remove_all: bool = False) -> None:
        self.composer.remove_card(card_id, remove_all=remove_all)
        self._refresh_stats()

    def add_to_sideboard(self, card: CardRecord) -> DeckEntry:
        return self.sideboard.add_card(card)

    def remove_from_sideboard(self, card_id: str, remove_all: bool = False) -> None:
        self.sideboard.remove_card(card_id, remove_all=remove_all)

    def reset(self) -> None:
        """Start over with an empty, unsaved deck."""
        self.name = ""
        self.deck_id = None
        self.composer = DeckComposer()
        self.sideboard = Sideboard()
        self.validation_errors = []
        self._refresh_stats()

    def to_deck(self) -> Deck:
        """Snapshot the session as a Deck."""
        return self.composer.to_deck(
            name=self.name,
            deck_id=self.deck_id,
            sideboard=self.sideboard.entries(),
            stats=self.stats,
        )

    # --- Persistence ---

    async def load(self, deck_id: str, refresh_cards: bool = False) -> Deck:
        """
        Load a stored deck into this session.

        Args:
            deck_id: Backend id of the deck
            refresh_cards: Re-fetch mainboard display fields from the catalog
                (counts and card ids are kept from the stored deck)

        Raises:
            PersistenceError: If the backend cannot return the deck
            CatalogError: If refreshing a card fails
        """
        deck = await self._store.get_deck(deck_id)

        mainboard = deck.mainboard
        if refresh_cards and self._catalog is not None:
            catalog = self._catalog
            mainboard = list(
                await asyncio.gather(*(_refresh_entry(catalog, e) for e in mainboard))
            )

        self.name = deck.name
        self.deck_id = deck.id or deck_id
        self.composer = DeckComposer(commander=deck.commander, mainboard=mainboard)
        self.sideboard = Sideboard(deck.sideboard)
        self.validation_errors = []
        self._refresh_stats()
        logger.info("Loaded deck %s (%s)", deck.name, self.deck_id)
        return self.to_deck()

    async def save(self) -> Deck:
        """
        Create or update the deck on the backend.

        On success the session adopts the assigned id and the server's
        stats. On failure the in-memory deck is untouched and the
        individual error messages are kept in `validation_errors`.

        Raises:
            SaveInProgressError: If a save is already outstanding
            DeckRuleError: If the deck has no name or no commander
            PersistenceError: If the backend rejects or fails the save
        """
        if self._saving:
            raise SaveInProgressError()
        if not self.name.strip():
            raise DeckRuleError(
                kind=FailureKind.MISSING_DECK_NAME,
                message="Deck name cannot be empty.",
            )
        if self.composer.commander is None:
            raise DeckRuleError(
                kind=FailureKind.NO_COMMANDER_SELECTED,
                message="Please select a commander.",
            )

        self._saving = True
        self.validation_errors = []
        revision = self._revision
        try:
            deck = self.to_deck()
            if self.deck_id is not None:
                saved = await self._store.update_deck(self.deck_id, deck)
            else:
                saved = await self._store.create_deck(deck)
        except PersistenceError as e:
            self.validation_errors = list(e.messages)
            logger.warning("Failed to save deck %s: %s", self.name, e.message)
            raise
        finally:
            self._saving = False

        if saved.id is not None:
            self.deck_id = saved.id
        # Server stats only describe the deck as it was sent
        if saved.stats is not None and revision == self._revision:
            self.stats = saved.stats
        logger.info("Saved deck %s (%s)", self.name, self.deck_id)
        return saved
