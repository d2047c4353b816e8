"""
Deck composition service.

DeckComposer owns a deck's commander and mainboard and is the only place
they are mutated. Every command either succeeds completely or raises a
DeckRuleError and leaves the deck untouched.

Rules enforced on add:
1. A commander must be selected.
2. The card's color identity must fit inside the commander's.
3. The card must be legal in the commander format.
4. Only basic lands may have more than one copy.

The 99-card mainboard size is not enforced here; it is reported through
DeckStats.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from edhforge.models.card import CardRecord
from edhforge.models.deck import Commander, Deck, DeckEntry
from edhforge.models.failure import DeckRuleError, FailureKind
from edhforge.models.legality import check_legality, is_within_identity
from edhforge.models.stats import DeckStats
from edhforge.services.commander import can_be_commander
from edhforge.services.deck_stats import compute_stats

logger = logging.getLogger(__name__)


def _index_entries(entries: Iterable[DeckEntry]) -> dict[str, DeckEntry]:
    board: dict[str, DeckEntry] = {}
    for entry in entries:
        if entry.card_id in board:
            raise ValueError(f"Duplicate entry for card id {entry.card_id}")
        board[entry.card_id] = entry
    return board


def _add_copy(board: dict[str, DeckEntry], card: CardRecord) -> DeckEntry:
    """Singleton rule: a second copy is allowed only for basic lands."""
    existing = board.get(card.id)
    if existing is None:
        entry = DeckEntry.from_card(card)
        board[card.id] = entry
        logger.debug("Added %s", card.name)
        return entry

    if not card.is_basic_land:
        raise DeckRuleError(
            kind=FailureKind.DUPLICATE_NON_BASIC,
            message=f'Only one copy of "{card.name}" allowed (excluding basic lands).',
            card_name=card.name,
        )
    updated = replace(existing, count=existing.count + 1)
    board[card.id] = updated
    logger.debug("Incremented %s to %d", card.name, updated.count)
    return updated


def _remove_copy(board: dict[str, DeckEntry], card_id: str, remove_all: bool) -> None:
    entry = board.get(card_id)
    if entry is None:
        return

    if remove_all or entry.count == 1:
        del board[card_id]
        logger.debug("Removed %s", entry.name)
    else:
        board[card_id] = replace(entry, count=entry.count - 1)
        logger.debug("Decremented %s to %d", entry.name, entry.count - 1)


class DeckComposer:
    """
    Mutable commander + mainboard state for one deck edit session.

    Single writer: a composer must not be mutated from two call sites
    concurrently.
    """

    def __init__(
        self,
        commander: Commander | None = None,
        mainboard: Iterable[DeckEntry] = (),
    ) -> None:
        self._commander = commander
        self._mainboard = _index_entries(mainboard)

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckComposer":
        """Hydrate a composer from a stored deck."""
        return cls(commander=deck.commander, mainboard=deck.mainboard)

    # --- Queries ---

    @property
    def commander(self) -> Commander | None:
        return self._commander

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._mainboard

    def __len__(self) -> int:
        """Number of distinct cards in the mainboard."""
        return len(self._mainboard)

    def get(self, card_id: str) -> DeckEntry | None:
        return self._mainboard.get(card_id)

    def entries(self) -> list[DeckEntry]:
        """Mainboard entries in the order they were first added."""
        return list(self._mainboard.values())

    def card_count(self) -> int:
        """Mainboard copies, commander excluded."""
        return sum(entry.count for entry in self._mainboard.values())

    def stats(self) -> DeckStats:
        return compute_stats(self._commander, self._mainboard.values())

    # --- Commands ---

    def set_commander(self, commander: Commander | None) -> None:
        """
        Replace or clear the commander.

        Unconditional: existing mainboard entries are not re-checked against
        the new color identity.
        """
        self._commander = commander
        if commander is None:
            logger.info("Commander cleared")
        else:
            logger.info(
                "Commander set: %s",
                commander.name,
                extra={"color_identity": "".join(commander.color_identity)},
            )

    def select_commander(self, card: CardRecord) -> Commander:
        """Validate a card as commander and make it the deck's commander."""
        commander = can_be_commander(card)
        self.set_commander(commander)
        return commander

    def add_card(self, card: CardRecord) -> DeckEntry:
        """
        Add one copy of a card to the mainboard.

        Args:
            card: Card record from the catalog

        Returns:
            The new or updated mainboard entry

        Raises:
            DeckRuleError: If any construction rule rejects the card
        """
        if self._commander is None:
            raise DeckRuleError(
                kind=FailureKind.NO_COMMANDER_SELECTED,
                message="Please select a commander first.",
                card_name=card.name,
            )

        if not is_within_identity(card, self._commander.color_identity):
            raise DeckRuleError(
                kind=FailureKind.OUTSIDE_COLOR_IDENTITY,
                message=f'Card "{card.name}" is outside commander\'s color identity.',
                card_name=card.name,
            )

        legality = check_legality(card)
        if not legality.is_legal:
            raise DeckRuleError(
                kind=FailureKind.ILLEGAL_IN_FORMAT,
                message=f'Card "{card.name}" is {legality.status} in Commander format.',
                card_name=card.name,
            )

        return _add_copy(self._mainboard, card)

    def remove_card(self, card_id: str, remove_all: bool = False) -> None:
        """
        Remove one copy (or every copy) of a card.

        Removing a card that is not in the mainboard is a no-op.
        """
        _remove_copy(self._mainboard, card_id, remove_all)

    def clear(self) -> None:
        """Drop the commander and every mainboard entry."""
        self._commander = None
        self._mainboard.clear()

    def to_deck(
        self,
        name: str = "",
        deck_id: str | None = None,
        sideboard: Iterable[DeckEntry] = (),
        stats: DeckStats | None = None,
    ) -> Deck:
        """
        Export the composer as a Deck.

        Stats default to a fresh local computation.
        """
        return Deck(
            name=name,
            id=deck_id,
            commander=self._commander,
            mainboard=self.entries(),
            sideboard=list(sideboard),
            stats=self.stats() if stats is None else stats,
        )


class Sideboard:
    """
    Sideboard entries.

    Same copy rules as the mainboard, but not checked against the
    commander's color identity or format legality.
    """

    def __init__(self, entries: Iterable[DeckEntry] = ()) -> None:
        self._entries = _index_entries(entries)

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[DeckEntry]:
        return list(self._entries.values())

    def add_card(self, card: CardRecord) -> DeckEntry:
        return _add_copy(self._entries, card)

    def remove_card(self, card_id: str, remove_all: bool = False) -> None:
        _remove_copy(self._entries, card_id, remove_all)
