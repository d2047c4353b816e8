from dataclasses import dataclass, field

from edhforge.models.card import CardRecord
from edhforge.models.stats import DeckStats


@dataclass(frozen=True, slots=True)
class Commander:
    """
    The card chosen to lead a deck.

    A snapshot taken at selection time: later catalog changes to the
    source card never alter a deck's stored commander.

    Attributes:
        id: Catalog id of the source card
        name: Card name
        image_url: Image reference, if any
        color_identity: Colors the rest of the deck must stay within
    """

    id: str
    name: str
    image_url: str | None = None
    color_identity: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeckEntry:
    """
    A mainboard or sideboard slot.

    Display fields are copied from the CardRecord when the card is added so
    the deck can be rendered and summarized without going back to the catalog.
    """

    card_id: str
    name: str
    count: int = 1
    image_url: str | None = None
    mana_value: float = 0.0
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    type_line: str = ""

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Entry count must be at least 1, got {self.count}")

    @classmethod
    def from_card(cls, card: CardRecord, count: int = 1) -> "DeckEntry":
        """Copy the fields needed for rendering and statistics."""
        return cls(
            card_id=card.id,
            name=card.name,
            count=count,
            image_url=card.image,
            mana_value=card.mana_value,
            colors=card.colors,
            color_identity=card.color_identity,
            type_line=card.type_line,
        )

    @property
    def is_basic_land(self) -> bool:
        return "Basic Land" in self.type_line


@dataclass
class Deck:
    """
    A Commander deck as exchanged with the persistence boundary.

    Attributes:
        name: Deck name (must be non-empty to save)
        id: Assigned by the backend on first save, None before that
        commander: Zero or one commander
        mainboard: Entries keyed uniquely by card id
        sideboard: Same count rules, not checked against the commander
        stats: Last statistics snapshot (local or server-computed)
    """

    name: str = ""
    id: str | None = None
    commander: Commander | None = None
    mainboard: list[DeckEntry] = field(default_factory=list)
    sideboard: list[DeckEntry] = field(default_factory=list)
    stats: DeckStats | None = None

    @property
    def is_saved(self) -> bool:
        """True once the backend has assigned an id."""
        return self.id is not None

    def mainboard_count(self) -> int:
        """Total mainboard cards, counting copies."""
        return sum(entry.count for entry in self.mainboard)
