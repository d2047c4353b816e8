"""
Color identity and format legality predicates.

Pure, total functions over CardRecord. They never raise and never touch
deck state; the validator and the composer decide what a failed check means.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from edhforge.config import COMMANDER_FORMAT
from edhforge.models.card import CardRecord

# Status reported when a card's legality mapping has no entry for a format
MISSING_STATUS = "not_legal"


@dataclass(frozen=True, slots=True)
class LegalityResult:
    """
    Result of a legality check.

    Keeps the raw status so messages can say "banned" rather than a
    generic "not legal".
    """

    is_legal: bool
    format_name: str
    status: str

    @property
    def reason(self) -> str:
        return f"legalities[{self.format_name}] = {self.status}"


def check_legality(card: CardRecord, format_name: str = COMMANDER_FORMAT) -> LegalityResult:
    """
    Check if a card is legal in a format.

    Args:
        card: Card record with a legality mapping
        format_name: Format key in the mapping

    Returns:
        LegalityResult with legality status
    """
    status = card.legalities.get(format_name, MISSING_STATUS)
    return LegalityResult(is_legal=status == "legal", format_name=format_name, status=status)


def commander_legality_status(card: CardRecord) -> str:
    """Raw commander-format status of a card ("not_legal" when absent)."""
    return check_legality(card).status


def is_commander_format_legal(card: CardRecord) -> bool:
    """True iff the card's commander legality is exactly "legal"."""
    return check_legality(card).is_legal


def is_within_identity(card: CardRecord, commander_identity: Iterable[str]) -> bool:
    """
    Check that a card's color identity fits inside a commander's.

    Set containment, order-independent. A colorless card fits any commander;
    a colorless commander only accepts colorless cards.
    """
    return set(card.color_identity).issubset(commander_identity)
