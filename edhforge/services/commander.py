"""
Commander eligibility.

A card may lead a deck when it is a legendary creature, or a planeswalker
whose rules text says it "can be your commander", and it is legal in the
commander format.
"""

import logging

from edhforge.models.card import CardRecord
from edhforge.models.deck import Commander
from edhforge.models.failure import DeckRuleError, FailureKind
from edhforge.models.legality import check_legality

logger = logging.getLogger(__name__)

COMMANDER_PHRASE = "can be your commander"


def has_commander_type(card: CardRecord) -> bool:
    """Type condition for commanders, independent of format legality."""
    if "Legendary Creature" in card.type_line:
        return True
    return "Planeswalker" in card.type_line and COMMANDER_PHRASE in card.full_oracle_text


def can_be_commander(card: CardRecord) -> Commander:
    """
    Validate a card as commander and snapshot it.

    Args:
        card: Candidate card from the catalog

    Returns:
        Commander snapshot, decoupled from the source record

    Raises:
        DeckRuleError: NOT_ELIGIBLE_TYPE if the type condition fails,
            ILLEGAL_IN_FORMAT if the card is not commander-legal
    """
    if not has_commander_type(card):
        raise DeckRuleError(
            kind=FailureKind.NOT_ELIGIBLE_TYPE,
            message="Only legendary creatures or specific planeswalkers can be commanders.",
            card_name=card.name,
        )

    legality = check_legality(card)
    if not legality.is_legal:
        raise DeckRuleError(
            kind=FailureKind.ILLEGAL_IN_FORMAT,
            message=(
                f'"{card.name}" is {legality.status} in Commander format '
                "and cannot be your commander."
            ),
            card_name=card.name,
        )

    logger.debug("Commander eligible: %s (%s)", card.name, legality.reason)
    return Commander(
        id=card.id,
        name=card.name,
        image_url=card.image,
        color_identity=tuple(card.color_identity),
    )
