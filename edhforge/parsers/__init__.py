from edhforge.parsers.deck_payload import (
    DeckPayload,
    deck_from_payload,
    deck_to_payload,
    stats_from_payload,
)
from edhforge.parsers.scryfall import (
    CardPayload,
    SearchPagePayload,
    parse_card,
    parse_search_page,
)

__all__ = [
    "CardPayload",
    "DeckPayload",
    "SearchPagePayload",
    "deck_from_payload",
    "deck_to_payload",
    "parse_card",
    "parse_search_page",
    "stats_from_payload",
]
