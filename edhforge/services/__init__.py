"""
EDHForge services.

Deck construction rules, statistics, and the catalog/backend adapters.
"""

from edhforge.services.auth_session import AuthSession, KeyValueStore, UserRecord
from edhforge.services.catalog_client import CatalogClient, CatalogPage
from edhforge.services.commander import can_be_commander, has_commander_type
from edhforge.services.deck_composer import DeckComposer, Sideboard
from edhforge.services.deck_editor import DeckEditSession
from edhforge.services.deck_service import DeckPersistenceClient, split_validation_messages
from edhforge.services.deck_stats import (
    TYPE_PRIORITY,
    classify_type,
    compute_stats,
)
from edhforge.services.search_session import (
    CatalogSearchSession,
    SearchResult,
    dedupe_printings,
)

__all__ = [
    "AuthSession",
    "CatalogClient",
    "CatalogPage",
    "CatalogSearchSession",
    "DeckComposer",
    "DeckEditSession",
    "DeckPersistenceClient",
    "KeyValueStore",
    "SearchResult",
    "Sideboard",
    "TYPE_PRIORITY",
    "UserRecord",
    "can_be_commander",
    "classify_type",
    "compute_stats",
    "dedupe_printings",
    "has_commander_type",
    "split_validation_messages",
]
