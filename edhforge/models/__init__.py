from edhforge.models.card import CardFace, CardRecord
from edhforge.models.deck import Commander, Deck, DeckEntry
from edhforge.models.failure import (
    AuthError,
    CatalogError,
    DeckRuleError,
    FailureDetail,
    FailureKind,
    KnownError,
    PersistenceError,
    SaveInProgressError,
)
from edhforge.models.legality import (
    LegalityResult,
    check_legality,
    commander_legality_status,
    is_commander_format_legal,
    is_within_identity,
)
from edhforge.models.stats import (
    COLOR_SYMBOLS,
    COLORLESS,
    DeckStats,
    TypeBreakdown,
    TypeBucket,
)

__all__ = [
    "AuthError",
    "COLORLESS",
    "COLOR_SYMBOLS",
    "CardFace",
    "CardRecord",
    "CatalogError",
    "Commander",
    "Deck",
    "DeckEntry",
    "DeckRuleError",
    "DeckStats",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "LegalityResult",
    "PersistenceError",
    "SaveInProgressError",
    "TypeBreakdown",
    "TypeBucket",
    "check_legality",
    "commander_legality_status",
    "is_commander_format_legal",
    "is_within_identity",
]
