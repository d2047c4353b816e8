"""
Deck statistics.

DeckStats is always derived: recomputed locally after every mutation, or
taken verbatim from the backend after a save round-trip. It is never
edited by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from edhforge.config import MAINBOARD_TARGET_SIZE

if TYPE_CHECKING:
    from edhforge.models.deck import Commander, DeckEntry

# Color symbols in display order, plus the bucket for colorless cards
COLOR_SYMBOLS: tuple[str, ...] = ("W", "U", "B", "R", "G")
COLORLESS = "Colorless"


class TypeBucket(str, Enum):
    """Display buckets for the type breakdown."""

    COMMANDER = "Commander"
    CREATURE = "Creature"
    INSTANT = "Instant"
    SORCERY = "Sorcery"
    ARTIFACT = "Artifact"
    ENCHANTMENT = "Enchantment"
    PLANESWALKER = "Planeswalker"
    LAND = "Land"
    OTHER = "Other"


@dataclass(frozen=True)
class TypeBreakdown:
    """
    Exact partition of a deck into type buckets.

    The commander sits in its own bucket; every mainboard entry appears in
    exactly one of the remaining buckets.
    """

    commander: Commander | None = None
    buckets: dict[TypeBucket, tuple[DeckEntry, ...]] = field(default_factory=dict)

    def entries(self, bucket: TypeBucket) -> tuple[DeckEntry, ...]:
        return self.buckets.get(bucket, ())

    def counts(self) -> dict[str, int]:
        """Copies per bucket, commander included when present."""
        counts: dict[str, int] = {}
        if self.commander is not None:
            counts[TypeBucket.COMMANDER.value] = 1
        for bucket, entries in self.buckets.items():
            counts[bucket.value] = sum(entry.count for entry in entries)
        return counts


@dataclass
class DeckStats:
    """
    Statistics for a deck.

    Attributes:
        total_cards: Mainboard copies plus one for the commander
        average_mana_value: Count-weighted mean over all mainboard entries
        mana_curve: floor(mana value) -> copies; empty buckets omitted
        color_breakdown: Color symbol or "Colorless" -> copies
        card_types: Bucket name -> copies
        type_breakdown: Full partition (only for locally computed stats)
    """

    total_cards: int = 0
    average_mana_value: float = 0.0
    mana_curve: dict[int, int] = field(default_factory=dict)
    color_breakdown: dict[str, int] = field(default_factory=dict)
    card_types: dict[str, int] = field(default_factory=dict)
    type_breakdown: TypeBreakdown | None = None

    @property
    def deck_target_size(self) -> int:
        """Advisory deck size: the mainboard target plus the commander."""
        return MAINBOARD_TARGET_SIZE + 1

    @property
    def cards_remaining(self) -> int:
        """Cards still needed to reach the target; negative when oversized."""
        return self.deck_target_size - self.total_cards

    @property
    def is_oversized(self) -> bool:
        return self.total_cards > self.deck_target_size
