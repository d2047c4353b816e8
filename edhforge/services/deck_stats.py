"""
Deck statistics aggregation.

Derives mana curve, color breakdown and type partition from a commander
and a mainboard. Pure: the same inputs always give the same DeckStats.
"""

import math
from collections.abc import Iterable

from edhforge.models.deck import Commander, DeckEntry
from edhforge.models.stats import (
    COLOR_SYMBOLS,
    COLORLESS,
    DeckStats,
    TypeBreakdown,
    TypeBucket,
)

# Evaluated top to bottom against the lower-cased type line; first match wins.
# "Artifact Creature" is a Creature, "Enchantment Land" is an Enchantment.
TYPE_PRIORITY: tuple[tuple[str, TypeBucket], ...] = (
    ("creature", TypeBucket.CREATURE),
    ("instant", TypeBucket.INSTANT),
    ("sorcery", TypeBucket.SORCERY),
    ("artifact", TypeBucket.ARTIFACT),
    ("enchantment", TypeBucket.ENCHANTMENT),
    ("planeswalker", TypeBucket.PLANESWALKER),
    ("land", TypeBucket.LAND),
)

# Mainboard buckets in display order (the commander bucket is separate)
MAINBOARD_BUCKETS: tuple[TypeBucket, ...] = tuple(bucket for _, bucket in TYPE_PRIORITY) + (
    TypeBucket.OTHER,
)


def classify_type(type_line: str) -> TypeBucket:
    """Place a type line in exactly one bucket."""
    lowered = type_line.lower()
    for keyword, bucket in TYPE_PRIORITY:
        if keyword in lowered:
            return bucket
    return TypeBucket.OTHER


def _mana_bucket(mana_value: float) -> int:
    return math.floor(mana_value)


def compute_mana_curve(mainboard: Iterable[DeckEntry]) -> dict[int, int]:
    """Copies per integer mana value, ascending; empty buckets omitted."""
    curve: dict[int, int] = {}
    for entry in mainboard:
        bucket = _mana_bucket(entry.mana_value)
        curve[bucket] = curve.get(bucket, 0) + entry.count
    return dict(sorted(curve.items()))


def compute_average_mana_value(mainboard: Iterable[DeckEntry]) -> float:
    """
    Count-weighted mean mana value.

    Lands (mana value 0) are included, so the figure is lower than tools
    that average over spells only.
    """
    total_value = 0.0
    total_count = 0
    for entry in mainboard:
        total_value += entry.mana_value * entry.count
        total_count += entry.count
    if total_count == 0:
        return 0.0
    return total_value / total_count


def compute_color_breakdown(mainboard: Iterable[DeckEntry]) -> dict[str, int]:
    """
    Copies per color symbol.

    A multicolor card counts once for each color it has, per copy, so the
    sum over colors can exceed the number of cards.
    """
    breakdown = {symbol: 0 for symbol in COLOR_SYMBOLS}
    breakdown[COLORLESS] = 0
    for entry in mainboard:
        if not entry.colors:
            breakdown[COLORLESS] += entry.count
            continue
        for symbol in entry.colors:
            if symbol in breakdown:
                breakdown[symbol] += entry.count
    return breakdown


def compute_type_breakdown(
    commander: Commander | None, mainboard: Iterable[DeckEntry]
) -> TypeBreakdown:
    """Partition the mainboard into type buckets, each sorted by name."""
    grouped: dict[TypeBucket, list[DeckEntry]] = {bucket: [] for bucket in MAINBOARD_BUCKETS}
    for entry in mainboard:
        grouped[classify_type(entry.type_line)].append(entry)

    buckets = {
        bucket: tuple(sorted(entries, key=lambda e: e.name.casefold()))
        for bucket, entries in grouped.items()
    }
    return TypeBreakdown(commander=commander, buckets=buckets)


def compute_stats(commander: Commander | None, mainboard: Iterable[DeckEntry]) -> DeckStats:
    """
    Compute all statistics for a deck.

    Args:
        commander: Current commander, if any (adds one card to the total)
        mainboard: Mainboard entries

    Returns:
        Freshly derived DeckStats
    """
    entries = list(mainboard)
    breakdown = compute_type_breakdown(commander, entries)
    total = sum(entry.count for entry in entries) + (1 if commander is not None else 0)

    return DeckStats(
        total_cards=total,
        average_mana_value=compute_average_mana_value(entries),
        mana_curve=compute_mana_curve(entries),
        color_breakdown=compute_color_breakdown(entries),
        card_types=breakdown.counts(),
        type_breakdown=breakdown,
    )
