"""
Deck persistence payloads.

Decks are exchanged with the backend as camelCase JSON:

    {name, commander: {id, name, image, colorIdentity},
     mainboard: [{id, name, count, image, manaValue, colorIdentity, typeLine, colors}],
     sideboard: [...]}

Create and update responses add the assigned id and server-computed stats
({totalCards, avgCmc, manaCurve, colorBreakdown, cardTypes}).
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from edhforge.models.deck import Commander, Deck, DeckEntry
from edhforge.models.stats import DeckStats


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CommanderPayload(_CamelModel):
    id: str
    name: str
    image: str | None = None
    color_identity: list[str] = Field(default_factory=list)


class DeckEntryPayload(_CamelModel):
    id: str
    name: str
    count: int = Field(default=1, ge=1)
    image: str | None = None
    mana_value: float = Field(default=0.0, ge=0)
    color_identity: list[str] = Field(default_factory=list)
    type_line: str = ""
    colors: list[str] = Field(default_factory=list)


class DeckStatsPayload(_CamelModel):
    total_cards: int = 0
    avg_cmc: float = 0.0
    mana_curve: dict[int, int] = Field(default_factory=dict)
    color_breakdown: dict[str, int] = Field(default_factory=dict)
    card_types: dict[str, int] = Field(default_factory=dict)


class DeckPayload(_CamelModel):
    # Backends keyed by document id return "_id" instead of "id"
    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    name: str
    commander: CommanderPayload | None = None
    mainboard: list[DeckEntryPayload] = Field(default_factory=list)
    sideboard: list[DeckEntryPayload] = Field(default_factory=list)
    stats: DeckStatsPayload | None = None


def _entry_to_payload(entry: DeckEntry) -> DeckEntryPayload:
    return DeckEntryPayload(
        id=entry.card_id,
        name=entry.name,
        count=entry.count,
        image=entry.image_url,
        mana_value=entry.mana_value,
        color_identity=list(entry.color_identity),
        type_line=entry.type_line,
        colors=list(entry.colors),
    )


def _entry_from_payload(payload: DeckEntryPayload) -> DeckEntry:
    return DeckEntry(
        card_id=payload.id,
        name=payload.name,
        count=payload.count,
        image_url=payload.image,
        mana_value=payload.mana_value,
        colors=tuple(payload.colors),
        color_identity=tuple(payload.color_identity),
        type_line=payload.type_line,
    )


def stats_from_payload(payload: DeckStatsPayload) -> DeckStats:
    """Server stats, taken verbatim (no type partition is available)."""
    return DeckStats(
        total_cards=payload.total_cards,
        average_mana_value=payload.avg_cmc,
        mana_curve=dict(sorted(payload.mana_curve.items())),
        color_breakdown=dict(payload.color_breakdown),
        card_types=dict(payload.card_types),
    )


def deck_to_payload(deck: Deck) -> dict[str, Any]:
    """
    Serialize a deck for create/update.

    The id travels in the URL and stats are computed by the server, so
    neither is sent in the body.
    """
    commander = None
    if deck.commander is not None:
        commander = CommanderPayload(
            id=deck.commander.id,
            name=deck.commander.name,
            image=deck.commander.image_url,
            color_identity=list(deck.commander.color_identity),
        )

    payload = DeckPayload(
        name=deck.name,
        commander=commander,
        mainboard=[_entry_to_payload(entry) for entry in deck.mainboard],
        sideboard=[_entry_to_payload(entry) for entry in deck.sideboard],
    )
    return payload.model_dump(by_alias=True, exclude={"id", "stats"})


def deck_from_payload(data: dict[str, Any]) -> Deck:
    """
    Parse a deck returned by the backend.

    Raises:
        pydantic.ValidationError: If the payload does not match the contract
    """
    payload = DeckPayload.model_validate(data)

    commander = None
    if payload.commander is not None:
        commander = Commander(
            id=payload.commander.id,
            name=payload.commander.name,
            image_url=payload.commander.image,
            color_identity=tuple(payload.commander.color_identity),
        )

    return Deck(
        name=payload.name,
        id=payload.id,
        commander=commander,
        mainboard=[_entry_from_payload(entry) for entry in payload.mainboard],
        sideboard=[_entry_from_payload(entry) for entry in payload.sideboard],
        stats=stats_from_payload(payload.stats) if payload.stats is not None else None,
    )
