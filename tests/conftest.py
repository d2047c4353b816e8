from collections.abc import Callable
from typing import Any

import pytest

from edhforge.models.card import CardRecord
from edhforge.models.deck import Commander

CardFactory = Callable[..., CardRecord]


@pytest.fixture
def make_card() -> CardFactory:
    """Build CardRecords with commander-legal defaults."""

    def _make(
        name: str,
        type_line: str = "Creature — Elf",
        color_identity: tuple[str, ...] = ("G",),
        colors: tuple[str, ...] | None = None,
        mana_value: float = 1.0,
        status: str | None = "legal",
        card_id: str | None = None,
        **kwargs: Any,
    ) -> CardRecord:
        legalities = {"commander": status} if status is not None else {}
        return CardRecord(
            id=card_id or name.lower().replace(" ", "-"),
            name=name,
            type_line=type_line,
            mana_value=mana_value,
            colors=color_identity if colors is None else colors,
            color_identity=color_identity,
            legalities=legalities,
            **kwargs,
        )

    return _make


@pytest.fixture
def green_commander() -> Commander:
    return Commander(id="cmd-1", name="Marwyn, the Nurturer", color_identity=("G",))


@pytest.fixture
def sample_card_payload() -> dict[str, Any]:
    """Single-faced catalog card, Scryfall shaped."""
    return {
        "object": "card",
        "id": "0001",
        "name": "Llanowar Elves",
        "type_line": "Creature — Elf Druid",
        "oracle_text": "{T}: Add {G}.",
        "cmc": 1.0,
        "colors": ["G"],
        "color_identity": ["G"],
        "set": "dom",
        "image_uris": {
            "small": "https://img.example/small/0001.jpg",
            "normal": "https://img.example/normal/0001.jpg",
        },
        "legalities": {"commander": "legal", "standard": "not_legal"},
    }


@pytest.fixture
def sample_mdfc_payload() -> dict[str, Any]:
    """Multi-faced catalog card: no top-level image, colors per face."""
    return {
        "object": "card",
        "id": "0002",
        "name": "Esika, God of the Tree // The Prismatic Bridge",
        "type_line": "Legendary Creature — God // Legendary Enchantment",
        "cmc": 3.0,
        "color_identity": ["G", "W"],
        "set": "khm",
        "card_faces": [
            {
                "name": "Esika, God of the Tree",
                "oracle_text": "Vigilance",
                "colors": ["G"],
                "image_uris": {"normal": "https://img.example/normal/0002-front.jpg"},
            },
            {
                "name": "The Prismatic Bridge",
                "oracle_text": "At the beginning of your upkeep, reveal cards.",
                "colors": ["W"],
                "image_uris": {"normal": "https://img.example/normal/0002-back.jpg"},
            },
        ],
        "legalities": {"commander": "legal"},
    }
