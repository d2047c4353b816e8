"""Tests for catalog and deck records."""

import pytest

from edhforge.models.card import CardFace, CardRecord
from edhforge.models.deck import DeckEntry


class TestCardRecord:
    """Tests for CardRecord."""

    def test_legalities_are_read_only(self) -> None:
        source = {"commander": "legal"}
        card = CardRecord(id="c1", name="Sol Ring", type_line="Artifact", legalities=source)

        with pytest.raises(TypeError):
            card.legalities["commander"] = "banned"  # type: ignore[index]

        source["commander"] = "banned"
        assert card.legalities["commander"] == "legal"

    def test_hashable_and_comparable(self) -> None:
        a = CardRecord(id="c1", name="Sol Ring", type_line="Artifact", legalities={"x": "legal"})
        b = CardRecord(id="c1", name="Sol Ring", type_line="Artifact", legalities={"x": "legal"})

        assert a == b
        assert len({a, b}) == 1
        assert a != CardRecord(id="c1", name="Sol Ring", type_line="Artifact")

    def test_negative_mana_value_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            CardRecord(id="c1", name="Bad", type_line="Instant", mana_value=-1)

    def test_face_fallbacks(self) -> None:
        card = CardRecord(
            id="c2",
            name="Front // Back",
            type_line="Creature // Creature",
            faces=(
                CardFace(name="Front", oracle_text="Flying"),
                CardFace(name="Back", image_url="back.jpg", oracle_text="Trample"),
            ),
        )

        assert card.image == "back.jpg"
        assert card.full_oracle_text == "Flying\n//\nTrample"


class TestDeckEntry:
    """Tests for DeckEntry."""

    def test_count_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            DeckEntry(card_id="x", name="X", count=0)
