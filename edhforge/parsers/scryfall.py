"""
Catalog payload schemas.

The catalog proxies Scryfall, so card and search payloads use Scryfall's
field names. Payloads are validated here before anything reaches the
engine: optional nested objects (image_uris, card_faces) are modelled as
present or absent rather than probed for truthiness.

Card objects: https://scryfall.com/docs/api/cards
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from edhforge.models.card import CardFace, CardRecord


class ImageUris(BaseModel):
    """Image references for one card or face, by size."""

    model_config = ConfigDict(extra="ignore")

    small: str | None = None
    normal: str | None = None
    large: str | None = None

    def best(self) -> str | None:
        """Preferred display image: normal, then large, then small."""
        return self.normal or self.large or self.small


class CardFacePayload(BaseModel):
    """One face of a multi-faced card."""

    model_config = ConfigDict(extra="ignore")

    name: str
    image_uris: ImageUris | None = None
    oracle_text: str | None = None
    colors: list[str] | None = None

    def to_face(self) -> CardFace:
        return CardFace(
            name=self.name,
            image_url=self.image_uris.best() if self.image_uris is not None else None,
            oracle_text=self.oracle_text,
        )


class CardPayload(BaseModel):
    """A catalog card as returned by search and lookup endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    type_line: str = ""
    oracle_text: str | None = None
    cmc: float = Field(default=0.0, ge=0)
    colors: list[str] | None = None
    color_identity: list[str] = Field(default_factory=list)
    set: str | None = None
    image_uris: ImageUris | None = None
    card_faces: list[CardFacePayload] | None = None
    legalities: dict[str, str] = Field(default_factory=dict)

    def _resolved_colors(self) -> tuple[str, ...]:
        # Multi-faced cards carry colors per face only
        if self.colors is not None:
            return tuple(self.colors)
        face_colors: list[str] = []
        for face in self.card_faces or []:
            for color in face.colors or []:
                if color not in face_colors:
                    face_colors.append(color)
        return tuple(face_colors)

    def to_record(self) -> CardRecord:
        """Convert to the engine's immutable CardRecord."""
        return CardRecord(
            id=self.id,
            name=self.name,
            type_line=self.type_line,
            mana_value=self.cmc,
            colors=self._resolved_colors(),
            color_identity=tuple(self.color_identity),
            legalities=dict(self.legalities),
            set_code=self.set,
            image_url=self.image_uris.best() if self.image_uris is not None else None,
            oracle_text=self.oracle_text,
            faces=tuple(face.to_face() for face in self.card_faces or []),
        )


class SearchPagePayload(BaseModel):
    """One page of catalog search results."""

    model_config = ConfigDict(extra="ignore")

    data: list[CardPayload] = Field(default_factory=list)
    has_more: bool = False
    total_cards: int | None = None


def parse_card(payload: dict[str, Any]) -> CardRecord:
    """
    Parse a single card payload.

    Raises:
        pydantic.ValidationError: If required fields are missing or malformed
    """
    return CardPayload.model_validate(payload).to_record()


def parse_search_page(payload: dict[str, Any]) -> tuple[list[CardRecord], bool]:
    """
    Parse a search response.

    Returns:
        Tuple of (cards in catalog order, has_more)

    Raises:
        pydantic.ValidationError: If the page or any card is malformed
    """
    page = SearchPagePayload.model_validate(payload)
    return [card.to_record() for card in page.data], page.has_more
