from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class CardFace:
    """
    One face of a multi-faced card.

    Attributes:
        name: Face name (e.g., "Delver of Secrets")
        image_url: Image reference for this face, if the catalog has one
        oracle_text: Rules text printed on this face
    """

    name: str
    image_url: str | None = None
    oracle_text: str | None = None


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A card as consumed from the external catalog.

    Read-only: records are never mutated after parsing and may be shared
    freely between the search session, the validators and the composer.

    Attributes:
        id: Catalog id, unique per printing
        name: Card name
        type_line: Free-text type line (e.g., "Legendary Creature — Elf Druid")
        mana_value: Converted mana cost, never negative
        colors: Casting colors (W, U, B, R, G)
        color_identity: Color identity, a superset of colors
        legalities: Format name -> status ("legal", "banned", "not_legal", ...),
            stored as a read-only mapping
        set_code: Printing/set identifier
        image_url: Top-level image reference (absent on multi-faced cards)
        oracle_text: Top-level rules text (absent on multi-faced cards)
        faces: Alternate faces, each with its own image reference
    """

    id: str
    name: str
    type_line: str
    mana_value: float = 0.0
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    legalities: Mapping[str, str] = field(default_factory=dict)
    set_code: str | None = None
    image_url: str | None = None
    oracle_text: str | None = None
    faces: tuple[CardFace, ...] = ()

    def __post_init__(self) -> None:
        if self.mana_value < 0:
            raise ValueError(f"Mana value must be non-negative, got {self.mana_value}")
        # Copied into a read-only view
        object.__setattr__(self, "legalities", MappingProxyType(dict(self.legalities)))

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def image(self) -> str | None:
        """Image to display: the card's own, else the first face that has one."""
        if self.image_url:
            return self.image_url
        for face in self.faces:
            if face.image_url:
                return face.image_url
        return None

    @property
    def full_oracle_text(self) -> str:
        """Rules text of the card, joining face texts for multi-faced cards."""
        if self.oracle_text is not None:
            return self.oracle_text
        return "\n//\n".join(face.oracle_text for face in self.faces if face.oracle_text)

    @property
    def is_basic_land(self) -> bool:
        """Basic lands are exempt from the singleton rule."""
        return "Basic Land" in self.type_line
