import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="EDHFORGE_")

    app_name: str = "EDHForge"
    debug: bool = False

    # Card catalog proxy (Scryfall-shaped payloads)
    catalog_url: str = "http://localhost:5000/api"

    # Deck persistence and auth backend
    backend_url: str = "http://localhost:5000/api"

    http_timeout_seconds: float = 30.0

    # Quiescence delay before a typed search query is sent upstream
    search_debounce_seconds: float = 0.5

    session_store_path: Path = Path.home() / ".edhforge" / "session.json"


settings = Settings()


# =============================================================================
# COMMANDER FORMAT CONSTANTS
# =============================================================================

# Key of the commander format in a card's legality mapping
COMMANDER_FORMAT = "commander"

# Advisory mainboard size (100-card deck minus the commander).
# Reported through DeckStats, never enforced by the composer.
MAINBOARD_TARGET_SIZE = 99

# Prefix the persistence backend uses for deck-shape validation failures
DECK_VALIDATION_PREFIX = "Deck validation failed: "


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for scripts and interactive use."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
