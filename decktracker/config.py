from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKTRACKER_")

    app_name: str = "decktracker"
    debug: bool = False

    # Snapshot files live under data_dir unless given as absolute paths
    data_dir: Path = Path("data")
    roster_file: str = "roster.json"
    collection_file: str = "collection.json"
    wallet_file: str = "wildcards.json"
    arena_ids_file: str = "arena_ids.json"

    scryfall_url: str = "https://api.scryfall.com"
    # Scryfall asks for 50-100ms between requests
    scryfall_delay_seconds: float = 0.075

    tracker_daemon_url: str = "http://localhost:6842"

    # strict: an unknown card aborts the recommendation
    # degraded: the offending deck is skipped and logged
    missing_card_policy: Literal["strict", "degraded"] = "strict"

    recommend_timeout_seconds: float = 30.0

    def data_path(self, filename: str) -> Path:
        """Resolve a snapshot filename against data_dir."""
        path = Path(filename)
        return path if path.is_absolute() else self.data_dir / path


settings = Settings()


# =============================================================================
# GAME CONSTANTS
# =============================================================================

# A constructed deck never plays more than 4 copies of a non-land card
MAX_USEFUL_COPIES = 4

# Basic lands are free and never cost wildcards
BASIC_LANDS = frozenset({"Plains", "Island", "Swamp", "Mountain", "Forest"})

# A mainboard with this card can fetch sideboard cards during play, so the
# first WISHBOARD_SIZE sideboard entries count as required
WISHBOARD_TRIGGER = "Karn, the Great Creator"
WISHBOARD_SIZE = 7
