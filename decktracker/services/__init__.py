from decktracker.services.arena_ids import ArenaIdTranslator
from decktracker.services.card_database import ScryfallCardSource
from decktracker.services.tracker_daemon import TrackerDaemonClient, fetch_collection

__all__ = [
    "ArenaIdTranslator",
    "ScryfallCardSource",
    "TrackerDaemonClient",
    "fetch_collection",
]
