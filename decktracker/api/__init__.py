from decktracker.api.decks import router as decks_router
from decktracker.api.health import router as health_router
from decktracker.api.inventory import router as inventory_router
from decktracker.api.recommendations import router as recommendations_router

__all__ = [
    "decks_router",
    "health_router",
    "inventory_router",
    "recommendations_router",
]
