from decktracker.analysis.inventory import CardSource, CollectionStore, Inventory
from decktracker.analysis.ranker import (
    CraftSuggestion,
    RankedDeck,
    rank_decks,
    rank_missing_cards,
)
from decktracker.analysis.recommender import (
    CraftRecommender,
    RecommendationStats,
    recommend,
)

__all__ = [
    "CardSource",
    "CollectionStore",
    "CraftRecommender",
    "CraftSuggestion",
    "Inventory",
    "RankedDeck",
    "RecommendationStats",
    "rank_decks",
    "rank_missing_cards",
    "recommend",
]
