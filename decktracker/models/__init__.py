from decktracker.models.card import CardPrinting
from decktracker.models.collection import (
    Collection,
    MissingCard,
    Printing,
    simplified_name,
)
from decktracker.models.deck import Deck
from decktracker.models.failure import (
    CardLookupError,
    CollectionParseError,
    DeckNotFoundError,
    DecklistParseError,
    DuplicateDeckError,
    FailureDetail,
    FailureKind,
    KnownError,
    ParseError,
    SearchCancelledError,
    SnapshotParseError,
    StorageError,
    UnknownCardError,
)
from decktracker.models.rarity import CRAFTABLE_RARITIES, Rarity
from decktracker.models.roster import Roster
from decktracker.models.wildcards import WildcardCoefficients, Wildcards

__all__ = [
    "CRAFTABLE_RARITIES",
    "CardLookupError",
    "CardPrinting",
    "Collection",
    "CollectionParseError",
    "Deck",
    "DeckNotFoundError",
    "DecklistParseError",
    "DuplicateDeckError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "MissingCard",
    "ParseError",
    "Printing",
    "Rarity",
    "Roster",
    "SearchCancelledError",
    "SnapshotParseError",
    "StorageError",
    "UnknownCardError",
    "WildcardCoefficients",
    "Wildcards",
    "simplified_name",
]
