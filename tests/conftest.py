from pathlib import Path

import pytest

from decktracker.analysis.inventory import Inventory
from decktracker.models.collection import Collection
from decktracker.models.deck import Deck
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster
from decktracker.models.wildcards import Wildcards
from decktracker.storage import SnapshotStore


@pytest.fixture
def sample_arena_export() -> str:
    """Sample Arena deck export for testing."""
    return """Deck
4 Lightning Bolt (LEB) 163
4 Monastery Swiftspear (BRO) 144
20 Mountain (NEO) 290

Sideboard
2 Abrade (VOW) 139"""


@pytest.fixture
def wallet() -> Wildcards:
    """Wallet with rares and a single mythic: coefficients C=6, U=6, R=1, M=3."""
    return Wildcards(common=0, uncommon=0, rare=5, mythic=1)


@pytest.fixture
def collection() -> Collection:
    """Small collection covering every rarity."""
    c = Collection()
    c.insert(4, "Lightning Bolt", Rarity.COMMON, "sta")
    c.insert(20, "Mountain", Rarity.COMMON, "neo")
    c.insert(1, "Sheoldred, the Apocalypse", Rarity.MYTHIC, "dmu")
    c.insert(0, "Fable of the Mirror-Breaker", Rarity.RARE, "neo")
    c.insert(0, "Ragavan, Nimble Pilferer", Rarity.MYTHIC, "mh2")
    return c


@pytest.fixture
def red_deck() -> Deck:
    """Deck missing 4 Fable and 1 Sheoldred against the collection fixture."""
    return Deck(
        name="Mono Red",
        mainboard=[
            ("Lightning Bolt", 4),
            ("Fable of the Mirror-Breaker", 4),
            ("Sheoldred, the Apocalypse", 2),
            ("Mountain", 20),
        ],
    )


@pytest.fixture
def burn_deck() -> Deck:
    """Deck the collection fixture completes."""
    return Deck(name="Burn", mainboard=[("Lightning Bolt", 4), ("Mountain", 20)])


@pytest.fixture
def roster(red_deck: Deck, burn_deck: Deck) -> Roster:
    return Roster(decks=[red_deck, burn_deck])


@pytest.fixture
def inventory(collection: Collection, wallet: Wildcards) -> Inventory:
    return Inventory(collection, wallet)


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    """Snapshot store writing under a temporary directory."""
    return SnapshotStore(
        roster_path=tmp_path / "roster.json",
        collection_path=tmp_path / "collection.json",
        wallet_path=tmp_path / "wildcards.json",
    )
