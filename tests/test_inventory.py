"""Tests for the inventory cost model."""

import logging

import pytest

from decktracker.analysis.inventory import Inventory
from decktracker.models.card import CardPrinting
from decktracker.models.collection import Collection
from decktracker.models.deck import Deck
from decktracker.models.failure import CardLookupError, UnknownCardError
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster
from decktracker.models.wildcards import Wildcards


class FakeCardSource:
    """Card source answering from a dict, recording every lookup."""

    def __init__(self, printings: dict[str, list[CardPrinting]], failing: set[str] | None = None):
        self.printings = printings
        self.failing = failing or set()
        self.calls: list[str] = []

    def fetch_card(self, name: str) -> list[CardPrinting]:
        self.calls.append(name)
        if name in self.failing:
            raise CardLookupError(name, "HTTP 500")
        return self.printings.get(name, [])


class FakeStore:
    def __init__(self) -> None:
        self.saved: list[Collection] = []

    def save_collection(self, collection: Collection) -> None:
        self.saved.append(collection)


class TestCardCost:
    """Tests for per-card costs."""

    def test_card_amount_is_capped(self, inventory: Inventory) -> None:
        assert inventory.card_amount("Mountain") == 4
        assert inventory.card_amount("Sheoldred, the Apocalypse") == 1

    def test_land_free_common_positive(self, inventory: Inventory) -> None:
        """With a rare/mythic wallet, lands cost nothing and commons cost something."""
        assert inventory.card_cost("Mountain") == 0.0
        assert inventory.card_cost("Lightning Bolt") == pytest.approx(6.0)

    def test_cheapest_rarity_follows_wallet(self) -> None:
        c = Collection()
        c.insert(0, "Thoughtseize", Rarity.RARE, "2xm")
        c.insert(0, "Thoughtseize", Rarity.MYTHIC, "ths")

        rare_rich = Inventory(c, Wildcards(rare=10, mythic=0))
        mythic_rich = Inventory(c, Wildcards(rare=0, mythic=10))

        assert rare_rich.cheapest_rarity("Thoughtseize") == Rarity.RARE
        assert mythic_rich.cheapest_rarity("Thoughtseize") == Rarity.MYTHIC
        assert mythic_rich.cheapest_printing("Thoughtseize").set == "ths"

    def test_cheapest_rarity_unknown(self, wallet: Wildcards) -> None:
        c = Collection()
        c.insert(0, "Mysterious Token", Rarity.UNKNOWN, "tneo")
        inventory = Inventory(c, wallet)

        assert inventory.cheapest_rarity("Mysterious Token") == Rarity.UNKNOWN
        assert inventory.card_cost("Mysterious Token") == 0.0

    def test_unknown_card_raises(self, inventory: Inventory) -> None:
        with pytest.raises(UnknownCardError):
            inventory.card_cost("Black Lotus")

    def test_cost_considering_deck(self, inventory: Inventory) -> None:
        # rare coefficient 1.0, 4 missing -> 1.0 * 4 + 4 / 4
        assert inventory.card_cost_considering_deck(
            "Fable of the Mirror-Breaker", 4
        ) == pytest.approx(5.0)
        # mythic coefficient 3.0, 1 owned, 1 missing -> 3.0 * 2 + 4 / 1
        assert inventory.card_cost_considering_deck(
            "Sheoldred, the Apocalypse", 2
        ) == pytest.approx(10.0)

    def test_cost_considering_deck_complete(self, inventory: Inventory) -> None:
        assert inventory.card_cost_considering_deck("Lightning Bolt", 4) == 0.0


class TestDeckCost:
    """Tests for Inventory.deck_cost."""

    def test_near_complete_deck_floors_at_one(self, inventory: Inventory, red_deck: Deck) -> None:
        assert inventory.deck_cost(red_deck) == 1.0

    def test_complete_deck(self, inventory: Inventory, burn_deck: Deck) -> None:
        assert inventory.deck_cost(burn_deck) == 1.0

    def test_far_deck(self, inventory: Inventory) -> None:
        deck = Deck(
            name="Treasure",
            mainboard=[("Ragavan, Nimble Pilferer", 4), ("Fable of the Mirror-Breaker", 4)],
        )

        # 4 * 3.0 + 4 * 1.0 - (4 * 1.0 + 3.0)
        assert inventory.deck_cost(deck) == pytest.approx(9.0)

    def test_sideboard_ignored(self, inventory: Inventory) -> None:
        deck = Deck(
            name="Side",
            mainboard=[("Lightning Bolt", 4)],
            sideboard=[("Ragavan, Nimble Pilferer", 4)],
        )

        assert inventory.deck_cost(deck) == pytest.approx(5.0)
        assert inventory.deck_cost(deck, ignore_sideboard=True) == 1.0


class TestEnsureKnown:
    """Tests for filling collection gaps from the card source."""

    def test_unknown_cards_fetched_with_zero_amount(
        self, collection: Collection, wallet: Wildcards
    ) -> None:
        source = FakeCardSource(
            {"Opt": [CardPrinting(name="Opt", rarity=Rarity.COMMON, set_code="eld")]}
        )
        inventory = Inventory(collection, wallet, card_source=source)
        roster = Roster([Deck(name="Izzet", mainboard=[("Opt", 4), ("Lightning Bolt", 4)])])

        unresolved = inventory.ensure_known(roster)

        assert unresolved == []
        assert source.calls == ["Opt"]
        assert collection.owned_amount("Opt") == 0

    def test_each_name_fetched_once(self, collection: Collection, wallet: Wildcards) -> None:
        source = FakeCardSource({})
        inventory = Inventory(collection, wallet, card_source=source)
        roster = Roster(
            [
                Deck(name="A", mainboard=[("Black Lotus", 1)]),
                Deck(name="B", mainboard=[("A-Black Lotus", 1)]),
            ]
        )

        unresolved = inventory.ensure_known(roster)

        assert source.calls == ["Black Lotus"]
        assert unresolved == ["Black Lotus"]

    def test_lookup_failure_is_logged(
        self, collection: Collection, wallet: Wildcards, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = FakeCardSource({}, failing={"Opt"})
        inventory = Inventory(collection, wallet, card_source=source)
        roster = Roster([Deck(name="Izzet", mainboard=[("Opt", 4)])])

        with caplog.at_level(logging.WARNING):
            unresolved = inventory.ensure_known(roster)

        assert unresolved == ["Opt"]
        assert "Failed to fetch unknown card Opt" in caplog.text

    def test_incoming_cards_not_fetched(self, collection: Collection, wallet: Wildcards) -> None:
        source = FakeCardSource({})
        inventory = Inventory(collection, wallet, card_source=source)
        roster = Roster([Deck(name="Izzet", mainboard=[("Opt", 4)])])
        incoming = Collection()
        incoming.insert(4, "Opt", Rarity.COMMON, "eld")

        assert inventory.ensure_known(roster, incoming=incoming) == []
        assert source.calls == []

    def test_without_source(self, inventory: Inventory) -> None:
        roster = Roster([Deck(name="Izzet", mainboard=[("Opt", 4), ("Lightning Bolt", 4)])])

        assert inventory.ensure_known(roster) == ["Opt"]


class TestUpdateCollection:
    """Tests for Inventory.update_collection."""

    def test_merges_and_saves(self, collection: Collection, wallet: Wildcards) -> None:
        store = FakeStore()
        source = FakeCardSource(
            {"Opt": [CardPrinting(name="Opt", rarity=Rarity.COMMON, set_code="eld")]}
        )
        inventory = Inventory(collection, wallet, card_source=source, store=store)
        roster = Roster([Deck(name="Izzet", mainboard=[("Opt", 4)])])
        fresh = Collection()
        fresh.insert(2, "Fable of the Mirror-Breaker", Rarity.RARE, "neo")

        inventory.update_collection(fresh, roster)

        assert collection.owned_amount("Fable of the Mirror-Breaker") == 2
        assert "Opt" in collection
        assert store.saved == [collection]

    def test_save_without_store_is_noop(self, inventory: Inventory) -> None:
        inventory.save()
