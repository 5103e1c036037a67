"""
Inventory cost model.

Combines the collection with the wildcard economy to answer "how expensive
is this card / this deck for me right now". Costs are relative scores used
for ranking, not wildcard counts.
"""

import logging
from typing import Protocol

from decktracker.config import MAX_USEFUL_COPIES
from decktracker.models.card import CardPrinting
from decktracker.models.collection import Collection, MissingCard, Printing, simplified_name
from decktracker.models.deck import Deck
from decktracker.models.failure import KnownError
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster
from decktracker.models.wildcards import WildcardCoefficients, Wildcards

logger = logging.getLogger(__name__)


class CardSource(Protocol):
    """Anything that can list the printings of a card by name."""

    def fetch_card(self, name: str) -> list[CardPrinting]: ...


class CollectionStore(Protocol):
    """Anything that can persist a collection snapshot."""

    def save_collection(self, collection: Collection) -> None: ...


class Inventory:
    """
    A collection priced against a wildcard wallet.

    The inventory never writes to disk on its own: call save() (or use
    decktracker.storage.open_workspace) to persist changes.
    """

    def __init__(
        self,
        collection: Collection,
        wildcards: Wildcards,
        card_source: CardSource | None = None,
        store: CollectionStore | None = None,
    ) -> None:
        self.collection = collection
        self.wildcards = wildcards
        self.coeffs: WildcardCoefficients = wildcards.coefficients()
        self.card_source = card_source
        self.store = store

    def card_amount(self, card_name: str) -> int:
        """Copies owned, capped at the 4 a deck can use."""
        return min(self.collection.owned_amount(card_name), MAX_USEFUL_COPIES)

    def cheapest_rarity(self, card_name: str) -> Rarity:
        """
        The cheapest rarity this card can be crafted at.

        Walks the wallet's cost order and returns the first rarity any
        printing of the card has. A card whose printings are all of unknown
        rarity yields Rarity.UNKNOWN.
        """
        group_rarities = {printing.rarity for printing in self.collection.get(card_name)}
        for rarity in self.coeffs.order():
            if rarity in group_rarities:
                return rarity
        return Rarity.UNKNOWN

    def cheapest_printing(self, card_name: str) -> Printing:
        """First printing of the card at its cheapest rarity."""
        cheapest = self.cheapest_rarity(card_name)
        group = self.collection.get(card_name)
        return next((p for p in group if p.rarity == cheapest), group[0])

    def card_cost(self, card_name: str) -> float:
        """Cost coefficient of the card's cheapest rarity."""
        return self.coeffs.select(self.cheapest_rarity(card_name))

    def card_cost_considering_deck(self, card_name: str, in_deck_amount: int) -> float:
        """
        Weight of crafting a card for a deck playing in_deck_amount copies.

        A four-of weighs more than a single. The 4/missing term breaks ties in
        favour of cards that are close to complete.
        """
        missing = max(0, in_deck_amount - self.card_amount(card_name))
        if missing == 0:
            return 0.0
        tiebreaker_bonus = MAX_USEFUL_COPIES / missing
        return self.card_cost(card_name) * in_deck_amount + tiebreaker_bonus

    def deck_cost(self, deck: Deck, ignore_sideboard: bool = False) -> float:
        """
        Relative cost of completing a deck, floored at 1.0.

        Decks within a few rares and a mythic of completion all score 1.0, so
        near-complete decks are not spread over tiny differences.
        """
        result = 0.0
        for card_name, amount in deck.cards(ignore_sideboard).items():
            missing = max(0, amount - self.card_amount(card_name))
            result += missing * self.card_cost(card_name)
        closeness_bound = self.coeffs.rare * 4.0 + self.coeffs.mythic
        return max(result - closeness_bound, 1.0)

    def ensure_known(self, roster: Roster, incoming: Collection | None = None) -> list[str]:
        """
        Look up every roster card the collection has never seen.

        Found printings are recorded with amount 0. Lookup failures are
        logged and skipped; the card stays unknown. Cards present in
        `incoming` are about to be merged and are not looked up.

        Returns:
            Names of cards that are still unknown afterwards
        """
        unresolved: list[str] = []
        seen: set[str] = set()
        for card_name, _ in roster.cards():
            name = simplified_name(card_name)
            if name in seen or name in self.collection:
                continue
            if incoming is not None and name in incoming:
                continue
            seen.add(name)

            if self.card_source is None:
                unresolved.append(name)
                continue

            try:
                printings = self.card_source.fetch_card(name)
            except KnownError as e:
                logger.warning("Failed to fetch unknown card %s: %s", name, e.message)
                unresolved.append(name)
                continue

            for printing in printings:
                self.collection.insert(0, printing.name, printing.rarity, printing.set_code)
            if name not in self.collection:
                logger.warning("Card database has no printing of %s", name)
                unresolved.append(name)

        return unresolved

    def update_collection(self, fresh: Collection, roster: Roster) -> None:
        """Fill roster gaps, merge freshly fetched ownership data, then persist."""
        unresolved = self.ensure_known(roster, incoming=fresh)
        if unresolved:
            logger.info("%d roster cards remain unknown", len(unresolved))
        self.collection.merge(fresh)
        logger.info("Merged %d fetched cards into the collection", len(fresh))
        self.save()

    def save(self) -> None:
        """Persist the collection through the configured store, if any."""
        if self.store is not None:
            self.store.save_collection(self.collection)

    def missing_cards(self, deck: Deck, ignore_sideboard: bool = False) -> list[MissingCard]:
        """Shortcut for Collection.missing."""
        return self.collection.missing(deck, ignore_sideboard)
