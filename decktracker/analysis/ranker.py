"""
Deck and card ranking.

Orders roster decks from nearly complete to far from complete, and orders a
deck's missing cards by how much crafting them matters.
"""

import logging
from dataclasses import dataclass

from decktracker.analysis.inventory import Inventory
from decktracker.models.deck import Deck
from decktracker.models.failure import UnknownCardError
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster

logger = logging.getLogger(__name__)


@dataclass
class RankedDeck:
    """A deck with its completion cost."""

    deck: Deck
    cost: float
    missing_rares: int
    missing_mythics: int

    @property
    def is_complete(self) -> bool:
        """True if no rare or mythic copy is missing."""
        return self.missing_rares == 0 and self.missing_mythics == 0


@dataclass
class CraftSuggestion:
    """A missing card and the weight of crafting it for one deck."""

    name: str
    missing: int
    rarity: Rarity
    set_name: str
    weight: float


def rank_decks(
    roster: Roster,
    inventory: Inventory,
    ignore_sideboard: bool = False,
    skip_unknown: bool = False,
) -> list[RankedDeck]:
    """
    Rank roster decks by completion cost, cheapest first.

    Args:
        roster: Decks to rank
        inventory: Collection priced against the wallet
        ignore_sideboard: Only count mainboards (plus wishboards)
        skip_unknown: Drop decks with unknown cards instead of raising

    Returns:
        List of RankedDeck sorted by cost (lowest first, roster order on ties)
    """
    ranked: list[RankedDeck] = []

    for deck in roster:
        try:
            cost = inventory.deck_cost(deck, ignore_sideboard)
            missing = inventory.missing_cards(deck, ignore_sideboard)
        except UnknownCardError as e:
            if not skip_unknown:
                raise
            logger.warning("Not ranking deck %s: %s", deck.name, e.message)
            continue

        ranked.append(
            RankedDeck(
                deck=deck,
                cost=cost,
                missing_rares=sum(c.amount for c in missing if c.rarity == Rarity.RARE),
                missing_mythics=sum(c.amount for c in missing if c.rarity == Rarity.MYTHIC),
            )
        )

    ranked.sort(key=lambda r: r.cost)
    return ranked


def rank_missing_cards(
    deck: Deck,
    inventory: Inventory,
    ignore_sideboard: bool = False,
) -> list[CraftSuggestion]:
    """
    Rank a deck's missing cards, most important craft first.

    Weight comes from Inventory.card_cost_considering_deck: playsets weigh
    more than singles, and cards close to complete get a small bonus.
    """
    required = deck.cards(ignore_sideboard)
    suggestions: list[CraftSuggestion] = []

    for card in inventory.missing_cards(deck, ignore_sideboard):
        if card.amount == 0:
            continue
        suggestions.append(
            CraftSuggestion(
                name=card.name,
                missing=card.amount,
                rarity=card.rarity,
                set_name=card.set_name,
                weight=inventory.card_cost_considering_deck(card.name, required[card.name]),
            )
        )

    suggestions.sort(key=lambda s: s.weight, reverse=True)
    return suggestions
