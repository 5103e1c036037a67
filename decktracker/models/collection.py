"""
Card ownership ledger.

Maps a card name to every known printing of it (amount owned, rarity, set).
Printings with amount 0 are kept: they record that the card exists and at
which rarities it can be crafted.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from decktracker.config import BASIC_LANDS
from decktracker.models.deck import Deck
from decktracker.models.failure import UnknownCardError
from decktracker.models.rarity import Rarity

MAX_PRINTING_AMOUNT = 255


def simplified_name(name: str) -> str:
    """
    Normalize a card name for lookups.

    Strips the "A-" prefix of rebalanced Alchemy cards and keeps only the
    front face of split/double-faced cards ("Fire // Ice" -> "Fire").
    """
    name = name.strip()
    if name.startswith("A-"):
        name = name[2:]
    return name.split(" // ", 1)[0]


@dataclass(slots=True)
class Printing:
    """
    One printing of a card.

    Attributes:
        amount: Copies owned of this printing (0-255)
        rarity: Rarity of this printing
        set: Set code (e.g., "dmu")
    """

    amount: int
    rarity: Rarity
    set: str

    def __post_init__(self) -> None:
        if not 0 <= self.amount <= MAX_PRINTING_AMOUNT:
            raise ValueError(
                f"Printing amount must be between 0 and {MAX_PRINTING_AMOUNT}, got {self.amount}"
            )


class MissingCard(NamedTuple):
    """A card a deck needs more copies of."""

    name: str
    amount: int
    rarity: Rarity
    set_name: str


@dataclass
class Collection:
    """
    A user's card collection, keyed by card name.

    INVARIANT: at most one Printing per (card name, set).
    """

    content: dict[str, list[Printing]] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and simplified_name(name) in self.content

    def __len__(self) -> int:
        """Distinct cards; a split card stored under two names counts once."""
        return len({simplified_name(name) for name in self.content})

    def names(self) -> Iterator[str]:
        """All card names in the ledger, simplified and literal forms."""
        return iter(self.content)

    def printings(self) -> Iterator[tuple[str, Printing]]:
        """Iterate over (card name, printing) pairs."""
        for name, group in self.content.items():
            for printing in group:
                yield name, printing

    def get(self, name: str) -> list[Printing]:
        """
        Get all printings of a card.

        Raises:
            UnknownCardError: If the card is not in the ledger
        """
        key = simplified_name(name)
        group = self.content.get(key)
        if not group:
            raise UnknownCardError(key)
        return group

    def _upsert(self, name: str, amount: int, rarity: Rarity, set_name: str) -> None:
        printing = Printing(amount=amount, rarity=rarity, set=set_name)
        group = self.content.setdefault(name, [])
        for i, existing in enumerate(group):
            if existing.set == set_name:
                group[i] = printing
                return
        group.append(printing)

    def insert(self, amount: int, name: str, rarity: Rarity, set_name: str) -> None:
        """
        Insert or update a printing.

        The printing is stored under both the simplified and the literal name
        so lookups succeed whichever form a deck uses. Basic lands are always
        recorded as Rarity.LAND.
        """
        card_name = name.strip()
        if card_name in BASIC_LANDS:
            rarity = Rarity.LAND

        self._upsert(simplified_name(card_name), amount, rarity, set_name)
        if card_name != simplified_name(card_name):
            self._upsert(card_name, amount, rarity, set_name)

    def merge(self, other: "Collection") -> None:
        """
        Merge another collection into this one.

        Per (name, set) the incoming amount and rarity win.
        """
        for name, printing in list(other.printings()):
            self.insert(printing.amount, name, printing.rarity, printing.set)

    def owned_amount(self, name: str) -> int:
        """Copies owned across all printings of a card."""
        return sum(printing.amount for printing in self.get(name))

    def missing(self, deck: Deck, ignore_sideboard: bool = False) -> list[MissingCard]:
        """
        List every card of a deck with the number of copies still needed.

        Cards that are complete are included with amount 0. Rarity and set
        come from the printing with the lowest rarity ordinal.

        Raises:
            UnknownCardError: If a deck card has no known printing
        """
        missing: list[MissingCard] = []
        for card_name, needed in deck.cards(ignore_sideboard).items():
            group = self.get(card_name)
            owned = sum(printing.amount for printing in group)
            # min() keeps the first printing on ties
            lowest = min(group, key=lambda printing: printing.rarity.ordinal)
            missing.append(
                MissingCard(
                    name=card_name,
                    amount=max(0, needed - owned),
                    rarity=lowest.rarity,
                    set_name=lowest.set,
                )
            )
        return missing

    def count_missing_of_rarity(
        self, deck: Deck, ignore_sideboard: bool, rarity: Rarity
    ) -> int:
        """Total missing copies of a given rarity for a deck."""
        return sum(
            card.amount for card in self.missing(deck, ignore_sideboard) if card.rarity == rarity
        )
