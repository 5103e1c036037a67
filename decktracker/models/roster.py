from collections.abc import Iterator
from dataclasses import dataclass, field

from decktracker.models.deck import Deck
from decktracker.models.failure import DeckNotFoundError, DuplicateDeckError


@dataclass
class Roster:
    """
    The user's decks, in insertion order and unique by name.

    Persisting the roster is the caller's job (see decktracker.storage).
    """

    decks: list[Deck] = field(default_factory=list)

    def __iter__(self) -> Iterator[Deck]:
        return iter(self.decks)

    def __len__(self) -> int:
        return len(self.decks)

    def __contains__(self, deck_name: object) -> bool:
        return any(deck.name == deck_name for deck in self.decks)

    def deck_names(self) -> list[str]:
        """Names of all decks, in roster order."""
        return [deck.name for deck in self.decks]

    def add_deck(self, deck: Deck) -> None:
        """
        Add a deck to the roster.

        Raises:
            DuplicateDeckError: If a deck with the same name exists
        """
        if deck.name in self:
            raise DuplicateDeckError(deck.name)
        self.decks.append(deck)

    def remove_deck(self, deck_name: str) -> Deck:
        """Remove a deck by name and return it."""
        for i, deck in enumerate(self.decks):
            if deck.name == deck_name:
                return self.decks.pop(i)
        raise DeckNotFoundError(deck_name)

    def find(self, deck_name: str) -> Deck:
        """Get a deck by name."""
        for deck in self.decks:
            if deck.name == deck_name:
                return deck
        raise DeckNotFoundError(deck_name)

    def replace(self, deck_name: str, deck: Deck) -> None:
        """Swap the deck named deck_name for another deck."""
        if deck.name != deck_name and deck.name in self:
            raise DuplicateDeckError(deck.name)
        for i, existing in enumerate(self.decks):
            if existing.name == deck_name:
                self.decks[i] = deck
                return
        raise DeckNotFoundError(deck_name)

    def cards(self, ignore_sideboard: bool = False) -> Iterator[tuple[str, int]]:
        """(card name, copies) for every deck, one entry per deck and card."""
        for deck in self.decks:
            yield from deck.cards(ignore_sideboard).items()
