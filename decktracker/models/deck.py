from dataclasses import dataclass, field, replace

from decktracker.config import WISHBOARD_SIZE, WISHBOARD_TRIGGER


@dataclass
class Deck:
    """
    A constructed decklist.

    Entries keep file order and may repeat a card name; repeated names are
    coalesced when the deck is queried.

    Attributes:
        name: Deck name, unique within a roster
        mainboard: (card name, copies) entries
        sideboard: (card name, copies) entries
        companion: Companion card name, if any
    """

    name: str = "Unnamed"
    mainboard: list[tuple[str, int]] = field(default_factory=list)
    sideboard: list[tuple[str, int]] = field(default_factory=list)
    companion: str | None = None

    @property
    def has_wishboard(self) -> bool:
        """True if the mainboard can fetch sideboard cards during play."""
        return any(name == WISHBOARD_TRIGGER for name, _ in self.mainboard)

    def cards(self, ignore_sideboard: bool = False) -> dict[str, int]:
        """
        Required copies per distinct card name.

        The sideboard is skipped when ignore_sideboard is set, except for a
        wishboard deck, whose first WISHBOARD_SIZE sideboard entries still
        count because they are effectively part of the main deck.
        """
        totals: dict[str, int] = {}
        for card_name, amount in self.mainboard:
            totals[card_name] = totals.get(card_name, 0) + amount

        if not ignore_sideboard:
            sideboard = self.sideboard
        elif self.has_wishboard:
            sideboard = self.sideboard[:WISHBOARD_SIZE]
        else:
            sideboard = []

        for card_name, amount in sideboard:
            totals[card_name] = totals.get(card_name, 0) + amount
        return totals

    def contains(self, card_name: str, ignore_sideboard: bool = False) -> bool:
        """Check if the mainboard, or the sideboard unless ignored, lists a card."""
        if any(name == card_name for name, _ in self.mainboard):
            return True
        if ignore_sideboard:
            return False
        return any(name == card_name for name, _ in self.sideboard)

    def renamed(self, name: str) -> "Deck":
        """Copy of this deck under another name."""
        return replace(
            self,
            name=name,
            mainboard=list(self.mainboard),
            sideboard=list(self.sideboard),
        )

    def maindeck_count(self) -> int:
        """Total cards in the mainboard."""
        return sum(amount for _, amount in self.mainboard)
