from dataclasses import dataclass

from decktracker.models.rarity import Rarity


@dataclass(frozen=True, slots=True)
class CardPrinting:
    """
    A printing as reported by the card database.

    Attributes:
        name: Card name exactly as it appears in Arena
        rarity: Rarity of this printing
        set_code: Lowercase set code (e.g., "dmu", "khm")
        arena_id: Arena's internal card ID, when known
    """

    name: str
    rarity: Rarity
    set_code: str
    arena_id: int | None = None
