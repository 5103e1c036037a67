"""
Wildcard economy.

Converts a wallet of wildcards into a relative cost per rarity. A rarity the
player holds few wildcards of is scarce, so crafting it costs more:

    coefficient(rarity) = total_wallet / (1 + wallet[rarity])
"""

from dataclasses import dataclass

from decktracker.models.rarity import CRAFTABLE_RARITIES, Rarity


@dataclass(frozen=True, slots=True)
class WildcardCoefficients:
    """Relative crafting cost of each craftable rarity."""

    common: float
    uncommon: float
    rare: float
    mythic: float

    def select(self, rarity: Rarity) -> float:
        """Cost coefficient for a rarity. Land and Unknown are free."""
        if rarity == Rarity.COMMON:
            return self.common
        if rarity == Rarity.UNCOMMON:
            return self.uncommon
        if rarity == Rarity.RARE:
            return self.rare
        if rarity == Rarity.MYTHIC:
            return self.mythic
        return 0.0

    def order(self) -> list[Rarity]:
        """
        Craftable rarities from cheapest to most expensive, then LAND.

        Equal coefficients keep enum order (sorted() is stable).
        """
        ordered = sorted(CRAFTABLE_RARITIES, key=self.select)
        return [*ordered, Rarity.LAND]


@dataclass(frozen=True, slots=True)
class Wildcards:
    """
    A wallet of wildcards, one pool per craftable rarity.

    Attributes:
        common: Common wildcards owned
        uncommon: Uncommon wildcards owned
        rare: Rare wildcards owned
        mythic: Mythic wildcards owned
    """

    common: int = 0
    uncommon: int = 0
    rare: int = 0
    mythic: int = 0

    def __post_init__(self) -> None:
        for rarity in CRAFTABLE_RARITIES:
            if self.select(rarity) < 0:
                raise ValueError(f"Wildcard count for {rarity.value} cannot be negative")

    def select(self, rarity: Rarity) -> int:
        """Wildcards held for a rarity. Land and Unknown have no pool."""
        if rarity == Rarity.COMMON:
            return self.common
        if rarity == Rarity.UNCOMMON:
            return self.uncommon
        if rarity == Rarity.RARE:
            return self.rare
        if rarity == Rarity.MYTHIC:
            return self.mythic
        return 0

    def total(self) -> int:
        """Total wildcards across all pools."""
        return self.common + self.uncommon + self.rare + self.mythic

    def coefficients(self) -> WildcardCoefficients:
        """Derive scarcity-weighted cost coefficients from this wallet."""
        total = float(self.total())
        return WildcardCoefficients(
            common=total / (1 + self.common),
            uncommon=total / (1 + self.uncommon),
            rare=total / (1 + self.rare),
            mythic=total / (1 + self.mythic),
        )
