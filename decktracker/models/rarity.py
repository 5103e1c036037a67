from enum import Enum


class Rarity(str, Enum):
    """
    Card rarity tiers, in ordinal order.

    LAND and UNKNOWN never consume wildcards. The ordinal is only used to pick
    a representative printing; crafting cost comes from the wildcard wallet.
    """

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    LAND = "land"
    UNKNOWN = "unknown"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @property
    def is_craftable(self) -> bool:
        """True for the four rarities that have a wildcard pool."""
        return self in CRAFTABLE_RARITIES

    @classmethod
    def parse(cls, value: str) -> "Rarity":
        """Parse a rarity string, mapping anything unrecognised to UNKNOWN."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


_ORDINALS = {rarity: i for i, rarity in enumerate(Rarity)}

CRAFTABLE_RARITIES = (Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.MYTHIC)
