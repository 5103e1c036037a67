"""
Inventory API endpoints.

Wildcard coefficients and deck completion costs.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from decktracker.analysis.ranker import rank_decks
from decktracker.api.dependencies import get_workspace
from decktracker.models.rarity import Rarity
from decktracker.storage import Workspace

router = APIRouter(prefix="/inventory", tags=["inventory"])


class WildcardsResponse(BaseModel):
    """Wallet, derived cost coefficients and the cheapest-first rarity order."""

    wallet: dict[str, int]
    coefficients: dict[str, float]
    order: list[Rarity]


class DeckCostResponse(BaseModel):
    """Completion cost of one deck."""

    name: str
    cost: float
    missing_rares: int
    missing_mythics: int
    is_complete: bool


class DeckCostsResponse(BaseModel):
    """Deck costs, cheapest first."""

    decks: list[DeckCostResponse] = Field(default_factory=list)


@router.get("/wildcards", response_model=WildcardsResponse)
async def get_wildcards(
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> WildcardsResponse:
    """Get the wildcard wallet and the cost it implies per rarity."""
    inventory = workspace.inventory
    wallet = inventory.wildcards
    coeffs = inventory.coeffs
    return WildcardsResponse(
        wallet={
            "common": wallet.common,
            "uncommon": wallet.uncommon,
            "rare": wallet.rare,
            "mythic": wallet.mythic,
        },
        coefficients={
            "common": coeffs.common,
            "uncommon": coeffs.uncommon,
            "rare": coeffs.rare,
            "mythic": coeffs.mythic,
        },
        order=coeffs.order(),
    )


@router.get("/decks", response_model=DeckCostsResponse)
async def get_deck_costs(
    workspace: Annotated[Workspace, Depends(get_workspace)],
    ignore_sideboard: bool = False,
) -> DeckCostsResponse:
    """
    Rank roster decks from nearly complete to far from complete.

    Decks with cards missing from the collection are left out.
    """
    ranked = rank_decks(
        workspace.roster,
        workspace.inventory,
        ignore_sideboard=ignore_sideboard,
        skip_unknown=True,
    )
    return DeckCostsResponse(
        decks=[
            DeckCostResponse(
                name=r.deck.name,
                cost=r.cost,
                missing_rares=r.missing_rares,
                missing_mythics=r.missing_mythics,
                is_complete=r.is_complete,
            )
            for r in ranked
        ]
    )
