"""
Deck API endpoints.

Manage the roster and inspect what a deck is missing.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from decktracker.analysis.ranker import rank_missing_cards
from decktracker.api.dependencies import get_workspace
from decktracker.models.rarity import Rarity
from decktracker.parsers.decklist import parse_decklist
from decktracker.storage import Workspace

router = APIRouter(prefix="/decks", tags=["decks"])


class DeckSummary(BaseModel):
    """Summary of a roster deck."""

    name: str
    companion: str | None = None
    mainboard_cards: int
    sideboard_cards: int


class DeckListResponse(BaseModel):
    """Response model for listing decks."""

    decks: list[DeckSummary] = Field(default_factory=list)
    count: int = 0


class AddDeckRequest(BaseModel):
    """Request model for adding a deck from decklist text."""

    name: str = Field(..., min_length=1, description="Deck name, unique in the roster")
    text: str = Field(
        ...,
        description="Arena decklist text",
        examples=["Deck\n4 Lightning Bolt (STA) 42\n20 Mountain (NEO) 290"],
    )
    replace: bool = Field(
        default=False,
        description="Replace an existing deck with the same name",
    )


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    name: str
    deleted: bool


class MissingCardResponse(BaseModel):
    """A card the deck needs more copies of."""

    name: str
    missing: int
    rarity: Rarity
    set_name: str
    weight: float


class MissingCardsResponse(BaseModel):
    """Response model for a deck's missing cards."""

    deck_name: str
    deck_cost: float
    cards: list[MissingCardResponse] = Field(default_factory=list)


@router.get("", response_model=DeckListResponse)
async def list_decks(workspace: Annotated[Workspace, Depends(get_workspace)]) -> DeckListResponse:
    """List all roster decks in roster order."""
    decks = [
        DeckSummary(
            name=deck.name,
            companion=deck.companion,
            mainboard_cards=deck.maindeck_count(),
            sideboard_cards=sum(amount for _, amount in deck.sideboard),
        )
        for deck in workspace.roster
    ]
    return DeckListResponse(decks=decks, count=len(decks))


@router.post("", response_model=DeckSummary, status_code=status.HTTP_201_CREATED)
async def add_deck(
    request: AddDeckRequest,
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> DeckSummary:
    """
    Add a deck parsed from decklist text.

    Fails with 409 if the name is taken, unless replace is set.
    """
    if not request.text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Decklist text cannot be empty",
        )

    deck = parse_decklist(request.text, name=request.name)
    if request.replace and deck.name in workspace.roster:
        workspace.roster.replace(deck.name, deck)
    else:
        workspace.roster.add_deck(deck)
    await run_in_threadpool(workspace.store.save_roster, workspace.roster)

    return DeckSummary(
        name=deck.name,
        companion=deck.companion,
        mainboard_cards=deck.maindeck_count(),
        sideboard_cards=sum(amount for _, amount in deck.sideboard),
    )


@router.delete("/{deck_name}", response_model=DeleteResponse)
async def delete_deck(
    deck_name: str,
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> DeleteResponse:
    """Remove a deck from the roster."""
    workspace.roster.remove_deck(deck_name)
    await run_in_threadpool(workspace.store.save_roster, workspace.roster)
    return DeleteResponse(name=deck_name, deleted=True)


@router.get("/{deck_name}/missing", response_model=MissingCardsResponse)
async def get_missing_cards(
    deck_name: str,
    workspace: Annotated[Workspace, Depends(get_workspace)],
    ignore_sideboard: bool = False,
) -> MissingCardsResponse:
    """
    List the cards a deck is missing, most important craft first.

    Returns 404 if the deck, or one of its cards, is unknown.
    """
    deck = workspace.roster.find(deck_name)
    inventory = workspace.inventory
    suggestions = rank_missing_cards(deck, inventory, ignore_sideboard)

    return MissingCardsResponse(
        deck_name=deck.name,
        deck_cost=inventory.deck_cost(deck, ignore_sideboard),
        cards=[
            MissingCardResponse(
                name=s.name,
                missing=s.missing,
                rarity=s.rarity,
                set_name=s.set_name,
                weight=s.weight,
            )
            for s in suggestions
        ],
    )
