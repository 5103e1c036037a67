"""
Crafting recommendation endpoint.

The search is CPU bound and may run for a while, so it is executed in the
threadpool with the configured timeout.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from decktracker.analysis.recommender import CraftRecommender
from decktracker.api.dependencies import get_workspace
from decktracker.config import settings
from decktracker.storage import Workspace

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


class RecommendationRequest(BaseModel):
    """Request model for a crafting recommendation."""

    rares: int = Field(..., ge=0, description="Rare wildcards expected over the horizon")
    mythics: int = Field(..., ge=0, description="Mythic wildcards expected over the horizon")
    ignore_sideboard: bool = False
    starting_selection: list[str] = Field(
        default_factory=list,
        description="Deck names to keep in every plan when they fit",
    )
    policy: Literal["strict", "degraded"] | None = Field(
        default=None,
        description="How to treat decks with unknown cards (defaults to server setting)",
    )


class RecommendationResponse(BaseModel):
    """All plans tied for the most completed decks."""

    plans: list[list[str]] = Field(default_factory=list)
    deck_count: int = 0
    relevant_decks: int = 0
    rare_rows: int = 0
    mythic_rows: int = 0
    explored_states: int = 0
    skipped_decks: list[str] = Field(default_factory=list)


@router.post("", response_model=RecommendationResponse)
async def create_recommendation(
    request: RecommendationRequest,
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> RecommendationResponse:
    """
    Find the largest sets of decks completable within the wildcard limits.

    Returns 404 if a deck references a card the collection does not know
    (strict policy) and 503 if the search times out.
    """
    recommender = CraftRecommender(
        request.rares,
        request.mythics,
        workspace.roster,
        workspace.inventory.collection,
        ignore_sideboard=request.ignore_sideboard,
        starting_selection=request.starting_selection,
        policy=request.policy,
        timeout=settings.recommend_timeout_seconds,
    )
    plans = await run_in_threadpool(recommender.recommend)
    stats = recommender.stats

    return RecommendationResponse(
        plans=plans,
        deck_count=len(plans[0]) if plans else 0,
        relevant_decks=stats.relevant_decks,
        rare_rows=stats.rare_rows,
        mythic_rows=stats.mythic_rows,
        explored_states=stats.explored_states,
        skipped_decks=stats.skipped_decks,
    )
