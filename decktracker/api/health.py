"""
Health check endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from decktracker.api.dependencies import get_workspace
from decktracker.storage import Workspace

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    decks: int
    known_cards: int


@router.get("/health", response_model=HealthResponse)
async def health(workspace: Annotated[Workspace, Depends(get_workspace)]) -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running, with the size of the loaded data.
    """
    return HealthResponse(
        status="healthy",
        decks=len(workspace.roster),
        known_cards=len(workspace.inventory.collection),
    )
