from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from decktracker.api import (
    decks_router,
    health_router,
    inventory_router,
    recommendations_router,
)
from decktracker.config import settings
from decktracker.models.failure import KnownError
from decktracker.services.card_database import ScryfallCardSource
from decktracker.storage import SnapshotStore, open_workspace


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load snapshots at startup and flush them at shutdown."""
    with ScryfallCardSource() as card_source:
        with open_workspace(SnapshotStore.from_settings(), card_source) as workspace:
            app.state.workspace = workspace
            yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("decktracker"),
    lifespan=lifespan,
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures with their status code and a FailureDetail body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_detail().model_dump(mode="json"),
    )


app.include_router(decks_router)
app.include_router(health_router)
app.include_router(inventory_router)
app.include_router(recommendations_router)
