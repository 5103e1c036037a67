"""
Client for the local MTG Arena tracker daemon.

The daemon reads the running Arena client and reports owned cards by Arena
id. Starting and stopping the daemon process is left to the user.
"""

import logging

import httpx

from decktracker.config import settings
from decktracker.models.card import CardPrinting
from decktracker.models.collection import MAX_PRINTING_AMOUNT, Collection, simplified_name
from decktracker.models.failure import CardLookupError
from decktracker.services.arena_ids import ArenaIdTranslator

logger = logging.getLogger(__name__)


class TrackerDaemonClient:
    """HTTP client for the tracker daemon's /cards and /status endpoints."""

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None) -> None:
        self.base_url = (base_url or settings.tracker_daemon_url).rstrip("/")
        self.client = client or httpx.Client(timeout=60.0)

    def close(self) -> None:
        self.client.close()

    def _get(self, path: str) -> dict:
        try:
            response = self.client.get(f"{self.base_url}{path}")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CardLookupError("tracker daemon", f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise CardLookupError("tracker daemon", str(e)) from e
        return response.json()

    def status(self) -> dict:
        """Raw daemon status document."""
        return self._get("/status")

    def owned_cards(self) -> dict[int, int]:
        """Owned copies per Arena id."""
        data = self._get("/cards")
        owned: dict[int, int] = {}
        for entry in data.get("cards", []):
            owned[int(entry["grpId"])] = int(entry["owned"])
        return owned


def fetch_collection(daemon: TrackerDaemonClient, translator: ArenaIdTranslator) -> Collection:
    """
    Build a fresh Collection from the daemon's owned cards.

    Ids Scryfall does not know (tokens, unreleased cards) are skipped.
    Several ids can share a (card, set), e.g. a showcase and a regular
    printing; their copies are added together.
    """
    collection = Collection()
    skipped = 0
    owned = daemon.owned_cards()
    totals: dict[tuple[str, str], tuple[CardPrinting, int]] = {}

    for arena_id, amount in owned.items():
        printing = translator.translate(arena_id)
        if printing is None:
            skipped += 1
            continue
        key = (simplified_name(printing.name), printing.set_code)
        _, so_far = totals.get(key, (printing, 0))
        totals[key] = (printing, so_far + amount)

    for printing, amount in totals.values():
        collection.insert(
            min(amount, MAX_PRINTING_AMOUNT),
            printing.name,
            printing.rarity,
            printing.set_code,
        )

    logger.info("Fetched %d owned printings, skipped %d unknown ids", len(owned) - skipped, skipped)
    return collection
