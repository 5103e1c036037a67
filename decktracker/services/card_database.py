"""
Card database service.

Looks up the Arena printings of a card on Scryfall, so the collection knows
which rarities a card it has never owned can be crafted at.

Respects Scryfall rate limits (50-100ms between requests).
"""

import logging
import time
from typing import Any

import httpx

from decktracker.config import settings
from decktracker.models.card import CardPrinting
from decktracker.models.failure import CardLookupError
from decktracker.models.rarity import Rarity

logger = logging.getLogger(__name__)

USER_AGENT = "decktracker/1.0"


def printing_from_scryfall(card: dict[str, Any]) -> CardPrinting:
    """Build a CardPrinting from a Scryfall card object."""
    return CardPrinting(
        name=card["name"],
        rarity=Rarity.parse(card.get("rarity", "")),
        set_code=card.get("set", ""),
        arena_id=card.get("arena_id"),
    )


class RateLimiter:
    """Sleeps so that consecutive calls are at least `delay` seconds apart."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._last_request: float | None = None

    def wait(self) -> None:
        if self._last_request is not None:
            remaining = self.delay - (time.monotonic() - self._last_request)
            if remaining > 0:
                time.sleep(remaining)
        self._last_request = time.monotonic()


class ScryfallCardSource:
    """
    Fetches card printings that exist on MTG Arena.

    Usable as a context manager; closes its HTTP client on exit if it
    created it.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        base_url: str | None = None,
        delay: float | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
            timeout=30.0,
        )
        self.base_url = (base_url or settings.scryfall_url).rstrip("/")
        self.rate_limiter = RateLimiter(
            settings.scryfall_delay_seconds if delay is None else delay
        )

    def __enter__(self) -> "ScryfallCardSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def fetch_card(self, name: str) -> list[CardPrinting]:
        """
        All Arena printings of a card, matched by exact name.

        Returns an empty list when Scryfall knows no such card.

        Raises:
            CardLookupError: If the request fails for any other reason
        """
        url: str | None = f"{self.base_url}/cards/search"
        params: dict[str, str] = {"q": f'!"{name}" game:arena', "unique": "prints"}
        printings: list[CardPrinting] = []

        try:
            while url:
                self.rate_limiter.wait()
                response = self.client.get(url, params=params)
                if response.status_code == httpx.codes.NOT_FOUND:
                    logger.debug("Scryfall has no Arena printing of %s", name)
                    return printings
                response.raise_for_status()
                data = response.json()

                printings.extend(printing_from_scryfall(card) for card in data.get("data", []))

                url = data.get("next_page") if data.get("has_more") else None
                params = {}  # Next page URL includes params
        except httpx.HTTPStatusError as e:
            raise CardLookupError(name, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise CardLookupError(name, str(e)) from e

        logger.debug("Found %d printings of %s", len(printings), name)
        return printings
