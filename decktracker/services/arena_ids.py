"""
Arena card id translator.

The Arena client identifies cards by numeric id (grpId). Scryfall maps an id
to a printing; answers, including "no such card", are cached in a JSON file
so each id is requested once.
"""

import json
import logging
import os
from dataclasses import replace
from pathlib import Path

import httpx

from decktracker.config import settings
from decktracker.models.card import CardPrinting
from decktracker.models.failure import CardLookupError, SnapshotParseError, StorageError
from decktracker.models.rarity import Rarity
from decktracker.services.card_database import USER_AGENT, RateLimiter, printing_from_scryfall

logger = logging.getLogger(__name__)


class ArenaIdTranslator:
    """
    Translates Arena ids to printings, with a persistent cache.

    Call save() to write the cache back; nothing is written implicitly.
    """

    def __init__(
        self,
        cache_path: Path,
        client: httpx.Client | None = None,
        base_url: str | None = None,
        delay: float | None = None,
    ) -> None:
        self.cache_path = cache_path
        self.client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
            timeout=30.0,
        )
        self.base_url = (base_url or settings.scryfall_url).rstrip("/")
        self.rate_limiter = RateLimiter(
            settings.scryfall_delay_seconds if delay is None else delay
        )
        self.cache: dict[int, CardPrinting | None] = self._load()

    def close(self) -> None:
        self.client.close()

    def _load(self) -> dict[int, CardPrinting | None]:
        if not self.cache_path.exists():
            return {}
        try:
            with open(self.cache_path, encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(str(self.cache_path), str(e)) from e
        except OSError as e:
            raise StorageError(str(self.cache_path), str(e)) from e

        cache: dict[int, CardPrinting | None] = {}
        try:
            for key, value in raw.items():
                arena_id = int(key)
                if value is None:
                    cache[arena_id] = None
                else:
                    cache[arena_id] = CardPrinting(
                        name=value["name"],
                        rarity=Rarity.parse(value["rarity"]),
                        set_code=value["set"],
                        arena_id=arena_id,
                    )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SnapshotParseError(str(self.cache_path), f"malformed entry: {e!r}") from e
        return cache

    def save(self) -> None:
        """Write the cache file."""
        raw = {
            str(arena_id): None
            if printing is None
            else {"name": printing.name, "rarity": printing.rarity.value, "set": printing.set_code}
            for arena_id, printing in self.cache.items()
        }
        # Write next to the target then rename, so a crash never leaves half a file
        tmp_path = self.cache_path.with_name(self.cache_path.name + ".tmp")
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(raw, f)
            os.replace(tmp_path, self.cache_path)
        except OSError as e:
            raise StorageError(str(self.cache_path), str(e)) from e

    def translate(self, arena_id: int) -> CardPrinting | None:
        """
        Printing for an Arena id, or None if Scryfall does not know it.

        Raises:
            CardLookupError: If Scryfall answers with an unexpected status
        """
        if arena_id in self.cache:
            return self.cache[arena_id]

        self.rate_limiter.wait()
        label = f"arena id {arena_id}"
        try:
            response = self.client.get(f"{self.base_url}/cards/arena/{arena_id}")
        except httpx.RequestError as e:
            raise CardLookupError(label, str(e)) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("Scryfall does not know %s", label)
            self.cache[arena_id] = None
            return None
        if response.status_code != httpx.codes.OK:
            raise CardLookupError(label, f"HTTP {response.status_code}")

        printing = replace(printing_from_scryfall(response.json()), arena_id=arena_id)
        self.cache[arena_id] = printing
        return printing
