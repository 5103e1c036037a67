"""Tests for Arena id translation and the tracker daemon client."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from decktracker.models.failure import CardLookupError, SnapshotParseError
from decktracker.models.rarity import Rarity
from decktracker.services.arena_ids import ArenaIdTranslator
from decktracker.services.tracker_daemon import TrackerDaemonClient, fetch_collection

SCRYFALL = "https://api.scryfall.com"
DAEMON = "http://localhost:6842"

SHEOLDRED = {"name": "Sheoldred, the Apocalypse", "rarity": "mythic", "set": "dmu"}
ISLAND = {"name": "Island", "rarity": "common", "set": "dmu"}


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "arena_ids.json"


@pytest.fixture
def translator(cache_path: Path) -> ArenaIdTranslator:
    return ArenaIdTranslator(cache_path, base_url=SCRYFALL, delay=0)


class TestArenaIdTranslator:
    """Tests for ArenaIdTranslator."""

    @respx.mock
    def test_translate_and_cache(self, translator: ArenaIdTranslator) -> None:
        route = respx.get(f"{SCRYFALL}/cards/arena/82120").mock(
            return_value=httpx.Response(200, json=SHEOLDRED)
        )

        first = translator.translate(82120)
        second = translator.translate(82120)

        assert first is not None
        assert first.name == "Sheoldred, the Apocalypse"
        assert first.rarity == Rarity.MYTHIC
        assert first.arena_id == 82120
        assert second == first
        assert route.call_count == 1

    @respx.mock
    def test_not_found_cached_as_none(self, translator: ArenaIdTranslator) -> None:
        route = respx.get(f"{SCRYFALL}/cards/arena/1").mock(return_value=httpx.Response(404))

        assert translator.translate(1) is None
        assert translator.translate(1) is None
        assert route.call_count == 1

    @respx.mock
    def test_unexpected_status(self, translator: ArenaIdTranslator) -> None:
        respx.get(f"{SCRYFALL}/cards/arena/2").mock(return_value=httpx.Response(503))

        with pytest.raises(CardLookupError, match="arena id 2"):
            translator.translate(2)

    @respx.mock
    def test_cache_survives_save(self, translator: ArenaIdTranslator, cache_path: Path) -> None:
        respx.get(f"{SCRYFALL}/cards/arena/82120").mock(
            return_value=httpx.Response(200, json=SHEOLDRED)
        )
        respx.get(f"{SCRYFALL}/cards/arena/1").mock(return_value=httpx.Response(404))
        translator.translate(82120)
        translator.translate(1)

        translator.save()
        reloaded = ArenaIdTranslator(cache_path, base_url=SCRYFALL, delay=0)

        assert json.loads(cache_path.read_text())["1"] is None
        assert reloaded.cache[1] is None
        assert reloaded.cache[82120] == translator.cache[82120]

    def test_corrupt_cache(self, cache_path: Path) -> None:
        cache_path.write_text("{not json")

        with pytest.raises(SnapshotParseError):
            ArenaIdTranslator(cache_path, delay=0)

    @pytest.mark.parametrize(
        "raw",
        [
            {"82120": {"name": "Sheoldred, the Apocalypse", "set": "dmu"}},
            {"not-an-id": None},
            {"82120": "Sheoldred"},
            ["82120"],
        ],
    )
    def test_malformed_cache_entry(self, cache_path: Path, raw: object) -> None:
        cache_path.write_text(json.dumps(raw))

        with pytest.raises(SnapshotParseError, match="Failed to decode snapshot"):
            ArenaIdTranslator(cache_path, delay=0)

    def test_save_leaves_no_temp_file(self, translator: ArenaIdTranslator, cache_path: Path) -> None:
        translator.cache[1] = None

        translator.save()

        assert json.loads(cache_path.read_text()) == {"1": None}
        assert not cache_path.with_name(cache_path.name + ".tmp").exists()


class TestTrackerDaemon:
    """Tests for the tracker daemon client."""

    @respx.mock
    def test_owned_cards(self) -> None:
        respx.get(f"{DAEMON}/cards").mock(
            return_value=httpx.Response(
                200, json={"cards": [{"grpId": 82120, "owned": 1}, {"grpId": 75557, "owned": 4}]}
            )
        )

        daemon = TrackerDaemonClient(DAEMON)

        assert daemon.owned_cards() == {82120: 1, 75557: 4}

    @respx.mock
    def test_status(self) -> None:
        respx.get(f"{DAEMON}/status").mock(
            return_value=httpx.Response(200, json={"isRunning": True})
        )

        assert TrackerDaemonClient(DAEMON).status() == {"isRunning": True}

    @respx.mock
    def test_daemon_down(self) -> None:
        respx.get(f"{DAEMON}/cards").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(CardLookupError, match="tracker daemon"):
            TrackerDaemonClient(DAEMON).owned_cards()

    @respx.mock
    def test_fetch_collection(self, translator: ArenaIdTranslator) -> None:
        respx.get(f"{DAEMON}/cards").mock(
            return_value=httpx.Response(
                200,
                json={
                    "cards": [
                        {"grpId": 82120, "owned": 1},
                        {"grpId": 75557, "owned": 300},
                        {"grpId": 1, "owned": 2},
                    ]
                },
            )
        )
        respx.get(f"{SCRYFALL}/cards/arena/82120").mock(
            return_value=httpx.Response(200, json=SHEOLDRED)
        )
        respx.get(f"{SCRYFALL}/cards/arena/75557").mock(
            return_value=httpx.Response(200, json=ISLAND)
        )
        respx.get(f"{SCRYFALL}/cards/arena/1").mock(return_value=httpx.Response(404))

        collection = fetch_collection(TrackerDaemonClient(DAEMON), translator)

        assert collection.owned_amount("Sheoldred, the Apocalypse") == 1
        assert collection.owned_amount("Island") == 255
        assert collection.get("Island")[0].rarity == Rarity.LAND
        assert len(collection) == 2

    @respx.mock
    def test_ids_sharing_a_set_are_summed(self, translator: ArenaIdTranslator) -> None:
        """A showcase and a regular printing in one set add their copies."""
        respx.get(f"{DAEMON}/cards").mock(
            return_value=httpx.Response(
                200,
                json={
                    "cards": [
                        {"grpId": 82120, "owned": 2},
                        {"grpId": 82400, "owned": 2},
                        {"grpId": 75557, "owned": 200},
                        {"grpId": 75600, "owned": 100},
                    ]
                },
            )
        )
        respx.get(f"{SCRYFALL}/cards/arena/82120").mock(
            return_value=httpx.Response(200, json=SHEOLDRED)
        )
        respx.get(f"{SCRYFALL}/cards/arena/82400").mock(
            return_value=httpx.Response(200, json=SHEOLDRED)
        )
        respx.get(f"{SCRYFALL}/cards/arena/75557").mock(
            return_value=httpx.Response(200, json=ISLAND)
        )
        respx.get(f"{SCRYFALL}/cards/arena/75600").mock(
            return_value=httpx.Response(200, json=ISLAND)
        )

        collection = fetch_collection(TrackerDaemonClient(DAEMON), translator)

        assert collection.owned_amount("Sheoldred, the Apocalypse") == 4
        assert len(collection.get("Sheoldred, the Apocalypse")) == 1
        assert collection.owned_amount("Island") == 255
