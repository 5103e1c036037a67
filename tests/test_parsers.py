"""Tests for decklist and collection export parsers."""

from pathlib import Path

import pytest

from decktracker.models.deck import Deck
from decktracker.models.failure import CollectionParseError, DecklistParseError, StorageError
from decktracker.models.rarity import Rarity
from decktracker.parsers.collection_csv import parse_collection_csv, parse_collection_csv_file
from decktracker.parsers.decklist import format_decklist, parse_decklist, parse_decklist_file


class TestParseDecklist:
    """Tests for Arena decklist parsing."""

    def test_sections(self, sample_arena_export: str) -> None:
        deck = parse_decklist(sample_arena_export, name="Mono Red")

        assert deck.name == "Mono Red"
        assert deck.mainboard == [
            ("Lightning Bolt", 4),
            ("Monastery Swiftspear", 4),
            ("Mountain", 20),
        ]
        assert deck.sideboard == [("Abrade", 2)]

    def test_companion(self) -> None:
        text = """Companion
1 Lurrus of the Dream-Den (IKO) 226

Deck
4 Ragavan, Nimble Pilferer (MH2) 138
"""
        deck = parse_decklist(text)

        assert deck.companion == "Lurrus of the Dream-Den"
        assert deck.mainboard == [("Ragavan, Nimble Pilferer", 4)]
        assert deck.sideboard == []
        assert deck.name == "Unnamed"

    def test_blank_line_starts_sideboard(self) -> None:
        deck = parse_decklist("4 Opt\n20 Island\n\n2 Negate\n")

        assert deck.mainboard == [("Opt", 4), ("Island", 20)]
        assert deck.sideboard == [("Negate", 2)]

    def test_leading_blank_lines_skipped(self) -> None:
        deck = parse_decklist("\n\n4 Opt\n")

        assert deck.mainboard == [("Opt", 4)]

    def test_headers_case_insensitive(self) -> None:
        deck = parse_decklist("DECK\n4 Opt\nSIDEBOARD\n1 Negate\n")

        assert deck.mainboard == [("Opt", 4)]
        assert deck.sideboard == [("Negate", 1)]

    def test_split_card_name_kept(self) -> None:
        deck = parse_decklist("2 Fire // Ice (MH2) 290\n")

        assert deck.mainboard == [("Fire // Ice", 2)]

    def test_bad_line(self) -> None:
        with pytest.raises(DecklistParseError) as exc_info:
            parse_decklist("Deck\n4 Opt\nfour Negate\n")

        assert exc_info.value.line_number == 3
        assert exc_info.value.detail == "found `four Negate`"
        assert exc_info.value.status_code == 400

    def test_count_without_name(self) -> None:
        with pytest.raises(DecklistParseError):
            parse_decklist("4 (ELD) 59\n")

    def test_format_round_trip(self) -> None:
        deck = Deck(
            name="Rakdos",
            mainboard=[("Thoughtseize", 4), ("Swamp", 10)],
            sideboard=[("Duress", 2)],
            companion="Kroxa, Titan of Death's Hunger",
        )

        assert parse_decklist(format_decklist(deck), name="Rakdos") == deck

    def test_file_name_is_default_deck_name(self, tmp_path: Path) -> None:
        path = tmp_path / "izzet_phoenix.txt"
        path.write_text("4 Opt\n", encoding="utf-8")

        assert parse_decklist_file(path).name == "izzet_phoenix"
        assert parse_decklist_file(path, name="Phoenix").name == "Phoenix"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StorageError, match="Failed to access"):
            parse_decklist_file(tmp_path / "nope.txt")


class TestParseCollectionCsv:
    """Tests for semicolon collection exports."""

    def test_rows(self) -> None:
        text = """Count;Name;Set;Number;Rarity
4;Lightning Bolt;sta;42;uncommon
1;Sheoldred, the Apocalypse;dmu;107;mythic
12;Island;dmu;263;common
"""
        collection = parse_collection_csv(text)

        assert collection.owned_amount("Lightning Bolt") == 4
        assert collection.get("Sheoldred, the Apocalypse")[0].rarity == Rarity.MYTHIC
        assert collection.get("Island")[0].rarity == Rarity.LAND

    def test_blank_rows_skipped(self) -> None:
        collection = parse_collection_csv("header\n\n2;Opt;eld;59;common\n\n")

        assert collection.owned_amount("Opt") == 2

    def test_header_only(self) -> None:
        assert len(parse_collection_csv("Count;Name;Set;Number;Rarity\n")) == 0

    def test_short_row(self) -> None:
        with pytest.raises(CollectionParseError) as exc_info:
            parse_collection_csv("header\n2;Opt;eld;59;common\n2;Opt;eld\n", source="export.csv")

        assert exc_info.value.line_number == 3
        assert "export.csv" in exc_info.value.message

    def test_bad_amount(self) -> None:
        with pytest.raises(CollectionParseError):
            parse_collection_csv("header\nlots;Opt;eld;59;common\n")

    def test_amount_out_of_range(self) -> None:
        with pytest.raises(CollectionParseError):
            parse_collection_csv("header\n300;Opt;eld;59;common\n")

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "collection.csv"
        path.write_text("header\n3;Opt;eld;59;common\n", encoding="utf-8")

        assert parse_collection_csv_file(path).owned_amount("Opt") == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StorageError) as exc_info:
            parse_collection_csv_file(tmp_path / "nope.csv")

        assert exc_info.value.path == str(tmp_path / "nope.csv")
