from decktracker.parsers.collection_csv import (
    parse_collection_csv,
    parse_collection_csv_file,
)
from decktracker.parsers.decklist import (
    format_decklist,
    parse_decklist,
    parse_decklist_file,
)

__all__ = [
    "format_decklist",
    "parse_collection_csv",
    "parse_collection_csv_file",
    "parse_decklist",
    "parse_decklist_file",
]
