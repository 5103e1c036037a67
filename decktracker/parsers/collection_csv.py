"""
Parser for semicolon-separated collection exports.

Expected layout (first line is a header and is skipped):
    amount;name;set;<ignored>;rarity

Example:
    Count;Name;Set;Number;Rarity
    4;Lightning Bolt;sta;42;uncommon
    1;Sheoldred, the Apocalypse;dmu;107;mythic
"""

import csv
from io import StringIO
from pathlib import Path

from decktracker.models.collection import Collection
from decktracker.models.failure import CollectionParseError, StorageError
from decktracker.models.rarity import Rarity


def parse_collection_csv(text: str, source: str | None = None) -> Collection:
    """
    Parse a collection export into a Collection.

    Args:
        text: Raw CSV text
        source: File name used in error messages

    Raises:
        CollectionParseError: If a row is short or its amount is not 0-255
    """
    collection = Collection()
    reader = csv.reader(StringIO(text), delimiter=";")

    # Header
    next(reader, None)

    for row in reader:
        line_number = reader.line_num
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < 5:
            raise CollectionParseError(line_number, ";".join(row), source)

        amount_str, name, set_code, _, rarity_str = (cell.strip() for cell in row[:5])
        try:
            amount = int(amount_str)
            collection.insert(amount, name, Rarity.parse(rarity_str), set_code)
        except ValueError as e:
            raise CollectionParseError(line_number, ";".join(row), source) from e

    return collection


def parse_collection_csv_file(path: Path) -> Collection:
    """Parse a collection export file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(str(path), str(e)) from e
    return parse_collection_csv(text, source=str(path))
