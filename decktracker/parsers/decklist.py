"""
Parser for MTG Arena decklist text.

Arena export format:
    <quantity> <card name> (<set_code>) <collector_number>

Example:
    Companion
    1 Lurrus of the Dream-Den

    Deck
    4 Lightning Bolt (LEB) 163
    4 Monastery Swiftspear (BRO) 144

    Sideboard
    2 Abrade (VOW) 139

A blank line after the first entries starts the sideboard, as Arena does
when the "Sideboard" header is omitted.
"""

import re
from enum import Enum
from pathlib import Path

from decktracker.models.deck import Deck
from decktracker.models.failure import DecklistParseError, StorageError

# Pattern: "4 Lightning Bolt (LEB) 163" or "4 Lightning Bolt"
# Groups: (quantity, rest of line)
LINE_PATTERN = re.compile(r"^(\d+)\s+(.+)$")


class _Section(Enum):
    COMPANION = "companion"
    MAIN = "main"
    SIDE = "side"


SECTION_HEADERS = {
    "companion": _Section.COMPANION,
    "deck": _Section.MAIN,
    "sideboard": _Section.SIDE,
}


def _card_name(rest: str) -> str:
    """Drop the trailing "(SET) 123" annotation from a card line."""
    words: list[str] = []
    for word in rest.split():
        if word.startswith("("):
            break
        words.append(word)
    return " ".join(words)


def parse_decklist(text: str, name: str = "Unnamed") -> Deck:
    """
    Parse decklist text into a Deck.

    Args:
        text: Raw decklist (clipboard paste or file contents)
        name: Name to give the deck

    Returns:
        Deck with mainboard, sideboard and companion filled in

    Raises:
        DecklistParseError: If a line is not "<count> <card name>"
    """
    deck = Deck(name=name)
    section = _Section.MAIN

    lines = text.splitlines()
    # Leading blank lines do not start the sideboard
    while lines and not lines[0].strip():
        lines.pop(0)

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()

        if not line:
            section = _Section.SIDE
            continue

        header = SECTION_HEADERS.get(line.lower())
        if header is not None:
            section = header
            continue

        match = LINE_PATTERN.match(line)
        if not match:
            raise DecklistParseError(line_number, raw_line)

        quantity, rest = match.groups()
        card_name = _card_name(rest)
        if not card_name:
            raise DecklistParseError(line_number, raw_line)

        if section is _Section.COMPANION:
            deck.companion = card_name
        elif section is _Section.MAIN:
            deck.mainboard.append((card_name, int(quantity)))
        else:
            deck.sideboard.append((card_name, int(quantity)))

    return deck


def parse_decklist_file(path: Path, name: str | None = None) -> Deck:
    """Parse a decklist file, naming the deck after the file stem by default."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(str(path), str(e)) from e
    return parse_decklist(text, name=name or path.stem)


def format_decklist(deck: Deck) -> str:
    """Render a Deck back to Arena decklist text."""
    lines: list[str] = []
    if deck.companion:
        lines.extend(["Companion", f"1 {deck.companion}", ""])

    lines.append("Deck")
    lines.extend(f"{amount} {card_name}" for card_name, amount in deck.mainboard)

    if deck.sideboard:
        lines.extend(["", "Sideboard"])
        lines.extend(f"{amount} {card_name}" for card_name, amount in deck.sideboard)

    return "\n".join(lines) + "\n"
