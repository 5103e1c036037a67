"""
Snapshot persistence.

The roster, collection and wildcard wallet are each stored as one JSON
document, read whole at start-up and written whole on save. Documents are
validated with pydantic on load.

Nothing here saves implicitly. open_workspace() gives a scope that flushes
the roster and collection when it exits.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from decktracker.analysis.inventory import CardSource, Inventory
from decktracker.config import Settings, settings
from decktracker.models.collection import Collection, Printing
from decktracker.models.deck import Deck
from decktracker.models.failure import KnownError, SnapshotParseError, StorageError
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster
from decktracker.models.wildcards import Wildcards

logger = logging.getLogger(__name__)


# =============================================================================
# DOCUMENT SCHEMAS
# =============================================================================


class PrintingDocument(BaseModel):
    amount: int = Field(ge=0, le=255)
    rarity: Rarity
    set: str


class DeckDocument(BaseModel):
    name: str
    companion: str | None = None
    mainboard: list[tuple[str, int]] = Field(default_factory=list)
    sideboard: list[tuple[str, int]] = Field(default_factory=list)


class WildcardsDocument(BaseModel):
    common: int = Field(default=0, ge=0)
    uncommon: int = Field(default=0, ge=0)
    rare: int = Field(default=0, ge=0)
    mythic: int = Field(default=0, ge=0)


RosterDocument = TypeAdapter(list[DeckDocument])
CollectionDocument = TypeAdapter(dict[str, list[PrintingDocument]])


# =============================================================================
# STORE
# =============================================================================


class SnapshotStore:
    """Reads and writes whole-document JSON snapshots."""

    def __init__(self, roster_path: Path, collection_path: Path, wallet_path: Path) -> None:
        self.roster_path = roster_path
        self.collection_path = collection_path
        self.wallet_path = wallet_path

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "SnapshotStore":
        config = config or settings
        return cls(
            roster_path=config.data_path(config.roster_file),
            collection_path=config.data_path(config.collection_file),
            wallet_path=config.data_path(config.wallet_file),
        )

    def _read(self, path: Path) -> bytes | None:
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(str(path), str(e)) from e

    def _write(self, path: Path, data: bytes) -> None:
        # Write next to the target then rename, so a crash never leaves half a file
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(str(path), str(e)) from e

    # --- Roster ---

    def load_roster(self) -> Roster:
        """Load the roster. A missing file is an empty roster."""
        raw = self._read(self.roster_path)
        if raw is None:
            return Roster()
        try:
            documents = RosterDocument.validate_json(raw)
        except ValidationError as e:
            raise SnapshotParseError(str(self.roster_path), str(e)) from e
        return Roster(
            decks=[
                Deck(
                    name=doc.name,
                    mainboard=list(doc.mainboard),
                    sideboard=list(doc.sideboard),
                    companion=doc.companion,
                )
                for doc in documents
            ]
        )

    def save_roster(self, roster: Roster) -> None:
        documents = [
            DeckDocument(
                name=deck.name,
                companion=deck.companion,
                mainboard=deck.mainboard,
                sideboard=deck.sideboard,
            )
            for deck in roster
        ]
        self._write(self.roster_path, RosterDocument.dump_json(documents))

    # --- Collection ---

    def load_collection(self) -> Collection:
        """Load the collection. A missing file is an empty collection."""
        raw = self._read(self.collection_path)
        if raw is None:
            return Collection()
        try:
            document = CollectionDocument.validate_json(raw)
        except ValidationError as e:
            raise SnapshotParseError(str(self.collection_path), str(e)) from e
        return Collection(
            content={
                name: [Printing(amount=p.amount, rarity=p.rarity, set=p.set) for p in group]
                for name, group in document.items()
            }
        )

    def save_collection(self, collection: Collection) -> None:
        document = {
            name: [
                PrintingDocument(amount=p.amount, rarity=p.rarity, set=p.set) for p in group
            ]
            for name, group in collection.content.items()
        }
        self._write(self.collection_path, CollectionDocument.dump_json(document))

    # --- Wildcards ---

    def load_wildcards(self) -> Wildcards:
        """Load the wallet. A missing file is an empty wallet."""
        raw = self._read(self.wallet_path)
        if raw is None:
            return Wildcards()
        try:
            doc = WildcardsDocument.model_validate_json(raw)
        except ValidationError as e:
            raise SnapshotParseError(str(self.wallet_path), str(e)) from e
        return Wildcards(common=doc.common, uncommon=doc.uncommon, rare=doc.rare, mythic=doc.mythic)

    def save_wildcards(self, wildcards: Wildcards) -> None:
        doc = WildcardsDocument(
            common=wildcards.common,
            uncommon=wildcards.uncommon,
            rare=wildcards.rare,
            mythic=wildcards.mythic,
        )
        self._write(self.wallet_path, doc.model_dump_json().encode())


# =============================================================================
# WORKSPACE
# =============================================================================


@dataclass
class Workspace:
    """The loaded roster and inventory of one process."""

    roster: Roster
    inventory: Inventory
    store: SnapshotStore

    def flush(self) -> None:
        """Write the roster and collection snapshots."""
        self.store.save_roster(self.roster)
        self.inventory.save()


@contextmanager
def open_workspace(
    store: SnapshotStore | None = None,
    card_source: CardSource | None = None,
) -> Iterator[Workspace]:
    """
    Load the roster, collection and wallet; flush on exit.

    Write failures at exit are logged, not raised: the caller is done with
    the data by then.
    """
    store = store or SnapshotStore.from_settings()
    workspace = Workspace(
        roster=store.load_roster(),
        inventory=Inventory(
            store.load_collection(),
            store.load_wildcards(),
            card_source=card_source,
            store=store,
        ),
        store=store,
    )
    try:
        yield workspace
    finally:
        try:
            workspace.flush()
        except KnownError as e:
            logger.error("Failed to save workspace on close: %s (%s)", e.message, e.detail)
