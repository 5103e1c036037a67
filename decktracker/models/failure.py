"""
Failure classification.

Every error the system knows how to explain is a KnownError carrying a
FailureKind, a user-facing message and the HTTP status it maps to. The API
layer converts them into a FailureDetail body; the CLI prints the message.

Anything that is not a KnownError is a bug and propagates unchanged.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Data failures
    UNKNOWN_CARD = "unknown_card"
    PARSE_ERROR = "parse_error"

    # Roster failures
    DECK_NOT_FOUND = "deck_not_found"
    DUPLICATE_DECK = "duplicate_deck"

    # Service failures
    STORAGE_ERROR = "storage_error"
    EXTERNAL_API_ERROR = "external_api_error"
    SEARCH_CANCELLED = "search_cancelled"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class UnknownCardError(KnownError):
    """
    A card is absent from the collection ledger.

    Not retried: resolving it needs a card database lookup first.
    """

    def __init__(self, card_name: str):
        self.card_name = card_name
        super().__init__(
            kind=FailureKind.UNKNOWN_CARD,
            message=f"Unknown card found: {card_name}",
            suggestion="Run `decktracker update-collection` before.",
            status_code=404,
        )


class ParseError(KnownError):
    """Malformed input text or document. Fatal to a single operation."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.PARSE_ERROR,
            message=message,
            detail=detail,
            status_code=400,
        )


class DecklistParseError(ParseError):
    """A decklist line is not of the form `<count> <card name>`."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Expected line {line_number} to be of the form `{{integer}} {{card_name}}`",
            detail=f"found `{line}`",
        )


class CollectionParseError(ParseError):
    """A collection export line is not in the expected format."""

    def __init__(self, line_number: int, line: str, source: str | None = None):
        self.line_number = line_number
        self.line = line
        where = f" in {source}" if source else ""
        super().__init__(
            f"Failed to read line {line_number}{where}, as it is not in the expected format",
            detail=line,
        )


class SnapshotParseError(ParseError):
    """A persisted snapshot document could not be decoded."""

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        super().__init__(f"Failed to decode snapshot {path}", detail=detail)


class StorageError(KnownError):
    """Reading or writing a snapshot failed at the OS level."""

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        super().__init__(
            kind=FailureKind.STORAGE_ERROR,
            message=f"Failed to access {path}",
            detail=detail,
            status_code=500,
        )


class DeckNotFoundError(KnownError):
    """A roster lookup by deck name found nothing."""

    def __init__(self, deck_name: str):
        self.deck_name = deck_name
        super().__init__(
            kind=FailureKind.DECK_NOT_FOUND,
            message=f"Could not find deck {deck_name} in roster",
            status_code=404,
        )


class DuplicateDeckError(KnownError):
    """A deck with the same name is already in the roster."""

    def __init__(self, deck_name: str):
        self.deck_name = deck_name
        super().__init__(
            kind=FailureKind.DUPLICATE_DECK,
            message=f"A deck named {deck_name} is already in the roster",
            suggestion="Remove it first or pick another name.",
            status_code=409,
        )


class CardLookupError(KnownError):
    """The external card database could not be queried."""

    def __init__(self, card_name: str, detail: str | None = None):
        self.card_name = card_name
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Failed to look up card {card_name}",
            detail=detail,
            status_code=502,
        )


class SearchCancelledError(KnownError):
    """The crafting search was cancelled before it finished."""

    def __init__(self, explored_states: int):
        self.explored_states = explored_states
        super().__init__(
            kind=FailureKind.SEARCH_CANCELLED,
            message="Crafting recommendation was cancelled before completion",
            detail=f"explored {explored_states} selections",
            suggestion="Lower the wildcard limits or remove decks from the roster.",
            status_code=503,
        )
