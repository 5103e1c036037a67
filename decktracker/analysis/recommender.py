"""
Crafting recommender.

Given a wildcard horizon (the rares and mythics the player expects to have
within some planning period), find the largest set of decks that can all be
completed together.

Each missing physical copy of a rare or mythic is a "row". Two decks missing
the same copy share a row, because one craft satisfies both, while a deck
missing three copies of a card needs three rows. Every relevant deck becomes
a pair of row bitmasks (rares, mythics) and the search walks subsets of decks,
keeping a subset only while the popcount of the OR of its masks stays within
each limit.

The search is exponential in the number of relevant decks. Decks that cannot
fit the budget on their own are discarded up front, and every subset is
solved once thanks to a memo keyed by the selection bitmask.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Literal

from decktracker.config import settings
from decktracker.models.collection import Collection, MissingCard, simplified_name
from decktracker.models.deck import Deck
from decktracker.models.failure import SearchCancelledError, UnknownCardError
from decktracker.models.rarity import Rarity
from decktracker.models.roster import Roster

logger = logging.getLogger(__name__)

MissingCardPolicy = Literal["strict", "degraded"]

# A row is one missing physical copy: (simplified card name, copy index)
Row = tuple[str, int]


@dataclass
class RecommendationStats:
    """Counters describing the last recommendation run."""

    relevant_decks: int = 0
    rare_rows: int = 0
    mythic_rows: int = 0
    explored_states: int = 0
    skipped_decks: list[str] = field(default_factory=list)
    seeded_decks: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeckRequirement:
    """A relevant deck reduced to its rare and mythic row bitmasks."""

    deck: Deck
    rare_mask: int
    mythic_mask: int


def build_rows_index(
    missing_by_deck: Iterable[list[MissingCard]], target: Rarity
) -> dict[Row, int]:
    """
    Assign a stable bit index to every missing copy of the target rarity.

    Copies are deduplicated across decks by (card, copy index), so a deck
    missing 1 copy and another missing 3 copies of the same card need 3 rows.
    """
    rows: set[Row] = set()
    for missing in missing_by_deck:
        for card in missing:
            if card.rarity != target:
                continue
            name = simplified_name(card.name)
            for copy_index in range(1, card.amount + 1):
                rows.add((name, copy_index))
    return {row: i for i, row in enumerate(sorted(rows))}


def row_mask(missing: list[MissingCard], target: Rarity, rows_index: dict[Row, int]) -> int:
    """Bitmask of the rows a deck needs, for one rarity."""
    mask = 0
    for card in missing:
        if card.rarity != target:
            continue
        name = simplified_name(card.name)
        for copy_index in range(1, card.amount + 1):
            mask |= 1 << rows_index[(name, copy_index)]
    return mask


class _SubsetSearch:
    """Memoized search for the largest feasible subset of decks."""

    def __init__(
        self,
        requirements: list[DeckRequirement],
        rares_limit: int,
        mythics_limit: int,
        should_cancel: Callable[[], bool] | None,
    ) -> None:
        self.requirements = requirements
        self.rares_limit = rares_limit
        self.mythics_limit = mythics_limit
        self.should_cancel = should_cancel
        self.memo: dict[int, int] = {}
        self.terminals: set[int] = set()

    def fits(self, rare_union: int, mythic_union: int) -> bool:
        return (
            rare_union.bit_count() <= self.rares_limit
            and mythic_union.bit_count() <= self.mythics_limit
        )

    def unions(self, selection: int) -> tuple[int, int]:
        rare_union = 0
        mythic_union = 0
        for i, requirement in enumerate(self.requirements):
            if selection >> i & 1:
                rare_union |= requirement.rare_mask
                mythic_union |= requirement.mythic_mask
        return rare_union, mythic_union

    def best_from(self, selection: int, rare_union: int, mythic_union: int) -> int:
        """Largest deck count reachable by adding decks to selection."""
        cached = self.memo.get(selection)
        if cached is not None:
            return cached

        if self.should_cancel is not None and self.should_cancel():
            raise SearchCancelledError(len(self.memo))

        best = -1
        for i, requirement in enumerate(self.requirements):
            bit = 1 << i
            if selection & bit:
                continue
            next_rares = rare_union | requirement.rare_mask
            next_mythics = mythic_union | requirement.mythic_mask
            if not self.fits(next_rares, next_mythics):
                continue
            best = max(best, self.best_from(selection | bit, next_rares, next_mythics))

        if best < 0:
            # Nothing else fits: this selection is a finished plan
            best = selection.bit_count()
            self.terminals.add(selection)

        self.memo[selection] = best
        return best

    def run(self, seed: int) -> list[int]:
        """All finished selections of maximum size, in roster order."""
        best = self.best_from(seed, *self.unions(seed))
        winners = [selection for selection in self.terminals if selection.bit_count() == best]
        return sorted(winners, key=self.indices)

    def indices(self, selection: int) -> list[int]:
        return [i for i in range(len(self.requirements)) if selection >> i & 1]


class CraftRecommender:
    """
    Recommends which decks to complete with a limited wildcard horizon.

    Args:
        rares_limit: Rare wildcards available over the horizon
        mythics_limit: Mythic wildcards available over the horizon
        roster: Decks to choose from
        collection: Ownership ledger; every roster card must be known
        ignore_sideboard: Only count mainboards (plus wishboards)
        starting_selection: Deck names to keep in every plan when they fit
        policy: "strict" propagates UnknownCardError, "degraded" skips the
            deck. Defaults to settings.missing_card_policy.
        should_cancel: Polled before each expansion; returning True aborts
            the search with SearchCancelledError
        timeout: Seconds before the search is cancelled
    """

    def __init__(
        self,
        rares_limit: int,
        mythics_limit: int,
        roster: Roster,
        collection: Collection,
        ignore_sideboard: bool = False,
        starting_selection: Iterable[str] | None = None,
        policy: MissingCardPolicy | None = None,
        should_cancel: Callable[[], bool] | None = None,
        timeout: float | None = None,
    ) -> None:
        if rares_limit < 0 or mythics_limit < 0:
            raise ValueError("Wildcard limits cannot be negative")
        self.rares_limit = rares_limit
        self.mythics_limit = mythics_limit
        self.roster = roster
        self.collection = collection
        self.ignore_sideboard = ignore_sideboard
        self.starting_selection = list(starting_selection or [])
        self.policy: MissingCardPolicy = policy or settings.missing_card_policy
        self.should_cancel = should_cancel
        self.timeout = timeout
        self.stats = RecommendationStats()

    def _missing(self, deck: Deck) -> list[MissingCard] | None:
        try:
            return self.collection.missing(deck, self.ignore_sideboard)
        except UnknownCardError as e:
            if self.policy == "strict":
                raise
            logger.warning("Skipping deck %s: %s", deck.name, e.message)
            self.stats.skipped_decks.append(deck.name)
            return None

    def relevant_decks(self) -> list[tuple[Deck, list[MissingCard]]]:
        """
        Decks missing at least one rare or mythic that fit the budget alone.

        A deck exceeding either limit by itself can never be part of a plan.
        """
        relevant: list[tuple[Deck, list[MissingCard]]] = []
        for deck in self.roster:
            missing = self._missing(deck)
            if missing is None:
                continue
            missing_rares = sum(c.amount for c in missing if c.rarity == Rarity.RARE)
            missing_mythics = sum(c.amount for c in missing if c.rarity == Rarity.MYTHIC)
            if (
                0 < missing_rares + missing_mythics
                and missing_rares <= self.rares_limit
                and missing_mythics <= self.mythics_limit
            ):
                relevant.append((deck, missing))
        return relevant

    def build_requirements(
        self, relevant: list[tuple[Deck, list[MissingCard]]]
    ) -> list[DeckRequirement]:
        """Build the deck -> missing copy incidence bitmasks."""
        missing_by_deck = [missing for _, missing in relevant]
        rare_rows = build_rows_index(missing_by_deck, Rarity.RARE)
        mythic_rows = build_rows_index(missing_by_deck, Rarity.MYTHIC)
        self.stats.rare_rows = len(rare_rows)
        self.stats.mythic_rows = len(mythic_rows)
        return [
            DeckRequirement(
                deck=deck,
                rare_mask=row_mask(missing, Rarity.RARE, rare_rows),
                mythic_mask=row_mask(missing, Rarity.MYTHIC, mythic_rows),
            )
            for deck, missing in relevant
        ]

    def _seed(self, search: _SubsetSearch) -> int:
        """
        Preselect starting decks, in roster order, while they fit together.

        Names that are not relevant decks, or that would break the budget
        alongside earlier ones, are dropped.
        """
        wanted = set(self.starting_selection)
        seed = 0
        rare_union = 0
        mythic_union = 0
        for i, requirement in enumerate(search.requirements):
            name = requirement.deck.name
            if name not in wanted:
                continue
            wanted.discard(name)
            next_rares = rare_union | requirement.rare_mask
            next_mythics = mythic_union | requirement.mythic_mask
            if not search.fits(next_rares, next_mythics):
                logger.warning("Starting deck %s does not fit alongside the others", name)
                continue
            seed |= 1 << i
            rare_union, mythic_union = next_rares, next_mythics
            self.stats.seeded_decks.append(name)

        for name in sorted(wanted):
            logger.warning("Starting deck %s is not completable within the limits", name)
        return seed

    def _cancel_check(self) -> Callable[[], bool] | None:
        if self.timeout is None:
            return self.should_cancel
        deadline = time.monotonic() + self.timeout
        should_cancel = self.should_cancel

        def check() -> bool:
            if time.monotonic() >= deadline:
                return True
            return should_cancel is not None and should_cancel()

        return check

    def recommend(self) -> list[list[str]]:
        """
        Return every plan that completes the maximum number of decks.

        Each plan is a list of deck names in roster order. Plans are ordered
        by roster position. Empty when no deck is both incomplete and
        completable within the limits.

        Raises:
            UnknownCardError: Under the strict policy, if a deck card is unknown
            SearchCancelledError: If the search was cancelled or timed out
        """
        self.stats = RecommendationStats()
        relevant = self.relevant_decks()
        self.stats.relevant_decks = len(relevant)
        if not relevant:
            logger.info(
                "No deck is completable within %d rares and %d mythics",
                self.rares_limit,
                self.mythics_limit,
            )
            return []

        requirements = self.build_requirements(relevant)
        search = _SubsetSearch(
            requirements,
            self.rares_limit,
            self.mythics_limit,
            self._cancel_check(),
        )
        seed = self._seed(search)

        try:
            winners = search.run(seed)
        finally:
            self.stats.explored_states = len(search.memo)

        logger.info(
            "Explored %d selections over %d decks (%d rare rows, %d mythic rows)",
            self.stats.explored_states,
            self.stats.relevant_decks,
            self.stats.rare_rows,
            self.stats.mythic_rows,
        )
        return [
            [requirements[i].deck.name for i in search.indices(selection)]
            for selection in winners
        ]


def recommend(
    rares_limit: int,
    mythics_limit: int,
    ignore_sideboard: bool,
    starting_selection: Iterable[str] | None,
    roster: Roster,
    collection: Collection,
    *,
    policy: MissingCardPolicy | None = None,
    should_cancel: Callable[[], bool] | None = None,
    timeout: float | None = None,
) -> list[list[str]]:
    """Convenience wrapper around CraftRecommender.recommend."""
    recommender = CraftRecommender(
        rares_limit,
        mythics_limit,
        roster,
        collection,
        ignore_sideboard=ignore_sideboard,
        starting_selection=starting_selection,
        policy=policy,
        should_cancel=should_cancel,
        timeout=timeout,
    )
    return recommender.recommend()
