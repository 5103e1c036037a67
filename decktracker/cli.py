"""
Command line entry point.

Usage:
    decktracker add boros_turns.txt deification_prison.txt
    decktracker recommend --rares 25 --mythics 6 --ignore-sideboard
    decktracker update-collection
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from decktracker.analysis.ranker import rank_decks, rank_missing_cards
from decktracker.analysis.recommender import CraftRecommender
from decktracker.config import Settings, settings
from decktracker.models.failure import KnownError
from decktracker.models.wildcards import Wildcards
from decktracker.parsers.collection_csv import parse_collection_csv_file
from decktracker.parsers.decklist import parse_decklist_file
from decktracker.services.arena_ids import ArenaIdTranslator
from decktracker.services.card_database import ScryfallCardSource
from decktracker.services.tracker_daemon import TrackerDaemonClient, fetch_collection
from decktracker.storage import SnapshotStore, Workspace, open_workspace

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decktracker",
        description="Track an Arena collection against your decks and plan wildcard crafts",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Directory holding the snapshot files (default: {settings.data_dir})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add decklists to the roster")
    add.add_argument("paths", nargs="+", type=Path, help="Decklist files")
    add.add_argument("--name", help="Deck name (only with a single file)")

    remove = subparsers.add_parser("remove", help="Remove a deck from the roster")
    remove.add_argument("name")

    subparsers.add_parser("list", help="List all decks")

    missing = subparsers.add_parser("missing", help="Show what a deck is missing")
    missing.add_argument("name")
    missing.add_argument("--ignore-sideboard", action="store_true")

    costs = subparsers.add_parser("costs", help="Rank decks by completion cost")
    costs.add_argument("--ignore-sideboard", action="store_true")

    recommend = subparsers.add_parser("recommend", help="Plan which decks to complete")
    recommend.add_argument("--rares", type=int, required=True, help="Rare wildcards expected")
    recommend.add_argument("--mythics", type=int, required=True, help="Mythic wildcards expected")
    recommend.add_argument("--ignore-sideboard", action="store_true")
    recommend.add_argument(
        "--start", nargs="+", default=[], metavar="DECK", help="Decks to keep in every plan"
    )
    recommend.add_argument("--policy", choices=["strict", "degraded"], default=None)
    recommend.add_argument("--timeout", type=float, default=None, help="Seconds before giving up")

    wildcards = subparsers.add_parser("wildcards", help="Set the wildcard wallet")
    for rarity in ("common", "uncommon", "rare", "mythic"):
        wildcards.add_argument(f"--{rarity}", type=int, default=0)

    import_csv = subparsers.add_parser("import-csv", help="Merge a CSV collection export")
    import_csv.add_argument("path", type=Path)

    subparsers.add_parser(
        "update-collection", help="Fetch owned cards from the tracker daemon and merge them"
    )

    return parser


def _add(workspace: Workspace, args: argparse.Namespace) -> None:
    if args.name and len(args.paths) > 1:
        raise SystemExit("--name can only be used with a single decklist")
    for path in args.paths:
        deck = parse_decklist_file(path, name=args.name)
        workspace.roster.add_deck(deck)
        print(f"Added {deck.name}")
    workspace.store.save_roster(workspace.roster)


def _remove(workspace: Workspace, args: argparse.Namespace) -> None:
    workspace.roster.remove_deck(args.name)
    workspace.store.save_roster(workspace.roster)
    print(f"Removed {args.name}")


def _list(workspace: Workspace, _args: argparse.Namespace) -> None:
    for name in workspace.roster.deck_names():
        print(name)


def _missing(workspace: Workspace, args: argparse.Namespace) -> None:
    deck = workspace.roster.find(args.name)
    for s in rank_missing_cards(deck, workspace.inventory, args.ignore_sideboard):
        print(f"{s.missing} {s.name} ({s.set_name}) [{s.rarity.value}]")


def _costs(workspace: Workspace, args: argparse.Namespace) -> None:
    ranked = rank_decks(
        workspace.roster, workspace.inventory, args.ignore_sideboard, skip_unknown=True
    )
    for r in ranked:
        print(f"{r.cost:8.2f}  {r.deck.name} ({r.missing_rares} rares, {r.missing_mythics} mythics)")


def _recommend(workspace: Workspace, args: argparse.Namespace) -> None:
    recommender = CraftRecommender(
        args.rares,
        args.mythics,
        workspace.roster,
        workspace.inventory.collection,
        ignore_sideboard=args.ignore_sideboard,
        starting_selection=args.start,
        policy=args.policy,
        timeout=args.timeout,
    )
    plans = recommender.recommend()
    if not plans:
        print("No incomplete deck fits within these limits.")
        return
    for i, plan in enumerate(plans, start=1):
        print(f"Plan {i}: {', '.join(plan)}")


def _wildcards(workspace: Workspace, args: argparse.Namespace) -> None:
    wallet = Wildcards(
        common=args.common, uncommon=args.uncommon, rare=args.rare, mythic=args.mythic
    )
    workspace.store.save_wildcards(wallet)
    print(f"Saved {wallet.total()} wildcards")


def _import_csv(workspace: Workspace, args: argparse.Namespace) -> None:
    fresh = parse_collection_csv_file(args.path)
    workspace.inventory.update_collection(fresh, workspace.roster)
    print(f"Merged {len(fresh)} cards from {args.path}")


def _update_collection(workspace: Workspace, config: Settings) -> None:
    translator = ArenaIdTranslator(config.data_path(config.arena_ids_file))
    daemon = TrackerDaemonClient(config.tracker_daemon_url)
    try:
        fresh = fetch_collection(daemon, translator)
    finally:
        translator.save()
        translator.close()
        daemon.close()
    workspace.inventory.update_collection(fresh, workspace.roster)
    print(f"Merged {len(fresh)} cards from the tracker daemon")


COMMANDS = {
    "add": _add,
    "remove": _remove,
    "list": _list,
    "missing": _missing,
    "costs": _costs,
    "recommend": _recommend,
    "wildcards": _wildcards,
    "import-csv": _import_csv,
}


def run(args: argparse.Namespace, config: Settings) -> None:
    """Execute a parsed command against the workspace in config.data_dir."""
    store = SnapshotStore.from_settings(config)
    with ScryfallCardSource() as card_source, open_workspace(store, card_source) as workspace:
        if args.command == "update-collection":
            _update_collection(workspace, config)
        else:
            COMMANDS[args.command](workspace, args)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = settings
    if args.data_dir is not None:
        config = settings.model_copy(update={"data_dir": args.data_dir})

    try:
        run(args, config)
    except KnownError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e.message}", file=sys.stderr)
        if e.suggestion:
            print(e.suggestion, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
