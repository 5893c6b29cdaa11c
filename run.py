"""Entry point for the BiblioGestor application."""

import argparse
import logging
import sys

from biblio.config import AppConfig, load_config
from biblio.errors import PersistenceError
from biblio.services.library import LibraryService, NoticeLevel
from biblio.storage import RecordStore, SqliteSlot, initialize_database
from biblio.views.projection import View, reading_progress

logger = logging.getLogger(__name__)


def build_service(config: AppConfig) -> LibraryService:
    """Open the durable slot and wire the record store into the service.

    An unusable database is not fatal: the store starts empty and later
    writes are reported as failed actions.
    """
    try:
        initialize_database(config.storage.sqlite_path)
    except PersistenceError as exc:
        logger.warning("Database unavailable, starting with an empty collection: %s", exc)
    store = RecordStore(SqliteSlot(config.storage.sqlite_path), key=config.storage.slot_key)
    return LibraryService(store, config)


def cmd_list(service: LibraryService, args: argparse.Namespace) -> int:
    view = View.WISHLIST if args.wishlist else View.LIBRARY
    for book in service.view(view, args.search):
        progress = "" if book.is_wishlist else f"  {reading_progress(book)}%"
        print(f"{book.title} - {book.author} [{book.status.value}]{progress}")
    return 0


def cmd_stats(service: LibraryService, args: argparse.Namespace) -> int:
    dashboard = service.dashboard()
    stats = dashboard.stats
    print(f"Library: {stats.library_count}  Wishlist: {stats.wishlist_count}")
    print(f"Pages read: {stats.pages_read} of {stats.total_pages} ({stats.overall_progress:.0f}%)")
    for status, count in stats.status_counts.items():
        print(f"  {status.value}: {count}")
    for owner, count in stats.owner_counts.items():
        print(f"  {owner.value}: {count}")
    if stats.top_genres:
        print("Top genres: " + ", ".join(f"{g.name} ({g.count})" for g in stats.top_genres))
    for book in dashboard.recent:
        print(f"  recent: {book.title}")
    return 0


def cmd_import_legacy(service: LibraryService, args: argparse.Namespace) -> int:
    if not service.legacy_import_available():
        print("Your collection is already large; the spreadsheet import is disabled.")
        return 1
    try:
        dataset = service.legacy_dataset(args.path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read legacy dataset: %s", exc)
        return 1
    result = service.import_legacy(dataset)
    print(result.notice.message)
    return 1 if result.notice.level is NoticeLevel.ERROR else 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, initialize storage and run one command."""
    parser = argparse.ArgumentParser(prog="biblio", description="Personal book collection manager")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="List library or wishlist books")
    list_parser.add_argument("--wishlist", action="store_true")
    list_parser.add_argument("--search", default="")
    list_parser.set_defaults(func=cmd_list)

    stats_parser = sub.add_parser("stats", help="Show dashboard statistics")
    stats_parser.set_defaults(func=cmd_stats)

    import_parser = sub.add_parser("import-legacy", help="Import the legacy spreadsheet")
    import_parser.add_argument("path", nargs="?", default=None)
    import_parser.set_defaults(func=cmd_import_legacy)

    args = parser.parse_args(argv)
    config = load_config(args.config)
    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(build_service(config), args)


if __name__ == "__main__":
    sys.exit(main())
