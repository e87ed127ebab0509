"""
Command line entry point: import a YML catalog feed into the store.

    catalog-import --file data.xml
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from catalog_import.db.config import get_supabase_client
from catalog_import.db.services import ImportService, ImportStats
from catalog_import.exceptions import ConfigurationError, FeedParseError
from catalog_import.feed.items import ParsedFeed
from catalog_import.feed.parser import parse_feed
from catalog_import.settings import DEFAULT_FEED_PATH, Settings, load_env_file, load_settings
from catalog_import.utils.logger_config import setup_logging
from catalog_import.utils.sentry import add_breadcrumb, capture_error, init_sentry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="catalog-import",
        description="Import categories, brands and products from a YML catalog feed.",
    )
    parser.add_argument(
        "--file", "-f",
        help=f"Path to the feed, relative to the working directory (default: FEED_PATH or {DEFAULT_FEED_PATH})",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR); overrides LOG_LEVEL",
    )
    parser.add_argument(
        "--env-file",
        help="Path to a .env file (default: .env in the working directory)",
    )
    return parser.parse_args(argv)


async def run_import(settings: Settings, feed: ParsedFeed) -> ImportStats:
    """Connect to the store and import the parsed feed"""
    supabase = await get_supabase_client(settings.supabase_url, settings.supabase_key)
    service = ImportService(supabase)
    return await service.run(feed)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_env_file(args.env_file)

    try:
        settings = load_settings(feed_path=args.file)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FATAL

    setup_logging(log_level=args.log_level or settings.log_level, log_dir=settings.log_dir)
    init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )

    feed_path = settings.feed_path
    logger.info(f"Reading: {feed_path}")
    if not feed_path.is_file():
        logger.error(f"Feed file not found: {feed_path}")
        return EXIT_FATAL

    try:
        feed = parse_feed(feed_path.read_text(encoding="utf-8"))
    except FeedParseError as e:
        logger.error(f"XML structure error: {e}. Check for unescaped characters near line {e.line}.")
        return EXIT_FATAL

    add_breadcrumb(
        "Feed parsed",
        category="import.lifecycle",
        data={"categories": len(feed.categories), "offers": len(feed.offers)},
    )
    try:
        stats = asyncio.run(run_import(settings, feed))
    except Exception as e:
        logger.error(f"Import aborted: {e}")
        capture_error(e, {"feed_path": str(feed_path)})
        return EXIT_FATAL

    print(stats.summary())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
