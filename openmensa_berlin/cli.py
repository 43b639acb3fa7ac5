# openmensa_berlin/cli.py
# Erzeugt OpenMensa v2 Feeds (metadata.xml, full.xml) für alle Berliner Mensen

import argparse
import logging
import sys
from pathlib import Path

from .catalog import Catalog
from .config import CATALOG_MODES, DAYS_AFTER, DAYS_BEFORE, PRICE_MODES, URL_FEED_BASE, Settings
from .errors import FetchError, InvalidIdentifier, InvariantViolation
from .feed import build_feed
from .fetch import Fetcher
from .metadata import extract_metadata
from .serializer import to_bytes
from .storage import write_atomic

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="openmensa-berlin",
        description="OpenMensa v2 feeds for the canteens of the Studierendenwerk Berlin",
    )
    parser.add_argument("--repo", default="berlin",
                        help="output directory (default: %(default)s)")
    parser.add_argument("--update-ids", action="store_true",
                        help="fetch the canteen list and update ids and index first")
    parser.add_argument("--names", action="store_true",
                        help="address canteens by a safe name instead of their id")
    parser.add_argument("--price-mode", choices=PRICE_MODES, default="scan",
                        help="price parsing strategy (default: %(default)s)")
    parser.add_argument("--days-before", type=int, default=DAYS_BEFORE)
    parser.add_argument("--days-after", type=int, default=DAYS_AFTER)
    parser.add_argument("--feed-base", default=URL_FEED_BASE,
                        help="URL prefix under which the repo directory is published")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    if args.days_after < args.days_before:
        parser.error("--days-after must not be smaller than --days-before")
    return args


def settings_from_args(args):
    return Settings(
        repo=args.repo,
        feed_base=args.feed_base,
        days_before=args.days_before,
        days_after=args.days_after,
        catalog_mode=CATALOG_MODES[1] if args.names else CATALOG_MODES[0],
        price_mode=args.price_mode,
        update_ids=args.update_ids,
    )


def generate(settings, fetcher, catalog):
    if settings.update_ids:
        ids = catalog.update(fetcher)
    else:
        ids = catalog.load()
    if not ids:
        logger.warning("no canteen ids in %s, run with --update-ids first", settings.repo)
        return

    repo = Path(settings.repo)
    for canteen_id in ids:
        key = catalog.key_for(canteen_id)
        canteen = extract_metadata(fetcher, canteen_id, settings.feed_base, key)
        if canteen is None:
            logger.warning("%s: skipping metadata", canteen_id)
            continue
        filename = repo / key / "metadata.xml"
        logger.info("generate %s (metadata)", filename)
        write_atomic(filename, to_bytes(canteen))

    for canteen_id in ids:
        key = catalog.key_for(canteen_id)
        canteen = build_feed(fetcher, canteen_id, settings.days_before, settings.days_after,
                             price_mode=settings.price_mode)
        filename = repo / key / "full.xml"
        logger.info("generate %s (feed full)", filename)
        write_atomic(filename, to_bytes(canteen))


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    settings = settings_from_args(args)
    catalog = Catalog(settings.repo, settings.catalog_mode, settings.feed_base)
    try:
        generate(settings, Fetcher(), catalog)
    except (FetchError, InvariantViolation, InvalidIdentifier, OSError) as e:
        logger.error("aborting: %s", e)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
