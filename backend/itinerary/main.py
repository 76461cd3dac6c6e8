"""
Command line entry point for the itinerary engine.

Usage:
    itinerary seed
    itinerary min-exchanges A C --order desc --max-exchanges 2
    itinerary min-price A C --departure 2025-06-01T08:00:00Z
    itinerary min-duration A C --departure 2025-06-01T08:00:00Z
    itinerary all --page 2 --size 20 --order-by price
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Any, List, Optional, Tuple

from .cache.manager import CacheManager
from .cache.snapshot import GraphSnapshotCache
from .database.config import DatabaseConfig, initialize_database
from .database.repository import SqlAlchemyJourneyRepository
from .database.seed import seed_database
from .models.enums import RankingCriterion
from .models.query import InvalidQueryError
from .services.formatter import journeys_to_list
from .services.journey_service import JourneyService
from .utils.config import ItineraryConfig, configure_logging, load_config

logger = logging.getLogger(__name__)

NO_JOURNEY_MESSAGE = "No journey exists between the specified locations."
NO_JOURNEY_AT_TIME_MESSAGE = "No journey exists between the specified locations for the given departure time."


async def build_service(
    config: ItineraryConfig,
    db_config: Optional[DatabaseConfig] = None,
) -> Tuple[JourneyService, Optional[CacheManager]]:
    """
    Wire storage, the snapshot cache and the optional Valkey tier into a JourneyService.

    Returns:
        The service and the cache manager to close afterwards (None when disabled)
    """
    db_config = db_config or initialize_database(config.database_url)
    repository = SqlAlchemyJourneyRepository(db_config)

    cache_manager = None
    if config.valkey_enabled:
        cache_manager = CacheManager(config=config.valkey_config())
        await cache_manager.initialize()

    snapshot_cache = GraphSnapshotCache(
        repository,
        ttl_seconds=config.snapshot_ttl_seconds,
        cache_manager=cache_manager,
    )
    service = JourneyService(
        snapshot_cache,
        strict_connections=config.strict_connections,
        default_max_results=config.default_max_results,
        max_page_size=config.max_page_size,
    )
    return service, cache_manager


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: '{value}'") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="itinerary", description="Journey discovery over scheduled flights")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    seed = commands.add_parser("seed", help="Load sample routes and flights into empty tables")
    seed.add_argument("--data-dir", default=None, help="Directory with routes.json and flights.json")

    for name, needs_departure in (
        ("min-exchanges", False),
        ("min-price", True),
        ("min-duration", True),
    ):
        sub = commands.add_parser(name, help=f"Journeys ordered by {name[4:]}")
        sub.add_argument("origin")
        sub.add_argument("destination")
        if needs_departure:
            sub.add_argument(
                "--departure", type=_parse_datetime, required=True,
                help="Earliest departure (ISO 8601, e.g. 2025-01-15T10:30:00Z)",
            )
        sub.add_argument("--order", choices=["asc", "desc"], default="asc")
        sub.add_argument("--max-exchanges", type=int, default=None)
        sub.add_argument("--max-results", type=int, default=None)

    listing = commands.add_parser("all", help="Every journey between every pair of locations, paged")
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--size", type=int, default=None)
    listing.add_argument("--order-by", default=RankingCriterion.EXCHANGES.value)
    listing.add_argument("--order", choices=["asc", "desc"], default="asc")
    listing.add_argument("--max-exchanges", type=int, default=None)

    return parser


async def run_command(args: argparse.Namespace, config: ItineraryConfig) -> Tuple[int, Any]:
    """
    Execute one parsed command.

    Returns:
        Exit code and the JSON-serializable output
    """
    if args.command == "seed":
        db_config = initialize_database(config.database_url)
        try:
            return 0, seed_database(db_config, data_dir=args.data_dir)
        finally:
            db_config.close()

    logger.debug(f"Running {args.command} against {config.database_url}")
    db_config = initialize_database(config.database_url)
    service, cache_manager = await build_service(config, db_config)
    try:
        ascending = args.order != "desc"

        if args.command == "all":
            page = await service.list_all_paged(
                page=args.page,
                size=args.size or config.default_page_size,
                order_by=args.order_by,
                ascending=ascending,
                max_exchanges=args.max_exchanges,
            )
            return 0, {
                "items": journeys_to_list(page.items, args.order_by),
                "total_count": page.total_count,
                "current_page": page.current_page,
                "page_size": page.page_size,
                "total_pages": page.total_pages,
            }

        options = dict(
            ascending=ascending,
            max_exchanges=args.max_exchanges,
            max_results=args.max_results,
        )
        if args.command == "min-exchanges":
            journeys = await service.find_by_min_exchanges(args.origin, args.destination, **options)
            criterion, missing = RankingCriterion.EXCHANGES, NO_JOURNEY_MESSAGE
        elif args.command == "min-price":
            journeys = await service.find_by_min_price(args.origin, args.destination, args.departure, **options)
            criterion, missing = RankingCriterion.PRICE, NO_JOURNEY_AT_TIME_MESSAGE
        else:
            journeys = await service.find_by_min_duration(args.origin, args.destination, args.departure, **options)
            criterion, missing = RankingCriterion.DURATION, NO_JOURNEY_AT_TIME_MESSAGE

        if not journeys:
            return 1, {"message": missing}
        return 0, journeys_to_list(journeys, criterion)
    finally:
        if cache_manager is not None:
            await cache_manager.close()
        db_config.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.env_file)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    configure_logging("DEBUG" if args.verbose else config.log_level)

    try:
        code, output = asyncio.run(run_command(args, config))
    except InvalidQueryError as e:
        print(json.dumps({"message": str(e)}), file=sys.stderr)
        return 2

    stream = sys.stdout if code == 0 else sys.stderr
    print(json.dumps(output, indent=2), file=stream)
    return code


if __name__ == "__main__":
    sys.exit(main())
