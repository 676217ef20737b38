"""Command-line interface for the surf session planner."""

import argparse
import asyncio
import logging
import sys

from surf_planner.config import get_settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def serve(host: str, port: int) -> int:
    import uvicorn

    from surf_planner.api import create_app

    uvicorn.run(create_app(), host=host, port=port)
    return 0


async def init_database() -> int:
    """Create any missing tables on the configured database."""
    from surf_planner.database.connection import close_db, create_tables, init_db

    await init_db()
    try:
        await create_tables()
    finally:
        await close_db()
    return 0


async def cache_forecasts(hours: int) -> int:
    """Refresh the cached forecast of every break with coordinates.

    Returns 1 when any break failed, 0 otherwise.
    """
    from surf_planner.database.connection import close_db, get_db, init_db
    from surf_planner.forecast_cache import ForecastCacheService, build_provider

    settings = get_settings()
    if not settings.stormglass_configured:
        logger.error("STORMGLASS_API_KEY is not set")
        return 1

    await init_db()
    try:
        async with build_provider(settings) as provider, get_db() as session:
            results = await ForecastCacheService(session, provider).refresh_all(hours)
            await session.commit()
    finally:
        await close_db()

    failed = [r for r in results if not r.success]
    for result in failed:
        logger.error(f"Break {result.break_id}: {result.error}")
    return 1 if failed else 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Surf Session Planner - Rank surf sessions from forecasts and availability"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    settings = get_settings()

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Bind port")

    subparsers.add_parser("init-db", help="Create missing database tables")

    # Cache command
    cache_parser = subparsers.add_parser(
        "cache-forecasts", help="Refresh cached forecasts for all breaks"
    )
    cache_parser.add_argument(
        "--hours",
        type=int,
        default=settings.forecast_hours,
        help="Forecast hours to fetch per break",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(settings.log_level)

    if args.command == "serve":
        return serve(args.host, args.port)
    if args.command == "init-db":
        return asyncio.run(init_database())
    return asyncio.run(cache_forecasts(args.hours))


if __name__ == "__main__":
    sys.exit(main())
