"""
CLI entry point for Chart Coach.

Usage:
    # Create the tables and seed the default pairs
    chartcoach init-db

    # Check that the configured database answers
    chartcoach db-test

    # Serve the API
    chartcoach serve --port 8000
"""

import argparse
import logging
import sys

from chartcoach.core.config import settings
from chartcoach.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create missing tables and seed the pair watchlist."""
    from chartcoach.infrastructure.coaching.database import get_engine, initialize_schema

    url = settings.get_database_url()
    if url is None:
        logger.error("No POSTGRES_URL or DATABASE_URL configured.")
        sys.exit(1)

    engine = get_engine(url)
    if args.no_seed:
        initialize_schema(engine, seed_pairs=())
    else:
        initialize_schema(engine)
    logger.info("Schema initialized.")


def cmd_db_test(args: argparse.Namespace) -> None:
    """Report database connectivity the way /api/db-test does."""
    from chartcoach.application.coaching.check_database import CheckDatabaseUseCase
    from chartcoach.infrastructure.coaching.database import SqlDatabaseProbe, get_engine

    enabled = settings.is_persistence_enabled()
    probe = SqlDatabaseProbe(get_engine(settings.get_database_url())) if enabled else None
    status = CheckDatabaseUseCase(probe=probe, persistence_enabled=enabled).execute()

    if status.ok:
        logger.info("Database reachable. Server time: %s", status.now)
    elif not status.has_db:
        logger.warning(status.message)
    else:
        logger.error("Database check failed: %s", status.error)
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    uvicorn.run(
        "chartcoach.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    configure_logging(level=settings.log_level)

    parser = argparse.ArgumentParser(description="Chart Coach CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Schema
    init_parser = subparsers.add_parser("init-db", help="Create tables and seed pairs")
    init_parser.add_argument(
        "--no-seed", action="store_true", dest="no_seed",
        help="Do not seed the default pairs into an empty watchlist",
    )
    init_parser.set_defaults(func=cmd_init_db)

    # Connectivity
    test_parser = subparsers.add_parser("db-test", help="Check database connectivity")
    test_parser.set_defaults(func=cmd_db_test)

    # Server
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1",
        help="Interface to bind (default 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", type=int, default=8000,
        help="Port to bind (default 8000)",
    )
    serve_parser.add_argument(
        "--reload", action="store_true",
        help="Reload on code changes (development only)",
    )
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
