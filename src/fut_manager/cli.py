#!/usr/bin/env python3
"""
Command-line interface for FUT Manager administration.

Usage:
    fut-manager init                          # Create document store tables
    fut-manager status                        # Show document counts
    fut-manager import-players players.csv    # Load the player catalog (CSV or JSON)
    fut-manager clear-cache                   # Drop cached player lists
    fut-manager standings SEASON_ID           # Print a season's league table
    fut-manager serve --port 8080             # Run the API server
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("fut_manager.cli")

# Catalog exports name the player key differently depending on the source
ID_COLUMNS = ("id", "sofifa_id", "player_id")

IMPORT_BATCH_SIZE = 500


def get_db():
    """Get a database connection from settings."""
    from .pg_connection import PostgresDB

    return PostgresDB.from_settings()


def _normalize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Map a raw catalog row onto Player fields. Blank cells become None."""
    doc = {key: (None if value == "" else value) for key, value in row.items() if key}
    if doc.get("id") is None:
        for column in ID_COLUMNS[1:]:
            if doc.get(column) is not None:
                doc["id"] = doc[column]
                break
    if doc.get("id") is not None:
        doc["id"] = str(doc["id"])
    return doc


def load_catalog(path: Path) -> list[dict[str, Any]]:
    """
    Read a player catalog file.

    JSON files hold a list of player objects; anything else is read as CSV
    with a header row.
    """
    if path.suffix.lower() == ".json":
        with path.open(encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{path} must contain a JSON list of players")
    else:
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    return [_normalize_row(row) for row in rows]


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the database with schema."""
    from .schema import init_database

    db = get_db()

    try:
        logger.info("Initializing document store...")
        init_database(db)
        logger.info("Database initialized successfully")
        return 0
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        return 1
    finally:
        db.close()


def cmd_status(args: argparse.Namespace) -> int:
    """Show document counts per collection."""
    from .schema import get_table_counts

    db = get_db()

    try:
        counts = get_table_counts(db)

        print("\nFUT Manager Database Status")
        print("=" * 50)
        for table, count in sorted(counts.items()):
            print(f"  {table}: {count:,}")
        return 0
    except Exception as e:
        logger.error("Failed to get status: %s", e)
        return 1
    finally:
        db.close()


def cmd_import_players(args: argparse.Namespace) -> int:
    """Upsert a player catalog file into the players collection."""
    from pydantic import ValidationError

    from .core.models import Player
    from .repositories import get_repositories

    path = Path(args.file)
    if not path.exists():
        logger.error("File not found: %s", path)
        return 1

    try:
        rows = load_catalog(path)
    except (ValueError, csv.Error) as e:
        logger.error("Failed to read %s: %s", path, e)
        return 1

    players: list[Player] = []
    skipped = 0
    for line, row in enumerate(rows, start=1):
        try:
            players.append(Player.model_validate(row))
        except ValidationError as e:
            skipped += 1
            logger.warning("Skipping row %d: %s", line, e.errors()[0]["msg"])

    db = get_db()
    try:
        repos = get_repositories(db)
        written = 0
        for start in range(0, len(players), IMPORT_BATCH_SIZE):
            written += repos.players.upsert_many(players[start:start + IMPORT_BATCH_SIZE])
        logger.info("Imported %d players from %s (%d skipped)", written, path, skipped)
        return 0
    except Exception as e:
        logger.error("Import failed: %s", e)
        return 1
    finally:
        db.close()


def cmd_clear_cache(args: argparse.Namespace) -> int:
    """Drop cached top players and random-draw pools."""
    from .api.cache import HybridCache
    from .core.config import get_settings

    settings = get_settings()
    cache = HybridCache(
        redis_url=settings.redis_url,
        default_ttl=settings.cache_default_ttl,
        prefix=settings.cache_prefix,
    )
    removed = cache.clear()
    print(f"Cache data removed ({removed} keys)")
    return 0


def cmd_standings(args: argparse.Namespace) -> int:
    """Print a season's league table and top scorers."""
    from .repositories import get_repositories
    from .standings import MalformedResultError, compute_scorers, compute_standings

    db = get_db()

    try:
        season = get_repositories(db).seasons.get(args.season_id)
        if season is None:
            logger.error("Season not found: %s", args.season_id)
            return 1

        try:
            table = compute_standings(season.results)
        except MalformedResultError as e:
            logger.error("Cannot build standings: %s", e)
            return 1
        scorers = compute_scorers(season.results)

        print(f"\n{season.title or season.id} ({len(season.results)} results)")
        print("=" * 64)
        print(f"{'#':>3}  {'Manager':<20} {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'GD':>4} {'Pts':>4}  Form")
        for rank, row in enumerate(table, start=1):
            print(
                f"{rank:>3}  {row.manager:<20} {row.played:>3} {row.won:>3} {row.drawn:>3} "
                f"{row.lost:>3} {row.goal_difference:>4} {row.points:>4}  {''.join(row.form[-5:])}"
            )

        if scorers and args.scorers:
            print("\nTop scorers")
            print("-" * 64)
            for row in scorers[: args.scorers]:
                print(f"  {row.count:>3}  {row.player:<24} ({row.manager})")
        return 0
    finally:
        db.close()


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    from .core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "fut_manager.api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
    )
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="FUT Manager CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create the document store tables")
    subparsers.add_parser("status", help="Show document counts")

    import_parser = subparsers.add_parser("import-players", help="Load a player catalog file")
    import_parser.add_argument("file", help="CSV (with header) or JSON list of players")

    subparsers.add_parser("clear-cache", help="Remove cached player lists")

    standings_parser = subparsers.add_parser("standings", help="Print a season's league table")
    standings_parser.add_argument("season_id", help="Season ID")
    standings_parser.add_argument(
        "--scorers", type=int, default=10, help="Number of top scorers to show (0 to hide)"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default: API_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "status": cmd_status,
        "import-players": cmd_import_players,
        "clear-cache": cmd_clear_cache,
        "standings": cmd_standings,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
