#!/usr/bin/env python3
"""
Look up player ratings from the command line.

Loads the ratings dataset, resolves each name (exact, then fuzzy) and
optionally enriches the result with live SoFIFA data. Results are printed
as JSON in the shape the UI cards use.

Usage:
    # Local dataset only
    python scripts/lookup_player.py "Erling Haaland" "kylian mbape" --no-live

    # With live SoFIFA enrichment (opens a browser)
    python scripts/lookup_player.py "Erling Haaland"

    # Check that SoFIFA is reachable
    python scripts/lookup_player.py --check-live

    # Use a specific dataset file
    python scripts/lookup_player.py "Pedri" --dataset data/players.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fifatracker.config import settings
from fifatracker.ratings import DatasetLoader, RatingsService, RatingsStore
from fifatracker.scrape.sofifa import SofifaScraper

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def lookup(service: RatingsService, names: list[str], use_live: bool) -> int:
    """Print one JSON document per name. Returns the number of misses."""
    misses = 0
    for name in names:
        result = await service.get_player_data(name, use_live_data=use_live)
        if result is None:
            logger.warning(f"No data found for '{name}'")
            misses += 1
            continue
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return misses


async def run(names: list[str], use_live: bool, check_live: bool, dataset: str | None) -> int:
    loader = DatasetLoader([dataset]) if dataset else DatasetLoader()
    store = RatingsStore()

    if not use_live and not check_live:
        service = RatingsService(store, loader=loader)
        return await lookup(service, names, use_live=False)

    async with SofifaScraper() as scraper:
        service = RatingsService(store, loader=loader, live_client=scraper)

        if check_live:
            report = await service.check_live_connectivity()
            print(json.dumps(report, indent=2, ensure_ascii=False))
            if not report["success"]:
                return 1

        return await lookup(service, names, use_live=use_live)


def main():
    parser = argparse.ArgumentParser(description="Look up FIFA player ratings by name")
    parser.add_argument("names", nargs="*", help="Player names to look up")
    parser.add_argument("--no-live", action="store_true",
                        help="Only use the local ratings dataset")
    parser.add_argument("--check-live", action="store_true",
                        help="Test SoFIFA connectivity before looking anything up")
    parser.add_argument("--dataset", default=None,
                        help="Path or URL of the ratings JSON (overrides settings)")
    args = parser.parse_args()

    if not args.names and not args.check_live:
        parser.error("give at least one player name, or --check-live")

    misses = asyncio.run(run(args.names, not args.no_live, args.check_live, args.dataset))
    raise SystemExit(1 if misses else 0)


if __name__ == "__main__":
    main()
