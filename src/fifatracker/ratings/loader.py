"""
Ratings dataset loader.

Fetches the bulk ratings export (a JSON array of raw SoFIFA records) from
the first candidate location that responds, transforms every record into
a PlayerRating and swaps the result into a RatingsStore.

Candidate locations may be local file paths or http(s) URLs:

    loader = DatasetLoader([
        "sofifa_my_players_app.json",
        "https://cdn.example.com/sofifa_my_players_app.json",
    ])
    ok = await loader.load_into(store)

Loading never raises. If no location responds, or the document is not an
array, or no record survives transformation, the store receives the
built-in fallback ratings and load_into() returns False.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from fifatracker.config import settings
from fifatracker.ratings.fallback import fallback_ratings
from fifatracker.ratings.models import PlayerRating
from fifatracker.ratings.store import RatingsStore
from fifatracker.ratings.transform import transform_record

logger = logging.getLogger(__name__)


class DatasetLoadError(Exception):
    """The dataset could not be fetched or parsed."""


def _is_http(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class DatasetLoader:
    """
    Loads the ratings dataset into a RatingsStore.

    Args:
        locations: Ordered candidate locations (default from settings)
        http_client: Optional shared httpx.AsyncClient. When omitted a
                     short-lived client is created per HTTP probe.
        timeout: HTTP timeout in seconds (default from settings)
    """

    def __init__(
        self,
        locations: Optional[list[str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.locations = list(locations) if locations is not None else list(settings.ratings_dataset_locations)
        self.timeout = timeout if timeout is not None else settings.ratings_http_timeout
        self._http_client = http_client

    # =========================================================================
    # Main Public Methods
    # =========================================================================

    async def load_into(self, store: RatingsStore) -> bool:
        """
        Load the dataset and replace the store's contents.

        Returns:
            True if the dataset was loaded (even with some records skipped),
            False if the fallback ratings were used instead
        """
        try:
            records, location = await self.fetch_dataset()
            ratings = self.transform_records(records)
            if not ratings:
                raise DatasetLoadError(f"No usable player records in {location}")

            store.replace(ratings)
            logger.info(
                "Ratings dataset loaded from %s with %d/%d players transformed",
                location, len(ratings), len(records),
            )
            return True

        except Exception as e:
            logger.error("Failed to load ratings dataset: %s", e)
            logger.info("Loading fallback ratings...")
            store.replace(fallback_ratings().items())
            return False

    async def fetch_dataset(self) -> tuple[list[Any], str]:
        """
        Fetch and parse the dataset from the first responding location.

        Returns:
            Tuple of (raw records, location they were read from)

        Raises:
            DatasetLoadError: If no location responded, or the document is
                              not valid JSON, or it is not an array
        """
        body = None
        loaded_from = None

        for location in self.locations:
            body = await self._fetch(location)
            if body is not None:
                loaded_from = location
                break

        if body is None:
            raise DatasetLoadError(
                f"Failed to load ratings JSON from any of {len(self.locations)} locations"
            )

        try:
            records = json.loads(body)
        except json.JSONDecodeError as e:
            raise DatasetLoadError(f"Invalid JSON in {loaded_from}: {e}") from e

        if not isinstance(records, list):
            raise DatasetLoadError(f"{loaded_from} does not contain an array of players")

        logger.info("Fetched %d raw player records from %s", len(records), loaded_from)
        return records, loaded_from

    def transform_records(self, records: list[Any]) -> list[tuple[str, PlayerRating]]:
        """
        Transform raw records independently.

        A record that fails to transform is logged and skipped; the rest
        of the dataset is unaffected. Duplicate names are kept in order so
        the last one wins when stored.
        """
        ratings: list[tuple[str, PlayerRating]] = []
        failed = 0

        for index, raw in enumerate(records):
            name = raw.get("name") if isinstance(raw, dict) else None
            try:
                if not isinstance(name, str) or not name.strip():
                    raise ValueError("record has no player name")
                ratings.append((name, transform_record(raw)))
            except (TypeError, ValueError, OverflowError) as e:
                failed += 1
                logger.warning("Failed to transform record #%d (%s): %s", index, name, e)

        if failed:
            logger.warning("Skipped %d/%d malformed player records", failed, len(records))

        return ratings

    # =========================================================================
    # Transport
    # =========================================================================

    async def _fetch(self, location: str) -> Optional[str]:
        """Return the document body at a location, or None if it didn't respond."""
        if _is_http(location):
            return await self._fetch_http(location)
        return await self._fetch_file(location)

    async def _fetch_http(self, url: str) -> Optional[str]:
        try:
            if self._http_client is not None:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch ratings from %s: %s", url, e)
            return None

        if response.status_code != 200:
            logger.warning("Ratings fetch from %s returned status %d", url, response.status_code)
            return None

        return response.text

    async def _fetch_file(self, location: str) -> Optional[str]:
        path = Path(location)
        if not path.is_file():
            logger.debug("No ratings file at %s", path)
            return None

        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read ratings file %s: %s", path, e)
            return None
