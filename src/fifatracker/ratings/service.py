"""
Ratings service: the public entry point for player rating lookups.

This is the single point of contact for the UI and backend glue. It:
- Loads the ratings dataset lazily (once per empty store)
- Resolves a display name to a rating (exact, then fuzzy)
- Optionally enriches the local rating with live SoFIFA data
- Tags every result with where its data came from

Lookup flow for a single call:

    load dataset if store is empty
      -> exact hit | fuzzy hit | not found (None)
      -> live attempt if enabled and the rating has a profile URL
      -> sofifa_enhanced | mock_fallback | mock_error_fallback

Live enrichment is best effort. Whatever the live client does (return
nothing, raise), the caller gets the local result with a distinguishing
source tag; exceptions never escape get_player_data().
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fifatracker.config import settings
from fifatracker.players.matcher import resolve_player
from fifatracker.ratings import sources
from fifatracker.ratings.loader import DatasetLoader
from fifatracker.ratings.models import MatchResult, PlayerRating, merge_live_data
from fifatracker.ratings.store import RatingsStore

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RatingsService:
    """
    Service for looking up player ratings by name.

    The live client is any object with a coroutine method
    ``fetch_player_data(url, sofifa_id, name)`` returning a flat dict of
    rating fields, or None, or raising. SofifaScraper is the production
    implementation.

    Usage:
        store = RatingsStore()
        async with SofifaScraper() as live:
            service = RatingsService(store, live_client=live)

            result = await service.get_player_data("kylian mbape")
            if result is None:
                # Nobody by that name
            elif result.source == "json_database_fuzzy":
                print(f"Did you mean {result.suggested_name}?")
    """

    def __init__(
        self,
        store: Optional[RatingsStore] = None,
        loader: Optional[DatasetLoader] = None,
        live_client: Any = None,
    ):
        """
        Initialize the ratings service.

        Args:
            store: Ratings store to read from (a fresh empty one if omitted)
            loader: Dataset loader used when the store is empty
            live_client: Optional live enrichment client
        """
        self.store = store if store is not None else RatingsStore()
        self.loader = loader if loader is not None else DatasetLoader()
        self.live_client = live_client

        # Load matching and live settings from config
        self.fuzzy_threshold = settings.player_fuzzy_threshold
        self.live_data_enabled = settings.live_data_enabled

    # =========================================================================
    # Dataset
    # =========================================================================

    async def load_dataset(self) -> bool:
        """
        (Re)load the ratings dataset into the store.

        Returns:
            True if the dataset loaded, False if fallback ratings were used
        """
        return await self.loader.load_into(self.store)

    async def _ensure_loaded(self) -> None:
        if self.store.is_empty():
            await self.store.ensure_loaded(self.loader.load_into)
            logger.info("Ratings store now contains %d players", len(self.store))

    # =========================================================================
    # Main Public Methods
    # =========================================================================

    async def get_player_data(
        self,
        name: Any,
        use_live_data: bool = True,
    ) -> Optional[MatchResult]:
        """
        Look up a player's rating by display name.

        Args:
            name: Player name as typed or stored in the club roster
            use_live_data: Attempt live enrichment when possible

        Returns:
            MatchResult, or None if the name is invalid or nobody matches

        Examples:
            result = await service.get_player_data("Erling Haaland")
            result.source  # 'json_database'

            result = await service.get_player_data("kylian mbape")
            result.suggested_name  # 'Kylian Mbappé'
        """
        await self._ensure_loaded()

        if not isinstance(name, str) or not name.strip():
            logger.warning("Invalid player name provided: %r", name)
            return None

        clean_name = name.strip()
        match = resolve_player(clean_name, self.store.ratings, threshold=self.fuzzy_threshold)

        if match is None:
            logger.info("No data found for player: %s", clean_name)
            return None

        if match.is_exact:
            logger.debug("Exact match for %s", clean_name)
            result = MatchResult(
                rating=match.rating,
                search_name=clean_name,
                source=sources.JSON_DATABASE,
            )
        else:
            logger.info("Fuzzy match: '%s' -> '%s'", clean_name, match.canonical_name)
            result = MatchResult(
                rating=match.rating,
                search_name=clean_name,
                source=sources.JSON_DATABASE_FUZZY,
                suggested_name=match.canonical_name,
            )

        if use_live_data and self._can_enrich(result.rating):
            return await self._enrich(result)

        return result

    async def get_available_player_names(self) -> list[str]:
        """Return every display name in the store, in insertion order."""
        await self._ensure_loaded()
        return self.store.names()

    async def has_player(self, name: str) -> bool:
        """Check if a display name exists (exact, case-sensitive)."""
        if not isinstance(name, str):
            return False
        await self._ensure_loaded()
        return name in self.store

    def add_player(self, name: str, rating: PlayerRating) -> None:
        """
        Insert or override a player (admin seeding and tests).

        Raises:
            TypeError: If rating is not a PlayerRating
        """
        if not isinstance(rating, PlayerRating):
            raise TypeError(f"rating must be a PlayerRating, got {type(rating).__name__}")
        self.store.add(name, rating)

    async def check_live_connectivity(self) -> dict[str, Any]:
        """
        Time a single live fetch for the first player with a profile URL.

        Returns:
            Dict with 'success', 'timestamp' and either 'result' and
            'response_time_ms' or 'error'
        """
        await self._ensure_loaded()

        if self.live_client is None:
            return {"success": False, "error": "No live client configured", "timestamp": _now_iso()}

        test_player = next(
            ((name, rating) for name, rating in self.store.ratings.items() if rating.sofifa_url),
            None,
        )
        if test_player is None:
            return {
                "success": False,
                "error": "No players with SoFIFA URLs available for testing",
                "timestamp": _now_iso(),
            }

        player_name, rating = test_player
        started = time.monotonic()
        try:
            live_data = await self.live_client.fetch_player_data(
                rating.sofifa_url, rating.sofifa_id, player_name
            )
        except Exception as e:
            return {
                "success": False,
                "test_player": player_name,
                "error": str(e),
                "timestamp": _now_iso(),
            }

        return {
            "success": bool(live_data),
            "test_player": player_name,
            "response_time_ms": round((time.monotonic() - started) * 1000),
            "result": live_data,
            "timestamp": _now_iso(),
        }

    # =========================================================================
    # Live enrichment
    # =========================================================================

    def _can_enrich(self, rating: PlayerRating) -> bool:
        return (
            self.live_data_enabled
            and self.live_client is not None
            and rating.sofifa_url is not None
        )

    async def _enrich(self, result: MatchResult) -> MatchResult:
        """
        Merge live data over a local result.

        Live fields take precedence over local ones. On failure the local
        result is returned with a fallback source tag.
        """
        rating = result.rating
        logger.info("Fetching live SoFIFA data for %s", result.search_name)

        try:
            live_data = await self.live_client.fetch_player_data(
                rating.sofifa_url, rating.sofifa_id, result.search_name
            )
            if live_data:
                merged, extras = merge_live_data(rating, live_data)
        except Exception as e:
            logger.error("Error fetching live data for %s: %s", result.search_name, e)
            result.source = sources.MOCK_ERROR_FALLBACK
            result.fetch_error = str(e)
            return result

        if not live_data:
            logger.warning("Live data fetch returned nothing, using local data for %s", result.search_name)
            result.source = sources.MOCK_FALLBACK
            result.live_attempted = True
            result.live_fetch_time = _now_iso()
            return result

        logger.info("Enhanced %s with live SoFIFA data", result.search_name)

        return MatchResult(
            rating=merged,
            search_name=result.search_name,
            source=sources.SOFIFA_ENHANCED,
            found=True,
            suggested_name=result.suggested_name,
            live_extras=extras,
            last_updated=_now_iso(),
            local_data_available=True,
        )
