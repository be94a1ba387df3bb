"""
In-memory ratings store.

Holds the display-name -> PlayerRating mapping for the lifetime of the
process. One store is created by the application and passed to the
RatingsService; tests create their own to seed and reset it.

The store also owns the load guard: concurrent callers that find it empty
share one in-flight load instead of each fetching the dataset.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from fifatracker.ratings.models import PlayerRating

logger = logging.getLogger(__name__)


class RatingsStore:
    """
    Mapping of player display name to canonical rating.

    At most one entry per display name; later writes replace earlier ones.
    Iteration follows insertion order, which the fuzzy matcher relies on.

    Usage:
        store = RatingsStore()
        store.add("Erling Haaland", rating)

        await store.ensure_loaded(loader.load_into)
    """

    def __init__(self, ratings: Optional[dict[str, PlayerRating]] = None):
        self._ratings: dict[str, PlayerRating] = dict(ratings or {})
        self._load_task: Optional[asyncio.Task] = None

    # =========================================================================
    # Mapping access
    # =========================================================================

    @property
    def ratings(self) -> dict[str, PlayerRating]:
        """Live view of the mapping. Treat as read-only."""
        return self._ratings

    def __len__(self) -> int:
        return len(self._ratings)

    def __contains__(self, name: object) -> bool:
        return name in self._ratings

    def is_empty(self) -> bool:
        return not self._ratings

    def get(self, name: str) -> Optional[PlayerRating]:
        return self._ratings.get(name)

    def names(self) -> list[str]:
        return list(self._ratings)

    def add(self, name: str, rating: PlayerRating) -> None:
        """Insert or override a single player."""
        self._ratings[name] = rating

    def replace(self, items: Iterable[tuple[str, PlayerRating]]) -> None:
        """
        Swap in a whole new mapping.

        The new mapping is built first and then assigned, so readers never
        observe a half-populated store.
        """
        fresh: dict[str, PlayerRating] = {}
        for name, rating in items:
            fresh[name] = rating
        self._ratings = fresh

    def clear(self) -> None:
        self._ratings = {}

    # =========================================================================
    # Load guard
    # =========================================================================

    async def ensure_loaded(self, load: Callable[["RatingsStore"], Awaitable[bool]]) -> None:
        """
        Run ``load(self)`` if the store is empty.

        Concurrent callers await the same load task, so the dataset is
        fetched once per empty state.

        Args:
            load: Coroutine function that populates this store
        """
        if not self.is_empty():
            return

        if self._load_task is None or self._load_task.done():
            logger.info("Ratings store empty, loading dataset...")
            self._load_task = asyncio.ensure_future(load(self))

        task = self._load_task
        try:
            await asyncio.shield(task)
        finally:
            if task.done() and self._load_task is task:
                self._load_task = None

    def __repr__(self) -> str:
        return f"<RatingsStore(players={len(self._ratings)})>"
