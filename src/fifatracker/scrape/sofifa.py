"""
SoFIFA live profile scraper.

Scrapes a SoFIFA player profile page to get current ratings (overall,
potential, positions, age, club, nationality) on top of the bulk dataset.

Uses BaseScraper for Playwright browser automation with stealth mode.
Results are cached per player for a configurable time and requests are
capped per minute, so opening the same card repeatedly doesn't hammer
the site.

Usage:
    async with SofifaScraper() as scraper:
        data = await scraper.fetch_player_data(
            "https://sofifa.com/player/239085/", 239085, "Erling Haaland"
        )
"""

import asyncio
import logging
import re
import time
from typing import Any, Optional

from bs4 import BeautifulSoup

from fifatracker.config import settings
from fifatracker.scrape.base import BaseScraper

logger = logging.getLogger(__name__)

_RATE_WINDOW_SECONDS = 60.0


def _parse_int(text: str) -> Optional[int]:
    m = re.search(r"\d+", text)
    return int(m.group(0)) if m else None


class SofifaScraper(BaseScraper):
    """
    Live enrichment client backed by SoFIFA profile pages.

    Each profile is loaded in a fresh browser page. Navigation errors are
    retried and then raised; a page without recognisable rating data
    yields None.
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        cache_ttl: Optional[int] = None,
        max_requests_per_minute: Optional[int] = None,
    ):
        super().__init__(headless=headless)
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.live_cache_ttl_seconds
        self.max_requests_per_minute = (
            max_requests_per_minute
            if max_requests_per_minute is not None
            else settings.live_rate_limit_per_minute
        )

        # cache key -> (stored at, data)
        self._cache: dict[str, tuple[float, dict[str, Any]]] = {}
        self._window_started: Optional[float] = None
        self._window_requests = 0

    # =========================================================================
    # Main Public Methods
    # =========================================================================

    async def fetch_player_data(
        self,
        profile_url: str,
        external_id: Optional[int],
        player_name: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Fetch current ratings for a player from their SoFIFA profile.

        Args:
            profile_url: e.g. "https://sofifa.com/player/239085/"
            external_id: SoFIFA player ID, used as the cache key
            player_name: Display name, for logging only

        Returns:
            Dict with any of: overall, potential, positions, age, club,
            nationality, name. None if rate limited or nothing parsed.

        Raises:
            Exception: If the page could not be loaded after all retries
        """
        cache_key = str(external_id) if external_id is not None else profile_url

        self._evict_expired()
        cached = self._cache.get(cache_key)
        if cached:
            logger.debug("Cache hit for SoFIFA ID %s", cache_key)
            return cached[1]

        if not self._check_rate_limit():
            logger.warning("Rate limit exceeded for SoFIFA requests (%s)", player_name or cache_key)
            return None

        logger.info("Scraping SoFIFA profile: %s", profile_url)
        html = await self.fetch_profile_html(profile_url)
        data = self.parse_profile(html)

        if data is None:
            logger.warning("No rating data found on SoFIFA profile for %s", player_name or cache_key)
            return None

        self._cache[cache_key] = (time.monotonic(), data)
        return data

    async def fetch_profile_html(self, profile_url: str) -> str:
        """Load a profile page and return its HTML."""
        page = await self.new_page()
        try:
            await self.navigate(page, profile_url, wait_for="domcontentloaded")
            html = await page.content()

            # Handle Cloudflare challenge
            if len(html) < 5000 or "challenge-platform" in html:
                logger.info("Cloudflare challenge for %s, waiting 15s...", profile_url)
                await asyncio.sleep(15)
                html = await page.content()

            return html

        finally:
            await page.close()

    def parse_profile(self, html: str) -> Optional[dict]:
        """
        Parse SoFIFA profile HTML into a flat dict of rating fields.

        SoFIFA profile page structure:
        - .bp-overall / .bp-potential: rating numbers
        - h1[data-title] (or .player-name): player name
        - .bp-positions .badge: one badge per position
        - .bp-age, .bp-club a, .bp-nationality a

        Returns:
            Dict of the fields found, or None when neither an overall
            rating nor a name could be extracted
        """
        soup = BeautifulSoup(html, "lxml")
        data: dict[str, Any] = {}

        overall = soup.select_one(".bp-overall")
        if overall:
            data["overall"] = _parse_int(overall.get_text(strip=True))

        potential = soup.select_one(".bp-potential")
        if potential:
            data["potential"] = _parse_int(potential.get_text(strip=True))

        name = soup.select_one("h1[data-title]") or soup.select_one(".player-name")
        if name:
            data["name"] = name.get_text(strip=True)

        badges = soup.select(".bp-positions .badge")
        if badges:
            data["positions"] = [badge.get_text(strip=True) for badge in badges]

        age = soup.select_one(".bp-age")
        if age:
            data["age"] = _parse_int(age.get_text(strip=True))

        club = soup.select_one(".bp-club a")
        if club:
            data["club"] = club.get_text(strip=True)

        nationality = soup.select_one(".bp-nationality a")
        if nationality:
            data["nationality"] = nationality.get_text(strip=True)

        if not data.get("overall") and not data.get("name"):
            return None

        return data

    # =========================================================================
    # Cache and rate limit
    # =========================================================================

    def _check_rate_limit(self) -> bool:
        """Count a request in the current one-minute window; False if over the cap."""
        now = time.monotonic()
        if self._window_started is None or now - self._window_started >= _RATE_WINDOW_SECONDS:
            self._window_started = now
            self._window_requests = 0

        if self._window_requests >= self.max_requests_per_minute:
            return False

        self._window_requests += 1
        return True

    def _evict_expired(self) -> None:
        now = time.monotonic()
        expired = [
            key for key, (stored_at, _) in self._cache.items()
            if now - stored_at >= self.cache_ttl
        ]
        for key in expired:
            del self._cache[key]

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("SoFIFA cache cleared")

    def cache_stats(self) -> dict[str, Any]:
        return {
            "size": len(self._cache),
            "entries": list(self._cache),
            "requests_this_minute": self._window_requests,
            "max_requests_per_minute": self.max_requests_per_minute,
        }
