"""
Base scraper class for player profile pages.

Uses Playwright for browser automation to handle JavaScript-rendered and
bot-protected profile pages.

Key features:
- Async context manager for proper resource cleanup
- Retry logic with exponential backoff
- Stealth mode to avoid bot detection (Cloudflare, etc.)
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from playwright_stealth import Stealth

from fifatracker.config import settings

logger = logging.getLogger(__name__)

# Stealth configuration to avoid bot detection (Cloudflare, etc.)
_stealth = Stealth()


class BaseScraper(ABC):
    """
    Abstract base class for player profile scrapers.

    Provides common functionality:
    - Playwright browser management (async context manager)
    - Page navigation with retry logic

    Subclasses must implement:
    - fetch_player_data(): Retrieve live rating fields for one player

    Usage:
        async with SofifaScraper() as scraper:
            data = await scraper.fetch_player_data(url, 239085, "Erling Haaland")
    """

    def __init__(self, headless: Optional[bool] = None):
        """
        Initialize the scraper.

        Args:
            headless: Whether to run browser in headless mode.
                     If None, uses settings.scrape_headless
        """
        self.headless = headless if headless is not None else settings.scrape_headless
        self.timeout = settings.scrape_timeout

        # Playwright objects (initialized in __aenter__)
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "BaseScraper":
        """
        Async context manager entry - starts browser.

        Sets up Playwright with a Chromium browser and context
        configured for web scraping (appropriate user agent, etc.)
        """
        self._playwright = await async_playwright().start()

        self._browser = await self._playwright.chromium.launch(
            headless=self.headless
        )

        # Create context with realistic browser fingerprint
        self._context = await self._browser.new_context(
            user_agent=(
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                "AppleWebKit/537.36 (KHTML, like Gecko) "
                "Chrome/120.0.0.0 Safari/537.36"
            ),
            viewport={"width": 1920, "height": 1080},
            locale="en-US",
        )

        self._context.set_default_timeout(self.timeout)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Async context manager exit - cleans up browser resources.

        Always closes browser and Playwright, even if an exception occurred.
        """
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()
        self._context = None
        self._browser = None
        self._playwright = None

    async def new_page(self) -> Page:
        """
        Create a new browser page with stealth mode enabled.

        Returns:
            New Playwright Page object with stealth enabled

        Raises:
            RuntimeError: If called outside ``async with``
        """
        if not self._context:
            raise RuntimeError("Scraper not initialized. Use 'async with' context manager.")

        page = await self._context.new_page()

        # Apply stealth to avoid Cloudflare and other bot detection
        await _stealth.apply_stealth_async(page)

        return page

    async def navigate(
        self,
        page: Page,
        url: str,
        wait_for: str = "load",
        max_attempts: Optional[int] = None,
    ) -> None:
        """
        Navigate to a URL with retry logic.

        Args:
            page: Playwright Page object
            url: URL to navigate to
            wait_for: Wait condition ('load', 'domcontentloaded', 'networkidle')

        Raises:
            Exception: If navigation fails after all retries
        """
        # Use lambda to create a fresh coroutine on each retry attempt
        await self.with_retry(
            lambda: page.goto(url, wait_until=wait_for, timeout=self.timeout),
            max_attempts=max_attempts,
            description=f"Navigate to {url}",
        )

    async def with_retry(
        self,
        coro_func,
        max_attempts: Optional[int] = None,
        base_delay: float = 2.0,
        description: str = "Operation",
    ):
        """
        Execute an async operation with exponential backoff retry.

        IMPORTANT: Pass a callable (like a lambda) that creates a coroutine,
        not a pre-created coroutine. Coroutines can only be awaited once,
        so we need to create a fresh one for each retry attempt.

        Args:
            coro_func: Callable that returns a coroutine (e.g., lambda: page.goto(url))
            max_attempts: Maximum retry attempts (default from settings)
            base_delay: Initial delay between retries (doubles each attempt)
            description: Description for logging

        Returns:
            Result of the coroutine

        Raises:
            Exception: The last exception if all retries fail
        """
        if max_attempts is None:
            max_attempts = settings.scrape_max_retries

        last_error = None

        for attempt in range(max_attempts):
            try:
                return await coro_func()
            except Exception as e:
                last_error = e

                if attempt < max_attempts - 1:
                    delay = base_delay * (2 ** attempt)
                    # Jitter to avoid thundering herd
                    delay += random.uniform(0, 1)

                    logger.warning(
                        "[Retry %d/%d] %s failed: %s. Retrying in %.1fs...",
                        attempt + 1, max_attempts, description, e, delay,
                    )
                    await asyncio.sleep(delay)

        raise last_error

    # =========================================================================
    # Abstract Methods - Must be implemented by subclasses
    # =========================================================================

    @abstractmethod
    async def fetch_player_data(
        self,
        profile_url: str,
        external_id: Optional[int],
        player_name: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Retrieve live rating fields for one player.

        Args:
            profile_url: Player profile URL
            external_id: Site-specific player ID
            player_name: Display name, for logging

        Returns:
            Flat dict of rating fields, or None if nothing could be retrieved
        """
        pass
