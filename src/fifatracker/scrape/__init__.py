"""
Web scraping module for FIFA Tracker.

Fetches live player data to enrich the local ratings dataset:
- SoFIFA player profiles (sofifa.com)

Key components:
- BaseScraper: Abstract base class with browser management and retries
- SofifaScraper: Live enrichment client for SoFIFA profile pages

The scraping architecture uses:
- Playwright for browser automation (handles bot-protected pages)
- BeautifulSoup for HTML parsing
- Async/await so lookups never block the event loop
"""

from fifatracker.scrape.base import BaseScraper
from fifatracker.scrape.sofifa import SofifaScraper

__all__ = [
    "BaseScraper",
    "SofifaScraper",
]
