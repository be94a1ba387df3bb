"""
FIFA Tracker - club management companion

Keeps player rating cards in sync with public FIFA rating data.

Main components:
- players: Name normalization and fuzzy player matching
- ratings: Ratings dataset loading, transformation and player lookup
- scrape: Live SoFIFA profile enrichment via Playwright
"""

__version__ = "1.0.0"
