"""Provenance tags attached to every player lookup result.

Callers tell "degraded but usable" results from primary ones by checking
``MatchResult.source`` against these values.
"""

from __future__ import annotations

# Local dataset, exact name hit.
JSON_DATABASE = "json_database"
# Local dataset, fuzzy name hit.
JSON_DATABASE_FUZZY = "json_database_fuzzy"
# Local hit merged with live profile data.
SOFIFA_ENHANCED = "sofifa_enhanced"
# Live lookup returned nothing; local data only.
MOCK_FALLBACK = "mock_fallback"
# Live lookup raised; local data only, error attached.
MOCK_ERROR_FALLBACK = "mock_error_fallback"

DEGRADED_SOURCES: tuple[str, ...] = (MOCK_FALLBACK, MOCK_ERROR_FALLBACK)


def is_degraded(source: str) -> bool:
    """Return True when a live lookup was attempted and did not contribute."""
    return source in DEGRADED_SOURCES
