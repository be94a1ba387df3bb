"""
Player matcher: resolve a display name against the ratings mapping.

The matching strategy (in priority order):
1. Exact name lookup (case-sensitive, trimmed input)
2. Term-wise fuzzy match: every search term must be contained in, contain,
   or be similar to at least one term of the stored name

The fuzzy pass walks the mapping in insertion order and returns the first
qualifying entry. There is no ranking across candidates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional

from fifatracker.config import settings
from fifatracker.players.aliases import normalize_name, similarity

if TYPE_CHECKING:
    from fifatracker.ratings.models import PlayerRating


@dataclass
class PlayerMatch:
    """
    Result of a player matching attempt.

    Returned by resolve_player() so callers can tell how the match was made.
    """
    canonical_name: str
    rating: PlayerRating
    match_type: str  # 'exact' or 'fuzzy'

    @property
    def is_exact(self) -> bool:
        return self.match_type == "exact"

    def __repr__(self) -> str:
        return f"<PlayerMatch(name='{self.canonical_name}', type='{self.match_type}')>"


def _term_matches(search_term: str, db_terms: list[str], threshold: float) -> bool:
    """Check one normalized search term against the terms of a stored name."""
    for db_term in db_terms:
        if search_term in db_term or db_term in search_term:
            return True
        if similarity(search_term, db_term) > threshold:
            return True
    return False


def fuzzy_match(
    name: str,
    ratings: Mapping[str, PlayerRating],
    threshold: Optional[float] = None,
) -> Optional[PlayerMatch]:
    """
    Find the first stored player whose name matches every search term.

    A search term matches a stored name when, for at least one term of the
    normalized stored name, one contains the other or their similarity is
    strictly above ``threshold``.

    Args:
        name: Name to search for (already trimmed)
        ratings: Mapping of display name to rating, in insertion order
        threshold: Per-term similarity threshold (default from settings)

    Returns:
        PlayerMatch for the first qualifying entry, None otherwise
    """
    if threshold is None:
        threshold = settings.player_fuzzy_threshold

    search_terms = [normalize_name(term) for term in name.split()]
    if not search_terms:
        return None

    for db_name, rating in ratings.items():
        db_terms = normalize_name(db_name).split()
        if all(_term_matches(term, db_terms, threshold) for term in search_terms):
            return PlayerMatch(canonical_name=db_name, rating=rating, match_type="fuzzy")

    return None


def resolve_player(
    name: str,
    ratings: Mapping[str, PlayerRating],
    threshold: Optional[float] = None,
) -> Optional[PlayerMatch]:
    """
    Resolve a display name to a stored rating.

    Tries an exact key lookup first; the fuzzy pass only runs when that
    misses. Input validation (non-string, blank) is the caller's job.

    Args:
        name: Display name to resolve
        ratings: Mapping of display name to rating
        threshold: Optional override of the fuzzy similarity threshold

    Returns:
        PlayerMatch if found, None otherwise

    Examples:
        match = resolve_player("kylian mbape", store.ratings)
        if match and not match.is_exact:
            print(f"Did you mean {match.canonical_name}?")
    """
    clean_name = name.strip()

    rating = ratings.get(clean_name)
    if rating is not None:
        return PlayerMatch(canonical_name=clean_name, rating=rating, match_type="exact")

    return fuzzy_match(clean_name, ratings, threshold=threshold)
