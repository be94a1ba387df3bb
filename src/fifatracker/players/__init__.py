"""
Player name matching module.

Resolves player names typed into the club roster to entries of the
ratings dataset, tolerating case, accents, punctuation and small typos.

Key components:
- normalize_name: Case/accent/punctuation-insensitive form of a name
- similarity: Levenshtein-based similarity score (0.0 - 1.0)
- resolve_player: Exact lookup, then term-wise fuzzy match

The matching strategy (in priority order):
1. Exact display-name match (case-sensitive)
2. First stored name where every search term is contained in, contains,
   or is similar (> 0.7) to one of its terms
"""

from fifatracker.players.aliases import levenshtein_distance, normalize_name, similarity
from fifatracker.players.matcher import PlayerMatch, fuzzy_match, resolve_player

__all__ = [
    "PlayerMatch",
    "fuzzy_match",
    "levenshtein_distance",
    "normalize_name",
    "resolve_player",
    "similarity",
]
