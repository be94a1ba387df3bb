"""
Player ratings module.

Loads the SoFIFA ratings export, keeps it in memory, and answers
"what are this player's ratings?" for the club roster.

Key components:
- RatingsService: Public lookup API (exact/fuzzy match + live enrichment)
- RatingsStore: Injectable in-memory name -> rating mapping
- DatasetLoader: Fetches and transforms the ratings export
- PlayerRating / MatchResult: Canonical rating and lookup result
"""

from fifatracker.ratings.loader import DatasetLoader, DatasetLoadError
from fifatracker.ratings.models import MatchResult, PlayerRating, merge_live_data
from fifatracker.ratings.service import RatingsService
from fifatracker.ratings.store import RatingsStore
from fifatracker.ratings.transform import transform_record

__all__ = [
    "DatasetLoadError",
    "DatasetLoader",
    "MatchResult",
    "PlayerRating",
    "RatingsService",
    "RatingsStore",
    "merge_live_data",
    "transform_record",
]
