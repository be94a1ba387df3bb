"""
Data structures for player ratings and lookup results.

PlayerRating is the canonical, fully-defaulted rating every lookup works
on. It is created once when the dataset is loaded and never mutated;
live enrichment builds a new PlayerRating through merge_live_data().

MatchResult wraps a rating with how it was found (search name, suggested
name, provenance tag, live-enrichment bookkeeping).
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

# Canonical field name -> key used by the UI cards
_UI_KEYS = {
    "work_rates": "workrates",
    "weak_foot": "weakFoot",
    "skill_moves": "skillMoves",
    "sofifa_id": "sofifaId",
    "sofifa_url": "sofifaUrl",
}

# Live clients may answer in either vocabulary
_FIELD_FOR_UI_KEY = {ui_key: name for name, ui_key in _UI_KEYS.items()}


@dataclass(frozen=True)
class PlayerRating:
    """
    Canonical player rating.

    Attribute scores default to 65 and physical data to 175cm / 70kg so a
    card can always be rendered, even from a sparse source record.
    """

    overall: int = 65
    potential: int = 65
    positions: tuple[str, ...] = ("Unknown",)
    age: Optional[int] = None
    height: int = 175
    weight: int = 70
    foot: str = "Right"

    # Face stats
    pace: int = 65
    shooting: int = 65
    passing: int = 65
    dribbling: int = 65
    defending: int = 65
    physical: int = 65

    # The 25 detailed skills, keyed by their card names (see transform.SKILL_NAMES)
    skills: dict[str, int] = field(default_factory=dict)

    work_rates: str = "Medium/Medium"
    weak_foot: int = 3
    skill_moves: int = 3
    nationality: str = "Unknown"

    # Not provided by the ratings dataset
    club: str = "Unknown"
    value: str = "€1M"
    wage: str = "€5K"
    contract: str = "2025"

    # External profile used for live enrichment
    sofifa_id: Optional[int] = None
    sofifa_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the camelCase shape the UI cards consume."""
        payload: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "positions":
                value = list(value)
            elif f.name == "skills":
                value = dict(value)
            payload[_UI_KEYS.get(f.name, f.name)] = value
        return payload


RATING_FIELDS = frozenset(f.name for f in fields(PlayerRating))


def merge_live_data(
    rating: PlayerRating,
    live_data: dict[str, Any],
) -> tuple[PlayerRating, dict[str, Any]]:
    """
    Merge freshly retrieved live fields over a local rating.

    Precedence: live over local, key by key. A live value of None means
    "not retrieved" and never overwrites a local value. Keys that are not
    PlayerRating fields are returned separately as extras. Keys may use
    either the field names or the UI's camelCase names (weakFoot, ...).

    Args:
        rating: Local rating from the dataset
        live_data: Flat dict returned by the live enrichment client

    Returns:
        Tuple of (merged rating, live-only extras)

    Raises:
        TypeError: If live positions are neither a string nor a list
    """
    # transform imports this module
    from fifatracker.ratings.transform import parse_positions

    overrides: dict[str, Any] = {}
    extras: dict[str, Any] = {}

    for key, value in live_data.items():
        if value is None:
            continue
        name = _FIELD_FOR_UI_KEY.get(key, key)
        if name in RATING_FIELDS:
            if name == "positions":
                value = parse_positions(value)
            overrides[name] = value
        else:
            extras[key] = value

    return replace(rating, **overrides), extras


@dataclass
class MatchResult:
    """
    Result of a player lookup.

    Built fresh for every call to RatingsService.get_player_data() and
    never stored.
    """

    rating: PlayerRating
    search_name: str
    source: str  # See ratings.sources
    found: bool = True

    # Set when the name was resolved by the fuzzy pass
    suggested_name: Optional[str] = None

    # Live enrichment bookkeeping
    live_extras: dict[str, Any] = field(default_factory=dict)
    last_updated: Optional[str] = None  # ISO timestamp of a successful live merge
    local_data_available: bool = False
    live_attempted: bool = False
    live_fetch_time: Optional[str] = None
    fetch_error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """
        Flatten for the UI: rating fields, then live-only extras, then
        provenance fields. Later keys win.
        """
        payload = self.rating.to_dict()
        payload.update(self.live_extras)
        payload["searchName"] = self.search_name
        payload["found"] = self.found
        payload["source"] = self.source
        if self.suggested_name is not None:
            payload["suggestedName"] = self.suggested_name
        if self.last_updated is not None:
            payload["lastUpdated"] = self.last_updated
            payload["mockDataAvailable"] = self.local_data_available
        if self.live_attempted:
            payload["sofifaAttempted"] = True
            payload["sofifaFetchTime"] = self.live_fetch_time
        if self.fetch_error is not None:
            payload["fetchError"] = self.fetch_error
        return payload

    def __repr__(self) -> str:
        return (
            f"<MatchResult(search='{self.search_name}', source='{self.source}', "
            f"overall={self.rating.overall})>"
        )
