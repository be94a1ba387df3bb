"""
Transform raw ratings-dataset records into canonical PlayerRating objects.

Raw records come from a scraped SoFIFA export and look like:

    {
        "id": "239085",
        "name": "Erling Haaland",
        "age": 2000,                      # birth year or real age
        "positions": "ST, CF",
        "overall": 91,
        "main_attributes": {"pace": 89, ...},
        "detailed_skills": {"attacking": {"finishing": 94, ...}, ...},
        ...
    }

Every missing or non-numeric field falls back to a fixed default so the
result can always be rendered as a card.

Two source skills are folded into an existing card skill because the card
has no slot for them:
- defensive_awareness -> interceptions
- dribbling           -> ballControl
The source value overwrites whatever the target held, so one of the two
original values is lost. This is intentional.
"""

import math
from datetime import datetime
from typing import Any, Mapping, Optional

from fifatracker.config import settings
from fifatracker.ratings.models import PlayerRating

DEFAULT_SKILL_VALUE = 65

# The 25 detailed skills shown on a player card
SKILL_NAMES: tuple[str, ...] = (
    "crossing", "finishing", "headingAccuracy", "shortPassing", "volleys",
    "curve", "fkAccuracy", "longPassing", "ballControl", "acceleration",
    "sprintSpeed", "agility", "reactions", "balance", "shotPower",
    "jumping", "stamina", "strength", "longShots", "aggression",
    "interceptions", "positioning", "vision", "penalties", "composure",
)

# Source skill key -> card skill name. Keys not listed here are dropped.
SKILL_NAME_MAP: dict[str, str] = {
    # Same name on both sides
    "crossing": "crossing",
    "finishing": "finishing",
    "volleys": "volleys",
    "curve": "curve",
    "vision": "vision",
    "acceleration": "acceleration",
    "agility": "agility",
    "reactions": "reactions",
    "balance": "balance",
    "jumping": "jumping",
    "stamina": "stamina",
    "strength": "strength",
    "aggression": "aggression",
    "interceptions": "interceptions",
    "positioning": "positioning",
    "penalties": "penalties",
    "composure": "composure",

    # Renamed
    "short_passing": "shortPassing",
    "long_passing": "longPassing",
    "fk_accuracy": "fkAccuracy",
    "ball_control": "ballControl",
    "sprint_speed": "sprintSpeed",
    "shot_power": "shotPower",
    "long_shots": "longShots",
    "heading_accuracy": "headingAccuracy",

    # Lossy: folded into the closest card skill
    "defensive_awareness": "interceptions",
    "dribbling": "ballControl",
}

MAIN_ATTRIBUTES: tuple[str, ...] = (
    "pace", "shooting", "passing", "dribbling", "defending", "physical",
)

# Raw ages inside this open interval are birth years
_BIRTH_YEAR_MIN = 1900
_BIRTH_YEAR_MAX = 2010


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a rating; inf and NaN have no int value
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _number_or(value: Any, default: int) -> int:
    """Return value as int when it is numeric, otherwise the default."""
    if _is_number(value):
        return int(value)
    return default


def _text_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def map_skill_name(source_key: str) -> Optional[str]:
    """Map a source skill key to its card skill name, or None if unmapped."""
    return SKILL_NAME_MAP.get(source_key)


def flatten_detailed_skills(detailed_skills: Optional[Mapping[str, Any]]) -> dict[str, int]:
    """
    Flatten the nested detailed_skills structure into the 25 card skills.

    Starts from every skill at 65, then walks each category and overwrites
    the mapped skill for every numeric value. Categories that are not
    mappings and non-numeric values are skipped.

    Args:
        detailed_skills: e.g. {"attacking": {"finishing": 94}, "skill": {...}}

    Returns:
        Dict with exactly the 25 keys of SKILL_NAMES

    Raises:
        TypeError: If detailed_skills is neither None nor a mapping
    """
    skills = {name: DEFAULT_SKILL_VALUE for name in SKILL_NAMES}

    if detailed_skills is None:
        return skills
    if not isinstance(detailed_skills, Mapping):
        raise TypeError(
            f"detailed_skills must be a mapping, got {type(detailed_skills).__name__}"
        )

    for category in detailed_skills.values():
        if not isinstance(category, Mapping):
            continue
        for source_key, value in category.items():
            if not _is_number(value):
                continue
            mapped = map_skill_name(source_key)
            if mapped:
                skills[mapped] = int(value)

    return skills


def derive_age(raw_age: Any, current_year: Optional[int] = None) -> Optional[int]:
    """
    Turn the dataset's age field into an age.

    Some exports store the birth year instead of the age. Values strictly
    between 1900 and 2010 are treated as birth years. Infinity and NaN
    become None; anything else is returned unchanged.

    Examples:
        >>> derive_age(2000, current_year=2025)
        25
        >>> derive_age(23)
        23
    """
    if isinstance(raw_age, float) and not math.isfinite(raw_age):
        return None
    if not _is_number(raw_age):
        return raw_age
    if _BIRTH_YEAR_MIN < raw_age < _BIRTH_YEAR_MAX:
        if current_year is None:
            current_year = datetime.now().year
        return current_year - int(raw_age)
    return raw_age


def parse_positions(raw_positions: Any) -> tuple[str, ...]:
    """
    Parse "ST, CF" into ("ST", "CF").

    Missing or blank values default to ("Unknown",). Lists are accepted as
    already split.

    Raises:
        TypeError: If the value is neither a string nor a list
    """
    if raw_positions is None:
        return ("Unknown",)

    if isinstance(raw_positions, str):
        tokens = raw_positions.split(",")
    elif isinstance(raw_positions, (list, tuple)):
        tokens = [str(token) for token in raw_positions]
    else:
        raise TypeError(
            f"positions must be a string or list, got {type(raw_positions).__name__}"
        )

    positions = tuple(token.strip() for token in tokens if token.strip())
    return positions or ("Unknown",)


def parse_sofifa_id(raw_id: Any) -> Optional[int]:
    """Parse the dataset id into an int, or None if it isn't one."""
    if raw_id is None or isinstance(raw_id, bool):
        return None
    try:
        return int(str(raw_id).strip())
    except ValueError:
        return None


def build_profile_url(sofifa_id: Optional[int], base_url: Optional[str] = None) -> Optional[str]:
    """Build the SoFIFA profile URL for an id, e.g. https://sofifa.com/player/239085/"""
    if sofifa_id is None:
        return None
    if base_url is None:
        base_url = settings.sofifa_base_url
    return f"{base_url}/player/{sofifa_id}/"


def transform_record(
    raw: Mapping[str, Any],
    current_year: Optional[int] = None,
) -> PlayerRating:
    """
    Transform one raw dataset record into a canonical PlayerRating.

    Args:
        raw: Record as parsed from the dataset JSON
        current_year: Override for birth-year conversion (tests)

    Returns:
        New PlayerRating

    Raises:
        TypeError: If the record or one of its nested structures has the
                   wrong shape
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"record must be a mapping, got {type(raw).__name__}")

    main_attributes = raw.get("main_attributes") or {}
    if not isinstance(main_attributes, Mapping):
        raise TypeError(
            f"main_attributes must be a mapping, got {type(main_attributes).__name__}"
        )

    overall = _number_or(raw.get("overall"), DEFAULT_SKILL_VALUE)
    sofifa_id = parse_sofifa_id(raw.get("id"))

    return PlayerRating(
        overall=overall,
        potential=_number_or(raw.get("potential"), overall),
        positions=parse_positions(raw.get("positions")),
        age=derive_age(raw.get("age"), current_year=current_year),
        height=_number_or(raw.get("height_cm"), 175),
        weight=_number_or(raw.get("weight_kg"), 70),
        foot=_text_or(raw.get("preferred_foot"), "Right"),
        **{
            name: _number_or(main_attributes.get(name), DEFAULT_SKILL_VALUE)
            for name in MAIN_ATTRIBUTES
        },
        skills=flatten_detailed_skills(raw.get("detailed_skills")),
        work_rates=_text_or(raw.get("work_rate"), "Medium/Medium"),
        weak_foot=_number_or(raw.get("weak_foot"), 3),
        skill_moves=_number_or(raw.get("skill_moves"), 3),
        nationality=_text_or(raw.get("nationality"), "Unknown"),
        sofifa_id=sofifa_id,
        sofifa_url=build_profile_url(sofifa_id),
    )
