"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import json

import pytest

from fifatracker.ratings.store import RatingsStore
from fifatracker.ratings.transform import transform_record


def _record(name: str, sofifa_id: str, **fields) -> dict:
    """Build a raw dataset record shaped like the SoFIFA export."""
    record = {"id": sofifa_id, "name": name}
    record.update(fields)
    return record


@pytest.fixture
def raw_records():
    """
    A small raw ratings export.

    Order matters: the fuzzy matcher returns the first qualifying entry.
    """
    return [
        _record(
            "Erling Haaland", "239085",
            age=2000,
            positions="ST, CF",
            overall=91,
            potential=94,
            height_cm=195,
            weight_kg=88,
            preferred_foot="Left",
            main_attributes={
                "pace": 89, "shooting": 91, "passing": 65,
                "dribbling": 80, "defending": 45, "physical": 88,
            },
            detailed_skills={
                "attacking": {"finishing": 94, "heading_accuracy": 85, "short_passing": 65},
                "power": {"shot_power": 94, "jumping": 95, "strength": 92},
            },
            work_rate="High/Medium",
            weak_foot=3,
            skill_moves=3,
            nationality="Norway",
        ),
        _record(
            "Kylian Mbappé", "231747",
            age=25,
            positions="ST, LW",
            overall=91,
            potential=94,
            main_attributes={"pace": 97, "shooting": 90},
            detailed_skills={"skill": {"dribbling": 93, "ball_control": 91}},
            nationality="France",
        ),
        _record(
            "Pedri", "251854",
            age=2002,
            positions="CM",
            overall=86,
            potential=91,
            nationality="Spain",
        ),
        _record(
            "Kevin De Bruyne", "192985",
            age=33,
            positions="CM, CAM",
            overall=90,
            detailed_skills={"mentality": {"vision": 94}, "defending": {"defensive_awareness": 66}},
            nationality="Belgium",
        ),
    ]


@pytest.fixture
def ratings_file(tmp_path, raw_records):
    """Write the raw export to a JSON file and return its path."""
    path = tmp_path / "sofifa_my_players_app.json"
    path.write_text(json.dumps(raw_records, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def store(raw_records):
    """A store pre-seeded with the transformed raw export."""
    ratings_store = RatingsStore()
    ratings_store.replace((raw["name"], transform_record(raw)) for raw in raw_records)
    return ratings_store
