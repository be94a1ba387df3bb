"""Built-in ratings used when the dataset cannot be loaded."""

from fifatracker.ratings.models import PlayerRating


def fallback_ratings() -> dict[str, PlayerRating]:
    """Return a small, always-available set of ratings."""
    return {
        "Erling Haaland": PlayerRating(
            overall=91,
            potential=94,
            positions=("ST", "CF"),
            age=23,
            height=195,
            weight=88,
            foot="Left",
            pace=89,
            shooting=91,
            passing=65,
            dribbling=80,
            defending=45,
            physical=88,
            skills={
                "crossing": 55, "finishing": 94, "headingAccuracy": 85,
                "shortPassing": 65, "volleys": 86, "curve": 77,
                "fkAccuracy": 84, "longPassing": 65, "ballControl": 81,
                "acceleration": 87, "sprintSpeed": 90, "agility": 77,
                "reactions": 93, "balance": 70, "shotPower": 94,
                "jumping": 95, "stamina": 88, "strength": 92,
                "longShots": 85, "aggression": 84, "interceptions": 30,
                "positioning": 95, "vision": 68, "penalties": 85,
                "composure": 88,
            },
            work_rates="High/Medium",
            weak_foot=3,
            skill_moves=3,
            nationality="Norway",
            club="Manchester City",
            value="€180M",
            wage="€375K",
            contract="2027",
            sofifa_id=239085,
            sofifa_url="https://sofifa.com/player/239085/erling-haaland/250001/",
        ),
    }
