"""Static simulation configuration constants."""

from __future__ import annotations

from .models import RATING_CEILING, RATING_FLOOR, LeagueSettings

RATING_MIN = RATING_FLOOR
RATING_MAX = RATING_CEILING

HOME_ADVANTAGE = 0.15
MAX_GOALS = 8
# Expected goals = max(XG_FLOOR, (attack - defense + XG_OFFSET) * XG_SCALE)
XG_OFFSET = 0.5
XG_SCALE = 2.2
XG_FLOOR = 0.1

RATING_STEP = 0.02
SEASON_START_RANGE = 0.05

GOAL_MINUTE_MAX = 89

# Division 1 final position -> bonus points.
POSITION_POINTS: dict[int, int] = {1: 6, 2: 4, 3: 2, 4: 1}

GENERATED_STRENGTH_MEAN = 0.65
GENERATED_STRENGTH_STDDEV = 0.12
GENERATED_STRENGTH_BOUNDS: tuple[float, float] = (0.4, 0.9)

DEFAULT_SETTINGS = LeagueSettings(
    divisions_count=2,
    teams_per_division=10,
    promotion_count=1,
    relegation_count=1,
    simulation_time=20,
)

LEAGUE_PRESETS: dict[str, tuple[str, LeagueSettings]] = {
    "Allsvenskan Style": (
        "Svenska Ligan",
        LeagueSettings(divisions_count=3, teams_per_division=16, promotion_count=2, relegation_count=2, simulation_time=30),
    ),
    "Regional League": (
        "Regionalligan",
        LeagueSettings(divisions_count=4, teams_per_division=12, promotion_count=2, relegation_count=2, simulation_time=25),
    ),
    "Local League": (
        "Lokalligan",
        LeagueSettings(divisions_count=2, teams_per_division=10, promotion_count=1, relegation_count=1, simulation_time=20),
    ),
}


def validate_settings(settings: LeagueSettings) -> LeagueSettings:
    """Reject league settings the season engine cannot run with.

    The engine itself never re-checks these, so every entry point that accepts
    settings from outside (league creation, the API) goes through here.
    """
    if settings.divisions_count < 1:
        raise ValueError("A league needs at least one division.")
    if settings.teams_per_division < 2:
        raise ValueError("Each division needs room for at least two teams.")
    if settings.promotion_count < 0 or settings.relegation_count < 0:
        raise ValueError("Promotion and relegation counts cannot be negative.")
    if settings.promotion_count >= settings.teams_per_division:
        raise ValueError(
            f"Promotion count {settings.promotion_count} must be below teams per division "
            f"({settings.teams_per_division})."
        )
    if settings.relegation_count >= settings.teams_per_division:
        raise ValueError(
            f"Relegation count {settings.relegation_count} must be below teams per division "
            f"({settings.teams_per_division})."
        )
    if settings.promotion_count + settings.relegation_count > settings.teams_per_division:
        raise ValueError("A team cannot be both promoted and relegated; lower the movement counts.")
    if settings.simulation_time <= 0:
        raise ValueError("Simulation time must be positive.")
    return settings
