from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Iterable

from .config import (
    GOAL_MINUTE_MAX,
    HOME_ADVANTAGE,
    MAX_GOALS,
    RATING_MAX,
    RATING_MIN,
    RATING_STEP,
    SEASON_START_RANGE,
    XG_FLOOR,
    XG_OFFSET,
    XG_SCALE,
)
from .models import MatchScore, Team, clamp_rating

logger = logging.getLogger(__name__)


def expected_goals(attack: float, opponent_defense: float) -> float:
    return max(XG_FLOOR, (attack - opponent_defense + XG_OFFSET) * XG_SCALE)


def _sample_goals(expected: float, rng: random.Random) -> int:
    # Two uniform draws around the expectation: Poisson-like spread, cheap and bounded.
    raw = round(expected * rng.random() + rng.random() * 2 - 1)
    return max(0, min(MAX_GOALS, int(raw)))


def simulate_match(home: Team, away: Team, rng: random.Random | None = None) -> MatchScore:
    rng = rng or random.Random()
    home_attack = min(RATING_MAX, home.attack_strength + HOME_ADVANTAGE)
    home_defense = min(RATING_MAX, home.defense_strength + HOME_ADVANTAGE)

    home_xg = expected_goals(home_attack, away.defense_strength)
    away_xg = expected_goals(away.attack_strength, home_defense)

    home_score = _sample_goals(home_xg, rng)
    away_score = _sample_goals(away_xg, rng)
    logger.debug(
        "%s %d-%d %s (xG %.2f / %.2f)",
        home.name,
        home_score,
        away_score,
        away.name,
        home_xg,
        away_xg,
    )
    return MatchScore(home_score=home_score, away_score=away_score)


def goal_minutes(goals: int, rng: random.Random | None = None) -> list[int]:
    """Random goal minutes for an already decided score; presentation only."""
    rng = rng or random.Random()
    return sorted(rng.randint(1, GOAL_MINUTE_MAX) for _ in range(max(0, goals)))


def _step(value: float, delta: float) -> float:
    return clamp_rating(value + delta, RATING_MIN, RATING_MAX)


def _reinforce(winner: Team, loser: Team) -> tuple[Team, Team]:
    win_attack = winner.attack_strength
    win_defense = winner.defense_strength
    lose_attack = loser.attack_strength
    lose_defense = loser.defense_strength

    if winner.attack_strength < loser.attack_strength:
        win_attack = _step(winner.attack_strength, RATING_STEP)
    if winner.defense_strength < loser.defense_strength:
        win_defense = _step(winner.defense_strength, RATING_STEP)
    if loser.attack_strength > winner.attack_strength:
        lose_attack = _step(loser.attack_strength, -RATING_STEP)
    if loser.defense_strength > winner.defense_strength:
        lose_defense = _step(loser.defense_strength, -RATING_STEP)

    return (
        replace(winner, attack_strength=win_attack, defense_strength=win_defense),
        replace(loser, attack_strength=lose_attack, defense_strength=lose_defense),
    )


def adjust_ratings(home: Team, away: Team, home_score: int, away_score: int) -> tuple[Team, Team]:
    """Return updated copies of both teams after a finished match.

    A winner closes the gap on any rating where the loser was stronger, and the
    loser gives ground on any rating where it was stronger than the winner. A draw
    only lifts the weaker defense.
    """
    if home_score > away_score:
        new_home, new_away = _reinforce(home, away)
    elif away_score > home_score:
        new_away, new_home = _reinforce(away, home)
    else:
        new_home, new_away = replace(home), replace(away)
        if home.defense_strength < away.defense_strength:
            new_home = replace(home, defense_strength=_step(home.defense_strength, RATING_STEP))
        elif away.defense_strength < home.defense_strength:
            new_away = replace(away, defense_strength=_step(away.defense_strength, RATING_STEP))

    logger.debug(
        "Ratings %s att %.2f->%.2f def %.2f->%.2f | %s att %.2f->%.2f def %.2f->%.2f",
        home.name,
        home.attack_strength,
        new_home.attack_strength,
        home.defense_strength,
        new_home.defense_strength,
        away.name,
        away.attack_strength,
        new_away.attack_strength,
        away.defense_strength,
        new_away.defense_strength,
    )
    return new_home, new_away


def apply_season_start_adjustments(teams: Iterable[Team], rng: random.Random | None = None) -> list[Team]:
    rng = rng or random.Random()
    adjusted: list[Team] = []
    for team in teams:
        attack = _step(team.attack_strength, rng.uniform(-SEASON_START_RANGE, SEASON_START_RANGE))
        defense = _step(team.defense_strength, rng.uniform(-SEASON_START_RANGE, SEASON_START_RANGE))
        adjusted.append(replace(team, attack_strength=attack, defense_strength=defense))
    logger.info("Applied season start adjustments to %d teams", len(adjusted))
    return adjusted
