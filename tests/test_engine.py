import random

import pytest

from football_sim.config import MAX_GOALS, RATING_MAX, RATING_MIN
from football_sim.engine import (
    adjust_ratings,
    apply_season_start_adjustments,
    expected_goals,
    goal_minutes,
    simulate_match,
)
from football_sim.models import Team


def test_scores_stay_in_range() -> None:
    rng = random.Random(3)
    strong = Team(name="Strong", attack_strength=1.0, defense_strength=1.0)
    weak = Team(name="Weak", attack_strength=0.3, defense_strength=0.3)
    for _ in range(10_000):
        for home, away in ((strong, weak), (weak, strong)):
            score = simulate_match(home, away, rng)
            assert 0 <= score.home_score <= MAX_GOALS
            assert 0 <= score.away_score <= MAX_GOALS


def test_stronger_side_scores_more_on_average() -> None:
    rng = random.Random(11)
    strong = Team(name="Strong", attack_strength=0.95, defense_strength=0.95)
    weak = Team(name="Weak", attack_strength=0.35, defense_strength=0.35)
    home_goals = away_goals = 0
    for _ in range(2_000):
        score = simulate_match(strong, weak, rng)
        home_goals += score.home_score
        away_goals += score.away_score
    assert home_goals > away_goals


def test_expected_goals_floor() -> None:
    assert expected_goals(0.3, 1.0) == pytest.approx(0.1)
    assert expected_goals(0.65, 0.65) == pytest.approx(1.1)


def test_winner_gains_where_weaker_and_loser_drops_where_stronger() -> None:
    home = Team(name="Home", attack_strength=0.5, defense_strength=0.5)
    away = Team(name="Away", attack_strength=0.7, defense_strength=0.4)
    new_home, new_away = adjust_ratings(home, away, 2, 1)
    assert new_home.attack_strength == pytest.approx(0.52)
    assert new_home.defense_strength == pytest.approx(0.5)
    assert new_away.attack_strength == pytest.approx(0.68)
    assert new_away.defense_strength == pytest.approx(0.4)


def test_away_win_applies_same_rule() -> None:
    home = Team(name="Home", attack_strength=0.8, defense_strength=0.8)
    away = Team(name="Away", attack_strength=0.6, defense_strength=0.6)
    new_home, new_away = adjust_ratings(home, away, 0, 3)
    assert new_away.attack_strength == pytest.approx(0.62)
    assert new_away.defense_strength == pytest.approx(0.62)
    assert new_home.attack_strength == pytest.approx(0.78)
    assert new_home.defense_strength == pytest.approx(0.78)


def test_draw_only_lifts_weaker_defense() -> None:
    home = Team(name="Home", attack_strength=0.5, defense_strength=0.7)
    away = Team(name="Away", attack_strength=0.9, defense_strength=0.6)
    new_home, new_away = adjust_ratings(home, away, 1, 1)
    assert new_home.attack_strength == pytest.approx(0.5)
    assert new_home.defense_strength == pytest.approx(0.7)
    assert new_away.attack_strength == pytest.approx(0.9)
    assert new_away.defense_strength == pytest.approx(0.62)


def test_equal_teams_unchanged() -> None:
    home = Team(name="Home", attack_strength=0.6, defense_strength=0.6)
    away = Team(name="Away", attack_strength=0.6, defense_strength=0.6)
    for score in ((1, 0), (0, 0), (0, 2)):
        new_home, new_away = adjust_ratings(home, away, *score)
        assert (new_home.attack_strength, new_home.defense_strength) == (0.6, 0.6)
        assert (new_away.attack_strength, new_away.defense_strength) == (0.6, 0.6)


def test_adjustments_respect_rating_bounds() -> None:
    winner = Team(name="Winner", attack_strength=0.99, defense_strength=0.3)
    loser = Team(name="Loser", attack_strength=1.0, defense_strength=0.31)
    new_winner, new_loser = adjust_ratings(winner, loser, 1, 0)
    assert new_winner.attack_strength == RATING_MAX
    assert new_loser.defense_strength == RATING_MIN


def test_adjust_ratings_does_not_mutate_inputs() -> None:
    home = Team(name="Home", attack_strength=0.5, defense_strength=0.5)
    away = Team(name="Away", attack_strength=0.7, defense_strength=0.7)
    adjust_ratings(home, away, 3, 0)
    assert (home.attack_strength, home.defense_strength) == (0.5, 0.5)
    assert (away.attack_strength, away.defense_strength) == (0.7, 0.7)


def test_team_ratings_clamped_on_creation() -> None:
    team = Team(name="Odd", attack_strength=1.4, defense_strength=0.1)
    assert team.attack_strength == RATING_MAX
    assert team.defense_strength == RATING_MIN


def test_season_start_adjustments_stay_close_and_in_bounds() -> None:
    rng = random.Random(5)
    teams = [Team(name=f"T{idx}", attack_strength=0.3 + idx * 0.07, defense_strength=1.0 - idx * 0.07) for idx in range(11)]
    adjusted = apply_season_start_adjustments(teams, rng)
    assert [t.team_id for t in adjusted] == [t.team_id for t in teams]
    for before, after in zip(teams, adjusted):
        assert RATING_MIN <= after.attack_strength <= RATING_MAX
        assert RATING_MIN <= after.defense_strength <= RATING_MAX
        assert abs(after.attack_strength - before.attack_strength) <= 0.05 + 1e-9
        assert abs(after.defense_strength - before.defense_strength) <= 0.05 + 1e-9


def test_goal_minutes_match_goal_count() -> None:
    minutes = goal_minutes(4, random.Random(1))
    assert len(minutes) == 4
    assert minutes == sorted(minutes)
    assert all(1 <= m <= 89 for m in minutes)
    assert goal_minutes(0, random.Random(1)) == []
