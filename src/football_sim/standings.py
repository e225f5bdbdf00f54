from __future__ import annotations

import logging
from typing import Iterable

from .models import Match, Team, TeamStats

logger = logging.getLogger(__name__)


def calculate_standings(matches: Iterable[Match], teams: Iterable[Team]) -> dict[str, TeamStats]:
    standings: dict[str, TeamStats] = {team.team_id: TeamStats(team_id=team.team_id) for team in teams}

    for match in matches:
        if not match.played or match.home_score is None or match.away_score is None:
            continue
        home = standings.get(match.home_team_id)
        away = standings.get(match.away_team_id)
        if home is None or away is None:
            logger.debug("Skipping match %s: team no longer in division", match.match_id)
            continue
        home.register_match(match.home_score, match.away_score)
        away.register_match(match.away_score, match.home_score)

    return standings


def standings_sort_key(stats: TeamStats) -> tuple[int, int, int]:
    return (stats.points, stats.goal_difference, stats.goals_for)


def sort_standings(stats: Iterable[TeamStats]) -> list[TeamStats]:
    # sorted() is stable, so exact ties keep the order they came in.
    return sorted(stats, key=standings_sort_key, reverse=True)


def ranked_standings(matches: Iterable[Match], teams: Iterable[Team]) -> list[TeamStats]:
    return sort_standings(calculate_standings(matches, teams).values())
