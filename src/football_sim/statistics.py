"""All-time leaderboards.

Everything here is rebuilt from scratch on each call from the season history
plus the league as it stands right now. The current structure matters for two
boards: "last place in the lowest division" uses today's division count, and the
promotion/relegation board compares the last finished season with where each
team sits now so the most recent move shows up before the next season is played.

Residual ties on every board are broken by team id so the output is stable.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config import POSITION_POINTS
from .models import (
    AllDivisionsMarathonEntry,
    AllTimeStats,
    ChampionshipEntry,
    DivisionWeightedPoints,
    LastPlaceEntry,
    League,
    MarathonEntry,
    PositionBreakdown,
    PositionPointsEntry,
    PromotionRelegationEntry,
    SeasonHistory,
    SeasonsPerDivisionEntry,
)

logger = logging.getLogger(__name__)


def collect_team_names(history: Iterable[SeasonHistory], league: League) -> dict[str, str]:
    names: dict[str, str] = {}
    for season in history:
        for division in season.divisions:
            for row in division.final_standings:
                names[row.team_id] = row.team_name
    for team in league.all_teams():
        names[team.team_id] = team.name
    return names


def _marathon(team_id: str, team_name: str, history: list[SeasonHistory]) -> MarathonEntry:
    entry = MarathonEntry(team_id=team_id, team_name=team_name)
    for season in history:
        top = season.division_at_level(1)
        row = top.result_for(team_id) if top else None
        if row is None:
            continue
        entry.total_points += row.points
        entry.total_played += row.played
        entry.total_won += row.won
        entry.total_drawn += row.drawn
        entry.total_lost += row.lost
        entry.total_goals_for += row.goals_for
        entry.total_goals_against += row.goals_against
        entry.seasons_in_div1 += 1
    entry.total_goal_difference = entry.total_goals_for - entry.total_goals_against
    return entry


def _championships(team_id: str, team_name: str, history: list[SeasonHistory]) -> ChampionshipEntry:
    seasons: list[int] = []
    for season in history:
        top = season.division_at_level(1)
        if top and top.final_standings and top.final_standings[0].team_id == team_id:
            seasons.append(season.season)
    return ChampionshipEntry(team_id=team_id, team_name=team_name, championships=len(seasons), championship_seasons=seasons)


def _last_places(team_id: str, team_name: str, history: list[SeasonHistory], total_divisions: int) -> LastPlaceEntry:
    seasons: list[int] = []
    for season in history:
        lowest = season.division_at_level(total_divisions)
        if lowest and lowest.final_standings and lowest.final_standings[-1].team_id == team_id:
            seasons.append(season.season)
    return LastPlaceEntry(team_id=team_id, team_name=team_name, last_place_count=len(seasons), last_place_seasons=seasons)


def _position_points(team_id: str, team_name: str, history: list[SeasonHistory]) -> PositionPointsEntry:
    entry = PositionPointsEntry(team_id=team_id, team_name=team_name, breakdown=PositionBreakdown())
    for season in history:
        top = season.division_at_level(1)
        row = top.result_for(team_id) if top else None
        if row is None:
            continue
        entry.total_position_points += POSITION_POINTS.get(row.position, 0)
        if row.position == 1:
            entry.breakdown.first += 1
        elif row.position == 2:
            entry.breakdown.second += 1
        elif row.position == 3:
            entry.breakdown.third += 1
        elif row.position == 4:
            entry.breakdown.fourth += 1
    return entry


def _movements(team_id: str, team_name: str, history: list[SeasonHistory], league: League) -> PromotionRelegationEntry:
    entry = PromotionRelegationEntry(team_id=team_id, team_name=team_name)

    def _record(before: int | None, after: int | None, season_no: int) -> None:
        if before is None or after is None:
            return
        if after < before:
            entry.promotions += 1
            entry.promotion_seasons.append(season_no)
        elif after > before:
            entry.relegations += 1
            entry.relegation_seasons.append(season_no)

    for prev, cur in zip(history, history[1:]):
        _record(prev.level_of(team_id), cur.level_of(team_id), cur.season)

    if history and history[-1].season != league.current_season:
        found = league.find_team(team_id)
        current_level = found[0].level if found else None
        _record(history[-1].level_of(team_id), current_level, league.current_season)
    return entry


def _seasons_per_division(team_id: str, team_name: str, history: list[SeasonHistory]) -> SeasonsPerDivisionEntry:
    entry = SeasonsPerDivisionEntry(team_id=team_id, team_name=team_name)
    for season in history:
        level = season.level_of(team_id)
        if level is None:
            continue
        entry.total_seasons += 1
        entry.division_breakdown[level] = entry.division_breakdown.get(level, 0) + 1
    entry.division_breakdown = dict(sorted(entry.division_breakdown.items()))
    return entry


def _weighted_marathon(
    team_id: str,
    team_name: str,
    history: list[SeasonHistory],
    total_divisions: int,
) -> AllDivisionsMarathonEntry:
    entry = AllDivisionsMarathonEntry(team_id=team_id, team_name=team_name)
    by_level: dict[int, DivisionWeightedPoints] = {}
    for season in history:
        for division in season.divisions:
            row = division.result_for(team_id)
            if row is None:
                continue
            weight = max(1, total_divisions - division.division_level + 1)
            bucket = by_level.setdefault(division.division_level, DivisionWeightedPoints(division_level=division.division_level))
            bucket.seasons += 1
            bucket.points += row.points * weight
            entry.total_seasons += 1
            entry.total_position_points += row.points * weight
    entry.division_breakdown = [by_level[level] for level in sorted(by_level)]
    if entry.total_seasons:
        entry.average_position_points = round(entry.total_position_points / entry.total_seasons, 2)
    return entry


def update_all_time_stats(
    current_stats: AllTimeStats | None,
    history: list[SeasonHistory],
    league: League,
) -> AllTimeStats:
    """Recompute every leaderboard. ``current_stats`` is never read."""
    history = list(history)
    total_divisions = len(league.divisions)
    team_names = collect_team_names(history, league)
    stats = AllTimeStats()

    for team_id, team_name in team_names.items():
        marathon = _marathon(team_id, team_name, history)
        if marathon.seasons_in_div1 > 0:
            stats.division1_marathon.append(marathon)

        titles = _championships(team_id, team_name, history)
        if titles.championships > 0:
            stats.championships.append(titles)

        last = _last_places(team_id, team_name, history, total_divisions)
        if last.last_place_count > 0:
            stats.last_place_in_lowest.append(last)

        position = _position_points(team_id, team_name, history)
        if position.total_position_points > 0:
            stats.position_points.append(position)

        moves = _movements(team_id, team_name, history, league)
        if moves.promotions > 0 or moves.relegations > 0:
            stats.promotions_relegations.append(moves)

        seasons = _seasons_per_division(team_id, team_name, history)
        if seasons.total_seasons > 0:
            stats.seasons_per_division.append(seasons)

        weighted = _weighted_marathon(team_id, team_name, history, total_divisions)
        if weighted.total_seasons > 0:
            stats.all_divisions_position_marathon.append(weighted)

    # Sort by id first, then by the metric: stable sort leaves id as the tie-break.
    def _ranked(rows: list, key) -> list:
        return sorted(sorted(rows, key=lambda r: r.team_id), key=key, reverse=True)

    stats.division1_marathon = _ranked(
        stats.division1_marathon,
        lambda e: (e.total_points, e.total_goal_difference, e.total_goals_for),
    )
    stats.championships = _ranked(stats.championships, lambda e: e.championships)
    stats.last_place_in_lowest = _ranked(stats.last_place_in_lowest, lambda e: e.last_place_count)
    stats.position_points = _ranked(stats.position_points, lambda e: e.total_position_points)
    stats.promotions_relegations = _ranked(stats.promotions_relegations, lambda e: e.net)
    stats.seasons_per_division = _ranked(stats.seasons_per_division, lambda e: e.total_seasons)
    stats.all_divisions_position_marathon = _ranked(
        stats.all_divisions_position_marathon,
        lambda e: e.total_position_points,
    )

    logger.info(
        "Recomputed all-time stats over %d seasons for %d teams",
        len(history),
        len(team_names),
    )
    return stats


def rename_in_stats(stats: AllTimeStats, team_id: str, new_name: str) -> AllTimeStats:
    boards = (
        stats.division1_marathon,
        stats.championships,
        stats.last_place_in_lowest,
        stats.position_points,
        stats.promotions_relegations,
        stats.seasons_per_division,
        stats.all_divisions_position_marathon,
    )
    for board in boards:
        for entry in board:
            if entry.team_id == team_id:
                entry.team_name = new_name
    return stats
