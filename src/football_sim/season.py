"""Season state machine.

Every public function takes a league and hands back a new one; the league passed
in is never touched. The normal life cycle is::

    in progress -> complete -> snapshotted -> reassigned -> rescheduled
                                                              |
    in progress (current_season + 1) <------------------------+

``complete_season`` and ``start_next_season`` quietly return their input when
the season still has unplayed matches.
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass, replace

from .engine import adjust_ratings, apply_season_start_adjustments, goal_minutes, simulate_match
from .models import (
    Division,
    DivisionSeasonResult,
    HistoricalMatch,
    League,
    Match,
    MatchReport,
    SeasonHistory,
    SeasonPhase,
    SimulationOutcome,
    Team,
    TeamSeasonResult,
)
from .schedule import generate_schedule
from .standings import ranked_standings
from .statistics import rename_in_stats, update_all_time_stats

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TeamMove:
    team: Team
    from_division_id: str
    to_division_id: str
    kind: str


def is_season_complete(league: League) -> bool:
    return bool(league.matches) and all(m.played for m in league.matches)


def season_phase(league: League) -> SeasonPhase:
    if not is_season_complete(league):
        return SeasonPhase.IN_PROGRESS
    if league.history_for(league.current_season) is not None:
        return SeasonPhase.SNAPSHOTTED
    return SeasonPhase.COMPLETE


def _division_snapshot(league: League, division: Division) -> tuple[DivisionSeasonResult, list[HistoricalMatch]]:
    played = [m for m in league.division_matches(division.division_id) if m.played]
    ranked = ranked_standings(played, division.teams)

    final_standings: list[TeamSeasonResult] = []
    for position, stats in enumerate(ranked, start=1):
        team = division.team_by_id(stats.team_id)
        final_standings.append(
            TeamSeasonResult(
                team_id=stats.team_id,
                team_name=team.name if team else "Unknown Team",
                position=position,
                points=stats.points,
                played=stats.played,
                won=stats.won,
                drawn=stats.drawn,
                lost=stats.lost,
                goals_for=stats.goals_for,
                goals_against=stats.goals_against,
                goal_difference=stats.goal_difference,
            )
        )

    records: list[HistoricalMatch] = []
    for match in played:
        home = division.team_by_id(match.home_team_id)
        away = division.team_by_id(match.away_team_id)
        if home is None or away is None or match.home_score is None or match.away_score is None:
            logger.warning("Match %s references a missing team; left out of history", match.match_id)
            continue
        records.append(
            HistoricalMatch(
                match_id=match.match_id,
                home_team_id=home.team_id,
                away_team_id=away.team_id,
                home_team_name=home.name,
                away_team_name=away.name,
                home_score=match.home_score,
                away_score=match.away_score,
                round=match.round,
                division_id=division.division_id,
                division_name=division.name,
                division_level=division.level,
            )
        )

    result = DivisionSeasonResult(
        division_id=division.division_id,
        division_level=division.level,
        final_standings=final_standings,
    )
    return result, records


def complete_season(league: League) -> League:
    if not is_season_complete(league):
        logger.info("Season %d of %s is not complete; nothing to finalize", league.current_season, league.name)
        return league
    if league.history_for(league.current_season) is not None:
        logger.debug("Season %d of %s already recorded", league.current_season, league.name)
        return league

    entry = SeasonHistory(season=league.current_season)
    for division in league.divisions:
        result, records = _division_snapshot(league, division)
        entry.divisions.append(result)
        entry.matches.extend(records)

    updated = copy.deepcopy(league)
    updated.season_history.append(entry)
    updated.all_time_stats = update_all_time_stats(updated.all_time_stats, updated.season_history, updated)
    logger.info(
        "Completed season %d of %s (%d matches archived)",
        league.current_season,
        league.name,
        len(entry.matches),
    )
    return updated


def plan_promotions_relegations(league: League) -> list[TeamMove]:
    """Work out every move from the final standings before anything is applied."""
    promotion_count = league.settings.promotion_count
    relegation_count = league.settings.relegation_count
    ladder = sorted(league.divisions, key=lambda d: d.level)
    ranked = {d.division_id: ranked_standings(league.division_matches(d.division_id), d.teams) for d in ladder}

    moves: list[TeamMove] = []
    promoted: set[str] = set()
    for idx, division in enumerate(ladder):
        table = ranked[division.division_id]
        if idx > 0 and promotion_count > 0:
            target = ladder[idx - 1]
            for stats in table[:promotion_count]:
                team = division.team_by_id(stats.team_id)
                if team is not None:
                    promoted.add(team.team_id)
                    moves.append(TeamMove(team, division.division_id, target.division_id, "promotion"))
        if idx < len(ladder) - 1 and relegation_count > 0:
            target = ladder[idx + 1]
            # A short division can rank the same team in both zones; promotion wins.
            for stats in table[-relegation_count:]:
                team = division.team_by_id(stats.team_id)
                if team is not None and team.team_id not in promoted:
                    moves.append(TeamMove(team, division.division_id, target.division_id, "relegation"))
    return moves


def apply_promotions_relegations(league: League) -> list[Division]:
    moves = plan_promotions_relegations(league)
    divisions = copy.deepcopy(league.divisions)
    by_id = {d.division_id: d for d in divisions}

    for move in moves:
        source = by_id.get(move.from_division_id)
        target = by_id.get(move.to_division_id)
        if source is None or target is None:
            continue
        source.teams = [t for t in source.teams if t.team_id != move.team.team_id]
        target.teams.append(replace(move.team, division_id=target.division_id))
        logger.debug("%s: %s %s -> %s", move.kind, move.team.name, source.name, target.name)

    logger.info("Applied %d promotions/relegations in %s", len(moves), league.name)
    return divisions


def build_league_schedule(divisions: list[Division]) -> list[Match]:
    matches: list[Match] = []
    for division in divisions:
        matches.extend(generate_schedule(division))
    return matches


def start_next_season(league: League) -> League:
    if not is_season_complete(league):
        logger.info("Season %d of %s is still in progress", league.current_season, league.name)
        return league

    archived = complete_season(league)
    updated = copy.deepcopy(archived)
    updated.divisions = apply_promotions_relegations(archived)
    updated.matches = build_league_schedule(updated.divisions)
    updated.standings = {}
    updated.current_season = archived.current_season + 1
    # Stats see the new structure so the transition into this season is counted.
    updated.all_time_stats = update_all_time_stats(updated.all_time_stats, updated.season_history, updated)
    logger.info(
        "Started season %d of %s with %d matches",
        updated.current_season,
        updated.name,
        len(updated.matches),
    )
    return updated


def reset_division(league: League, division_id: str) -> League:
    updated = copy.deepcopy(league)
    updated.matches = [m.cleared() if m.division_id == division_id and m.played else m for m in updated.matches]
    updated.standings = {}
    logger.info("Reset division %s in %s", division_id, league.name)
    return updated


def first_unplayed_round(league: League, division_id: str) -> int:
    rounds = [m.round for m in league.division_matches(division_id) if not m.played]
    return min(rounds, default=1)


def regenerate_division_schedule(league: League, division_id: str) -> League:
    division = league.division_by_id(division_id)
    if division is None or len(division.teams) < 2:
        return league
    updated = copy.deepcopy(league)
    others = [m for m in updated.matches if m.division_id != division_id]
    updated.matches = others + generate_schedule(division)
    return updated


def _simulate_matches(
    league: League,
    division_id: str,
    pending: list[Match],
    rng: random.Random | None,
) -> SimulationOutcome:
    rng = rng or random.Random()
    updated = copy.deepcopy(league)
    division = updated.division_by_id(division_id)
    if division is None or not pending:
        return SimulationOutcome(league=league)

    results: dict[str, Match] = {}
    reports: list[MatchReport] = []
    for match in pending:
        home = division.team_by_id(match.home_team_id)
        away = division.team_by_id(match.away_team_id)
        if home is None or away is None:
            logger.warning("Skipping match %s: team not found in %s", match.match_id, division.name)
            continue
        score = simulate_match(home, away, rng)
        results[match.match_id] = match.with_result(score.home_score, score.away_score)
        new_home, new_away = adjust_ratings(home, away, score.home_score, score.away_score)
        division.teams = [
            new_home if t.team_id == new_home.team_id else new_away if t.team_id == new_away.team_id else t
            for t in division.teams
        ]
        reports.append(
            MatchReport(
                match_id=match.match_id,
                round=match.round,
                home_team=home.name,
                away_team=away.name,
                home_score=score.home_score,
                away_score=score.away_score,
                home_goal_minutes=goal_minutes(score.home_score, rng),
                away_goal_minutes=goal_minutes(score.away_score, rng),
            )
        )

    updated.matches = [results.get(m.match_id, m) for m in updated.matches]
    updated.standings = {}
    logger.info("Simulated %d matches in %s", len(results), division.name)
    return SimulationOutcome(league=complete_season(updated), reports=reports)


def simulate_round(
    league: League,
    division_id: str,
    round_no: int,
    rng: random.Random | None = None,
) -> SimulationOutcome:
    pending = [m for m in league.division_matches(division_id) if not m.played and m.round == round_no]
    return _simulate_matches(league, division_id, pending, rng)


def simulate_division(league: League, division_id: str, rng: random.Random | None = None) -> SimulationOutcome:
    pending = [m for m in league.division_matches(division_id) if not m.played]
    return _simulate_matches(league, division_id, pending, rng)


def simulate_season(league: League, rng: random.Random | None = None) -> League:
    """Play out every remaining match in every division."""
    rng = rng or random.Random()
    current = league
    for division in league.divisions:
        current = simulate_division(current, division.division_id, rng).league
    return current


def apply_league_season_adjustments(league: League, rng: random.Random | None = None) -> League:
    rng = rng or random.Random()
    updated = copy.deepcopy(league)
    for division in updated.divisions:
        division.teams = apply_season_start_adjustments(division.teams, rng)
    return updated


def rename_team_in_history(league: League, team_id: str, new_name: str) -> League:
    """Back-fill a team's new display name into every archived record."""
    updated = copy.deepcopy(league)
    for season in updated.season_history:
        for division in season.divisions:
            for row in division.final_standings:
                if row.team_id == team_id:
                    row.team_name = new_name
        for record in season.matches:
            if record.home_team_id == team_id:
                record.home_team_name = new_name
            if record.away_team_id == team_id:
                record.away_team_name = new_name
    rename_in_stats(updated.all_time_stats, team_id, new_name)
    logger.info("Back-filled name %r for team %s across %d seasons", new_name, team_id, len(updated.season_history))
    return updated
