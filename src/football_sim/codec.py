"""Plain-dict form of a league, using the original camelCase save keys."""

from __future__ import annotations

from typing import Any

from .models import (
    AllDivisionsMarathonEntry,
    AllTimeStats,
    ChampionshipEntry,
    Division,
    DivisionSeasonResult,
    DivisionWeightedPoints,
    HistoricalMatch,
    LastPlaceEntry,
    League,
    LeagueSettings,
    MarathonEntry,
    Match,
    PositionBreakdown,
    PositionPointsEntry,
    PromotionRelegationEntry,
    SeasonHistory,
    SeasonsPerDivisionEntry,
    Team,
    TeamSeasonResult,
    TeamStats,
)


def _int(raw: dict[str, Any], key: str, default: int = 0) -> int:
    try:
        return int(raw.get(key, default))
    except (TypeError, ValueError):
        return default


def _float(raw: dict[str, Any], key: str, default: float = 0.0) -> float:
    try:
        return float(raw.get(key, default))
    except (TypeError, ValueError):
        return default


def _opt_int(raw: dict[str, Any], key: str) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _ints(value: Any) -> list[int]:
    if not isinstance(value, list):
        return []
    out: list[int] = []
    for item in value:
        try:
            out.append(int(item))
        except (TypeError, ValueError):
            continue
    return out


# -- teams, divisions, matches ------------------------------------------------


def team_to_dict(team: Team) -> dict[str, Any]:
    return {
        "id": team.team_id,
        "name": team.name,
        "attackStrength": team.attack_strength,
        "defenseStrength": team.defense_strength,
        "divisionId": team.division_id,
    }


def team_from_dict(raw: dict[str, Any]) -> Team:
    return Team(
        team_id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        attack_strength=_float(raw, "attackStrength", 0.65),
        defense_strength=_float(raw, "defenseStrength", 0.65),
        division_id=str(raw.get("divisionId", "")),
    )


def division_to_dict(division: Division) -> dict[str, Any]:
    return {
        "id": division.division_id,
        "name": division.name,
        "level": division.level,
        "teams": [team_to_dict(t) for t in division.teams],
    }


def division_from_dict(raw: dict[str, Any]) -> Division:
    return Division(
        division_id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        level=_int(raw, "level", 1),
        teams=[team_from_dict(t) for t in _dicts(raw.get("teams"))],
    )


def match_to_dict(match: Match) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": match.match_id,
        "homeTeamId": match.home_team_id,
        "awayTeamId": match.away_team_id,
        "played": match.played,
        "round": match.round,
        "divisionId": match.division_id,
    }
    if match.home_score is not None:
        out["homeScore"] = match.home_score
    if match.away_score is not None:
        out["awayScore"] = match.away_score
    return out


def match_from_dict(raw: dict[str, Any]) -> Match:
    home_score = _opt_int(raw, "homeScore")
    away_score = _opt_int(raw, "awayScore")
    return Match(
        match_id=str(raw.get("id", "")),
        home_team_id=str(raw.get("homeTeamId", "")),
        away_team_id=str(raw.get("awayTeamId", "")),
        round=_int(raw, "round", 1),
        division_id=str(raw.get("divisionId", "")),
        home_score=home_score,
        away_score=away_score,
        played=bool(raw.get("played", False)) and home_score is not None and away_score is not None,
    )


def settings_to_dict(settings: LeagueSettings) -> dict[str, Any]:
    return {
        "divisionsCount": settings.divisions_count,
        "teamsPerDivision": settings.teams_per_division,
        "promotionCount": settings.promotion_count,
        "relegationCount": settings.relegation_count,
        "simulationTime": settings.simulation_time,
    }


def settings_from_dict(raw: dict[str, Any]) -> LeagueSettings:
    defaults = LeagueSettings()
    return LeagueSettings(
        divisions_count=_int(raw, "divisionsCount", defaults.divisions_count),
        teams_per_division=_int(raw, "teamsPerDivision", defaults.teams_per_division),
        promotion_count=_int(raw, "promotionCount", defaults.promotion_count),
        relegation_count=_int(raw, "relegationCount", defaults.relegation_count),
        simulation_time=_int(raw, "simulationTime", defaults.simulation_time),
    )


_STAT_KEYS = (
    ("played", "played"),
    ("won", "won"),
    ("drawn", "drawn"),
    ("lost", "lost"),
    ("goals_for", "goalsFor"),
    ("goals_against", "goalsAgainst"),
    ("goal_difference", "goalDifference"),
    ("points", "points"),
)


def stats_to_dict(stats: TeamStats) -> dict[str, Any]:
    out: dict[str, Any] = {"teamId": stats.team_id}
    for attr, key in _STAT_KEYS:
        out[key] = getattr(stats, attr)
    return out


def stats_from_dict(raw: dict[str, Any]) -> TeamStats:
    stats = TeamStats(team_id=str(raw.get("teamId", "")))
    for attr, key in _STAT_KEYS:
        setattr(stats, attr, _int(raw, key))
    return stats


# -- history ---------------------------------------------------------------------


def season_result_to_dict(row: TeamSeasonResult) -> dict[str, Any]:
    out: dict[str, Any] = {"teamId": row.team_id, "teamName": row.team_name, "position": row.position}
    for attr, key in _STAT_KEYS:
        out[key] = getattr(row, attr)
    return out


def season_result_from_dict(raw: dict[str, Any]) -> TeamSeasonResult:
    row = TeamSeasonResult(
        team_id=str(raw.get("teamId", "")),
        team_name=str(raw.get("teamName", "")),
        position=_int(raw, "position", 0),
    )
    for attr, key in _STAT_KEYS:
        setattr(row, attr, _int(raw, key))
    return row


def historical_match_to_dict(record: HistoricalMatch) -> dict[str, Any]:
    return {
        "id": record.match_id,
        "homeTeamId": record.home_team_id,
        "awayTeamId": record.away_team_id,
        "homeTeamName": record.home_team_name,
        "awayTeamName": record.away_team_name,
        "homeScore": record.home_score,
        "awayScore": record.away_score,
        "round": record.round,
        "divisionId": record.division_id,
        "divisionName": record.division_name,
        "divisionLevel": record.division_level,
    }


def historical_match_from_dict(raw: dict[str, Any]) -> HistoricalMatch:
    return HistoricalMatch(
        match_id=str(raw.get("id", "")),
        home_team_id=str(raw.get("homeTeamId", "")),
        away_team_id=str(raw.get("awayTeamId", "")),
        home_team_name=str(raw.get("homeTeamName", "")),
        away_team_name=str(raw.get("awayTeamName", "")),
        home_score=_int(raw, "homeScore"),
        away_score=_int(raw, "awayScore"),
        round=_int(raw, "round", 1),
        division_id=str(raw.get("divisionId", "")),
        division_name=str(raw.get("divisionName", "")),
        division_level=_int(raw, "divisionLevel", 1),
    )


def history_to_dict(entry: SeasonHistory) -> dict[str, Any]:
    return {
        "season": entry.season,
        "divisions": [
            {
                "divisionId": d.division_id,
                "divisionLevel": d.division_level,
                "finalStandings": [season_result_to_dict(r) for r in d.final_standings],
            }
            for d in entry.divisions
        ],
        "matches": [historical_match_to_dict(m) for m in entry.matches],
        "completed": entry.completed,
    }


def history_from_dict(raw: dict[str, Any]) -> SeasonHistory:
    return SeasonHistory(
        season=_int(raw, "season", 1),
        divisions=[
            DivisionSeasonResult(
                division_id=str(d.get("divisionId", "")),
                division_level=_int(d, "divisionLevel", 1),
                final_standings=[season_result_from_dict(r) for r in _dicts(d.get("finalStandings"))],
            )
            for d in _dicts(raw.get("divisions"))
        ],
        matches=[historical_match_from_dict(m) for m in _dicts(raw.get("matches"))],
        completed=bool(raw.get("completed", True)),
    )


# -- all-time stats ---------------------------------------------------------------


def all_time_stats_to_dict(stats: AllTimeStats) -> dict[str, Any]:
    return {
        "division1Marathon": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "totalPoints": e.total_points,
                "totalPlayed": e.total_played,
                "totalWon": e.total_won,
                "totalDrawn": e.total_drawn,
                "totalLost": e.total_lost,
                "totalGoalsFor": e.total_goals_for,
                "totalGoalsAgainst": e.total_goals_against,
                "totalGoalDifference": e.total_goal_difference,
                "seasonsInDiv1": e.seasons_in_div1,
            }
            for e in stats.division1_marathon
        ],
        "championships": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "championships": e.championships,
                "championshipSeasons": list(e.championship_seasons),
            }
            for e in stats.championships
        ],
        "lastPlaceInLowest": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "lastPlaceCount": e.last_place_count,
                "lastPlaceSeasons": list(e.last_place_seasons),
            }
            for e in stats.last_place_in_lowest
        ],
        "positionPoints": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "totalPositionPoints": e.total_position_points,
                "breakdown": {
                    "first": e.breakdown.first,
                    "second": e.breakdown.second,
                    "third": e.breakdown.third,
                    "fourth": e.breakdown.fourth,
                },
            }
            for e in stats.position_points
        ],
        "promotionsRelegations": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "promotions": e.promotions,
                "relegations": e.relegations,
                "promotionSeasons": list(e.promotion_seasons),
                "relegationSeasons": list(e.relegation_seasons),
            }
            for e in stats.promotions_relegations
        ],
        "seasonsPerDivision": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "totalSeasons": e.total_seasons,
                # JSON object keys are strings; levels come back as ints on load.
                "divisionBreakdown": {str(level): count for level, count in e.division_breakdown.items()},
            }
            for e in stats.seasons_per_division
        ],
        "allDivisionsPositionMarathon": [
            {
                "teamId": e.team_id,
                "teamName": e.team_name,
                "totalPositionPoints": e.total_position_points,
                "totalSeasons": e.total_seasons,
                "averagePositionPoints": e.average_position_points,
                "divisionBreakdown": [
                    {"divisionLevel": b.division_level, "seasons": b.seasons, "points": b.points}
                    for b in e.division_breakdown
                ],
            }
            for e in stats.all_divisions_position_marathon
        ],
    }


def all_time_stats_from_dict(raw: Any) -> AllTimeStats:
    if not isinstance(raw, dict):
        return AllTimeStats()

    def _ident(row: dict[str, Any]) -> dict[str, str]:
        return {"team_id": str(row.get("teamId", "")), "team_name": str(row.get("teamName", ""))}

    def _breakdown(value: Any) -> dict[int, int]:
        out: dict[int, int] = {}
        if isinstance(value, dict):
            for level, count in value.items():
                try:
                    out[int(level)] = int(count)
                except (TypeError, ValueError):
                    continue
        return out

    return AllTimeStats(
        division1_marathon=[
            MarathonEntry(
                **_ident(r),
                total_points=_int(r, "totalPoints"),
                total_played=_int(r, "totalPlayed"),
                total_won=_int(r, "totalWon"),
                total_drawn=_int(r, "totalDrawn"),
                total_lost=_int(r, "totalLost"),
                total_goals_for=_int(r, "totalGoalsFor"),
                total_goals_against=_int(r, "totalGoalsAgainst"),
                total_goal_difference=_int(r, "totalGoalDifference"),
                seasons_in_div1=_int(r, "seasonsInDiv1"),
            )
            for r in _dicts(raw.get("division1Marathon"))
        ],
        championships=[
            ChampionshipEntry(
                **_ident(r),
                championships=_int(r, "championships"),
                championship_seasons=_ints(r.get("championshipSeasons")),
            )
            for r in _dicts(raw.get("championships"))
        ],
        last_place_in_lowest=[
            LastPlaceEntry(
                **_ident(r),
                last_place_count=_int(r, "lastPlaceCount"),
                last_place_seasons=_ints(r.get("lastPlaceSeasons")),
            )
            for r in _dicts(raw.get("lastPlaceInLowest"))
        ],
        position_points=[
            PositionPointsEntry(
                **_ident(r),
                total_position_points=_int(r, "totalPositionPoints"),
                breakdown=PositionBreakdown(
                    first=_int(r.get("breakdown") or {}, "first"),
                    second=_int(r.get("breakdown") or {}, "second"),
                    third=_int(r.get("breakdown") or {}, "third"),
                    fourth=_int(r.get("breakdown") or {}, "fourth"),
                ),
            )
            for r in _dicts(raw.get("positionPoints"))
        ],
        promotions_relegations=[
            PromotionRelegationEntry(
                **_ident(r),
                promotions=_int(r, "promotions"),
                relegations=_int(r, "relegations"),
                promotion_seasons=_ints(r.get("promotionSeasons")),
                relegation_seasons=_ints(r.get("relegationSeasons")),
            )
            for r in _dicts(raw.get("promotionsRelegations"))
        ],
        seasons_per_division=[
            SeasonsPerDivisionEntry(
                **_ident(r),
                total_seasons=_int(r, "totalSeasons"),
                division_breakdown=_breakdown(r.get("divisionBreakdown")),
            )
            for r in _dicts(raw.get("seasonsPerDivision"))
        ],
        all_divisions_position_marathon=[
            AllDivisionsMarathonEntry(
                **_ident(r),
                total_position_points=_int(r, "totalPositionPoints"),
                total_seasons=_int(r, "totalSeasons"),
                average_position_points=_float(r, "averagePositionPoints"),
                division_breakdown=[
                    DivisionWeightedPoints(
                        division_level=_int(b, "divisionLevel", 1),
                        seasons=_int(b, "seasons"),
                        points=_int(b, "points"),
                    )
                    for b in _dicts(r.get("divisionBreakdown"))
                ],
            )
            for r in _dicts(raw.get("allDivisionsPositionMarathon"))
        ],
    )


# -- league ----------------------------------------------------------------------


def league_to_dict(league: League) -> dict[str, Any]:
    return {
        "id": league.league_id,
        "name": league.name,
        "divisions": [division_to_dict(d) for d in league.divisions],
        "settings": settings_to_dict(league.settings),
        "currentSeason": league.current_season,
        "matches": [match_to_dict(m) for m in league.matches],
        "standings": {team_id: stats_to_dict(s) for team_id, s in league.standings.items()},
        "seasonHistory": [history_to_dict(h) for h in league.season_history],
        "allTimeStats": all_time_stats_to_dict(league.all_time_stats),
    }


def league_from_dict(raw: dict[str, Any]) -> League:
    raw_settings = raw.get("settings")
    raw_standings = raw.get("standings")
    standings = (
        {str(k): stats_from_dict(v) for k, v in raw_standings.items() if isinstance(v, dict)}
        if isinstance(raw_standings, dict)
        else {}
    )
    return League(
        league_id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        divisions=[division_from_dict(d) for d in _dicts(raw.get("divisions"))],
        settings=settings_from_dict(raw_settings) if isinstance(raw_settings, dict) else LeagueSettings(),
        current_season=max(1, _int(raw, "currentSeason", 1)),
        matches=[match_from_dict(m) for m in _dicts(raw.get("matches"))],
        standings=standings,
        season_history=[history_from_dict(h) for h in _dicts(raw.get("seasonHistory"))],
        all_time_stats=all_time_stats_from_dict(raw.get("allTimeStats")),
    )
