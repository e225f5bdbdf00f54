from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

RATING_FLOOR = 0.3
RATING_CEILING = 1.0


def clamp_rating(value: float, low: float = RATING_FLOOR, high: float = RATING_CEILING) -> float:
    return max(low, min(high, value))


@dataclass(slots=True)
class Team:
    name: str
    attack_strength: float = 0.65
    defense_strength: float = 0.65
    division_id: str = ""
    team_id: str = field(default_factory=lambda: f"team-{uuid4().hex[:12]}")

    def __post_init__(self) -> None:
        self.attack_strength = clamp_rating(float(self.attack_strength))
        self.defense_strength = clamp_rating(float(self.defense_strength))

    @property
    def rating(self) -> float:
        return (self.attack_strength + self.defense_strength) / 2.0


@dataclass(slots=True)
class Division:
    name: str
    level: int
    teams: list[Team] = field(default_factory=list)
    division_id: str = field(default_factory=lambda: f"div-{uuid4().hex[:12]}")

    def team_by_id(self, team_id: str) -> Team | None:
        for team in self.teams:
            if team.team_id == team_id:
                return team
        return None


@dataclass(slots=True)
class Match:
    match_id: str
    home_team_id: str
    away_team_id: str
    round: int
    division_id: str
    home_score: int | None = None
    away_score: int | None = None
    played: bool = False

    @property
    def is_draw(self) -> bool:
        return self.played and self.home_score == self.away_score

    def with_result(self, home_score: int, away_score: int) -> Match:
        return Match(
            match_id=self.match_id,
            home_team_id=self.home_team_id,
            away_team_id=self.away_team_id,
            round=self.round,
            division_id=self.division_id,
            home_score=int(home_score),
            away_score=int(away_score),
            played=True,
        )

    def cleared(self) -> Match:
        return Match(
            match_id=self.match_id,
            home_team_id=self.home_team_id,
            away_team_id=self.away_team_id,
            round=self.round,
            division_id=self.division_id,
        )


@dataclass(slots=True)
class LeagueSettings:
    divisions_count: int = 2
    teams_per_division: int = 10
    promotion_count: int = 1
    relegation_count: int = 1
    simulation_time: int = 30


@dataclass(slots=True)
class TeamStats:
    team_id: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    def register_match(self, goals_for: int, goals_against: int) -> None:
        self.played += 1
        self.goals_for += goals_for
        self.goals_against += goals_against
        if goals_for > goals_against:
            self.won += 1
            self.points += 3
        elif goals_for < goals_against:
            self.lost += 1
        else:
            self.drawn += 1
            self.points += 1
        self.goal_difference = self.goals_for - self.goals_against


@dataclass(slots=True)
class TeamSeasonResult:
    team_id: str
    team_name: str
    position: int
    points: int = 0
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0


@dataclass(slots=True)
class DivisionSeasonResult:
    division_id: str
    division_level: int
    final_standings: list[TeamSeasonResult] = field(default_factory=list)

    def result_for(self, team_id: str) -> TeamSeasonResult | None:
        for row in self.final_standings:
            if row.team_id == team_id:
                return row
        return None


@dataclass(slots=True)
class HistoricalMatch:
    match_id: str
    home_team_id: str
    away_team_id: str
    home_team_name: str
    away_team_name: str
    home_score: int
    away_score: int
    round: int
    division_id: str
    division_name: str
    division_level: int


@dataclass(slots=True)
class SeasonHistory:
    season: int
    divisions: list[DivisionSeasonResult] = field(default_factory=list)
    matches: list[HistoricalMatch] = field(default_factory=list)
    completed: bool = True

    def division_at_level(self, level: int) -> DivisionSeasonResult | None:
        for division in self.divisions:
            if division.division_level == level:
                return division
        return None

    def level_of(self, team_id: str) -> int | None:
        level: int | None = None
        for division in self.divisions:
            if division.result_for(team_id) is not None:
                level = division.division_level
        return level


@dataclass(slots=True)
class MarathonEntry:
    team_id: str
    team_name: str
    total_points: int = 0
    total_played: int = 0
    total_won: int = 0
    total_drawn: int = 0
    total_lost: int = 0
    total_goals_for: int = 0
    total_goals_against: int = 0
    total_goal_difference: int = 0
    seasons_in_div1: int = 0


@dataclass(slots=True)
class ChampionshipEntry:
    team_id: str
    team_name: str
    championships: int = 0
    championship_seasons: list[int] = field(default_factory=list)


@dataclass(slots=True)
class LastPlaceEntry:
    team_id: str
    team_name: str
    last_place_count: int = 0
    last_place_seasons: list[int] = field(default_factory=list)


@dataclass(slots=True)
class PositionBreakdown:
    first: int = 0
    second: int = 0
    third: int = 0
    fourth: int = 0


@dataclass(slots=True)
class PositionPointsEntry:
    team_id: str
    team_name: str
    total_position_points: int = 0
    breakdown: PositionBreakdown = field(default_factory=PositionBreakdown)


@dataclass(slots=True)
class PromotionRelegationEntry:
    team_id: str
    team_name: str
    promotions: int = 0
    relegations: int = 0
    promotion_seasons: list[int] = field(default_factory=list)
    relegation_seasons: list[int] = field(default_factory=list)

    @property
    def net(self) -> int:
        return self.promotions - self.relegations


@dataclass(slots=True)
class SeasonsPerDivisionEntry:
    team_id: str
    team_name: str
    total_seasons: int = 0
    division_breakdown: dict[int, int] = field(default_factory=dict)


@dataclass(slots=True)
class DivisionWeightedPoints:
    division_level: int
    seasons: int = 0
    points: int = 0


@dataclass(slots=True)
class AllDivisionsMarathonEntry:
    team_id: str
    team_name: str
    total_position_points: int = 0
    total_seasons: int = 0
    average_position_points: float = 0.0
    division_breakdown: list[DivisionWeightedPoints] = field(default_factory=list)


@dataclass(slots=True)
class AllTimeStats:
    division1_marathon: list[MarathonEntry] = field(default_factory=list)
    championships: list[ChampionshipEntry] = field(default_factory=list)
    last_place_in_lowest: list[LastPlaceEntry] = field(default_factory=list)
    position_points: list[PositionPointsEntry] = field(default_factory=list)
    promotions_relegations: list[PromotionRelegationEntry] = field(default_factory=list)
    seasons_per_division: list[SeasonsPerDivisionEntry] = field(default_factory=list)
    all_divisions_position_marathon: list[AllDivisionsMarathonEntry] = field(default_factory=list)


@dataclass(slots=True)
class League:
    name: str
    divisions: list[Division] = field(default_factory=list)
    settings: LeagueSettings = field(default_factory=LeagueSettings)
    current_season: int = 1
    matches: list[Match] = field(default_factory=list)
    standings: dict[str, TeamStats] = field(default_factory=dict)
    season_history: list[SeasonHistory] = field(default_factory=list)
    all_time_stats: AllTimeStats = field(default_factory=AllTimeStats)
    league_id: str = field(default_factory=lambda: f"league-{uuid4().hex[:12]}")

    def division_by_id(self, division_id: str) -> Division | None:
        for division in self.divisions:
            if division.division_id == division_id:
                return division
        return None

    def division_matches(self, division_id: str) -> list[Match]:
        return [m for m in self.matches if m.division_id == division_id]

    def all_teams(self) -> list[Team]:
        return [team for division in self.divisions for team in division.teams]

    def find_team(self, team_id: str) -> tuple[Division, Team] | None:
        for division in self.divisions:
            team = division.team_by_id(team_id)
            if team is not None:
                return division, team
        return None

    def history_for(self, season: int) -> SeasonHistory | None:
        for entry in self.season_history:
            if entry.season == season:
                return entry
        return None


class SeasonPhase(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    SNAPSHOTTED = "snapshotted"


@dataclass(slots=True)
class MatchScore:
    home_score: int
    away_score: int


@dataclass(slots=True)
class MatchReport:
    match_id: str
    round: int
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    home_goal_minutes: list[int] = field(default_factory=list)
    away_goal_minutes: list[int] = field(default_factory=list)


@dataclass(slots=True)
class SimulationOutcome:
    league: League
    reports: list[MatchReport] = field(default_factory=list)
