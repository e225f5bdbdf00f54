from __future__ import annotations

import copy
import logging
import random
from dataclasses import replace

from . import season
from .config import LEAGUE_PRESETS, validate_settings
from .models import Division, League, LeagueSettings, SeasonPhase, Team, TeamStats, clamp_rating
from .names import TeamNameGenerator
from .schedule import max_round
from .standings import ranked_standings
from .storage import LeagueStore, MemoryLeagueStore

logger = logging.getLogger(__name__)


class LeagueFullError(ValueError):
    pass


def new_league(
    name: str,
    settings: LeagueSettings,
    names: TeamNameGenerator | None = None,
) -> League:
    """Create a league with empty divisions, or filled ones when ``names`` is given."""
    validate_settings(settings)
    league = League(name=name, settings=replace(settings))
    for idx in range(settings.divisions_count):
        division = Division(name=f"Division {idx + 1}", level=idx + 1, division_id=f"{league.league_id}-div{idx + 1}")
        if names is not None:
            for _slot in range(settings.teams_per_division):
                division.teams.append(
                    Team(
                        name=names.next_name(),
                        attack_strength=names.next_strength(),
                        defense_strength=names.next_strength(),
                        division_id=division.division_id,
                    )
                )
        league.divisions.append(division)
    league.matches = season.build_league_schedule(league.divisions)
    logger.info(
        "Created league %s: %d divisions, %d teams, %d matches",
        name,
        len(league.divisions),
        len(league.all_teams()),
        len(league.matches),
    )
    return league


class LeagueSimulator:
    """Holds the league collection and the active league; saves after every change."""

    def __init__(self, store: LeagueStore | None = None, seed: int | None = None) -> None:
        self.store: LeagueStore = store or MemoryLeagueStore()
        self._rng = random.Random(seed)
        self.leagues: list[League] = self.store.load()
        self.last_load_error: str = str(getattr(self.store, "last_load_error", "") or "")
        active_id = self.store.load_active_id()
        self.active_league_id: str | None = active_id if self._find(active_id) is not None else None
        if self.active_league_id is None and self.leagues:
            self.active_league_id = self.leagues[0].league_id
        self._round_pointer: dict[str, int] = {}

    # -- collection ----------------------------------------------------------------

    def _find(self, league_id: str | None) -> League | None:
        for league in self.leagues:
            if league.league_id == league_id:
                return league
        return None

    @property
    def league(self) -> League:
        league = self._find(self.active_league_id)
        if league is None:
            raise KeyError("No active league")
        return league

    def _replace(self, league: League) -> League:
        self.leagues = [league if lg.league_id == league.league_id else lg for lg in self.leagues]
        self._save()
        return league

    def _save(self) -> None:
        self.store.save(self.leagues, self.active_league_id)

    def create_league(
        self,
        name: str,
        settings: LeagueSettings,
        generate_teams: bool = False,
        seed: int | None = None,
    ) -> League:
        names = None
        if generate_teams:
            names = TeamNameGenerator(seed=seed if seed is not None else self._rng.randrange(1 << 30))
            names.reserve([t.name for lg in self.leagues for t in lg.all_teams()])
        league = new_league(name, settings, names)
        self.leagues.append(league)
        self.active_league_id = league.league_id
        self._round_pointer = {}
        self._save()
        return league

    def create_preset_league(self, preset: str) -> League:
        if preset not in LEAGUE_PRESETS:
            raise KeyError(f"Unknown preset '{preset}'")
        name, settings = LEAGUE_PRESETS[preset]
        return self.create_league(name, settings, generate_teams=True)

    def select_league(self, league_id: str) -> League:
        league = self._find(league_id)
        if league is None:
            raise KeyError(f"League '{league_id}' not found")
        self.active_league_id = league_id
        self._round_pointer = {}
        self.store.save_active_id(league_id)
        return league

    def delete_league(self, league_id: str) -> None:
        if self._find(league_id) is None:
            raise KeyError(f"League '{league_id}' not found")
        self.leagues = [lg for lg in self.leagues if lg.league_id != league_id]
        if self.active_league_id == league_id:
            self.active_league_id = None
            self._round_pointer = {}
        self._save()

    # -- teams -------------------------------------------------------------------------

    def _division(self, division_id: str) -> Division:
        division = self.league.division_by_id(division_id)
        if division is None:
            raise KeyError(f"Division '{division_id}' not found")
        return division

    def add_team(
        self,
        name: str,
        attack_strength: float,
        defense_strength: float,
        division_id: str | None = None,
    ) -> Team:
        league = self.league
        capacity = league.settings.teams_per_division
        target = league.division_by_id(division_id) if division_id else None
        if target is None or len(target.teams) >= capacity:
            target = next((d for d in league.divisions if len(d.teams) < capacity), None)
        if target is None:
            raise LeagueFullError(f"All divisions in {league.name} are full ({capacity} teams each).")

        team = Team(
            name=name.strip(),
            attack_strength=attack_strength,
            defense_strength=defense_strength,
            division_id=target.division_id,
        )
        updated = copy.deepcopy(league)
        updated.division_by_id(target.division_id).teams.append(team)
        updated = season.regenerate_division_schedule(updated, target.division_id)
        self._round_pointer.pop(target.division_id, None)
        self._replace(updated)
        logger.info("Added %s to %s", team.name, target.name)
        return team

    def update_team(
        self,
        team_id: str,
        name: str | None = None,
        attack_strength: float | None = None,
        defense_strength: float | None = None,
    ) -> Team:
        league = self.league
        found = league.find_team(team_id)
        if found is None:
            raise KeyError(f"Team '{team_id}' not found")
        _division, current = found
        changed = replace(
            current,
            name=(name or "").strip() or current.name,
            attack_strength=clamp_rating(attack_strength) if attack_strength is not None else current.attack_strength,
            defense_strength=clamp_rating(defense_strength) if defense_strength is not None else current.defense_strength,
        )
        updated = copy.deepcopy(league)
        for division in updated.divisions:
            division.teams = [changed if t.team_id == team_id else t for t in division.teams]
        if changed.name != current.name:
            updated = season.rename_team_in_history(updated, team_id, changed.name)
        self._replace(updated)
        return changed

    def delete_team(self, team_id: str) -> None:
        league = self.league
        found = league.find_team(team_id)
        if found is None:
            raise KeyError(f"Team '{team_id}' not found")
        division, _team = found
        updated = copy.deepcopy(league)
        target = updated.division_by_id(division.division_id)
        target.teams = [t for t in target.teams if t.team_id != team_id]
        updated.matches = [m for m in updated.matches if team_id not in (m.home_team_id, m.away_team_id)]
        updated = season.regenerate_division_schedule(updated, division.division_id)
        self._round_pointer.pop(division.division_id, None)
        self._replace(updated)

    # -- simulation ----------------------------------------------------------------------

    def current_round(self, division_id: str) -> int:
        pointer = self._round_pointer.get(division_id)
        if pointer is None:
            pointer = season.first_unplayed_round(self.league, division_id)
        return pointer

    def total_rounds(self, division_id: str) -> int:
        return max_round(self.league.division_matches(division_id))

    def simulate_round(self, division_id: str, round_no: int | None = None) -> dict[str, object]:
        self._division(division_id)
        round_no = round_no or self.current_round(division_id)
        outcome = season.simulate_round(self.league, division_id, round_no, self._rng)
        self._replace(outcome.league)
        self._round_pointer[division_id] = min(round_no + 1, max(1, self.total_rounds(division_id)))
        return {
            "round": round_no,
            "results": outcome.reports,
            "season_complete": season.is_season_complete(outcome.league),
        }

    def simulate_division(self, division_id: str) -> dict[str, object]:
        self._division(division_id)
        outcome = season.simulate_division(self.league, division_id, self._rng)
        self._replace(outcome.league)
        self._round_pointer[division_id] = max(1, self.total_rounds(division_id))
        return {
            "results": outcome.reports,
            "season_complete": season.is_season_complete(outcome.league),
        }

    def run_season(self) -> League:
        return self._replace(season.simulate_season(self.league, self._rng))

    def reset_division(self, division_id: str) -> League:
        self._division(division_id)
        self._round_pointer[division_id] = 1
        return self._replace(season.reset_division(self.league, division_id))

    def apply_season_adjustments(self) -> League:
        return self._replace(season.apply_league_season_adjustments(self.league, self._rng))

    # -- season transitions ----------------------------------------------------------------

    def phase(self) -> SeasonPhase:
        return season.season_phase(self.league)

    def complete_season(self) -> dict[str, object]:
        league = self.league
        if not season.is_season_complete(league):
            return {"completed": False, "reason": "season_not_complete"}
        updated = season.complete_season(league)
        if updated is not league:
            self._replace(updated)
        return {"completed": True, "season": league.current_season, "history_length": len(updated.season_history)}

    def advance_to_next_season(self) -> dict[str, object]:
        league = self.league
        if not season.is_season_complete(league):
            return {"advanced": False, "reason": "season_not_complete"}
        updated = self._replace(season.start_next_season(league))
        self._round_pointer = {}
        return {
            "advanced": True,
            "completed_season": league.current_season,
            "next_season": updated.current_season,
            "matches": len(updated.matches),
        }

    # -- views -----------------------------------------------------------------------------

    def get_division_standings(self, division_id: str) -> list[tuple[Team, TeamStats]]:
        division = self._division(division_id)
        ranked = ranked_standings(self.league.division_matches(division_id), division.teams)
        rows: list[tuple[Team, TeamStats]] = []
        for stats in ranked:
            team = division.team_by_id(stats.team_id)
            if team is not None:
                rows.append((team, stats))
        return rows
