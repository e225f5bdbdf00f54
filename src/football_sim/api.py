from __future__ import annotations

import logging
import os
from dataclasses import asdict
from pathlib import Path
from threading import Lock
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .codec import (
    all_time_stats_to_dict,
    history_to_dict,
    match_to_dict,
    settings_to_dict,
    stats_to_dict,
    team_to_dict,
)
from .config import DEFAULT_SETTINGS, LEAGUE_PRESETS
from .league import LeagueSimulator
from .models import League, LeagueSettings, MatchReport
from .storage import JsonLeagueStore

logger = logging.getLogger(__name__)


class SettingsPayload(BaseModel):
    divisions_count: int = DEFAULT_SETTINGS.divisions_count
    teams_per_division: int = DEFAULT_SETTINGS.teams_per_division
    promotion_count: int = DEFAULT_SETTINGS.promotion_count
    relegation_count: int = DEFAULT_SETTINGS.relegation_count
    simulation_time: int = DEFAULT_SETTINGS.simulation_time


class LeagueCreate(BaseModel):
    name: str
    settings: SettingsPayload = SettingsPayload()
    generate_teams: bool = False
    seed: int | None = None


class ActiveLeagueSelection(BaseModel):
    league_id: str


class RoundSimulation(BaseModel):
    division_id: str
    round: int | None = None


class DivisionSelection(BaseModel):
    division_id: str


class TeamCreate(BaseModel):
    name: str
    attack_strength: float = 0.65
    defense_strength: float = 0.65
    division_id: str | None = None


class TeamUpdate(BaseModel):
    name: str | None = None
    attack_strength: float | None = None
    defense_strength: float | None = None


def default_data_root() -> Path:
    configured = os.environ.get("FOOTBALL_SIM_DATA_DIR")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parents[2]


class SimService:
    def __init__(self, data_root: Path | None = None) -> None:
        self.data_root = data_root or default_data_root()
        self.store = JsonLeagueStore(self.data_root / "football_leagues.json")
        self.simulator = LeagueSimulator(store=self.store)
        if self.simulator.last_load_error:
            logger.warning("League save not loaded: %s", self.simulator.last_load_error)
        self._lock = Lock()

    def _league(self) -> League:
        try:
            return self.simulator.league
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="No active league") from exc

    def _team_names(self, league: League) -> dict[str, str]:
        return {t.team_id: t.name for t in league.all_teams()}

    def _report(self, report: MatchReport) -> dict[str, Any]:
        return asdict(report)

    def league_summary(self, league: League) -> dict[str, Any]:
        played = sum(1 for m in league.matches if m.played)
        return {
            "id": league.league_id,
            "name": league.name,
            "current_season": league.current_season,
            "phase": self.simulator.phase().value if league.league_id == self.simulator.active_league_id else None,
            "settings": settings_to_dict(league.settings),
            "divisions": [
                {
                    "id": d.division_id,
                    "name": d.name,
                    "level": d.level,
                    "teams": [team_to_dict(t) for t in d.teams],
                    "current_round": self.simulator.current_round(d.division_id)
                    if league.league_id == self.simulator.active_league_id
                    else None,
                    "total_rounds": max((m.round for m in league.division_matches(d.division_id)), default=0),
                }
                for d in sorted(league.divisions, key=lambda d: d.level)
            ],
            "matches_played": played,
            "matches_total": len(league.matches),
            "history_length": len(league.season_history),
        }

    def leagues(self) -> dict[str, Any]:
        return {
            "active_league_id": self.simulator.active_league_id,
            "last_load_error": self.simulator.last_load_error or None,
            "leagues": [
                {
                    "id": lg.league_id,
                    "name": lg.name,
                    "current_season": lg.current_season,
                    "divisions": len(lg.divisions),
                    "teams": len(lg.all_teams()),
                }
                for lg in self.simulator.leagues
            ],
        }

    def standings(self, division_id: str) -> dict[str, Any]:
        league = self._league()
        division = league.division_by_id(division_id)
        if division is None:
            raise HTTPException(status_code=404, detail="Division not found")
        rows = []
        for idx, (team, stats) in enumerate(self.simulator.get_division_standings(division_id), start=1):
            row = stats_to_dict(stats)
            row.update({"position": idx, "team_name": team.name})
            rows.append(row)
        return {"division_id": division_id, "division": division.name, "rows": rows}

    def schedule(self, division_id: str, round_no: int | None = None) -> dict[str, Any]:
        league = self._league()
        if league.division_by_id(division_id) is None:
            raise HTTPException(status_code=404, detail="Division not found")
        names = self._team_names(league)
        matches = league.division_matches(division_id)
        if round_no is not None:
            matches = [m for m in matches if m.round == round_no]
        rows = []
        for match in matches:
            row = match_to_dict(match)
            row.update(
                {
                    "homeTeamName": names.get(match.home_team_id, "Unknown"),
                    "awayTeamName": names.get(match.away_team_id, "Unknown"),
                }
            )
            rows.append(row)
        return {"division_id": division_id, "round": round_no, "matches": rows}

    def history(self) -> list[dict[str, Any]]:
        return [history_to_dict(h) for h in self._league().season_history]

    def statistics(self) -> dict[str, Any]:
        return all_time_stats_to_dict(self._league().all_time_stats)

    def simulate_round(self, division_id: str, round_no: int | None = None) -> dict[str, Any]:
        self._league()
        result = self.simulator.simulate_round(division_id, round_no)
        return {
            "ok": True,
            "round": result["round"],
            "results": [self._report(r) for r in result["results"]],
            "season_complete": result["season_complete"],
            "next_round": self.simulator.current_round(division_id),
        }

    def simulate_division(self, division_id: str) -> dict[str, Any]:
        self._league()
        result = self.simulator.simulate_division(division_id)
        return {
            "ok": True,
            "results": [self._report(r) for r in result["results"]],
            "season_complete": result["season_complete"],
        }


service = SimService()
app = FastAPI(title="Football League Sim API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/presets")
def presets() -> list[dict[str, Any]]:
    return [
        {"preset": key, "name": name, "settings": settings_to_dict(settings)}
        for key, (name, settings) in LEAGUE_PRESETS.items()
    ]


@app.get("/api/leagues")
def leagues() -> dict[str, Any]:
    with service._lock:
        return service.leagues()


@app.post("/api/leagues")
def create_league(payload: LeagueCreate) -> dict[str, Any]:
    with service._lock:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="League name is required")
        settings = LeagueSettings(**payload.settings.model_dump())
        try:
            league = service.simulator.create_league(
                name,
                settings,
                generate_teams=payload.generate_teams,
                seed=payload.seed,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return service.league_summary(league)


@app.post("/api/leagues/active")
def select_league(payload: ActiveLeagueSelection) -> dict[str, Any]:
    with service._lock:
        try:
            league = service.simulator.select_league(payload.league_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="League not found") from exc
        return service.league_summary(league)


@app.delete("/api/leagues/{league_id}")
def delete_league(league_id: str) -> dict[str, Any]:
    with service._lock:
        try:
            service.simulator.delete_league(league_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="League not found") from exc
        return {"ok": True, "active_league_id": service.simulator.active_league_id}


@app.get("/api/league")
def active_league() -> dict[str, Any]:
    with service._lock:
        return service.league_summary(service._league())


@app.get("/api/standings")
def standings(division_id: str) -> dict[str, Any]:
    with service._lock:
        return service.standings(division_id)


@app.get("/api/schedule")
def schedule(division_id: str, round: int | None = None) -> dict[str, Any]:
    with service._lock:
        return service.schedule(division_id, round)


@app.post("/api/simulate/round")
def simulate_round(payload: RoundSimulation) -> dict[str, Any]:
    with service._lock:
        try:
            return service.simulate_round(payload.division_id, payload.round)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Division not found") from exc


@app.post("/api/simulate/division")
def simulate_division(payload: DivisionSelection) -> dict[str, Any]:
    with service._lock:
        try:
            return service.simulate_division(payload.division_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Division not found") from exc


@app.post("/api/divisions/{division_id}/reset")
def reset_division(division_id: str) -> dict[str, Any]:
    with service._lock:
        service._league()
        try:
            league = service.simulator.reset_division(division_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Division not found") from exc
        return service.league_summary(league)


@app.post("/api/season/adjustments")
def season_adjustments() -> dict[str, Any]:
    with service._lock:
        service._league()
        return service.league_summary(service.simulator.apply_season_adjustments())


@app.post("/api/season/complete")
def complete_season() -> dict[str, Any]:
    with service._lock:
        service._league()
        return service.simulator.complete_season()


@app.post("/api/season/next")
def next_season() -> dict[str, Any]:
    with service._lock:
        service._league()
        return service.simulator.advance_to_next_season()


@app.get("/api/history")
def history() -> list[dict[str, Any]]:
    with service._lock:
        return service.history()


@app.get("/api/statistics")
def statistics() -> dict[str, Any]:
    with service._lock:
        return service.statistics()


@app.post("/api/teams")
def add_team(payload: TeamCreate) -> dict[str, Any]:
    with service._lock:
        service._league()
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Team name is required")
        try:
            team = service.simulator.add_team(
                name,
                payload.attack_strength,
                payload.defense_strength,
                division_id=payload.division_id,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return team_to_dict(team)


@app.put("/api/teams/{team_id}")
def update_team(team_id: str, payload: TeamUpdate) -> dict[str, Any]:
    with service._lock:
        service._league()
        if payload.name is not None and not payload.name.strip():
            raise HTTPException(status_code=400, detail="Team name cannot be blank")
        try:
            team = service.simulator.update_team(
                team_id,
                name=payload.name,
                attack_strength=payload.attack_strength,
                defense_strength=payload.defense_strength,
            )
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Team not found") from exc
        return team_to_dict(team)


@app.delete("/api/teams/{team_id}")
def delete_team(team_id: str) -> dict[str, Any]:
    with service._lock:
        service._league()
        try:
            service.simulator.delete_team(team_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Team not found") from exc
        return {"ok": True}
