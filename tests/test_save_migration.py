import json
import random

import pytest

from football_sim import season
from football_sim.codec import league_from_dict, league_to_dict
from football_sim.league import LeagueSimulator, new_league
from football_sim.models import League, LeagueSettings
from football_sim.names import TeamNameGenerator
from football_sim.storage import SAVE_VERSION, JsonLeagueStore


def _played_league() -> League:
    settings = LeagueSettings(divisions_count=2, teams_per_division=4, promotion_count=1, relegation_count=1)
    league = new_league("Saved League", settings, TeamNameGenerator(seed=4))
    league = season.simulate_season(league, random.Random(4))
    league = season.start_next_season(league)
    return season.simulate_round(league, league.divisions[0].division_id, 1, random.Random(5)).league


@pytest.mark.regression
def test_codec_round_trip() -> None:
    league = _played_league()
    assert league.season_history
    assert league.all_time_stats.seasons_per_division
    assert league_from_dict(league_to_dict(league)) == league


@pytest.mark.regression
def test_codec_uses_camel_case_keys() -> None:
    raw = league_to_dict(_played_league())
    assert {"id", "name", "divisions", "settings", "currentSeason", "matches", "seasonHistory", "allTimeStats"} <= set(raw)
    team = raw["divisions"][0]["teams"][0]
    assert "attackStrength" in team and "defenseStrength" in team
    breakdown = raw["allTimeStats"]["seasonsPerDivision"][0]["divisionBreakdown"]
    assert all(isinstance(level, str) for level in breakdown)


@pytest.mark.regression
def test_tolerant_decode_of_partial_league() -> None:
    league = league_from_dict(
        {
            "id": "old",
            "name": "Old Save",
            "currentSeason": "3",
            "divisions": [
                {"id": "d1", "name": "Top", "level": 1, "teams": [{"id": "t1", "name": "X", "attackStrength": 4}]}
            ],
            "matches": [{"id": "m1", "homeTeamId": "t1", "awayTeamId": "t2", "round": "2", "played": True}],
        }
    )
    assert league.current_season == 3
    assert league.divisions[0].teams[0].attack_strength == 1.0
    assert league.matches[0].round == 2
    assert not league.matches[0].played
    assert league.all_time_stats.championships == []
    assert league.settings == LeagueSettings()


@pytest.mark.regression
def test_json_store_round_trip(tmp_path) -> None:
    path = tmp_path / "leagues.json"
    store = JsonLeagueStore(path)
    league = _played_league()
    store.save([league], league.league_id)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["save_version"] == SAVE_VERSION
    assert payload["active_league_id"] == league.league_id
    assert not (tmp_path / "leagues.json.bak").exists()

    reloaded = JsonLeagueStore(path)
    assert reloaded.load() == [league]
    assert reloaded.load_active_id() == league.league_id
    assert reloaded.last_load_error == ""


@pytest.mark.regression
def test_loads_legacy_list_payload(tmp_path) -> None:
    league = _played_league()
    path = tmp_path / "leagues.json"
    path.write_text(json.dumps([league_to_dict(league)]), encoding="utf-8")
    store = JsonLeagueStore(path)
    assert store.load() == [league]
    assert store.load_active_id() is None


@pytest.mark.regression
def test_rejects_future_save_version(tmp_path) -> None:
    path = tmp_path / "leagues.json"
    path.write_text(json.dumps({"save_version": SAVE_VERSION + 1, "leagues": []}), encoding="utf-8")
    sim = LeagueSimulator(store=JsonLeagueStore(path))
    assert sim.leagues == []
    assert "Unsupported league save version" in sim.last_load_error


@pytest.mark.regression
def test_corrupt_file_reports_error(tmp_path) -> None:
    path = tmp_path / "leagues.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonLeagueStore(path)
    assert store.load() == []
    assert store.last_load_error.startswith("Failed to load leagues")


@pytest.mark.regression
def test_simulator_reloads_active_league(tmp_path) -> None:
    path = tmp_path / "leagues.json"
    sim = LeagueSimulator(store=JsonLeagueStore(path), seed=3)
    sim.create_preset_league("Local League")
    second = sim.create_league("Second", LeagueSettings(divisions_count=1, teams_per_division=4), generate_teams=True)
    sim.run_season()

    again = LeagueSimulator(store=JsonLeagueStore(path))
    assert len(again.leagues) == 2
    assert again.active_league_id == second.league_id
    assert again.league == sim.league


@pytest.mark.regression
def test_backup_keeps_previous_save(tmp_path) -> None:
    path = tmp_path / "leagues.json"
    sim = LeagueSimulator(store=JsonLeagueStore(path), seed=8)
    sim.create_league("Backed Up", LeagueSettings(divisions_count=1, teams_per_division=4), generate_teams=True)
    before = json.loads(path.read_text(encoding="utf-8"))

    sim.run_season()
    backup = json.loads((tmp_path / "leagues.json.bak").read_text(encoding="utf-8"))
    current = json.loads(path.read_text(encoding="utf-8"))
    assert backup == before
    assert backup != current
    assert not any(m["played"] for m in backup["leagues"][0]["matches"])
    assert all(m["played"] for m in current["leagues"][0]["matches"])
