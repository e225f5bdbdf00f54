import pytest
from fastapi.testclient import TestClient

from football_sim import api


@pytest.fixture
def client(tmp_path, monkeypatch) -> TestClient:
    monkeypatch.setattr(api, "service", api.SimService(data_root=tmp_path))
    return TestClient(api.app)


def _create(client: TestClient, **overrides) -> dict:
    body = {
        "name": "Api League",
        "settings": {"divisions_count": 2, "teams_per_division": 4, "promotion_count": 1, "relegation_count": 1},
        "generate_teams": True,
        "seed": 21,
    }
    body.update(overrides)
    response = client.post("/api/leagues", json=body)
    assert response.status_code == 200
    return response.json()


def test_health_and_presets(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}
    presets = client.get("/api/presets").json()
    assert {p["preset"] for p in presets} == {"Allsvenskan Style", "Regional League", "Local League"}


def test_no_active_league_is_404(client: TestClient) -> None:
    assert client.get("/api/league").status_code == 404
    assert client.post("/api/season/next").status_code == 404


def test_create_and_list_leagues(client: TestClient, tmp_path) -> None:
    summary = _create(client)
    assert summary["name"] == "Api League"
    assert [len(d["teams"]) for d in summary["divisions"]] == [4, 4]
    assert summary["matches_total"] == 24
    assert summary["phase"] == "in_progress"

    listing = client.get("/api/leagues").json()
    assert listing["active_league_id"] == summary["id"]
    assert (tmp_path / "football_leagues.json").exists()


def test_invalid_settings_are_400(client: TestClient) -> None:
    response = client.post(
        "/api/leagues",
        json={"name": "Bad", "settings": {"divisions_count": 1, "teams_per_division": 4, "promotion_count": 4}},
    )
    assert response.status_code == 400


def test_play_a_full_season_over_http(client: TestClient) -> None:
    summary = _create(client)
    first, second = (d["id"] for d in summary["divisions"])

    round_result = client.post("/api/simulate/round", json={"division_id": first}).json()
    assert round_result["round"] == 1
    assert len(round_result["results"]) == 2
    assert round_result["next_round"] == 2

    schedule = client.get("/api/schedule", params={"division_id": first, "round": 1}).json()
    assert all(m["played"] for m in schedule["matches"])

    assert client.post("/api/season/next").json() == {"advanced": False, "reason": "season_not_complete"}

    client.post("/api/simulate/division", json={"division_id": first})
    last = client.post("/api/simulate/division", json={"division_id": second}).json()
    assert last["season_complete"] is True

    table = client.get("/api/standings", params={"division_id": first}).json()
    assert [row["position"] for row in table["rows"]] == [1, 2, 3, 4]

    advanced = client.post("/api/season/next").json()
    assert advanced["advanced"] is True
    assert advanced["next_season"] == 2

    history = client.get("/api/history").json()
    assert [h["season"] for h in history] == [1]
    stats = client.get("/api/statistics").json()
    assert len(stats["championships"]) == 1


def test_unknown_division_is_404(client: TestClient) -> None:
    _create(client)
    assert client.get("/api/standings", params={"division_id": "nope"}).status_code == 404
    assert client.post("/api/simulate/round", json={"division_id": "nope"}).status_code == 404
    assert client.post("/api/divisions/nope/reset").status_code == 404


def test_team_crud(client: TestClient) -> None:
    _create(client, generate_teams=False, settings={"divisions_count": 1, "teams_per_division": 2, "promotion_count": 0, "relegation_count": 0})
    a = client.post("/api/teams", json={"name": "Alpha", "attack_strength": 0.7}).json()
    client.post("/api/teams", json={"name": "Beta"})
    assert client.post("/api/teams", json={"name": "Gamma"}).status_code == 400

    renamed = client.put(f"/api/teams/{a['id']}", json={"name": "Alpha United"}).json()
    assert renamed["name"] == "Alpha United"
    assert client.put(f"/api/teams/{a['id']}", json={"name": "  "}).status_code == 400
    assert client.put("/api/teams/missing", json={"name": "X"}).status_code == 404

    assert client.delete(f"/api/teams/{a['id']}").json() == {"ok": True}
    assert client.delete(f"/api/teams/{a['id']}").status_code == 404


def test_select_and_delete_league(client: TestClient) -> None:
    first = _create(client, name="First")
    second = _create(client, name="Second")
    selected = client.post("/api/leagues/active", json={"league_id": first["id"]}).json()
    assert selected["id"] == first["id"]
    assert client.post("/api/leagues/active", json={"league_id": "missing"}).status_code == 404

    assert client.delete(f"/api/leagues/{second['id']}").json()["active_league_id"] == first["id"]
    assert client.delete(f"/api/leagues/{second['id']}").status_code == 404
