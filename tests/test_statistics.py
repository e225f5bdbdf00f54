import pytest

from football_sim.models import (
    AllTimeStats,
    ChampionshipEntry,
    Division,
    DivisionSeasonResult,
    League,
    SeasonHistory,
    Team,
    TeamSeasonResult,
)
from football_sim.statistics import rename_in_stats, update_all_time_stats


def _season(number: int, tables: dict[int, list[tuple[str, int]]]) -> SeasonHistory:
    entry = SeasonHistory(season=number)
    for level, rows in tables.items():
        entry.divisions.append(
            DivisionSeasonResult(
                division_id=f"div{level}",
                division_level=level,
                final_standings=[
                    TeamSeasonResult(team_id=team_id, team_name=team_id.upper(), position=pos, points=points, played=4)
                    for pos, (team_id, points) in enumerate(rows, start=1)
                ],
            )
        )
    return entry


def _history() -> list[SeasonHistory]:
    return [
        _season(1, {1: [("a", 10), ("b", 6), ("c", 3)], 2: [("d", 9), ("e", 4), ("f", 1)]}),
        _season(2, {1: [("b", 12), ("a", 7), ("d", 2)], 2: [("c", 8), ("e", 5), ("f", 0)]}),
    ]


def _league(current_season: int = 3) -> League:
    top = Division(name="Division 1", level=1, division_id="div1")
    top.teams = [Team(name=tid.upper(), team_id=tid, division_id="div1") for tid in ("b", "a", "c")]
    bottom = Division(name="Division 2", level=2, division_id="div2")
    bottom.teams = [Team(name=tid.upper(), team_id=tid, division_id="div2") for tid in ("d", "e", "f", "g")]
    return League(name="Stats", divisions=[top, bottom], current_season=current_season)


def _stats(current_season: int = 3) -> AllTimeStats:
    return update_all_time_stats(AllTimeStats(), _history(), _league(current_season))


def test_championships() -> None:
    stats = _stats()
    assert [(e.team_id, e.championship_seasons) for e in stats.championships] == [("a", [1]), ("b", [2])]


def test_last_place_in_lowest_division() -> None:
    stats = _stats()
    assert [(e.team_id, e.last_place_count, e.last_place_seasons) for e in stats.last_place_in_lowest] == [
        ("f", 2, [1, 2])
    ]


def test_position_points_and_tie_break_by_id() -> None:
    stats = _stats()
    assert [(e.team_id, e.total_position_points) for e in stats.position_points] == [
        ("a", 10),
        ("b", 10),
        ("c", 2),
        ("d", 2),
    ]
    a = stats.position_points[0]
    assert (a.breakdown.first, a.breakdown.second, a.breakdown.third) == (1, 1, 0)


def test_division1_marathon() -> None:
    stats = _stats()
    assert [(e.team_id, e.total_points, e.seasons_in_div1) for e in stats.division1_marathon] == [
        ("b", 18, 2),
        ("a", 17, 2),
        ("c", 3, 1),
        ("d", 2, 1),
    ]
    assert stats.division1_marathon[0].total_played == 8


def test_promotions_and_relegations_include_current_structure() -> None:
    moves = {e.team_id: e for e in _stats().promotions_relegations}
    assert set(moves) == {"c", "d"}
    assert (moves["c"].promotion_seasons, moves["c"].relegation_seasons) == ([3], [2])
    assert (moves["d"].promotion_seasons, moves["d"].relegation_seasons) == ([2], [3])


def test_current_comparison_skipped_when_season_already_archived() -> None:
    moves = {e.team_id: e for e in _stats(current_season=2).promotions_relegations}
    assert moves["c"].promotions == 0
    assert moves["c"].relegation_seasons == [2]
    assert moves["d"].promotion_seasons == [2]
    assert moves["d"].relegations == 0


def test_seasons_per_division() -> None:
    rows = {e.team_id: e for e in _stats().seasons_per_division}
    assert rows["c"].total_seasons == 2
    assert rows["c"].division_breakdown == {1: 1, 2: 1}
    assert rows["e"].division_breakdown == {2: 2}
    assert "g" not in rows


def test_weighted_all_divisions_marathon() -> None:
    rows = {e.team_id: e for e in _stats().all_divisions_position_marathon}
    assert rows["a"].total_position_points == 34
    assert rows["a"].average_position_points == pytest.approx(17.0)
    assert rows["d"].total_position_points == 13
    assert rows["d"].average_position_points == pytest.approx(6.5)
    assert [(b.division_level, b.seasons, b.points) for b in rows["d"].division_breakdown] == [(1, 1, 4), (2, 1, 9)]
    assert rows["f"].total_position_points == 1


def test_current_stats_are_ignored() -> None:
    stale = AllTimeStats(championships=[ChampionshipEntry(team_id="zz", team_name="Ghost", championships=9)])
    stats = update_all_time_stats(stale, _history(), _league())
    assert all(e.team_id != "zz" for e in stats.championships)


def test_empty_history_gives_empty_boards() -> None:
    assert update_all_time_stats(None, [], _league()) == AllTimeStats()


def test_rename_in_stats() -> None:
    stats = rename_in_stats(_stats(), "a", "Alpha")
    assert stats.championships[0].team_name == "Alpha"
    assert stats.position_points[0].team_name == "Alpha"
    assert {e.team_name for e in stats.division1_marathon if e.team_id == "a"} == {"Alpha"}


def test_titles_in_seasons_one_and_three() -> None:
    history = [
        _season(1, {1: [("a", 9), ("b", 3)]}),
        _season(2, {1: [("b", 9), ("a", 3)]}),
        _season(3, {1: [("a", 9), ("b", 3)]}),
    ]
    stats = update_all_time_stats(None, history, _league(current_season=4))
    titles = {e.team_id: e for e in stats.championships}
    assert titles["a"].championships == 2
    assert titles["a"].championship_seasons == [1, 3]


def test_first_and_fifth_place_position_points() -> None:
    history = [
        _season(1, {1: [("a", 15), ("b", 9), ("c", 6), ("d", 3), ("e", 0)]}),
        _season(2, {1: [("b", 15), ("c", 9), ("d", 6), ("e", 3), ("a", 0)]}),
    ]
    stats = update_all_time_stats(None, history, _league())
    entry = next(e for e in stats.position_points if e.team_id == "a")
    assert entry.total_position_points == 6
    assert entry.breakdown.first == 1
