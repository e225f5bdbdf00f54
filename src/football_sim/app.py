from __future__ import annotations

import argparse
import logging
from typing import Iterable

from .config import LEAGUE_PRESETS
from .league import LeagueSimulator
from .models import AllTimeStats, ChampionshipEntry, League, MarathonEntry, Team, TeamStats
from .storage import JsonLeagueStore, MemoryLeagueStore


def build_default_league(preset: str = "Local League", seed: int | None = 7) -> LeagueSimulator:
    simulator = LeagueSimulator(store=MemoryLeagueStore(), seed=seed)
    simulator.create_preset_league(preset)
    return simulator


def format_standings(rows: Iterable[tuple[Team, TeamStats]], title: str = "") -> str:
    lines = [title] if title else []
    lines.append("Pos Team                     P   W   D   L  GF  GA  GD Pts")
    for idx, (team, stats) in enumerate(rows, start=1):
        lines.append(
            f"{idx:>3} {team.name:<22} {stats.played:>3} {stats.won:>3} {stats.drawn:>3} {stats.lost:>3}"
            f" {stats.goals_for:>3} {stats.goals_against:>3} {stats.goal_difference:>3} {stats.points:>3}"
        )
    return "\n".join(lines)


def format_marathon(entries: Iterable[MarathonEntry], limit: int = 20) -> str:
    lines = ["Division 1 marathon", "Pos Team                   Sn   P   W   D   L  GF  GA  GD  Pts"]
    for idx, e in enumerate(list(entries)[:limit], start=1):
        lines.append(
            f"{idx:>3} {e.team_name:<22} {e.seasons_in_div1:>2} {e.total_played:>3} {e.total_won:>3}"
            f" {e.total_drawn:>3} {e.total_lost:>3} {e.total_goals_for:>3} {e.total_goals_against:>3}"
            f" {e.total_goal_difference:>3} {e.total_points:>4}"
        )
    return "\n".join(lines)


def format_championships(entries: Iterable[ChampionshipEntry]) -> str:
    lines = ["Championships", "Team                   Titles Seasons"]
    for e in entries:
        seasons = ", ".join(str(s) for s in e.championship_seasons)
        lines.append(f"{e.team_name:<22} {e.championships:>6} {seasons}")
    return "\n".join(lines)


def format_movements(stats: AllTimeStats) -> str:
    lines = ["Promotions / relegations", "Team                     Up Down"]
    for e in stats.promotions_relegations:
        lines.append(f"{e.team_name:<22} {e.promotions:>4} {e.relegations:>4}")
    return "\n".join(lines)


def print_league(simulator: LeagueSimulator) -> None:
    league: League = simulator.league
    print(f"{league.name} - season {league.current_season}")
    for division in sorted(league.divisions, key=lambda d: d.level):
        print()
        print(format_standings(simulator.get_division_standings(division.division_id), title=division.name))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a multi-division football league.")
    parser.add_argument("--preset", default="Local League", choices=sorted(LEAGUE_PRESETS))
    parser.add_argument("--seasons", type=int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--save", default=None, help="JSON file to keep the league collection in")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    store = JsonLeagueStore(args.save) if args.save else MemoryLeagueStore()
    simulator = LeagueSimulator(store=store, seed=args.seed)
    if simulator.last_load_error:
        print(simulator.last_load_error)
    if simulator.active_league_id is None:
        simulator.create_preset_league(args.preset)

    for _ in range(max(0, args.seasons)):
        simulator.run_season()
        print_league(simulator)
        simulator.advance_to_next_season()

    stats = simulator.league.all_time_stats
    print()
    print(format_marathon(stats.division1_marathon))
    print()
    print(format_championships(stats.championships))
    print()
    print(format_movements(stats))
    return 0
