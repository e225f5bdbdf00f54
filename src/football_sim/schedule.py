from __future__ import annotations

import logging
from typing import Iterable

from .models import Division, Match, Team

logger = logging.getLogger(__name__)

BYE_ID = "bye"


def _single_round_pairings(teams: list[Team]) -> list[list[tuple[Team, Team]]]:
    """Build one full round-robin, one list of (home, away) pairs per round."""
    if len(teams) < 2:
        return []

    # Circle method: the last slot stays fixed, everyone else rotates.
    rotating: list[Team] = list(teams)
    if len(rotating) % 2 == 1:
        rotating.append(Team(name="BYE", team_id=BYE_ID))

    total = len(rotating)
    circle = total - 1
    rounds: list[list[tuple[Team, Team]]] = []
    for round_idx in range(circle):
        pairs: list[tuple[Team, Team]] = []
        for idx in range(total // 2):
            home = rotating[(round_idx + idx) % circle]
            away = rotating[total - 1] if idx == 0 else rotating[(circle - idx + round_idx) % circle]
            if home.team_id == BYE_ID or away.team_id == BYE_ID:
                continue
            pairs.append((home, away))
        rounds.append(pairs)
    return rounds


def build_round_robin_rounds(teams: Iterable[Team]) -> list[list[tuple[Team, Team]]]:
    """Double round-robin: the second half mirrors the first with venues swapped."""
    first_half = _single_round_pairings(list(teams))
    second_half = [[(away, home) for home, away in pairs] for pairs in first_half]
    return first_half + second_half


def generate_schedule(division: Division) -> list[Match]:
    team_list = list(division.teams)
    if len(team_list) < 2:
        return []

    matches: list[Match] = []
    seq = 0
    for round_no, pairs in enumerate(build_round_robin_rounds(team_list), start=1):
        for home, away in pairs:
            matches.append(
                Match(
                    match_id=f"{division.division_id}-r{round_no}-{seq}",
                    home_team_id=home.team_id,
                    away_team_id=away.team_id,
                    round=round_no,
                    division_id=division.division_id,
                )
            )
            seq += 1

    logger.info("Generated %d matches for %s (%d teams)", len(matches), division.name, len(team_list))
    logger.debug("Rounds distribution for %s: %s", division.name, round_distribution(matches))
    return matches


def round_distribution(matches: Iterable[Match]) -> dict[int, int]:
    distribution: dict[int, int] = {}
    for match in matches:
        distribution[match.round] = distribution.get(match.round, 0) + 1
    return distribution


def max_round(matches: Iterable[Match]) -> int:
    return max((m.round for m in matches), default=0)
