"""
Score folding for score-card games.

Scores are never patched incrementally. Every consumer recomputes them by
folding the whole round ledger, so editing any past round's points ripples
into the totals without drift.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from scorecard.logic.enums import Side
from scorecard.logic.topology import resolve, validate_player_count

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scorecard.logic.state import Round

FOUR_PLAYER_COUNT = 4

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_points(value: object) -> int | None:
    """Parse a stored or entered point value.

    Strings are read by their leading integer, so legacy values such as
    "12.5" or "12 pts" count as 12. Non-negative floats are truncated.
    Returns None for None, blanks, garbage, negatives, booleans and
    non-finite floats.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value >= 0 else None
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match is None:
            return None
        parsed = int(match.group(1))
        return parsed if parsed >= 0 else None
    return None


def round_points(rnd: Round) -> int:
    """Points the scoring side earns in a round; unset or unscored is 0."""
    if rnd.scoring_side is None:
        return 0
    return parse_points(rnd.points_for(rnd.scoring_side)) or 0


def fold_scores(player_count: int, rounds: Iterable[Round]) -> tuple[int, ...]:
    """
    Fold a round ledger into per-seat cumulative scores.

    Each scored round credits the full points to every seat on its scoring
    side: one seat for 2 players and for a 3-player solo, both seats for a
    3-player pair and for a 4-player team. Points are not split. Unscored
    rounds contribute nothing.
    """
    validate_player_count(player_count)
    totals = [0] * player_count
    for rnd in rounds:
        if rnd.scoring_side is None:
            continue
        points = round_points(rnd)
        for seat in resolve(player_count, rnd.sequence_number).seats(rnd.scoring_side):
            totals[seat] += points
    return tuple(totals)


def team_scores(scores: Sequence[int]) -> tuple[int, int]:
    """Side A and side B display totals for 2- and 4-player games.

    4-player team totals are derived on read from the per-seat values.
    """
    if len(scores) == FOUR_PLAYER_COUNT:
        return scores[0] + scores[2], scores[1] + scores[3]
    if len(scores) == 2:  # noqa: PLR2004
        return scores[0], scores[1]
    raise ValueError(f"Team scores are undefined for {len(scores)} players")


def effective_score(scores: Sequence[int], player_index: int) -> int:
    """Score used for ranking: the team total in 4-player games, else the seat's own."""
    if len(scores) == FOUR_PLAYER_COUNT:
        side = Side.A if player_index % 2 == 0 else Side.B
        return team_scores(scores)[side - 1]
    return scores[player_index]


def effective_scores(scores: Sequence[int]) -> tuple[int, ...]:
    return tuple(effective_score(scores, i) for i in range(len(scores)))


def cumulative_series(player_count: int, rounds: Sequence[Round], player_index: int) -> list[int]:
    """A seat's effective score after each scored round of a single game."""
    series: list[int] = []
    scored: list[Round] = []
    for rnd in rounds:
        if rnd.scoring_side is None:
            continue
        scored.append(rnd)
        series.append(effective_score(fold_scores(player_count, scored), player_index))
    return series
