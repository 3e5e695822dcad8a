"""Builders for players, rounds and games used across score-card tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from scorecard.logic.enums import Side
from scorecard.logic.ledger import new_ledger
from scorecard.logic.scoring import fold_scores
from scorecard.logic.state import Game, Player, Round

if TYPE_CHECKING:
    from collections.abc import Sequence

BASE_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)

NAMES = ("Ann", "Bo", "Cy", "Di")


def make_players(count: int) -> tuple[Player, ...]:
    return tuple(Player(id=f"p{i + 1}", name=NAMES[i]) for i in range(count))


def scored_round(sequence_number: int, side: Side, points: int) -> Round:
    return Round(
        sequence_number=sequence_number,
        side_a_points=points if side is Side.A else None,
        side_b_points=points if side is Side.B else None,
        scoring_side=side,
    )


def make_game(
    player_count: int = 2,
    results: Sequence[tuple[Side, int]] = (),
    *,
    game_id: str = "g1",
    players: Sequence[Player] | None = None,
    open_round: bool = True,
    is_ended: bool = False,
    created_at: datetime | None = None,
) -> Game:
    """Build a game whose rounds score ``results`` in order, with a consistent score cache."""
    seated = tuple(players) if players is not None else make_players(player_count)
    rounds: tuple[Round, ...] = tuple(scored_round(i, side, pts) for i, (side, pts) in enumerate(results, start=1))
    if open_round:
        rounds = (*rounds, Round(sequence_number=len(rounds) + 1)) if rounds else new_ledger()
    created = created_at or BASE_TIME
    return Game(
        id=game_id,
        players=seated,
        scores=fold_scores(len(seated), rounds),
        created_at=created,
        updated_at=created,
        rounds=rounds,
        is_ended=is_ended,
    )


class SequentialIds:
    """Deterministic id factory: id-1, id-2, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._n = 0

    def __call__(self) -> str:
        self._n += 1
        return f"{self._prefix}-{self._n}"


class SteppingClock:
    """Clock advancing one minute per call."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(minutes=1)
        return self._now
