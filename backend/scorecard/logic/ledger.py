"""
Round ledger operations.

The ledger is the ordered tuple of rounds owned by a game. Round n sits at
position n (1-based) and the last round is the current one: it stays open
for edits until the game advances past it. All functions here are pure and
return new tuples.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorecard.logic.enums import Side
from scorecard.logic.exceptions import InvalidPointsError, OpenRoundIncompleteError, RoundNotFoundError
from scorecard.logic.scoring import round_points
from scorecard.logic.state import Round
from scorecard.logic.topology import side_players
from scorecard.logic.types import RoundHistoryEntry

if TYPE_CHECKING:
    from scorecard.logic.state import Game

Ledger = tuple[Round, ...]


def new_ledger() -> Ledger:
    """A fresh ledger holding only the open first round."""
    return (Round(sequence_number=1),)


def current_round(rounds: Ledger) -> Round | None:
    return rounds[-1] if rounds else None


def closed_rounds(rounds: Ledger) -> Ledger:
    """Rounds with a scoring side, i.e. the ones that count towards scores."""
    return tuple(r for r in rounds if r.is_scored)


def _validate_points(points: object) -> None:
    if points is None:
        return
    if isinstance(points, bool) or not isinstance(points, int) or points < 0:
        raise InvalidPointsError(f"Points must be a non-negative integer, got {points!r}")


def record_points(rounds: Ledger, sequence_number: int, side: Side, points: int | None) -> Ledger:
    """
    Return a ledger where round ``sequence_number`` is scored to ``side``.

    The other side's points on that round are cleared, so a round never
    carries points for both sides. ``points=None`` clears the round back to
    unscored. Any existing round may be edited; round len+1 is opened on the
    fly when the current round already has points.

    Raises:
        InvalidPointsError: points is not a non-negative integer
        RoundNotFoundError: no such round and it cannot be opened

    """
    _validate_points(points)
    position = sequence_number - 1
    can_open = sequence_number == len(rounds) + 1 and (not rounds or rounds[-1].has_points)
    if not (0 <= position < len(rounds) or can_open):
        raise RoundNotFoundError(f"Round {sequence_number} does not exist (ledger has {len(rounds)} rounds)")

    if points is None:
        updated = Round(sequence_number=sequence_number)
    else:
        updated = Round(
            sequence_number=sequence_number,
            side_a_points=points if side is Side.A else None,
            side_b_points=points if side is Side.B else None,
            scoring_side=side,
        )
    return (*rounds[:position], updated, *rounds[position + 1 :])


def append_open_round(rounds: Ledger) -> Ledger:
    """Open the next round once the current one has points.

    Raises:
        OpenRoundIncompleteError: the current round has no points recorded

    """
    latest = current_round(rounds)
    if latest is None:
        return new_ledger()
    if not latest.has_points:
        raise OpenRoundIncompleteError(f"Round {latest.sequence_number} has no points recorded")
    return (*rounds, Round(sequence_number=len(rounds) + 1))


def drop_open_round(rounds: Ledger) -> Ledger:
    """Discard a trailing unscored round, as happens when a game ends."""
    latest = current_round(rounds)
    if latest is not None and not latest.is_scored:
        return rounds[:-1]
    return rounds


def round_history(game: Game) -> tuple[RoundHistoryEntry, ...]:
    """Scored rounds with the names of whoever scored them."""
    entries = []
    for rnd in game.rounds:
        if rnd.scoring_side is None:
            continue
        scorers = side_players(game.players, rnd.sequence_number, rnd.scoring_side)
        entries.append(
            RoundHistoryEntry(
                sequence_number=rnd.sequence_number,
                scoring_side=rnd.scoring_side,
                scorer_ids=tuple(p.id for p in scorers),
                scorer_names=" & ".join(p.name for p in scorers),
                points=round_points(rnd),
            ),
        )
    return tuple(entries)
