"""
Round topology: which seats occupy side A and side B of a round.

Everything that needs to know "who is on which side" goes through resolve(),
whether it is attributing points, highlighting turns, naming scorers in the
round history or badging seats on a new game.

- 2 players: seat 0 vs seat 1, every round.
- 3 players: a rotating solo seat against the other two as a pair. The solo
  seat for round n is (n - 1) mod 3, so each seat plays solo once every
  three rounds.
- 4 players: fixed teams, seats 0 & 2 against seats 1 & 3.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scorecard.logic.enums import SUPPORTED_PLAYER_COUNTS, Side
from scorecard.logic.exceptions import InvalidPlayerCountError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorecard.logic.state import Player

THREE_PLAYER_COUNT = 3

_TWO_PLAYER_TOPOLOGY = ((0,), (1,))
_FOUR_PLAYER_TOPOLOGY = ((0, 2), (1, 3))


@dataclass(frozen=True)
class Topology:
    """Seat indices on each side of a single round."""

    side_a: tuple[int, ...]
    side_b: tuple[int, ...]

    def seats(self, side: Side) -> tuple[int, ...]:
        return self.side_a if side is Side.A else self.side_b


def validate_player_count(player_count: int) -> None:
    if player_count not in SUPPORTED_PLAYER_COUNTS:
        raise InvalidPlayerCountError(player_count)


def solo_seat(sequence_number: int) -> int:
    """Seat playing solo in a 3-player round."""
    return (sequence_number - 1) % THREE_PLAYER_COUNT


def resolve(player_count: int, sequence_number: int) -> Topology:
    """Resolve the sides of round ``sequence_number`` (1-based) for a table size.

    Pure function of its arguments.

    Raises:
        InvalidPlayerCountError: player_count is not 2, 3 or 4
        ValueError: sequence_number is less than 1

    """
    validate_player_count(player_count)
    if sequence_number < 1:
        raise ValueError(f"Invalid sequence number {sequence_number}, expected >= 1")

    if player_count == THREE_PLAYER_COUNT:
        solo = solo_seat(sequence_number)
        return Topology(
            side_a=(solo,),
            side_b=((solo + 1) % THREE_PLAYER_COUNT, (solo + 2) % THREE_PLAYER_COUNT),
        )
    side_a, side_b = _TWO_PLAYER_TOPOLOGY if player_count == 2 else _FOUR_PLAYER_TOPOLOGY  # noqa: PLR2004
    return Topology(side_a=side_a, side_b=side_b)


def side_of(player_count: int, sequence_number: int, player_index: int) -> Side:
    """Side that seat ``player_index`` plays on in the given round."""
    if not (0 <= player_index < player_count):
        raise ValueError(f"Invalid seat {player_index}, expected 0-{player_count - 1}")
    topology = resolve(player_count, sequence_number)
    return Side.A if player_index in topology.side_a else Side.B


def seat_label(player_count: int, player_index: int) -> str:
    """Badge shown next to a seat when setting up a game.

    3-player games have no fixed teams since the solo seat rotates.
    """
    validate_player_count(player_count)
    if player_count == THREE_PLAYER_COUNT:
        return "Solo"
    side = side_of(player_count, 1, player_index)
    return f"Team {side.value}"


def side_players(players: Sequence[Player], sequence_number: int, side: Side) -> tuple[Player, ...]:
    topology = resolve(len(players), sequence_number)
    return tuple(players[i] for i in topology.seats(side))


def side_label(players: Sequence[Player], sequence_number: int, side: Side) -> str:
    """Names on a side, e.g. "Ann" or "Ann & Cy"."""
    return " & ".join(p.name for p in side_players(players, sequence_number, side))


def matchup_label(players: Sequence[Player]) -> str:
    """One-line description of a game's line-up.

    "Ann vs Bo", "Ann vs Bo vs Cy" or "Ann & Cy vs Bo & Di".
    """
    validate_player_count(len(players))
    if len(players) == THREE_PLAYER_COUNT:
        return " vs ".join(p.name for p in players)
    return f"{side_label(players, 1, Side.A)} vs {side_label(players, 1, Side.B)}"
