"""
Turn indication: whose input is expected for a round.

Turn and topology are separate contracts. In 3-player games they coincide:
the seat whose turn it is is the rotating solo seat on side A. In 2- and
4-player games the sides are fixed, so turn degenerates to a fixed
alternation between them: side A on odd rounds, side B on even rounds.
"""

from scorecard.logic.enums import Side
from scorecard.logic.topology import THREE_PLAYER_COUNT, resolve


def current_turn(player_count: int, sequence_number: int) -> frozenset[int]:
    """Seat indices whose turn it is in round ``sequence_number``."""
    topology = resolve(player_count, sequence_number)
    if player_count == THREE_PLAYER_COUNT:
        return frozenset(topology.side_a)
    side = Side.A if sequence_number % 2 == 1 else Side.B
    return frozenset(topology.seats(side))


def is_players_turn(player_count: int, sequence_number: int, player_index: int) -> bool:
    return player_index in current_turn(player_count, sequence_number)
