"""
Enum definitions for score-card game concepts.
"""

from enum import IntEnum, StrEnum


class Side(IntEnum):
    """The two opposing sides of a round.

    Integer values are the persisted ``scoringTeam`` encoding and must stay
    stable: 1 for side A, 2 for side B (unscored rounds persist as null).
    """

    A = 1
    B = 2

    @property
    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


class GameType(StrEnum):
    """Kinds of score-card games. Only fixed-point accumulation is supported."""

    MANILLEN = "manillen"


class GameListFilter(StrEnum):
    """Game list views: everything, games still being played, or ended games."""

    ALL = "all"
    ONGOING = "ongoing"
    PAST = "past"


SUPPORTED_PLAYER_COUNTS: frozenset[int] = frozenset({2, 3, 4})
