"""
Derived read models returned by the engine.

These are computed on demand from Game values and never persisted.
"""

from pydantic import BaseModel

from scorecard.logic.enums import Side


class RoundHistoryEntry(BaseModel, frozen=True):
    """A scored round as shown in the history list, e.g. "Ann & Cy scored 10 points"."""

    sequence_number: int
    scoring_side: Side
    scorer_ids: tuple[str, ...]
    scorer_names: str
    points: int


class PlayerStats(BaseModel, frozen=True):
    """Cross-game statistics for one player.

    game_scores: the player's effective score in each game, oldest first.
    score_series: running cumulative total of game_scores, for trend charts.
    """

    player_id: str
    games_played: int
    wins: int
    win_rate: float
    game_scores: tuple[int, ...] = ()
    score_series: tuple[int, ...] = ()


class GameView(BaseModel, frozen=True):
    """Everything a score screen needs beyond the stored game record."""

    game_id: str
    matchup: str
    is_ended: bool
    current_round: int | None
    current_turn: tuple[int, ...]
    scores: tuple[int, ...]
    effective_scores: tuple[int, ...]
    team_scores: tuple[int, int] | None
    history: tuple[RoundHistoryEntry, ...]
