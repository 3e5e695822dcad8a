"""
Cross-game player statistics.

Statistics are read-side only: they take the stored games, refold each
game's ledger and never write anything back. Effective scores are compared,
so in 4-player games a player wins or loses with their team.
"""

from __future__ import annotations

from itertools import accumulate
from typing import TYPE_CHECKING

from scorecard.logic.enums import SUPPORTED_PLAYER_COUNTS
from scorecard.logic.scoring import FOUR_PLAYER_COUNT, effective_scores, fold_scores
from scorecard.logic.types import PlayerStats

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scorecard.dal import GameRepository, PlayerRepository
    from scorecard.logic.state import Game, Player


def _chronological(games: Iterable[Game]) -> list[Game]:
    return sorted(games, key=lambda g: g.created_at)


def _opponent_seats(player_count: int, player_index: int) -> list[int]:
    if player_count == FOUR_PLAYER_COUNT:
        return [i for i in range(player_count) if i % 2 != player_index % 2]
    return [i for i in range(player_count) if i != player_index]


def effective_score_in(game: Game, player_id: str) -> int | None:
    """A player's effective score in a game, or None if they did not play."""
    index = game.player_index(player_id)
    if index is None:
        return None
    return effective_scores(fold_scores(game.player_count, game.rounds))[index]


def is_winner(game: Game, player_id: str) -> bool:
    """True if the player's effective score strictly beats every opponent's.

    Ties are not wins. Ongoing games are judged on their current scores.
    """
    index = game.player_index(player_id)
    if index is None:
        return False
    scores = effective_scores(fold_scores(game.player_count, game.rounds))
    best_opponent = max(scores[i] for i in _opponent_seats(game.player_count, index))
    return scores[index] > best_opponent


def player_stats(player_id: str, games: Iterable[Game]) -> PlayerStats:
    played = [g for g in _chronological(games) if g.player_index(player_id) is not None]
    wins = sum(1 for g in played if is_winner(g, player_id))
    game_scores = tuple(effective_score_in(g, player_id) or 0 for g in played)
    return PlayerStats(
        player_id=player_id,
        games_played=len(played),
        wins=wins,
        win_rate=(wins / len(played) * 100) if played else 0.0,
        game_scores=game_scores,
        score_series=tuple(accumulate(game_scores)),
    )


def all_player_stats(players: Sequence[Player], games: Iterable[Game]) -> list[PlayerStats]:
    """Stats for every given player, in the given player order."""
    game_list = list(games)
    return [player_stats(p.id, game_list) for p in players]


def games_by_player_count(games: Iterable[Game]) -> dict[int, int]:
    """Number of games per table size; every supported size is present."""
    counts = dict.fromkeys(sorted(SUPPORTED_PLAYER_COUNTS), 0)
    for game in games:
        counts[game.player_count] += 1
    return counts


class StatisticsService:
    """Reads the persisted players and games on demand and aggregates them."""

    def __init__(self, player_repo: PlayerRepository, game_repo: GameRepository) -> None:
        self._player_repo = player_repo
        self._game_repo = game_repo

    async def player_stats(self, player_id: str) -> PlayerStats:
        return player_stats(player_id, await self._game_repo.list_games())

    async def overview(self) -> tuple[list[PlayerStats], dict[int, int]]:
        """Stats for every registered player plus the games-per-table-size distribution."""
        players = await self._player_repo.list_players()
        games = await self._game_repo.list_games()
        return all_player_stats(players, games), games_by_player_count(games)
