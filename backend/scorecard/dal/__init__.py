"""Data access layer: repository interfaces for players and games."""

from scorecard.dal.game_repository import GameRepository
from scorecard.dal.player_repository import PlayerRepository

__all__ = [
    "GameRepository",
    "PlayerRepository",
]
