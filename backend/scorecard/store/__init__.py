"""Repository implementations on top of a shared.storage.RecordStore."""

from scorecard.store.game_repository import GAMES_COLLECTION, RecordStoreGameRepository
from scorecard.store.player_repository import PLAYERS_COLLECTION, RecordStorePlayerRepository

__all__ = [
    "GAMES_COLLECTION",
    "PLAYERS_COLLECTION",
    "RecordStoreGameRepository",
    "RecordStorePlayerRepository",
]
