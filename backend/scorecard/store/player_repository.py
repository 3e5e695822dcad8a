"""Record-store-backed player registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from scorecard.dal.player_repository import PlayerRepository
from scorecard.logic.exceptions import PersistenceError
from scorecard.logic.state import Player

if TYPE_CHECKING:
    from shared.storage import RecordStore

logger = structlog.get_logger()

PLAYERS_COLLECTION = "players"


class RecordStorePlayerRepository(PlayerRepository):
    """PlayerRepository persisting players as ``{id, name}`` records."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def save_player(self, player: Player) -> None:
        """Insert or replace a player by id."""
        try:
            await self._store.put(PLAYERS_COLLECTION, player.to_record())
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to save player {player.id}") from exc

    async def get_player(self, player_id: str) -> Player | None:
        return next((p for p in await self.list_players() if p.id == player_id), None)

    async def list_players(self) -> list[Player]:
        try:
            records = await self._store.get(PLAYERS_COLLECTION)
        except (OSError, ValueError) as exc:
            raise PersistenceError("Failed to load players") from exc
        players = []
        for record in records:
            try:
                players.append(Player.model_validate(record))
            except ValidationError as exc:
                logger.warning("skipping invalid player record", player_id=record.get("id"), error=str(exc))
        return players
