"""Record-store-backed game repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from scorecard.dal.game_repository import GameRepository
from scorecard.logic.exceptions import PersistenceError
from scorecard.logic.ledger import new_ledger
from scorecard.logic.scoring import fold_scores
from scorecard.logic.state import Game

if TYPE_CHECKING:
    from shared.storage import Record, RecordStore

logger = structlog.get_logger()

GAMES_COLLECTION = "games"


def _normalize(game: Game) -> Game:
    """Bring a loaded game in line with the ledger invariants.

    Older records may store an ongoing game with no rounds at all, or a
    score cache that disagrees with its rounds. The former gets its open
    first round, the latter is refolded.
    """
    updates: dict[str, object] = {}
    if not game.rounds and not game.is_ended:
        updates["rounds"] = new_ledger()
    folded = fold_scores(game.player_count, game.rounds)
    if folded != game.scores:
        logger.warning("refolded stale score cache", game_id=game.id, stored=game.scores, folded=folded)
        updates["scores"] = folded
    return game.model_copy(update=updates) if updates else game


class RecordStoreGameRepository(GameRepository):
    """GameRepository persisting each game as one record in the "games" collection.

    Store failures (OSError, ValueError) surface as PersistenceError. Records
    that no longer validate are skipped on read with a warning instead of
    failing every listing.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def _load_records(self) -> list[Record]:
        try:
            return await self._store.get(GAMES_COLLECTION)
        except (OSError, ValueError) as exc:
            raise PersistenceError("Failed to load games") from exc

    @staticmethod
    def _parse(record: Record) -> Game | None:
        try:
            return _normalize(Game.model_validate(record))
        except ValidationError as exc:
            logger.warning("skipping invalid game record", game_id=record.get("id"), error=str(exc))
            return None

    async def save_game(self, game: Game) -> None:
        try:
            await self._store.put(GAMES_COLLECTION, game.to_record())
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to save game {game.id}") from exc

    async def get_game(self, game_id: str) -> Game | None:
        for record in await self._load_records():
            if record.get("id") == game_id:
                return self._parse(record)
        return None

    async def list_games(self) -> list[Game]:
        """All stored games in store order."""
        games = (self._parse(record) for record in await self._load_records())
        return [g for g in games if g is not None]

    async def delete_game(self, game_id: str) -> None:
        try:
            await self._store.delete(GAMES_COLLECTION, game_id)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to delete game {game_id}") from exc
