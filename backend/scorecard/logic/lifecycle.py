"""
Game lifecycle: player registration and game create / score / advance / end / delete.

Games are immutable values. Each mutating operation builds the next Game,
persists it, and only then returns it. If the write fails the caller gets a
PersistenceError and still holds the previous Game, which matches what is
stored. Callers must not issue a second mutation on the same game before the
previous one has returned.

States: in progress -> ended -> (deleted). Ended games are frozen; only
deletion and a player-name resync are allowed afterwards.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from scorecard.logic.enums import GameListFilter
from scorecard.logic.exceptions import (
    DuplicatePlayerSelectionError,
    GameAlreadyEndedError,
    GameNotFoundError,
    IncompletePlayerSelectionError,
    PersistenceError,
    PlayerNotFoundError,
)
from scorecard.logic.ledger import append_open_round, drop_open_round, new_ledger, record_points
from scorecard.logic.scoring import fold_scores
from scorecard.logic.state import Game, Player
from scorecard.logic.topology import validate_player_count
from shared.ids import new_id

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scorecard.dal import GameRepository, PlayerRepository
    from scorecard.logic.enums import Side
    from scorecard.logic.ledger import Ledger

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _ensure_in_progress(game: Game) -> None:
    if game.is_ended:
        raise GameAlreadyEndedError(game.id)


class GameLifecycleManager:
    """Owns every state transition of players and games and their persistence."""

    def __init__(
        self,
        player_repo: PlayerRepository,
        game_repo: GameRepository,
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._player_repo = player_repo
        self._game_repo = game_repo
        self._new_id = id_factory
        self._now = clock

    # -- players -------------------------------------------------------------

    async def register_player(self, name: str) -> Player:
        """Create and persist a player. Raises ValueError (pydantic) on a blank name."""
        player = Player(id=self._new_id(), name=name)
        await self._player_repo.save_player(player)
        logger.info("registered player", player_id=player.id, name=player.name)
        return player

    async def rename_player(self, player_id: str, name: str) -> Player:
        """Replace a player's record under the same id.

        Games keep the name snapshot taken at creation until resync_players().
        """
        existing = await self.get_player(player_id)
        renamed = Player(id=existing.id, name=name)
        await self._player_repo.save_player(renamed)
        logger.info("renamed player", player_id=player_id, old_name=existing.name, name=renamed.name)
        return renamed

    async def get_player(self, player_id: str) -> Player:
        player = await self._player_repo.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def list_players(self) -> list[Player]:
        return await self._player_repo.list_players()

    # -- games ---------------------------------------------------------------

    async def create_game(self, player_ids: Sequence[str], player_count: int) -> Game:
        """
        Start a game with the given players in seat order.

        Raises:
            InvalidPlayerCountError: player_count is not 2, 3 or 4
            DuplicatePlayerSelectionError: a player id appears more than once
            IncompletePlayerSelectionError: number of ids != player_count
            PlayerNotFoundError: an id is not in the player registry
            PersistenceError: the game could not be stored

        """
        validate_player_count(player_count)
        if len(set(player_ids)) != len(player_ids):
            raise DuplicatePlayerSelectionError("The same player was selected more than once")
        if len(player_ids) != player_count:
            raise IncompletePlayerSelectionError(
                f"Expected {player_count} players, got {len(player_ids)}",
            )

        registry = {p.id: p for p in await self._player_repo.list_players()}
        missing = [pid for pid in player_ids if pid not in registry]
        if missing:
            raise PlayerNotFoundError(missing[0])

        now = self._now()
        game = Game(
            id=self._new_id(),
            players=tuple(registry[pid] for pid in player_ids),
            scores=(0,) * player_count,
            created_at=now,
            updated_at=now,
            rounds=new_ledger(),
        )
        await self._persist(game, "created game", player_ids=list(player_ids))
        return game

    async def get_game(self, game_id: str) -> Game:
        game = await self._game_repo.get_game(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def list_games(self, status: GameListFilter = GameListFilter.ALL) -> list[Game]:
        games = await self._game_repo.list_games()
        if status is GameListFilter.ONGOING:
            return [g for g in games if not g.is_ended]
        if status is GameListFilter.PAST:
            return [g for g in games if g.is_ended]
        return games

    async def list_ongoing_games(self) -> list[Game]:
        return await self.list_games(GameListFilter.ONGOING)

    async def list_past_games(self) -> list[Game]:
        return await self.list_games(GameListFilter.PAST)

    async def record_round_points(
        self,
        game: Game,
        sequence_number: int,
        side: Side,
        points: int | None,
    ) -> Game:
        """
        Score round ``sequence_number`` to ``side`` and recompute the scores.

        The other side's points on that round are cleared. ``points=None``
        clears the round back to unscored.

        Raises:
            GameAlreadyEndedError: the game has ended
            InvalidPointsError: points is negative or not an integer
            RoundNotFoundError: the round does not exist and cannot be opened
            PersistenceError: the game could not be stored

        """
        _ensure_in_progress(game)
        rounds = record_points(game.rounds, sequence_number, side, points)
        updated = self._with_rounds(game, rounds)
        await self._persist(
            updated,
            "recorded round points",
            sequence_number=sequence_number,
            side=side.name,
            points=points,
            scores=updated.scores,
        )
        return updated

    async def advance_round(self, game: Game) -> Game:
        """
        Open the next round.

        Raises:
            GameAlreadyEndedError: the game has ended
            OpenRoundIncompleteError: the current round has no points yet
            PersistenceError: the game could not be stored

        """
        _ensure_in_progress(game)
        updated = self._with_rounds(game, append_open_round(game.rounds))
        await self._persist(updated, "advanced round", sequence_number=len(updated.rounds))
        return updated

    async def end_game(self, game: Game) -> Game:
        """Freeze the game with its final scores, discarding a trailing unscored round."""
        _ensure_in_progress(game)
        updated = self._with_rounds(game, drop_open_round(game.rounds)).model_copy(update={"is_ended": True})
        await self._persist(updated, "ended game", rounds=len(updated.rounds), scores=updated.scores)
        return updated

    async def delete_game(self, game_id: str) -> None:
        """Remove a game. Deleting an unknown id is not an error."""
        await self._game_repo.delete_game(game_id)
        logger.info("deleted game", game_id=game_id)

    async def resync_players(self, game: Game) -> Game:
        """Refresh the game's player name snapshot from the registry.

        Rounds and scores are untouched, so this is allowed on ended games.
        Players missing from the registry keep their snapshot.
        """
        registry = {p.id: p for p in await self._player_repo.list_players()}
        players = tuple(registry.get(p.id, p) for p in game.players)
        if players == game.players:
            return game
        updated = game.model_copy(update={"players": players, "updated_at": self._now()})
        await self._persist(updated, "resynced player names")
        return updated

    # -- internals -----------------------------------------------------------

    def _with_rounds(self, game: Game, rounds: Ledger) -> Game:
        return game.model_copy(
            update={
                "rounds": rounds,
                "scores": fold_scores(game.player_count, rounds),
                "updated_at": self._now(),
            },
        )

    async def _persist(self, game: Game, event: str, **context: object) -> None:
        try:
            await self._game_repo.save_game(game)
        except PersistenceError:
            logger.exception("failed to persist game", game_id=game.id, action=event)
            raise
        logger.info(event, game_id=game.id, **context)
