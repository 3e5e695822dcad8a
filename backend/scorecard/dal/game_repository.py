"""Abstract interface for game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scorecard.logic.state import Game


class GameRepository(ABC):
    """Abstract interface for game persistence.

    Implementations raise PersistenceError when the underlying store fails;
    a failed save leaves the previously stored game untouched.
    """

    @abstractmethod
    async def save_game(self, game: Game) -> None: ...

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def list_games(self) -> list[Game]: ...

    @abstractmethod
    async def delete_game(self, game_id: str) -> None: ...
