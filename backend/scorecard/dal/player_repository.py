"""Abstract interface for player persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scorecard.logic.state import Player


class PlayerRepository(ABC):
    """Abstract interface for the player registry."""

    @abstractmethod
    async def save_player(self, player: Player) -> None: ...

    @abstractmethod
    async def get_player(self, player_id: str) -> Player | None: ...

    @abstractmethod
    async def list_players(self) -> list[Player]: ...
