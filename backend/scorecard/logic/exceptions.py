"""Typed domain exceptions for score-card rule violations.

Engine errors are deterministic validation failures that indicate a caller
contract violation; nothing here is retried. PersistenceError is the only
category a caller may reasonably retry, and the engine never retries it
itself. The HTTP layer maps these to status codes at its boundary.
"""


class ScoreCardError(Exception):
    """Base exception for score-card engine errors."""


class InvalidPlayerCountError(ScoreCardError):
    """Player count is not one of the supported table sizes (2, 3 or 4)."""

    def __init__(self, player_count: int) -> None:
        self.player_count = player_count
        super().__init__(f"unsupported player count {player_count}, expected 2, 3 or 4")


class IncompletePlayerSelectionError(ScoreCardError):
    """Number of selected players does not match the chosen player count."""


class DuplicatePlayerSelectionError(ScoreCardError):
    """The same player was selected for more than one seat."""


class GameAlreadyEndedError(ScoreCardError):
    """Mutation attempted on a game that has already ended."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id} has already ended")


class OpenRoundIncompleteError(ScoreCardError):
    """Cannot advance: the current round has no points recorded."""


class InvalidPointsError(ScoreCardError):
    """Round points must be a non-negative integer."""


class RoundNotFoundError(ScoreCardError):
    """Sequence number does not address a round that exists or can be opened."""


class GameNotFoundError(ScoreCardError):
    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id} not found")


class PlayerNotFoundError(ScoreCardError):
    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"player {player_id} not found")


class PersistenceError(ScoreCardError):
    """The record store failed to read or write. Prior persisted state is intact."""
