"""
Immutable game state models.

Player, Round and Game are frozen Pydantic models. Python attributes are
snake_case; the persisted record shape keeps the legacy camelCase field names
through aliases, so ``Game.to_record()`` and ``Game.model_validate(record)``
round-trip existing stored data unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from scorecard.logic.enums import SUPPORTED_PLAYER_COUNTS, GameType, Side
from scorecard.logic.scoring import parse_points


class Player(BaseModel):
    """A registered player. Identity is ``id``; renames replace the record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Player name cannot be empty")
        return stripped

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


class Round(BaseModel):
    """One round of the ledger.

    At most one side carries points, and ``scoring_side`` names that side.
    A round whose ``scoring_side`` is None is unscored (still being entered).
    Point values persist as strings ("" when unset) like the legacy store.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sequence_number: int = Field(alias="id", ge=1)
    side_a_points: int | None = Field(default=None, alias="team1Points")
    side_b_points: int | None = Field(default=None, alias="team2Points")
    scoring_side: Side | None = Field(default=None, alias="scoringTeam")

    @field_validator("side_a_points", "side_b_points", mode="before")
    @classmethod
    def _parse_points(cls, v: object) -> int | None:
        return parse_points(v)

    @field_serializer("side_a_points", "side_b_points")
    def _serialize_points(self, v: int | None) -> str:
        return "" if v is None else str(v)

    @model_validator(mode="after")
    def _validate_single_side(self) -> Self:
        if self.scoring_side is None:
            if self.side_a_points is not None or self.side_b_points is not None:
                raise ValueError(f"Round {self.sequence_number} has points but no scoring side")
        elif self.points_for(self.scoring_side.other) is not None:
            raise ValueError(f"Round {self.sequence_number} has points on both sides")
        return self

    @property
    def is_scored(self) -> bool:
        return self.scoring_side is not None

    @property
    def has_points(self) -> bool:
        return self.side_a_points is not None or self.side_b_points is not None

    def points_for(self, side: Side) -> int | None:
        return self.side_a_points if side is Side.A else self.side_b_points


class Game(BaseModel):
    """A score-card game: fixed seat order, a round ledger and a score cache.

    ``scores`` is always the fold of ``rounds`` and is only ever replaced by
    recomputation (see scorecard.logic.scoring.fold_scores).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    type: GameType = GameType.MANILLEN
    players: tuple[Player, ...]
    scores: tuple[int, ...]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    rounds: tuple[Round, ...] = ()
    is_ended: bool = Field(default=False, alias="isEnded")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        """Timestamps stored without an offset are UTC."""
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    @model_validator(mode="after")
    def _validate_shape(self) -> Self:
        if len(self.players) not in SUPPORTED_PLAYER_COUNTS:
            raise ValueError(f"Game must have 2, 3 or 4 players, got {len(self.players)}")
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("Game players must be distinct")
        if len(self.scores) != len(self.players):
            raise ValueError(f"Expected {len(self.players)} scores, got {len(self.scores)}")
        for position, rnd in enumerate(self.rounds, start=1):
            if rnd.sequence_number != position:
                raise ValueError(f"Round at position {position} has sequence number {rnd.sequence_number}")
        return self

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(p.id for p in self.players)

    def player_index(self, player_id: str) -> int | None:
        """Seat index of a player in this game, or None if not seated."""
        return next((i for i, p in enumerate(self.players) if p.id == player_id), None)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
