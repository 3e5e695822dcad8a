"""Request bodies accepted by the score-card HTTP API."""

from pydantic import BaseModel, Field, field_validator

from scorecard.logic.enums import Side


class PlayerNameRequest(BaseModel):
    name: str


class CreateGameRequest(BaseModel):
    player_ids: list[str]
    player_count: int


class RecordPointsRequest(BaseModel):
    side: Side
    points: int | None = Field(default=None)

    @field_validator("side", mode="before")
    @classmethod
    def _side_by_name(cls, v: object) -> object:
        """Accept "A"/"B" as well as the stored 1/2 encoding."""
        if isinstance(v, str) and v.upper() in Side.__members__:
            return Side[v.upper()]
        return v
