"""JSON request handlers for players, games and statistics."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse, Response

from scorecard.logic.enums import GameListFilter
from scorecard.logic.topology import seat_label
from scorecard.logic.view import build_game_view
from scorecard.server.types import CreateGameRequest, PlayerNameRequest, RecordPointsRequest

if TYPE_CHECKING:
    from starlette.requests import Request

    from scorecard.logic.lifecycle import GameLifecycleManager
    from scorecard.logic.state import Game
    from scorecard.logic.statistics import StatisticsService


_M = TypeVar("_M", bound=BaseModel)


class InvalidRequestError(Exception):
    """Request body is not valid JSON or does not match the expected shape."""


async def _parse_body(request: Request, model: type[_M]) -> _M:
    raw_body = await request.body()
    try:
        body: Any = json.loads(raw_body) if raw_body.strip() else {}
    except (ValueError, json.JSONDecodeError) as e:  # fmt: skip
        raise InvalidRequestError("Invalid JSON body") from e
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(str(e)) from e


def _lifecycle(request: Request) -> GameLifecycleManager:
    return request.app.state.lifecycle


def _statistics(request: Request) -> StatisticsService:
    return request.app.state.statistics


def _game_payload(game: Game) -> dict[str, Any]:
    return {"game": game.to_record(), "view": build_game_view(game).model_dump(mode="json")}


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def list_players(request: Request) -> JSONResponse:
    players = await _lifecycle(request).list_players()
    return JSONResponse({"players": [p.to_record() for p in players]})


async def create_player(request: Request) -> JSONResponse:
    req = await _parse_body(request, PlayerNameRequest)
    player = await _lifecycle(request).register_player(req.name)
    return JSONResponse(player.to_record(), status_code=HTTPStatus.CREATED)


async def rename_player(request: Request) -> JSONResponse:
    req = await _parse_body(request, PlayerNameRequest)
    player = await _lifecycle(request).rename_player(request.path_params["player_id"], req.name)
    return JSONResponse(player.to_record())


async def list_games(request: Request) -> JSONResponse:
    raw_status = request.query_params.get("status", GameListFilter.ALL.value)
    try:
        status = GameListFilter(raw_status)
    except ValueError as e:
        raise InvalidRequestError(f"Unknown status filter {raw_status!r}") from e
    games = await _lifecycle(request).list_games(status)
    return JSONResponse({"games": [_game_payload(g) for g in games]})


async def create_game(request: Request) -> JSONResponse:
    req = await _parse_body(request, CreateGameRequest)
    game = await _lifecycle(request).create_game(req.player_ids, req.player_count)
    payload = _game_payload(game)
    payload["seat_labels"] = [seat_label(game.player_count, i) for i in range(game.player_count)]
    return JSONResponse(payload, status_code=HTTPStatus.CREATED)


async def get_game(request: Request) -> JSONResponse:
    game = await _lifecycle(request).get_game(request.path_params["game_id"])
    return JSONResponse(_game_payload(game))


async def record_points(request: Request) -> JSONResponse:
    req = await _parse_body(request, RecordPointsRequest)
    lifecycle = _lifecycle(request)
    game = await lifecycle.get_game(request.path_params["game_id"])
    game = await lifecycle.record_round_points(game, request.path_params["sequence_number"], req.side, req.points)
    return JSONResponse(_game_payload(game))


async def advance_round(request: Request) -> JSONResponse:
    lifecycle = _lifecycle(request)
    game = await lifecycle.advance_round(await lifecycle.get_game(request.path_params["game_id"]))
    return JSONResponse(_game_payload(game))


async def end_game(request: Request) -> JSONResponse:
    lifecycle = _lifecycle(request)
    game = await lifecycle.end_game(await lifecycle.get_game(request.path_params["game_id"]))
    return JSONResponse(_game_payload(game))


async def resync_players(request: Request) -> JSONResponse:
    lifecycle = _lifecycle(request)
    game = await lifecycle.resync_players(await lifecycle.get_game(request.path_params["game_id"]))
    return JSONResponse(_game_payload(game))


async def delete_game(request: Request) -> Response:
    await _lifecycle(request).delete_game(request.path_params["game_id"])
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def stats_overview(request: Request) -> JSONResponse:
    stats, distribution = await _statistics(request).overview()
    return JSONResponse(
        {
            "players": [s.model_dump(mode="json") for s in stats],
            "games_by_player_count": {str(count): n for count, n in distribution.items()},
        },
    )


async def player_stats(request: Request) -> JSONResponse:
    player_id = request.path_params["player_id"]
    await _lifecycle(request).get_player(player_id)
    stats = await _statistics(request).player_stats(player_id)
    return JSONResponse(stats.model_dump(mode="json"))
