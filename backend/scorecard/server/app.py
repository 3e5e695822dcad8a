from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from scorecard.logic.exceptions import (
    GameAlreadyEndedError,
    GameNotFoundError,
    PersistenceError,
    PlayerNotFoundError,
    ScoreCardError,
)
from scorecard.logic.lifecycle import GameLifecycleManager
from scorecard.logic.statistics import StatisticsService
from scorecard.server.handlers import (
    InvalidRequestError,
    advance_round,
    create_game,
    create_player,
    delete_game,
    end_game,
    get_game,
    health,
    list_games,
    list_players,
    player_stats,
    record_points,
    rename_player,
    resync_players,
    stats_overview,
)
from scorecard.server.settings import ScoreCardServerSettings
from scorecard.store import RecordStoreGameRepository, RecordStorePlayerRepository
from shared.logging import setup_logging
from shared.storage import FileRecordStore, MemoryRecordStore

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.storage import RecordStore

logger = structlog.get_logger()

_ERROR_STATUS: tuple[tuple[type[Exception], HTTPStatus], ...] = (
    (GameNotFoundError, HTTPStatus.NOT_FOUND),
    (PlayerNotFoundError, HTTPStatus.NOT_FOUND),
    (GameAlreadyEndedError, HTTPStatus.CONFLICT),
    (PersistenceError, HTTPStatus.SERVICE_UNAVAILABLE),
)


async def _error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map domain and request errors to JSON error responses.

    Anything not listed in _ERROR_STATUS is a caller contract violation (422).
    """
    status = next((s for cls, s in _ERROR_STATUS if isinstance(exc, cls)), HTTPStatus.UNPROCESSABLE_ENTITY)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("request failed", path=request.url.path, error=str(exc))
    return JSONResponse({"error": str(exc), "type": type(exc).__name__}, status_code=status)


def _build_store(settings: ScoreCardServerSettings) -> RecordStore:
    if settings.in_memory:
        return MemoryRecordStore()
    return FileRecordStore(settings.data_dir)


def create_app(
    settings: ScoreCardServerSettings | None = None,
    store: RecordStore | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ScoreCardServerSettings()
    if store is None:
        store = _build_store(settings)

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/players", list_players, methods=["GET"], name="list_players"),
        Route("/players", create_player, methods=["POST"], name="create_player"),
        Route("/players/{player_id}", rename_player, methods=["PUT"], name="rename_player"),
        Route("/games", list_games, methods=["GET"], name="list_games"),
        Route("/games", create_game, methods=["POST"], name="create_game"),
        Route("/games/{game_id}", get_game, methods=["GET"], name="get_game"),
        Route("/games/{game_id}", delete_game, methods=["DELETE"], name="delete_game"),
        Route(
            "/games/{game_id}/rounds/{sequence_number:int}",
            record_points,
            methods=["POST"],
            name="record_points",
        ),
        Route("/games/{game_id}/advance", advance_round, methods=["POST"], name="advance_round"),
        Route("/games/{game_id}/end", end_game, methods=["POST"], name="end_game"),
        Route("/games/{game_id}/resync", resync_players, methods=["POST"], name="resync_players"),
        Route("/stats", stats_overview, methods=["GET"], name="stats_overview"),
        Route("/stats/players/{player_id}", player_stats, methods=["GET"], name="player_stats"),
    ]

    app = Starlette(
        routes=routes,
        exception_handlers={
            ScoreCardError: _error_handler,
            InvalidRequestError: _error_handler,
            ValidationError: _error_handler,
        },
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    player_repo = RecordStorePlayerRepository(store)
    game_repo = RecordStoreGameRepository(store)
    app.state.settings = settings
    app.state.lifecycle = GameLifecycleManager(player_repo, game_repo)
    app.state.statistics = StatisticsService(player_repo, game_repo)

    logger.info("scorecard server ready", in_memory=settings.in_memory, data_dir=settings.data_dir)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory scorecard.server.app:get_app."""
    s = ScoreCardServerSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)
