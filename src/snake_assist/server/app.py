"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from snake_assist.advice import AdviceService
from snake_assist.config import GameSettings, GameStatistics
from snake_assist.server.routes import router
from snake_assist.server.session_manager import SessionManager
from snake_assist.server.websocket import ws_router


def create_app(
    settings: GameSettings | None = None,
    stats_path: str | Path | None = None,
    settings_path: str | Path | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    When *settings_path* is given and *settings* is not, settings are
    loaded from that file; a raised high score is written back to it.
    """
    if settings is None:
        settings = GameSettings.load(settings_path) if settings_path else GameSettings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        stats = GameStatistics.load(stats_path) if stats_path else GameStatistics()
        app.state.session_manager = SessionManager(
            settings, stats=stats, stats_path=stats_path, settings_path=settings_path,
        )
        app.state.advice_service = AdviceService(settings)
        yield
        await app.state.session_manager.cleanup()
        await app.state.advice_service.aclose()

    app = FastAPI(
        title="Snake Assist API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
