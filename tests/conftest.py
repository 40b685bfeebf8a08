"""Shared fixtures for the HTTP and WebSocket tests."""

from __future__ import annotations

import pytest

from snake_assist.advice import AdviceService
from snake_assist.config import GameSettings
from snake_assist.server.app import create_app
from snake_assist.server.session_manager import SessionManager


@pytest.fixture()
def app():
    settings = GameSettings(grid_width=12, grid_height=8)
    application = create_app(settings)
    application.state.session_manager = SessionManager(settings)
    application.state.advice_service = AdviceService(settings)
    return application
