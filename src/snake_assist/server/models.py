"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from snake_assist.engine import SimulationState

DirectionName = Literal["up", "down", "left", "right"]


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_width: int | None = Field(default=None, ge=2, le=200)
    grid_height: int | None = Field(default=None, ge=2, le=200)
    tick_rate_ms: int | None = Field(default=None, ge=50, le=2000)
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: DirectionName


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: SimulationState
    score: int
    tick_interval_ms: int
    grid_width: int
    grid_height: int


class SuggestionResponse(BaseModel):
    """Local advisor output; ``direction`` is null when no move is safe."""

    direction: DirectionName | None
    source: str = "local"
    error: str | None = None


class AdviceResponse(BaseModel):
    text: str
    source: str
    error: str | None = None
