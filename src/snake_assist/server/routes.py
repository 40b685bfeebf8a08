"""REST API route handlers for session control, snapshots, and advice."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_assist.advice import AdviceService
from snake_assist.advisor import MoveAdvisor
from snake_assist.geometry import Direction
from snake_assist.server.models import (
    AdviceResponse,
    CreateSessionRequest,
    DirectionRequest,
    SessionSummary,
    SuggestionResponse,
)
from snake_assist.server.session_manager import GameSession, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])

_advisor = MoveAdvisor()


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _get_advice_service(request: Request) -> AdviceService:
    return request.app.state.advice_service


def _lookup(manager: SessionManager, session_id: str) -> GameSession:
    try:
        return manager.get_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc


@router.post("", status_code=201)
async def create_session(body: CreateSessionRequest, request: Request) -> SessionSummary:
    """Create a new session in the ready state."""
    manager = _get_manager(request)
    try:
        session = manager.create_session(
            grid_width=body.grid_width,
            grid_height=body.grid_height,
            tick_rate_ms=body.tick_rate_ms,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/tips")
async def get_tips(request: Request) -> AdviceResponse:
    """A general playing tip, remote when available."""
    result = await _get_advice_service(request).tips()
    return AdviceResponse(**result.to_dict())


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Return lifecycle state plus a snapshot of the board."""
    session = _lookup(_get_manager(request), session_id)
    async with session.lock:
        state = session.engine.get_state()
    state["session_id"] = session.session_id
    return state


@router.post("/{session_id}/start")
async def start_session(session_id: str, request: Request) -> dict:
    manager = _get_manager(request)
    _lookup(manager, session_id)
    session = await manager.start(session_id)
    return {"session_id": session_id, "state": session.engine.state.value}


@router.post("/{session_id}/pause")
async def pause_session(session_id: str, request: Request) -> dict:
    manager = _get_manager(request)
    _lookup(manager, session_id)
    session = await manager.pause(session_id)
    return {"session_id": session_id, "state": session.engine.state.value}


@router.post("/{session_id}/restart")
async def restart_session(session_id: str, request: Request) -> dict:
    manager = _get_manager(request)
    _lookup(manager, session_id)
    session = await manager.restart(session_id)
    return {"session_id": session_id, "state": session.engine.state.value}


@router.post("/{session_id}/direction", status_code=202)
async def set_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> dict:
    """Queue a direction change; ignored by the engine unless playing."""
    manager = _get_manager(request)
    _lookup(manager, session_id)
    await manager.set_direction(session_id, Direction[body.direction.upper()])
    return {"session_id": session_id, "direction": body.direction}


@router.get("/{session_id}/suggestion")
async def get_suggestion(session_id: str, request: Request) -> SuggestionResponse:
    """Local greedy move suggestion for the current snapshot."""
    session = _lookup(_get_manager(request), session_id)
    async with session.lock:
        snapshot = session.engine.snapshot()
    direction = _advisor.suggest_move(snapshot)
    return SuggestionResponse(
        direction=direction.name.lower() if direction is not None else None,
    )


@router.get("/{session_id}/advice")
async def get_advice(session_id: str, request: Request) -> AdviceResponse:
    """Textual advice; the remote call runs outside the session lock."""
    manager = _get_manager(request)
    session = _lookup(manager, session_id)
    async with session.lock:
        snapshot = session.engine.snapshot()
    result = await _get_advice_service(request).game_advice(snapshot)
    manager.stats.record_advice_used()
    return AdviceResponse(**result.to_dict())


@router.get("/{session_id}/move-advice")
async def get_move_advice(session_id: str, request: Request) -> SuggestionResponse:
    """Direction advice from the remote service, or the local heuristic."""
    manager = _get_manager(request)
    session = _lookup(manager, session_id)
    async with session.lock:
        snapshot = session.engine.snapshot()
    result = await _get_advice_service(request).move_advice(snapshot)
    manager.stats.record_advice_used()
    return SuggestionResponse(**result.to_dict())


@router.get("/{session_id}/performance")
async def get_performance(session_id: str, request: Request) -> AdviceResponse:
    """Analysis of the current game's score against recent finished games."""
    manager = _get_manager(request)
    session = _lookup(manager, session_id)
    async with session.lock:
        score = session.engine.score
        play_time = session.engine.play_time
    recent = list(manager.recent_scores)
    result = await _get_advice_service(request).performance_analysis(
        score, play_time, recent,
    )
    return AdviceResponse(**result.to_dict())
