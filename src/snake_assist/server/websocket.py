"""WebSocket handler streaming engine events and accepting directions."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_assist.geometry import Direction
from snake_assist.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send directions, receive update/score/game-over events each tick."""
    manager = _get_manager(websocket)
    try:
        session = manager.get_session(session_id)
    except KeyError:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.websockets.append(websocket)
    logger.info("Client connected to session %s.", session_id)

    # Initial snapshot so the client can draw before the first tick.
    async with session.lock:
        state = session.engine.get_state()
    state["event"] = "snapshot"
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            direction_str = msg.get("direction")
            if not isinstance(direction_str, str):
                continue

            direction = _DIRECTION_MAP.get(direction_str.lower())
            if direction is None:
                continue

            await manager.set_direction(session_id, direction)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        if websocket in session.websockets:
            session.websockets.remove(websocket)
