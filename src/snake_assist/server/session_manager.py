"""In-memory session registry, control surface, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field, replace
from pathlib import Path

from starlette.websockets import WebSocket, WebSocketState

from snake_assist.config import GameSettings, GameStatistics
from snake_assist.engine import SimulationEngine, SimulationState
from snake_assist.events import EngineEvent
from snake_assist.geometry import Direction
from snake_assist.server.models import SessionSummary

logger = logging.getLogger(__name__)

_MAX_FINISHED_SESSIONS = 100
_RECENT_SCORES = 5


@dataclass
class GameSession:
    """A single-player game and the sockets watching it."""

    session_id: str
    engine: SimulationEngine
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    websockets: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _pending: list[dict] = field(default_factory=list, repr=False)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.engine.subscribe(self._collect)

    def _collect(self, event: EngineEvent) -> None:
        self._pending.append(event.to_dict())

    def drain(self) -> list[dict]:
        """Return and clear the event payloads gathered since the last call."""
        payloads, self._pending = self._pending, []
        return payloads

    @property
    def finished(self) -> bool:
        return self.engine.state == SimulationState.GAME_OVER

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            state=self.engine.state,
            score=self.engine.score,
            tick_interval_ms=self.engine.tick_interval_ms,
            grid_width=self.engine.bounds.width,
            grid_height=self.engine.bounds.height,
        )


class SessionManager:
    """Central registry owning every session's periodic tick source.

    Each playing session has exactly one tick task. It sleeps for the
    engine's current tick interval, ticks under the session lock, then
    broadcasts the events that tick produced. The task ends on its own
    once the engine leaves PLAYING.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        stats: GameStatistics | None = None,
        stats_path: str | Path | None = None,
        settings_path: str | Path | None = None,
        max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
    ) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self.settings = settings if settings is not None else GameSettings()
        self.stats = stats if stats is not None else GameStatistics()
        self.stats_path = Path(stats_path) if stats_path is not None else None
        self.settings_path = Path(settings_path) if settings_path is not None else None
        self.recent_scores: deque[int] = deque(maxlen=_RECENT_SCORES)
        self._sessions: dict[str, GameSession] = {}
        self._max_finished_sessions = max_finished_sessions

    def create_session(
        self,
        grid_width: int | None = None,
        grid_height: int | None = None,
        tick_rate_ms: int | None = None,
        seed: int | None = None,
    ) -> GameSession:
        """Create a session in the READY state."""
        overrides: dict = {}
        if grid_width is not None:
            overrides["grid_width"] = grid_width
        if grid_height is not None:
            overrides["grid_height"] = grid_height
        if tick_rate_ms is not None:
            overrides["game_speed_ms"] = tick_rate_ms
        settings = replace(self.settings, **overrides)

        engine = SimulationEngine(settings, stats=self.stats, seed=seed)
        session = GameSession(session_id=uuid.uuid4().hex[:12], engine=engine)
        self._sessions[session.session_id] = session
        self._prune_finished_sessions()
        logger.info(
            "Session %s created (%dx%d).",
            session.session_id, settings.grid_width, settings.grid_height,
        )
        return session

    def get_session(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    async def start(self, session_id: str) -> GameSession:
        session = self.get_session(session_id)
        async with session.lock:
            session.engine.start()
            self._ensure_tick_loop(session)
        return session

    async def pause(self, session_id: str) -> GameSession:
        session = self.get_session(session_id)
        async with session.lock:
            session.engine.pause()
        return session

    async def restart(self, session_id: str) -> GameSession:
        session = self.get_session(session_id)
        async with session.lock:
            session.engine.restart()
            session.finished_at = None
            session.drain()
            self._ensure_tick_loop(session)
        return session

    async def set_direction(self, session_id: str, direction: Direction) -> None:
        session = self.get_session(session_id)
        async with session.lock:
            session.engine.set_direction(direction)

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def _ensure_tick_loop(self, session: GameSession) -> None:
        if session.engine.state != SimulationState.PLAYING:
            return
        if session._task is not None and not session._task.done():
            return
        session._task = asyncio.create_task(self._tick_loop(session))

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick the engine until it stops playing, broadcasting each tick."""
        engine = session.engine
        try:
            while engine.state == SimulationState.PLAYING:
                await asyncio.sleep(engine.tick_interval_ms / 1000.0)
                async with session.lock:
                    engine.tick()
                    payloads = session.drain()
                    just_finished = session.finished and session.finished_at is None
                    if just_finished:
                        session.finished_at = time.monotonic()
                if just_finished:
                    self._record_result(engine.score)
                for payload in payloads:
                    await self._broadcast(session, payload)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)

    def _record_result(self, score: int) -> None:
        """Remember a finished game's score and persist what changed."""
        self.recent_scores.append(score)
        raised = self.settings.with_high_score(score)
        if raised is not self.settings:
            self.settings = raised
            self._save_settings()
        self._save_stats()

    def _save_settings(self) -> None:
        if self.settings_path is None:
            return
        try:
            self.settings.save(self.settings_path)
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", self.settings_path, exc)

    def _save_stats(self) -> None:
        if self.stats_path is None:
            return
        try:
            self.stats.save(self.stats_path)
        except OSError as exc:
            logger.warning("Could not save statistics to %s: %s", self.stats_path, exc)

    async def _broadcast(self, session: GameSession, payload: dict) -> None:
        """Send one event payload to every connected socket."""
        text = json.dumps(payload, separators=(",", ":"))
        dead: list[WebSocket] = []
        # Iterate over a copy so disconnect handlers can mutate the list.
        for ws in list(session.websockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(text)
            except Exception:
                dead.append(ws)
        for ws in dead:
            if ws in session.websockets:
                session.websockets.remove(ws)

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [s for s in self._sessions.values() if s.finished]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return
        finished.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow, self._max_finished_sessions,
        )

    async def cleanup(self) -> None:
        """Cancel all running tick loops and persist statistics."""
        tasks = [
            s._task for s in self._sessions.values()
            if s._task is not None and not s._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._save_stats()
        logger.info("SessionManager cleanup complete.")
