"""Tick-driven simulation engine composing snake, food, and scoring."""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable

import numpy as np

from snake_assist.config import GameSettings, GameStatistics
from snake_assist.events import (
    EventChannel,
    GameOverEvent,
    Listener,
    ScoreChangedEvent,
    UpdateEvent,
)
from snake_assist.food import Food, FoodPlacementError
from snake_assist.geometry import Direction, GridBounds, Point
from snake_assist.snake import Snake
from snake_assist.snapshot import Snapshot

logger = logging.getLogger(__name__)


class SimulationState(str, enum.Enum):
    """Lifecycle states of a single game."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class SimulationEngine:
    """Single-snake engine driven by an external periodic tick.

    The engine is the only writer of snake, food, and score. Consumers
    read :meth:`snapshot` copies and receive events through
    :meth:`subscribe`; they request transitions through :meth:`start`,
    :meth:`pause`, :meth:`restart`, and :meth:`set_direction`, each of
    which is a no-op when the current state does not allow it.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        stats: GameStatistics | None = None,
        seed: int | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GameSettings()
        self.stats = stats
        self.bounds = GridBounds(self.settings.grid_width, self.settings.grid_height)
        if self.bounds.area < 2:
            raise ValueError("Grid must have room for the snake and its food.")
        self.rng = np.random.default_rng(seed)

        self._events = EventChannel()
        self._tick_lock = threading.Lock()
        self._playing_since: float | None = None
        self._play_time = 0.0

        self._initialize()

    def _initialize(self) -> None:
        """Replace snake and food with fresh instances and reset scoring."""
        start = Point(self.bounds.width // 2, self.bounds.height // 2)
        self.snake = Snake(start, Direction.RIGHT)
        self.food = Food.spawn(self.bounds, self.snake.body, rng=self.rng)
        self.state = SimulationState.READY
        self.score = 0
        self.ticks = 0
        self.tick_interval_ms = self.settings.game_speed_ms
        self._playing_since = None
        self._play_time = 0.0

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register an event listener; returns an unsubscribe callable."""
        return self._events.subscribe(listener)

    def start(self) -> None:
        if self.state in (SimulationState.READY, SimulationState.PAUSED):
            self.state = SimulationState.PLAYING
            self._playing_since = time.monotonic()

    def pause(self) -> None:
        if self.state == SimulationState.PLAYING:
            self._stop_clock()
            self.state = SimulationState.PAUSED

    def restart(self) -> None:
        """Discard the current game and begin a new one immediately."""
        self._initialize()
        self.start()
        logger.debug("Game restarted.")

    def set_direction(self, direction: Direction) -> None:
        """Queue a direction change; ignored unless playing."""
        if self.state == SimulationState.PLAYING:
            self.snake.set_direction(direction)

    @property
    def play_time(self) -> float:
        """Seconds spent in the PLAYING state during this game."""
        if self._playing_since is not None:
            return self._play_time + (time.monotonic() - self._playing_since)
        return self._play_time

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Advance the game by one step.

        Returns ``True`` if the tick was applied. Ticks outside PLAYING,
        and ticks arriving while another tick is still running, are
        dropped.
        """
        if self.state != SimulationState.PLAYING:
            return False
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Dropped overlapping tick.")
            return False
        try:
            self._advance()
        finally:
            self._tick_lock.release()
        return True

    def _advance(self) -> None:
        # Eating is decided from the head's position before it moves.
        ate_food = self.snake.head == self.food.position
        self.snake.move(grow=ate_food)
        self.ticks += 1

        if self._collided():
            self._end_game()
            return

        if ate_food:
            self.score += self.settings.food_reward
            try:
                self.food.generate_new_position(self.bounds, self.snake.body)
            except FoodPlacementError:
                logger.info("Board filled at tick %d.", self.ticks)
                self._end_game()
                return
            self._events.emit(ScoreChangedEvent(self.score))
            self._ramp_speed()

        self._events.emit(UpdateEvent(self.snake.body, self.food.position, self.score))

    def _collided(self) -> bool:
        if not self.bounds.contains(self.snake.head):
            return True
        return self.snake.check_self_collision()

    def _ramp_speed(self) -> None:
        s = self.settings
        if self.score % s.speed_step_score == 0 and self.tick_interval_ms > s.speed_floor_ms:
            self.tick_interval_ms = max(
                s.speed_floor_ms, self.tick_interval_ms - s.speed_decrement_ms,
            )
            logger.debug("Tick interval now %d ms.", self.tick_interval_ms)

    def _stop_clock(self) -> None:
        if self._playing_since is not None:
            self._play_time += time.monotonic() - self._playing_since
            self._playing_since = None

    def _end_game(self) -> None:
        """Enter GAME_OVER, record the result, and notify listeners."""
        self._stop_clock()
        self.state = SimulationState.GAME_OVER
        self.settings = self.settings.with_high_score(self.score)
        if self.stats is not None:
            self.stats.record_game(self.score, self._play_time, len(self.snake))
        logger.info(
            "Game over at tick %d with score %d (length %d).",
            self.ticks, self.score, len(self.snake),
        )
        self._events.emit(GameOverEvent(self.score))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Return a detached copy of the current game state."""
        return Snapshot(
            head=self.snake.head,
            body=self.snake.body,
            food=self.food.position,
            direction=self.snake.current_direction,
            score=self.score,
            width=self.bounds.width,
            height=self.bounds.height,
        )

    def get_state(self) -> dict:
        """Return the full, serializable session view."""
        return {
            "state": self.state.value,
            "ticks": self.ticks,
            "tick_interval_ms": self.tick_interval_ms,
            "high_score": self.settings.high_score,
            "snapshot": self.snapshot().to_dict(),
        }
