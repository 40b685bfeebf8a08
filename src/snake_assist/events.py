"""Notifications pushed by the simulation engine to its listeners."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, Union

from snake_assist.geometry import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateEvent:
    """State after a completed, non-terminal tick."""

    kind: ClassVar[str] = "update"

    body: tuple[Point, ...]
    food: Point
    score: int

    def to_dict(self) -> dict:
        return {
            "event": self.kind,
            "body": [p.to_list() for p in self.body],
            "food": self.food.to_list(),
            "score": self.score,
        }


@dataclass(frozen=True)
class ScoreChangedEvent:
    kind: ClassVar[str] = "score_changed"

    score: int

    def to_dict(self) -> dict:
        return {"event": self.kind, "score": self.score}


@dataclass(frozen=True)
class GameOverEvent:
    kind: ClassVar[str] = "game_over"

    final_score: int

    def to_dict(self) -> dict:
        return {"event": self.kind, "final_score": self.final_score}


EngineEvent = Union[UpdateEvent, ScoreChangedEvent, GameOverEvent]
Listener = Callable[[EngineEvent], None]


class EventChannel:
    """Ordered listener registry.

    Listeners are called in registration order. A failing listener is
    logged and skipped; it never aborts delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: EngineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed handling %s event.", event.kind)

    def __len__(self) -> int:
        return len(self._listeners)
