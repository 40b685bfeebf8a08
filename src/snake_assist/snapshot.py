"""Read-only, point-in-time view of the simulation."""

from __future__ import annotations

from dataclasses import dataclass

from snake_assist.geometry import Direction, GridBounds, Point


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer or advisor may see of the engine.

    The body is stored as a tuple, so holding a snapshot never exposes
    live engine state.
    """

    head: Point
    body: tuple[Point, ...]
    food: Point
    direction: Direction
    score: int
    width: int
    height: int

    @property
    def bounds(self) -> GridBounds:
        return GridBounds(self.width, self.height)

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "head": self.head.to_list(),
            "body": [p.to_list() for p in self.body],
            "food": self.food.to_list(),
            "direction": self.direction.name.lower(),
            "score": self.score,
            "width": self.width,
            "height": self.height,
        }
