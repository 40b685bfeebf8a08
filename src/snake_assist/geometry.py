"""Grid coordinates, movement directions, and board bounds."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values.

    ``y`` grows downward, so ``UP`` decreases it.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def opposite(direction: Direction) -> Direction:
    """Return the direction pointing the other way."""
    return _OPPOSITES[direction]


class Point(NamedTuple):
    """An immutable (x, y) cell coordinate."""

    x: int
    y: int

    def step(self, direction: Direction) -> Point:
        """Return the neighbouring cell one step in *direction*."""
        dx, dy = direction.value
        return Point(self.x + dx, self.y + dy)

    def manhattan(self, other: Point) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_list(self) -> list[int]:
        return [self.x, self.y]


class GridBounds:
    """Fixed board dimensions; valid cells are ``[0, width) × [0, height)``."""

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be at least 1×1.")
        self.width = width
        self.height = height

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def free_cells(self, occupied: Iterable[Point]) -> list[Point]:
        """Return every in-bounds cell not listed in *occupied*.

        Cells come back in row-major order (``y`` then ``x``).
        """
        mask = np.zeros((self.height, self.width), dtype=bool)
        for p in occupied:
            if self.contains(p):
                mask[p.y, p.x] = True
        ys, xs = np.where(~mask)
        return [Point(x, y) for y, x in zip(ys.tolist(), xs.tolist(), strict=True)]

    def __repr__(self) -> str:
        return f"GridBounds(width={self.width}, height={self.height})"
