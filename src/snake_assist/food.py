"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from snake_assist.geometry import GridBounds, Point

logger = logging.getLogger(__name__)


class FoodPlacementError(RuntimeError):
    """Raised when every cell of the board is occupied."""


class Food:
    """A single food item.

    Placement draws cells uniformly at random and rejects occupied ones.
    The number of draws is bounded; once the budget is spent the free
    cells are enumerated and one is chosen directly, so placement always
    terminates.
    """

    def __init__(
        self,
        position: Point,
        rng: np.random.Generator | None = None,
        max_attempts: int = 64,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0.")
        self.position = position
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    @classmethod
    def spawn(
        cls,
        bounds: GridBounds,
        body: Iterable[Point],
        rng: np.random.Generator | None = None,
    ) -> Food:
        """Create food on a random cell not covered by *body*."""
        food = cls(Point(0, 0), rng=rng)
        food.generate_new_position(bounds, body)
        return food

    def generate_new_position(
        self, bounds: GridBounds, body: Iterable[Point],
    ) -> Point:
        """Move the food to a random unoccupied cell and return it.

        Raises :class:`FoodPlacementError` if the board is full; the
        current position is left untouched in that case.
        """
        occupied = set(body)
        if len(occupied) < bounds.area:
            for _ in range(self.max_attempts):
                candidate = Point(
                    int(self.rng.integers(0, bounds.width)),
                    int(self.rng.integers(0, bounds.height)),
                )
                if candidate not in occupied:
                    self.position = candidate
                    return candidate

        free = bounds.free_cells(occupied)
        if not free:
            logger.warning("No empty cells available for food placement.")
            raise FoodPlacementError("No free cell left for food.")

        self.position = free[int(self.rng.integers(0, len(free)))]
        return self.position

    def to_dict(self) -> dict:
        return {"position": self.position.to_list()}
